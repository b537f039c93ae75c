"""
File name check: a MonoBehaviour lives in a file named after its class.
"""

import re
from pathlib import PurePosixPath
from typing import Iterator

from ..checker_base import BaseChecker
from ..config import StyleConfig
from ..finding import Finding, Severity
from ..parser import Declaration, DeclarationKind
from ..source import SourceFile


def base_name(type_name: str) -> str:
    """'UnityEngine.MonoBehaviour' -> 'MonoBehaviour', 'Singleton<Foo>' -> 'Singleton'."""
    bare = re.sub(r"<.*$", "", type_name).strip()
    return bare.rsplit(".", 1)[-1]


class FileNameChecker(BaseChecker):
    """Unity only attaches scripts whose MonoBehaviour class matches the file name."""

    rule_id = "FileNameCheck"
    default_severity = Severity.ERROR
    description = "MonoBehaviour classes are named like their file"
    needs_structure = True

    def inspect_declaration(self, decl: Declaration, source: SourceFile, config: StyleConfig,
                            severity: Severity) -> Iterator[Finding]:
        if decl.kind != DeclarationKind.CLASS or source.path.startswith("<"):
            return
        bases = {base_name(b) for b in decl.base_types}
        matched = sorted(bases & set(config.file_name_base_types))
        if not matched or decl.name == source.stem:
            return
        suffix = PurePosixPath(source.path).suffix or ".cs"
        yield self._finding(
            source, severity, decl.name_span,
            f"{matched[0]} class '{decl.name}' must be declared in '{decl.name}{suffix}', "
            f"not '{PurePosixPath(source.path).name}'",
            f"{decl.name}{suffix}",
        )
