"""
Abbreviation checks: acronyms of three or more letters are written as words.
"""

from typing import Iterator

from ..checker_base import BaseChecker
from ..config import StyleConfig
from ..finding import Finding, Severity
from ..parser import TYPE_KINDS, Declaration, DeclarationKind
from ..source import SourceFile
from ..utils import fix_acronyms, long_acronyms

_MEMBER_KINDS = frozenset({
    DeclarationKind.FIELD, DeclarationKind.PROPERTY, DeclarationKind.METHOD,
    DeclarationKind.EVENT, DeclarationKind.DELEGATE, DeclarationKind.ENUM_MEMBER,
})


class AbbreviationChecker(BaseChecker):
    """Flags 'HTMLParser' style names (use 'HtmlParser'); 'IO' and 'ID' stay upper case."""

    rule_id = "AbbreviationCheck"
    default_severity = Severity.ERROR
    description = "Acronyms longer than two letters are cased as words"
    needs_structure = True

    def inspect_declaration(self, decl: Declaration, source: SourceFile, config: StyleConfig,
                            severity: Severity) -> Iterator[Finding]:
        if decl.kind in TYPE_KINDS:
            if not config.abbreviations.include_types:
                return
        elif decl.kind not in _MEMBER_KINDS:
            return
        if decl.special is not None or "override" in decl.modifiers or "const" in decl.modifiers:
            return

        prefix, body = "", decl.name
        if decl.kind == DeclarationKind.INTERFACE and len(body) > 1 and body[0] == "I" and body[1].isupper():
            prefix, body = "I", body[1:]
        acronyms = long_acronyms(body)
        if not acronyms:
            return
        expected = prefix + fix_acronyms(body)
        words = ", ".join(f"'{a}' -> '{a[0] + a[1:].lower()}'" for a in acronyms)
        yield self._finding(
            source, severity, decl.name_span,
            f"Abbreviation in '{decl.name}' should be written as a word ({words}): rename to '{expected}'",
            expected,
        )
