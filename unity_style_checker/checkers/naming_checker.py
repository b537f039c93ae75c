"""
Naming convention checks (casing per declaration kind, boolean prefixes).
"""

from typing import FrozenSet, Iterator

from ..checker_base import BaseChecker
from ..config import StyleConfig
from ..finding import Finding, Severity
from ..parser import ACCESS_MODIFIERS, Declaration, DeclarationKind
from ..source import SourceFile
from ..utils import BOOL_TYPES, CasePattern, convert_case, has_bool_prefix, matches_case

# Declarations whose names are fixed by the language or a base type.
_EXEMPT_SPECIAL = frozenset({"operator", "destructor", "static-constructor", "explicit-interface", "indexer"})


def effective_modifiers(decl: Declaration) -> FrozenSet[str]:
    """Declared modifiers plus the implicit access level (public in interfaces, else private)."""
    if decl.modifiers & ACCESS_MODIFIERS:
        return decl.modifiers
    parent = decl.parent
    implicit = "public" if parent is not None and parent.kind == DeclarationKind.INTERFACE else "private"
    return decl.modifiers | {implicit}


def describe(decl: Declaration) -> str:
    """Human-readable declaration kind, e.g. 'private field' or 'method'."""
    label = decl.kind.value.replace("-", " ")
    if decl.kind in (DeclarationKind.FIELD, DeclarationKind.PROPERTY):
        if "const" in decl.modifiers:
            return "constant"
        access = decl.access
        if access is None:
            access = "public" if "public" in effective_modifiers(decl) else "private"
        return f"{access} {label}"
    return label


class NamingChecker(BaseChecker):
    """Casing conventions from the naming table and is/has/can prefixes on booleans."""

    rule_id = "NamingCheck"
    default_severity = Severity.ERROR
    description = "Identifiers follow the casing table; booleans start with is/has/can"
    needs_structure = True

    def inspect_declaration(self, decl: Declaration, source: SourceFile, config: StyleConfig,
                            severity: Severity) -> Iterator[Finding]:
        if decl.kind in (DeclarationKind.FILE, DeclarationKind.CONSTRUCTOR):
            return
        if decl.special in _EXEMPT_SPECIAL or "override" in decl.modifiers:
            return
        if decl.kind == DeclarationKind.NAMESPACE:
            yield from self._check_namespace(decl, source, config, severity)
            return

        pattern = config.naming_pattern(decl.kind, effective_modifiers(decl))
        if pattern is not None and not matches_case(decl.name, pattern):
            expected = convert_case(decl.name, pattern)
            yield self._finding(
                source, severity, decl.span,
                f"{describe(decl).capitalize()} '{decl.name}' should be {pattern.value}: rename to '{expected}'",
                expected,
            )
            return

        if decl.kind in (DeclarationKind.FIELD, DeclarationKind.METHOD) and decl.type_name in BOOL_TYPES:
            if config.bool_prefixes and "const" not in decl.modifiers \
                    and not has_bool_prefix(decl.name, config.bool_prefixes):
                yield self._bool_finding(decl, source, config, severity, pattern)

    def _check_namespace(self, decl: Declaration, source: SourceFile, config: StyleConfig,
                         severity: Severity) -> Iterator[Finding]:
        """Every dotted segment of a namespace name follows the namespace pattern."""
        pattern = config.naming_pattern(DeclarationKind.NAMESPACE, frozenset()) or CasePattern.PASCAL
        segments = decl.name.split(".")
        if all(matches_case(seg, pattern) for seg in segments):
            return
        expected = ".".join(seg if matches_case(seg, pattern) else convert_case(seg, pattern) for seg in segments)
        yield self._finding(
            source, severity, decl.name_span,
            f"Namespace '{decl.name}' should be {pattern.value}: rename to '{expected}'",
            expected,
        )

    def _bool_finding(self, decl: Declaration, source: SourceFile, config: StyleConfig,
                      severity: Severity, pattern) -> Finding:
        """Boolean field or method without an is/has/can style prefix."""
        prefixes = config.bool_prefixes
        expected = convert_case(f"{prefixes[0]}_{decl.name.lstrip('_')}", pattern or CasePattern.CAMEL)
        return self._finding(
            source, severity, decl.span,
            f"Boolean {decl.kind.value} '{decl.name}' should start with one of "
            f"{', '.join(repr(p) for p in prefixes)}: e.g. '{expected}'",
            expected,
        )
