"""
Access modifier presence checks.
"""

from typing import Iterator

from ..checker_base import BaseChecker
from ..config import StyleConfig
from ..finding import Finding, Severity
from ..parser import TYPE_KINDS, Declaration, DeclarationKind
from ..source import SourceFile

_CHECKED_KINDS = TYPE_KINDS | {
    DeclarationKind.FIELD, DeclarationKind.PROPERTY, DeclarationKind.METHOD,
    DeclarationKind.CONSTRUCTOR, DeclarationKind.EVENT, DeclarationKind.DELEGATE,
}
# Forms the language does not allow an access modifier on
_EXEMPT_SPECIAL = frozenset({"static-constructor", "destructor", "explicit-interface"})


class ModifierChecker(BaseChecker):
    """Every type and member spells out its access modifier."""

    rule_id = "ModifierPresenceCheck"
    default_severity = Severity.ERROR
    description = "Access modifiers are always written explicitly"
    needs_structure = True

    def inspect_declaration(self, decl: Declaration, source: SourceFile, config: StyleConfig,
                            severity: Severity) -> Iterator[Finding]:
        if decl.kind not in _CHECKED_KINDS or decl.access is not None:
            return
        if decl.special in _EXEMPT_SPECIAL:
            return
        parent = decl.parent
        if parent is not None and parent.kind == DeclarationKind.INTERFACE:
            return
        if decl.kind == DeclarationKind.METHOD and "partial" in decl.modifiers:
            return

        nested = parent is not None and parent.is_type
        implicit = "internal" if decl.is_type and not nested else "private"
        if decl.kind == DeclarationKind.DELEGATE and not nested:
            implicit = "internal"
        yield self._finding(
            source, severity, decl.span,
            f"{decl.kind.value.capitalize()} '{decl.name}' has no explicit access modifier "
            f"(defaults to '{implicit}')",
            f"{implicit} {_header_hint(decl)}",
        )


def _header_hint(decl: Declaration) -> str:
    """Modifiers and name as they should start the declaration, e.g. 'static int Count'."""
    parts = [t.text for t in decl.modifier_tokens]
    if decl.type_name:
        parts.append(decl.type_name)
    parts.append(decl.name)
    return " ".join(parts)
