"""
Member ordering checks inside type declarations.
"""

from fnmatch import fnmatchcase
from typing import Iterator, Optional, Tuple

from ..checker_base import BaseChecker
from ..config import MemberCategory, StyleConfig
from ..finding import Finding, Severity
from ..parser import Declaration, DeclarationKind
from ..source import SourceFile

_CONTAINERS = frozenset({DeclarationKind.CLASS, DeclarationKind.STRUCT, DeclarationKind.INTERFACE})

_KIND_CATEGORIES = {
    DeclarationKind.FIELD: MemberCategory.FIELD,
    DeclarationKind.DELEGATE: MemberCategory.DELEGATE,
    DeclarationKind.EVENT: MemberCategory.EVENT,
    DeclarationKind.ENUM: MemberCategory.ENUM,
    DeclarationKind.INTERFACE: MemberCategory.INTERFACE,
    DeclarationKind.PROPERTY: MemberCategory.PROPERTY,
    DeclarationKind.METHOD: MemberCategory.METHOD,
    DeclarationKind.CONSTRUCTOR: MemberCategory.METHOD,
    DeclarationKind.STRUCT: MemberCategory.STRUCT,
    DeclarationKind.CLASS: MemberCategory.CLASS,
}

_LABELS = {
    MemberCategory.SERIALIZED_FIELD: "serialized field",
    MemberCategory.FIELD: "field",
    MemberCategory.DELEGATE: "delegate",
    MemberCategory.EVENT: "event",
    MemberCategory.ENUM: "enum",
    MemberCategory.INTERFACE: "interface",
    MemberCategory.PROPERTY: "property",
    MemberCategory.LIFECYCLE_METHOD: "lifecycle method",
    MemberCategory.METHOD: "method",
    MemberCategory.STRUCT: "struct",
    MemberCategory.CLASS: "class",
}


def lifecycle_index(name: str, order: Tuple[str, ...]) -> Optional[int]:
    """Position of a Unity message method in the lifecycle sequence ('OnTrigger*' style patterns)."""
    for index, pattern in enumerate(order):
        if fnmatchcase(name, pattern):
            return index
    return None


def categorize(member: Declaration, config: StyleConfig) -> Tuple[MemberCategory, int]:
    """Member category and position within it (lifecycle methods only)."""
    category = _KIND_CATEGORIES[member.kind]
    if category == MemberCategory.FIELD and member.has_attribute("SerializeField", "SerializeReference"):
        return MemberCategory.SERIALIZED_FIELD, 0
    if member.kind == DeclarationKind.METHOD and member.special is None:
        index = lifecycle_index(member.name, config.lifecycle_order)
        if index is not None:
            return MemberCategory.LIFECYCLE_METHOD, index
    return category, 0


class MemberOrderChecker(BaseChecker):
    """Fields, delegates, events, enums, interfaces, properties, lifecycle methods, methods, structs, classes."""

    rule_id = "MemberOrderCheck"
    default_severity = Severity.WARNING
    description = "Type members follow the canonical order and the Unity lifecycle sequence"
    needs_structure = True

    def inspect_declaration(self, decl: Declaration, source: SourceFile, config: StyleConfig,
                            severity: Severity) -> Iterator[Finding]:
        if decl.kind not in _CONTAINERS:
            return
        highest: Optional[Tuple[int, int]] = None
        highest_member: Optional[Declaration] = None
        highest_category: Optional[MemberCategory] = None
        for member in decl.children:
            if member.kind not in _KIND_CATEGORIES:
                continue
            category, index = categorize(member, config)
            rank = (config.member_rank(category), index)
            if highest is not None and rank < highest:
                if category == highest_category:
                    message = (f"Lifecycle method '{member.name}' should come before "
                               f"'{highest_member.name}' (Unity call order)")
                else:
                    message = (f"{_LABELS[category].capitalize()} '{member.name}' should come before "
                               f"{_LABELS[highest_category]} '{highest_member.name}'")
                yield self._finding(source, severity, member.span, message)
            elif highest is None or rank > highest:
                highest, highest_member, highest_category = rank, member, category
