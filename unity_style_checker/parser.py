"""
Shallow structural parser for C#.

Groups the significant tokens of a file into a declaration tree (namespaces,
types, members) by keyword and bracket matching. Method and accessor bodies
are skipped, not parsed: the tree is only as deep as the style rules need.
"""

import weakref
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, FrozenSet, Iterator, List, Optional, Sequence, Tuple

from .errors import StructureError
from .lexer import Token, TokenKind
from .source import Span


class DeclarationKind(Enum):
    """Kinds of declarations the parser recognizes."""
    FILE = "file"
    NAMESPACE = "namespace"
    ENUM = "enum"
    INTERFACE = "interface"
    STRUCT = "struct"
    CLASS = "class"
    FIELD = "field"
    PROPERTY = "property"
    METHOD = "method"
    CONSTRUCTOR = "constructor"
    DELEGATE = "delegate"
    EVENT = "event"
    ENUM_MEMBER = "enum-member"


TYPE_KINDS = frozenset({
    DeclarationKind.ENUM, DeclarationKind.INTERFACE,
    DeclarationKind.STRUCT, DeclarationKind.CLASS,
})
MEMBER_KINDS = frozenset({
    DeclarationKind.FIELD, DeclarationKind.PROPERTY, DeclarationKind.METHOD,
    DeclarationKind.CONSTRUCTOR, DeclarationKind.EVENT,
})

ACCESS_MODIFIERS = frozenset({"public", "private", "protected", "internal"})
MODIFIERS = ACCESS_MODIFIERS | frozenset({
    "static", "readonly", "const", "sealed", "partial", "abstract", "virtual",
    "override", "extern", "unsafe", "volatile", "new", "async",
})
# Modifiers that lex as identifiers (contextual keywords)
_CONTEXTUAL_MODIFIERS = frozenset({"partial", "async"})

_TYPE_KEYWORDS = {
    "class": DeclarationKind.CLASS,
    "struct": DeclarationKind.STRUCT,
    "interface": DeclarationKind.INTERFACE,
    "enum": DeclarationKind.ENUM,
}
_OPENERS = {"{": "}", "(": ")", "[": "]"}
_CLOSERS = {v: k for k, v in _OPENERS.items()}


@dataclass(frozen=True)
class Attribute:
    """One attribute from an attribute section, e.g. [Range(0, 10)]."""
    name: str
    arguments: str = ""

    @property
    def short_name(self) -> str:
        """Last name segment without the 'Attribute' suffix."""
        name = self.name.rsplit(".", 1)[-1]
        if name.endswith("Attribute") and name != "Attribute":
            name = name[: -len("Attribute")]
        return name


@dataclass(eq=False)
class Declaration:
    """A parsed declaration. Children are owned; the parent is a weak reference."""
    kind: DeclarationKind
    name: str
    span: Span
    name_span: Span
    modifiers: FrozenSet[str] = frozenset()
    modifier_tokens: Tuple[Token, ...] = ()
    type_name: Optional[str] = None
    base_types: Tuple[str, ...] = ()
    attributes: Tuple[Attribute, ...] = ()
    leading_comments: Tuple[Token, ...] = ()
    special: Optional[str] = None
    children: List["Declaration"] = field(default_factory=list)
    _parent: Optional[weakref.ref] = field(default=None, repr=False)

    @property
    def parent(self) -> Optional["Declaration"]:
        return self._parent() if self._parent is not None else None

    def add_child(self, child: "Declaration") -> None:
        child._parent = weakref.ref(self)
        self.children.append(child)

    @property
    def is_type(self) -> bool:
        return self.kind in TYPE_KINDS

    @property
    def access(self) -> Optional[str]:
        """Explicit access modifiers in source order, e.g. 'protected internal'."""
        words = [t.text for t in self.modifier_tokens if t.text in ACCESS_MODIFIERS]
        return " ".join(words) if words else None

    @property
    def doc_comment(self) -> Optional[str]:
        docs = [t.text for t in self.leading_comments if t.kind == TokenKind.DOC_COMMENT]
        return "\n".join(docs) if docs else None

    def has_attribute(self, *names: str) -> bool:
        return any(attr.short_name in names for attr in self.attributes)

    def walk(self) -> Iterator["Declaration"]:
        """Pre-order traversal of this declaration and its descendants."""
        yield self
        for child in self.children:
            yield from child.walk()


class Parser:
    """
    Bracket-depth state machine over the significant tokens of one file.

    Usage:
        root = Parser(tokens, "Player.cs").parse()
    """

    def __init__(self, tokens: Sequence[Token], path: str = "<input>"):
        self.path = path
        self.tokens: List[Token] = []
        self.comments_before: List[Tuple[Token, ...]] = []
        pending: List[Token] = []
        for tok in tokens:
            if tok.is_comment:
                pending.append(tok)
            elif not tok.is_trivia:
                prev_line = self.tokens[-1].end_line if self.tokens else 0
                # a comment on the same line as the previous token trails it
                self.comments_before.append(tuple(c for c in pending if c.line != prev_line))
                self.tokens.append(tok)
                pending = []
        self.pos = 0
        self.matches: Dict[int, int] = {}

    # --- token helpers ---

    def _peek(self, offset: int = 0) -> Optional[Token]:
        i = self.pos + offset
        return self.tokens[i] if i < len(self.tokens) else None

    def _at_punct(self, text: str, index: Optional[int] = None) -> bool:
        i = self.pos if index is None else index
        return i < len(self.tokens) and self.tokens[i].is_punct(text)

    @staticmethod
    def _span(first: Token, last: Token) -> Span:
        return Span(first.line, first.column, last.end_line, last.end_column)

    def _check_balance(self) -> None:
        """Match every bracket; raises StructureError on the first mismatch."""
        stack: List[int] = []
        for i, tok in enumerate(self.tokens):
            if tok.kind != TokenKind.PUNCTUATION:
                continue
            if tok.text in _OPENERS:
                stack.append(i)
            elif tok.text in _CLOSERS:
                if not stack:
                    raise StructureError(f"unexpected '{tok.text}'", tok.line, tok.column)
                opener = self.tokens[stack[-1]]
                if _OPENERS[opener.text] != tok.text:
                    raise StructureError(
                        f"'{tok.text}' does not match '{opener.text}' opened at "
                        f"line {opener.line}, column {opener.column}",
                        tok.line, tok.column,
                    )
                self.matches[stack.pop()] = i
        if stack:
            opener = self.tokens[stack[-1]]
            raise StructureError(f"unclosed '{opener.text}'", opener.line, opener.column)

    def _skip_statement(self, i: int) -> int:
        """Index of the ';' ending the statement at i, or of the last token before the enclosing '}'."""
        while i < len(self.tokens):
            tok = self.tokens[i]
            if tok.is_punct(";"):
                return i
            if tok.is_punct("}"):
                return i - 1
            if i in self.matches:
                i = self.matches[i]
            i += 1
        return len(self.tokens) - 1

    def _leading_comments(self, start: int, end: int) -> Tuple[Token, ...]:
        comments: List[Token] = []
        for i in range(start, min(end, len(self.tokens) - 1) + 1):
            comments.extend(self.comments_before[i])
        return tuple(comments)

    # --- entry point ---

    def parse(self) -> Declaration:
        self._check_balance()
        start = Span(1, 1, 1, 1)
        if self.tokens:
            start = self._span(self.tokens[0], self.tokens[-1])
        root = Declaration(
            kind=DeclarationKind.FILE,
            name=Path(self.path).stem,
            span=start,
            name_span=start,
        )
        self._parse_members(root, in_braces=False)
        return root

    # --- bodies ---

    def _parse_members(self, container: Declaration, in_braces: bool) -> Optional[Token]:
        """Parse members until the closing brace of the container (returned) or end of file."""
        while self.pos < len(self.tokens):
            tok = self.tokens[self.pos]
            if tok.is_punct("}"):
                self.pos += 1
                if in_braces:
                    return tok
                continue
            if tok.is_punct(";"):
                self.pos += 1
                continue
            before = self.pos
            self._parse_member(container)
            if self.pos == before:
                self.pos += 1
        return None

    def _parse_attributes(self) -> Tuple[Attribute, ...]:
        attributes: List[Attribute] = []
        while self._at_punct("["):
            close = self.matches[self.pos]
            entries: List[List[Token]] = [[]]
            i = self.pos + 1
            while i < close:
                tok = self.tokens[i]
                if tok.is_punct(","):
                    entries.append([])
                    i += 1
                    continue
                entries[-1].append(tok)
                if i in self.matches:
                    entries[-1].extend(self.tokens[i + 1:self.matches[i] + 1])
                    i = self.matches[i]
                i += 1
            for entry in entries:
                attr = self._attribute_from(entry)
                if attr is not None:
                    attributes.append(attr)
            self.pos = close + 1
        return tuple(attributes)

    @staticmethod
    def _attribute_from(entry: List[Token]) -> Optional[Attribute]:
        # skip an "assembly:" / "field:" target
        if len(entry) >= 2 and entry[1].is_punct(":"):
            entry = entry[2:]
        name_parts: List[str] = []
        arguments = ""
        for idx, tok in enumerate(entry):
            if tok.is_punct("("):
                inner = entry[idx + 1:-1] if entry[-1].is_punct(")") else entry[idx + 1:]
                arguments = _join(inner)
                break
            name_parts.append(tok.text)
        if not name_parts:
            return None
        return Attribute(name="".join(name_parts), arguments=arguments)

    def _parse_member(self, container: Declaration) -> None:
        start = self.pos
        attributes = self._parse_attributes()
        mod_tokens: List[Token] = []
        while self.pos < len(self.tokens) and self._is_modifier(self.pos):
            mod_tokens.append(self.tokens[self.pos])
            self.pos += 1

        head = self._peek()
        if head is None or head.is_punct("}") or head.is_punct(";"):
            return
        header_start = self.pos
        if mod_tokens:
            header_start = self.pos - len(mod_tokens)
        ctx = _Header(
            start=start,
            first=self.tokens[header_start],
            attributes=attributes,
            modifier_tokens=tuple(mod_tokens),
            leading=self._leading_comments(start, header_start),
        )

        text = head.text
        if text == "using" or (text == "global" and self._peek(1) and self._peek(1).text == "using"):
            self.pos = self._skip_statement(self.pos) + 1
        elif text == "alias" and "extern" in {t.text for t in mod_tokens}:
            self.pos = self._skip_statement(self.pos) + 1
        elif text == "namespace" and head.kind == TokenKind.KEYWORD:
            self._parse_namespace(container, ctx)
        elif text in _TYPE_KEYWORDS and head.kind == TokenKind.KEYWORD:
            self.pos += 1
            self._parse_type(container, ctx, _TYPE_KEYWORDS[text])
        elif text == "record" and head.kind == TokenKind.IDENTIFIER and self._is_record():
            self.pos += 1
            kind = DeclarationKind.CLASS
            nxt = self._peek()
            if nxt is not None and nxt.text in ("class", "struct"):
                kind = _TYPE_KEYWORDS[nxt.text]
                self.pos += 1
            self._parse_type(container, ctx, kind)
        elif text == "delegate" and head.kind == TokenKind.KEYWORD:
            self._parse_delegate(container, ctx)
        elif text == "event" and head.kind == TokenKind.KEYWORD:
            self.pos += 1
            self._parse_member_body(container, ctx, event=True)
        else:
            self._parse_member_body(container, ctx, event=False)

    def _is_modifier(self, i: int) -> bool:
        tok = self.tokens[i]
        if tok.text not in MODIFIERS:
            return False
        if tok.kind == TokenKind.KEYWORD:
            return True
        if tok.kind == TokenKind.IDENTIFIER and tok.text in _CONTEXTUAL_MODIFIERS:
            nxt = self.tokens[i + 1] if i + 1 < len(self.tokens) else None
            return nxt is not None and nxt.kind in (TokenKind.KEYWORD, TokenKind.IDENTIFIER)
        return False

    def _is_record(self) -> bool:
        nxt = self._peek(1)
        return nxt is not None and (nxt.kind == TokenKind.IDENTIFIER or nxt.text in ("class", "struct"))

    def _make(self, ctx: "_Header", kind: DeclarationKind, name_tok: Token, last: Token,
              name: Optional[str] = None, **extra) -> Declaration:
        return Declaration(
            kind=kind,
            name=name if name is not None else _identifier_text(name_tok),
            span=self._span(ctx.first, last),
            name_span=name_tok.span,
            modifiers=frozenset(t.text for t in ctx.modifier_tokens),
            modifier_tokens=ctx.modifier_tokens,
            attributes=ctx.attributes,
            leading_comments=ctx.leading,
            **extra,
        )

    def _parse_namespace(self, container: Declaration, ctx: "_Header") -> None:
        self.pos += 1
        first = self.pos
        while self.pos < len(self.tokens) and not (self._at_punct("{") or self._at_punct(";")):
            self.pos += 1
        if first >= len(self.tokens) or self.pos == first:
            return
        name_tokens = self.tokens[first:self.pos]
        decl = self._make(ctx, DeclarationKind.NAMESPACE, name_tokens[0], name_tokens[-1],
                          name=_join(name_tokens))
        decl.name_span = self._span(name_tokens[0], name_tokens[-1])
        container.add_child(decl)
        if self.pos >= len(self.tokens):
            return
        in_braces = self._at_punct("{")
        self.pos += 1
        close = self._parse_members(decl, in_braces=in_braces)
        last = close or self.tokens[-1]
        decl.span = self._span(ctx.first, last)

    def _parse_type(self, container: Declaration, ctx: "_Header", kind: DeclarationKind) -> None:
        name_tok = self._peek()
        if name_tok is None or name_tok.kind != TokenKind.IDENTIFIER:
            self.pos = self._skip_statement(self.pos) + 1
            return
        self.pos += 1
        bases: List[str] = []
        current: List[Token] = []
        in_bases = False
        bases_done = False
        angle = 0
        while self.pos < len(self.tokens):
            tok = self.tokens[self.pos]
            if angle == 0 and (tok.is_punct("{") or tok.is_punct(";")):
                break
            if tok.is_punct("<"):
                angle += 1
            elif tok.is_punct(">") and angle:
                angle -= 1
            elif tok.is_punct("(") and self.pos in self.matches:
                self.pos = self.matches[self.pos]
            elif angle == 0 and tok.is_punct(":") and not in_bases and not bases_done:
                in_bases = True
            elif angle == 0 and in_bases:
                if tok.is_punct(",") or tok.text == "where":
                    if current:
                        bases.append(_join(current))
                    current = []
                    if tok.text == "where":
                        in_bases = False
                        bases_done = True
                else:
                    current.append(tok)
            self.pos += 1
        if current:
            bases.append(_join(current))

        decl = self._make(ctx, kind, name_tok, name_tok, base_types=tuple(bases))
        container.add_child(decl)
        if self.pos >= len(self.tokens):
            return
        if self._at_punct(";"):
            decl.span = self._span(ctx.first, self.tokens[self.pos])
            self.pos += 1
            return
        self.pos += 1
        if kind == DeclarationKind.ENUM:
            close = self._parse_enum_body(decl)
        else:
            close = self._parse_members(decl, in_braces=True)
        decl.span = self._span(ctx.first, close or self.tokens[-1])

    def _parse_enum_body(self, decl: Declaration) -> Optional[Token]:
        while self.pos < len(self.tokens):
            if self._at_punct("}"):
                self.pos += 1
                return self.tokens[self.pos - 1]
            if self._at_punct(","):
                self.pos += 1
                continue
            start = self.pos
            attributes = self._parse_attributes()
            if self._at_punct("}") or self._at_punct(","):
                continue
            name_tok = self._peek()
            if name_tok is None:
                break
            self.pos += 1
            while self.pos < len(self.tokens) and not (self._at_punct(",") or self._at_punct("}")):
                if self.pos in self.matches:
                    self.pos = self.matches[self.pos]
                self.pos += 1
            if name_tok.kind != TokenKind.IDENTIFIER:
                continue
            member = Declaration(
                kind=DeclarationKind.ENUM_MEMBER,
                name=_identifier_text(name_tok),
                span=self._span(name_tok, self.tokens[self.pos - 1]),
                name_span=name_tok.span,
                attributes=attributes,
                leading_comments=self._leading_comments(start, start),
            )
            decl.add_child(member)
        return None

    def _parse_delegate(self, container: Declaration, ctx: "_Header") -> None:
        self.pos += 1
        end = self._skip_statement(self.pos)
        paren = self._find_at_depth0(self.pos, end, "(")
        if paren is None:
            self.pos = end + 1
            return
        name_idx = self._name_before(paren)
        name_tok = self.tokens[name_idx]
        if name_tok.kind == TokenKind.IDENTIFIER:
            decl = self._make(ctx, DeclarationKind.DELEGATE, name_tok, self.tokens[end],
                              type_name=_join(self.tokens[self.pos:name_idx]))
            container.add_child(decl)
        self.pos = end + 1

    # --- members ---

    def _find_at_depth0(self, start: int, end: int, text: str) -> Optional[int]:
        i = start
        while i <= end and i < len(self.tokens):
            if self.tokens[i].is_punct(text):
                return i
            if i in self.matches:
                i = self.matches[i]
            i += 1
        return None

    def _name_before(self, index: int) -> int:
        """Index of the name token before '(' / '<...>('."""
        i = index - 1
        if i > 0 and self.tokens[i].is_punct(">"):
            depth = 0
            while i > 0:
                if self.tokens[i].is_punct(">"):
                    depth += 1
                elif self.tokens[i].is_punct("<"):
                    depth -= 1
                    if depth == 0:
                        return i - 1
                i -= 1
        return i

    def _scan_header(self) -> Optional[int]:
        """Index of the token that ends a member header: ( [ = ; { => or ','."""
        j = self.pos
        angle = 0
        while j < len(self.tokens):
            tok = self.tokens[j]
            if tok.kind == TokenKind.KEYWORD and tok.text == "operator":
                while j < len(self.tokens) and not self.tokens[j].is_punct("("):
                    j += 1
                return j if j < len(self.tokens) else None
            if tok.kind == TokenKind.PUNCTUATION:
                if tok.text == "<":
                    angle += 1
                elif tok.text == ">" and angle:
                    angle -= 1
                elif tok.text == "(":
                    if angle or j == self.pos or self.tokens[j - 1].is_punct(","):
                        j = self.matches.get(j, j) + 1
                        continue
                    return j
                elif tok.text == "[":
                    if angle == 0 and j > self.pos and self.tokens[j - 1].text == "this":
                        return j
                    j = self.matches.get(j, j) + 1
                    continue
                elif angle == 0 and tok.text in ("=", ";", "{", "=>", ","):
                    return j
                elif tok.text == "}":
                    return None
            j += 1
        return None

    def _qualified_start(self, name_idx: int, lower: int) -> int:
        """Start of `IFoo.Bar` style qualified member names."""
        k = name_idx
        while k - 2 >= lower and self.tokens[k - 1].is_punct(".") and self.tokens[k - 2].kind == TokenKind.IDENTIFIER:
            k -= 2
        return k

    def _skip_body(self, i: int) -> int:
        """From a '{', '=>' or ';' at i, return the index of the last token of the member."""
        tok = self.tokens[i]
        if tok.is_punct("{"):
            end = self.matches.get(i, i)
            if self._at_punct("=", end + 1):
                return self._skip_statement(end + 1)
            return end
        if tok.is_punct(";"):
            return i
        return self._skip_statement(i)

    def _parse_member_body(self, container: Declaration, ctx: "_Header", event: bool) -> None:
        header_first = self.pos
        stop = self._scan_header()
        if stop is None:
            self.pos = self._skip_statement(self.pos) + 1
            return
        if stop == header_first:
            # a bare block or stray token at member level
            self.pos = self._skip_body(stop) + 1 if self.tokens[stop].text in ("{", "=>") else stop + 1
            return
        stop_tok = self.tokens[stop]

        if stop_tok.is_punct("(") and not event:
            self._parse_method(container, ctx, header_first, stop)
            return
        if stop_tok.is_punct("["):
            name_tok = self.tokens[stop - 1]
            end = self.matches.get(stop, stop) + 1
            while end < len(self.tokens) and not (self.tokens[end].text in ("{", "=>", ";")):
                end += 1
            last = self._skip_body(min(end, len(self.tokens) - 1))
            decl = self._make(ctx, DeclarationKind.PROPERTY, name_tok, self.tokens[last], name="this",
                              type_name=_join(self.tokens[header_first:stop - 1]), special="indexer")
            container.add_child(decl)
            self.pos = last + 1
            return

        name_idx = stop - 1
        name_tok = self.tokens[name_idx]
        if name_tok.kind != TokenKind.IDENTIFIER:
            self.pos = self._skip_statement(stop) + 1
            return
        qual = self._qualified_start(name_idx, header_first)
        type_name = _join(self.tokens[header_first:qual]) or None

        if stop_tok.text in ("{", "=>"):
            last = self._skip_body(stop)
            kind = DeclarationKind.EVENT if event else DeclarationKind.PROPERTY
            decl = self._make(ctx, kind, name_tok, self.tokens[last], type_name=type_name,
                              special="explicit-interface" if qual != name_idx else None)
            container.add_child(decl)
            self.pos = last + 1
            return

        # fields (or field-like events), one declaration per declarator
        kind = DeclarationKind.EVENT if event else DeclarationKind.FIELD
        end = self._skip_statement(stop)
        declarators = [name_idx]
        i = stop
        while i < end:
            tok = self.tokens[i]
            if tok.is_punct(",") and i + 2 <= end + 1:
                nxt = self.tokens[i + 1]
                after = self.tokens[i + 2] if i + 2 < len(self.tokens) else None
                if nxt.kind == TokenKind.IDENTIFIER and after is not None and after.text in ("=", ",", ";"):
                    declarators.append(i + 1)
            if i in self.matches:
                i = self.matches[i]
            i += 1
        for idx in declarators:
            decl = self._make(ctx, kind, self.tokens[idx], self.tokens[end], type_name=type_name)
            container.add_child(decl)
        self.pos = end + 1

    def _parse_method(self, container: Declaration, ctx: "_Header", header_first: int, paren: int) -> None:
        name_idx = self._name_before(paren)
        name_tok = self.tokens[name_idx]
        body = self.matches.get(paren, paren) + 1
        while body < len(self.tokens) and self.tokens[body].text not in ("{", "=>", ";"):
            if body in self.matches:
                body = self.matches[body]
            body += 1
        last = self._skip_body(min(body, len(self.tokens) - 1))

        header = self.tokens[header_first:name_idx]
        kind = DeclarationKind.METHOD
        special = None
        name = None
        type_name: Optional[str] = None
        if any(t.text == "operator" for t in self.tokens[header_first:paren]):
            op_idx = next(i for i in range(header_first, paren) if self.tokens[i].text == "operator")
            name = "operator " + _join(self.tokens[op_idx + 1:paren])
            special = "operator"
            type_name = _join(self.tokens[header_first:op_idx]) or None
            name_tok = self.tokens[op_idx]
        elif header and header[-1].is_punct("~"):
            kind = DeclarationKind.CONSTRUCTOR
            special = "destructor"
        elif not header:
            kind = DeclarationKind.CONSTRUCTOR
            if "static" in {t.text for t in ctx.modifier_tokens}:
                special = "static-constructor"
        else:
            qual = self._qualified_start(name_idx, header_first)
            if qual != name_idx:
                special = "explicit-interface"
            type_name = _join(self.tokens[header_first:qual]) or None

        if name is None and name_tok.kind != TokenKind.IDENTIFIER:
            self.pos = last + 1
            return
        decl = self._make(ctx, kind, name_tok, self.tokens[last], name=name,
                          type_name=type_name, special=special)
        container.add_child(decl)
        self.pos = last + 1


@dataclass(frozen=True)
class _Header:
    start: int
    first: Token
    attributes: Tuple[Attribute, ...]
    modifier_tokens: Tuple[Token, ...]
    leading: Tuple[Token, ...]


def _identifier_text(tok: Token) -> str:
    return tok.text[1:] if tok.text.startswith("@") else tok.text


def _join(tokens: Sequence[Token]) -> str:
    """Token texts joined, with a single space only between two words."""
    out: List[str] = []
    prev: Optional[Token] = None
    for tok in tokens:
        if prev is not None and _is_word(prev) and _is_word(tok):
            out.append(" ")
        out.append(tok.text)
        prev = tok
    return "".join(out)


def _is_word(tok: Token) -> bool:
    return tok.kind in (TokenKind.IDENTIFIER, TokenKind.KEYWORD, TokenKind.LITERAL)


def parse_declarations(tokens: Sequence[Token], path: str = "<input>") -> Declaration:
    """Parse a token stream into the file's declaration tree. Raises StructureError."""
    return Parser(tokens, path).parse()
