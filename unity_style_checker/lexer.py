"""
C# lexer (tokenizer).

Converts raw source text into a flat, position-tagged token stream.
Whitespace and comments are kept as tokens so the stream is lossless:
joining every token's text gives back the original text.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from .errors import LexError
from .source import Span


class TokenKind(Enum):
    """Kinds of tokens in C# source."""
    IDENTIFIER = "identifier"        # foo, _bar, @class
    KEYWORD = "keyword"              # class, public, if
    PUNCTUATION = "punctuation"      # { } ( ) ; , => ==
    LITERAL = "literal"              # "text", 'c', 42, 0.5f
    LINE_COMMENT = "line-comment"    # // text
    BLOCK_COMMENT = "block-comment"  # /* text */
    DOC_COMMENT = "doc-comment"      # /// <summary>
    PREPROCESSOR = "preprocessor"    # #region, #if UNITY_EDITOR
    WHITESPACE = "whitespace"        # spaces, tabs, newlines


COMMENT_KINDS = frozenset({TokenKind.LINE_COMMENT, TokenKind.BLOCK_COMMENT, TokenKind.DOC_COMMENT})
TRIVIA_KINDS = COMMENT_KINDS | {TokenKind.WHITESPACE, TokenKind.PREPROCESSOR}

KEYWORDS = frozenset({
    "abstract", "as", "base", "bool", "break", "byte", "case", "catch", "char",
    "checked", "class", "const", "continue", "decimal", "default", "delegate",
    "do", "double", "else", "enum", "event", "explicit", "extern", "false",
    "finally", "fixed", "float", "for", "foreach", "goto", "if", "implicit",
    "in", "int", "interface", "internal", "is", "lock", "long", "namespace",
    "new", "null", "object", "operator", "out", "override", "params", "private",
    "protected", "public", "readonly", "ref", "return", "sbyte", "sealed",
    "short", "sizeof", "stackalloc", "static", "string", "struct", "switch",
    "this", "throw", "true", "try", "typeof", "uint", "ulong", "unchecked",
    "unsafe", "ushort", "using", "virtual", "void", "volatile", "while",
})

# Longest first. '>>' and '>>=' are left out so generic closers stay separate.
OPERATORS = (
    "??=", "<<=",
    "=>", "==", "!=", "<=", ">=", "&&", "||", "++", "--", "+=", "-=", "*=",
    "/=", "%=", "&=", "|=", "^=", "??", "?.", "::", "->", "<<", "..",
)

WHITESPACE_CHARS = " \t\r\n\f\v\ufeff"
DIGITS = "0123456789"

_NUMBER = re.compile(
    r"0[xX][0-9a-fA-F_]+[uUlL]*"
    r"|0[bB][01_]+[uUlL]*"
    r"|\d[\d_]*(?:\.\d[\d_]*)?(?:[eE][+-]?\d[\d_]*)?[fFdDmMuUlL]*"
    r"|\.\d[\d_]*(?:[eE][+-]?\d[\d_]*)?[fFdDmM]?"
)
_IDENTIFIER = re.compile(r"@?[^\W\d]\w*")
_BANNER_CHARS = set("/-=*#~_")


@dataclass(frozen=True)
class Token:
    """A single token with its 1-based position (end column is exclusive)."""
    kind: TokenKind
    text: str
    line: int
    column: int
    end_line: int
    end_column: int
    offset: int

    @property
    def span(self) -> Span:
        return Span(self.line, self.column, self.end_line, self.end_column)

    @property
    def is_trivia(self) -> bool:
        return self.kind in TRIVIA_KINDS

    @property
    def is_comment(self) -> bool:
        return self.kind in COMMENT_KINDS

    @property
    def has_newline(self) -> bool:
        return "\n" in self.text

    def is_punct(self, text: str) -> bool:
        return self.kind == TokenKind.PUNCTUATION and self.text == text

    def __repr__(self):
        return f"Token({self.kind.name}, {self.text!r}, L{self.line}:{self.column})"


class Lexer:
    """
    Tokenizer for C# source files.

    Usage:
        tokens = Lexer(source_text).tokenize()
    """

    def __init__(self, text: str):
        self.text = text
        self.length = len(text)
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []
        # True while only whitespace has been seen on the current line
        self.at_line_start = True

    def tokenize(self) -> List[Token]:
        """Tokenize the whole text. Raises LexError on unterminated literals/comments."""
        while self.pos < self.length:
            self._scan_token()
        return self.tokens

    # --- cursor helpers ---

    def _peek(self, offset: int = 0) -> str:
        pos = self.pos + offset
        return self.text[pos] if pos < self.length else ""

    def _emit(self, kind: TokenKind, end: int) -> None:
        """Emit text[pos:end] as one token and move the cursor past it."""
        text = self.text[self.pos:end]
        line, column = self.line, self.column
        newlines = text.count("\n")
        if newlines:
            end_line = line + newlines
            end_column = len(text) - text.rfind("\n")
        else:
            end_line = line
            end_column = column + len(text)
        self.tokens.append(Token(kind, text, line, column, end_line, end_column, self.pos))
        self.pos, self.line, self.column = end, end_line, end_column
        if kind == TokenKind.WHITESPACE:
            if newlines:
                self.at_line_start = True
        else:
            self.at_line_start = False

    def _error(self, message: str, start: int) -> LexError:
        line = self.text.count("\n", 0, start) + 1
        column = start - (self.text.rfind("\n", 0, start) + 1) + 1
        return LexError(message, line, column, tokens=list(self.tokens))

    def _line_end(self, start: int) -> int:
        """Index of the line break (or end of text) at or after start, excluding a trailing CR."""
        end = self.text.find("\n", start)
        if end == -1:
            end = self.length
        if end > start and self.text[end - 1] == "\r":
            end -= 1
        return end

    # --- scanning ---

    def _scan_token(self) -> None:
        ch = self._peek()
        nxt = self._peek(1)

        if ch in WHITESPACE_CHARS:
            end = self.pos
            while end < self.length and self.text[end] in WHITESPACE_CHARS:
                end += 1
            self._emit(TokenKind.WHITESPACE, end)
            return

        if ch == "/" and nxt == "/":
            end = self._line_end(self.pos)
            text = self.text[self.pos:end]
            is_doc = text.startswith("///") and not text.startswith("////")
            self._emit(TokenKind.DOC_COMMENT if is_doc else TokenKind.LINE_COMMENT, end)
            return

        if ch == "/" and nxt == "*":
            close = self.text.find("*/", self.pos + 2)
            if close == -1:
                raise self._error("unterminated block comment", self.pos)
            end = close + 2
            text = self.text[self.pos:end]
            is_doc = text.startswith("/**") and text != "/**/"
            self._emit(TokenKind.DOC_COMMENT if is_doc else TokenKind.BLOCK_COMMENT, end)
            return

        if ch == "#" and self.at_line_start:
            self._emit(TokenKind.PREPROCESSOR, self._line_end(self.pos))
            return

        string_end = self._match_string(self.pos)
        if string_end is not None:
            self._emit(TokenKind.LITERAL, string_end)
            return

        if ch == "'":
            self._emit(TokenKind.LITERAL, self._scan_char(self.pos))
            return

        if ch in DIGITS or (ch == "." and nxt != "" and nxt in DIGITS):
            match = _NUMBER.match(self.text, self.pos)
            self._emit(TokenKind.LITERAL, match.end())
            return

        match = _IDENTIFIER.match(self.text, self.pos)
        if match:
            word = match.group(0)
            kind = TokenKind.KEYWORD if word in KEYWORDS else TokenKind.IDENTIFIER
            self._emit(kind, match.end())
            return

        for op in OPERATORS:
            if self.text.startswith(op, self.pos):
                self._emit(TokenKind.PUNCTUATION, self.pos + len(op))
                return
        self._emit(TokenKind.PUNCTUATION, self.pos + 1)

    def _match_string(self, start: int) -> Optional[int]:
        """If a string literal starts at `start`, return its end index; else None."""
        i = start
        dollars = 0
        verbatim = False
        while i < self.length and self.text[i] in "$@":
            if self.text[i] == "$":
                dollars += 1
            else:
                if verbatim:
                    return None
                verbatim = True
            i += 1
        if i >= self.length or self.text[i] != '"':
            return None
        if self.text.startswith('"""', i) and not verbatim:
            return self._scan_raw_string(start, i)
        if verbatim:
            return self._scan_quoted(start, i + 1, verbatim=True, interpolated=dollars > 0)
        return self._scan_quoted(start, i + 1, verbatim=False, interpolated=dollars > 0)

    def _scan_raw_string(self, start: int, quote_pos: int) -> int:
        count = 0
        while quote_pos + count < self.length and self.text[quote_pos + count] == '"':
            count += 1
        close = self.text.find('"' * count, quote_pos + count)
        if close == -1:
            raise self._error("unterminated raw string literal", start)
        end = close + count
        while end < self.length and self.text[end] == '"':
            end += 1
        return end

    def _scan_quoted(self, start: int, i: int, verbatim: bool, interpolated: bool) -> int:
        """Scan the body of a regular/verbatim/interpolated string; i is just past the opening quote."""
        text = self.text
        while i < self.length:
            c = text[i]
            if c == "\\" and not verbatim:
                i += 2
                continue
            if c == '"':
                if verbatim and i + 1 < self.length and text[i + 1] == '"':
                    i += 2
                    continue
                return i + 1
            if c == "\n" and not verbatim:
                break
            if interpolated and c == "{":
                if i + 1 < self.length and text[i + 1] == "{":
                    i += 2
                    continue
                i = self._scan_hole(start, i + 1)
                continue
            i += 1
        raise self._error("unterminated string literal", start)

    def _scan_hole(self, start: int, i: int) -> int:
        """Skip an interpolation hole `{expr}`; i is just past the opening brace."""
        depth = 1
        while i < self.length:
            c = self.text[i]
            if c == "{":
                depth += 1
            elif c == "}":
                depth -= 1
                if depth == 0:
                    return i + 1
            elif c == "'":
                i = self._scan_char(i)
                continue
            else:
                nested = self._match_string(i) if c in '"$@' else None
                if nested is not None:
                    i = nested
                    continue
            i += 1
        raise self._error("unterminated string literal", start)

    def _scan_char(self, start: int) -> int:
        i = start + 1
        while i < self.length:
            c = self.text[i]
            if c == "\\":
                i += 2
                continue
            if c == "'":
                return i + 1
            if c == "\n":
                break
            i += 1
        raise self._error("unterminated character literal", start)


def tokenize(text: str) -> List[Token]:
    """Tokenize C# source text."""
    return Lexer(text).tokenize()


def significant(tokens: Iterable[Token]) -> List[Token]:
    """Tokens that are not whitespace, comments or preprocessor lines."""
    return [t for t in tokens if not t.is_trivia]


def comment_body(token: Token) -> str:
    """Text after the comment marker (`//`, `///`, `/*`) of a line or doc comment."""
    if token.kind == TokenKind.DOC_COMMENT and token.text.startswith("///"):
        return token.text[3:]
    return token.text[2:]


def is_banner_comment(token: Token) -> bool:
    """True for separator lines such as `//////` or `// -----`."""
    body = comment_body(token).strip()
    return not body or all(ch in _BANNER_CHARS for ch in body)
