"""
Whitespace and brace formatting checks over the raw token stream.
"""

from typing import Dict, Iterator, List, Optional, Sequence

from ..checker_base import BaseChecker
from ..config import StyleConfig
from ..finding import Finding, Severity
from ..lexer import Token, TokenKind
from ..source import SourceFile

# Keywords that must be followed by one space before their '('
PAREN_KEYWORDS = frozenset({"if", "for", "foreach", "while", "switch", "catch", "lock", "using"})
# Statements whose body must be a braced block
BRACED_KEYWORDS = frozenset({"if", "for", "foreach", "while", "else", "do"})
SPACED_OPERATORS = frozenset({"==", "!=", "<=", ">=", "&&", "||", "=", "+=", "-=", "*=", "/=", "=>", "??"})


class _Stream:
    """Raw tokens plus significant-token navigation."""

    def __init__(self, tokens: Sequence[Token]):
        self.tokens = list(tokens)
        self.sig = [i for i, tok in enumerate(self.tokens) if not tok.is_trivia]
        self.sig_pos = {raw: pos for pos, raw in enumerate(self.sig)}
        self.paren_match = self._match_parens()

    def _match_parens(self) -> Dict[int, int]:
        """Raw index of '(' -> raw index of its ')'; unbalanced parens are left out."""
        matches: Dict[int, int] = {}
        stack: List[int] = []
        for raw in self.sig:
            tok = self.tokens[raw]
            if tok.is_punct("("):
                stack.append(raw)
            elif tok.is_punct(")") and stack:
                matches[stack.pop()] = raw
        return matches

    def raw(self, i: int) -> Optional[Token]:
        return self.tokens[i] if 0 <= i < len(self.tokens) else None

    def next_sig(self, raw: int) -> Optional[int]:
        pos = self.sig_pos[raw] + 1
        return self.sig[pos] if pos < len(self.sig) else None

    def prev_sig(self, raw: int) -> Optional[int]:
        pos = self.sig_pos[raw] - 1
        return self.sig[pos] if pos >= 0 else None


def _is_inline_space(tok: Optional[Token]) -> bool:
    return tok is not None and tok.kind == TokenKind.WHITESPACE and not tok.has_newline


class FormattingChecker(BaseChecker):
    """Spacing around commas, parentheses, braces, keywords and operators; braced bodies."""

    rule_id = "FormattingCheck"
    default_severity = Severity.WARNING
    description = "Whitespace conventions and mandatory braces"

    def inspect_tokens(self, source: SourceFile, config: StyleConfig, severity: Severity) -> Iterator[Finding]:
        options = config.formatting
        stream = _Stream(source.tokens)
        for i in stream.sig:
            tok = stream.tokens[i]
            if tok.kind == TokenKind.PUNCTUATION:
                if tok.text == "," and options.space_after_comma:
                    yield from self._check_comma(stream, i, source, severity)
                elif tok.text in ("(", ")") and options.no_space_inside_parens:
                    yield from self._check_paren(stream, i, source, severity)
                elif tok.text == "{" and options.space_before_brace:
                    yield from self._check_brace(stream, i, source, severity)
                elif tok.text == ";" and options.no_space_before_semicolon:
                    yield from self._check_semicolon(stream, i, source, severity)
                elif tok.text in SPACED_OPERATORS and options.space_around_operators:
                    yield from self._check_operator(stream, i, source, severity)
            elif tok.kind == TokenKind.KEYWORD:
                if tok.text in PAREN_KEYWORDS and options.space_after_keyword:
                    yield from self._check_keyword_space(stream, i, source, severity)
                if tok.text in BRACED_KEYWORDS and options.require_braces:
                    yield from self._check_braces(stream, i, source, severity)

    def _check_comma(self, stream: _Stream, i: int, source: SourceFile, severity: Severity) -> Iterator[Finding]:
        """Exactly one space (or a line break) after ','."""
        tok = stream.tokens[i]
        nxt = stream.raw(i + 1)
        if nxt is None or nxt.has_newline or nxt.is_comment:
            return
        # int[,] and Dictionary<,>
        if nxt.kind == TokenKind.PUNCTUATION and nxt.text in (",", "]", ">", ")"):
            return
        if nxt.kind != TokenKind.WHITESPACE:
            yield self._token_finding(source, severity, tok, "Missing space after ','", ", ")
            return
        # aligned trailing comment: "Yes,        // ..."
        after = stream.raw(i + 2)
        if after is None or after.has_newline or after.is_comment:
            return
        if nxt.text != " ":
            yield self._token_finding(source, severity, nxt, "Expected exactly one space after ','", " ")

    def _check_paren(self, stream: _Stream, i: int, source: SourceFile, severity: Severity) -> Iterator[Finding]:
        """No space right after '(' or right before ')' on the same line."""
        tok = stream.tokens[i]
        if tok.text == "(":
            nxt = stream.raw(i + 1)
            after = stream.raw(i + 2)
            if _is_inline_space(nxt) and after is not None and not after.is_comment:
                yield self._token_finding(source, severity, nxt, "Unexpected space after '('", "")
            return
        prev = stream.raw(i - 1)
        before = stream.raw(i - 2)
        # '( )' is already reported at the '('
        if _is_inline_space(prev) and before is not None and not before.is_punct("("):
            yield self._token_finding(source, severity, prev, "Unexpected space before ')'", "")

    def _check_brace(self, stream: _Stream, i: int, source: SourceFile, severity: Severity) -> Iterator[Finding]:
        """Exactly one space before '{' unless it starts a line."""
        tok = stream.tokens[i]
        prev = stream.raw(i - 1)
        if prev is None or prev.has_newline:
            return
        if prev.kind == TokenKind.WHITESPACE:
            if prev.text != " ":
                yield self._token_finding(source, severity, prev, "Expected exactly one space before '{'", " ")
            return
        # nested initializers: new int[,] {{1, 2}}, Foo({ ... })
        if prev.kind == TokenKind.PUNCTUATION and prev.text in ("(", "{", "["):
            return
        yield self._token_finding(source, severity, tok, "Missing space before '{'", " {")

    def _check_semicolon(self, stream: _Stream, i: int, source: SourceFile, severity: Severity) -> Iterator[Finding]:
        """No space before ';'."""
        prev = stream.raw(i - 1)
        before = stream.raw(i - 2)
        if not _is_inline_space(prev) or before is None or before.has_newline:
            return
        # for (;;) style empty clauses
        if before.is_punct(";") or before.is_punct("("):
            return
        yield self._token_finding(source, severity, prev, "Unexpected space before ';'", "")

    def _check_operator(self, stream: _Stream, i: int, source: SourceFile, severity: Severity) -> Iterator[Finding]:
        """Binary and assignment operators are surrounded by spaces."""
        tok = stream.tokens[i]
        prev_sig = stream.prev_sig(i)
        if prev_sig is not None and stream.tokens[prev_sig].text == "operator":
            return
        prev = stream.raw(i - 1)
        nxt = stream.raw(i + 1)
        # '>>=' lexes as '>' '>='
        if prev is not None and prev.is_punct(">") and tok.text == ">=":
            return
        missing = []
        if prev is None or prev.kind != TokenKind.WHITESPACE:
            missing.append("before")
        if nxt is None or nxt.kind != TokenKind.WHITESPACE:
            missing.append("after")
        if missing:
            yield self._token_finding(
                source, severity, tok,
                f"Missing space {' and '.join(missing)} '{tok.text}'",
                f" {tok.text} ",
            )

    def _check_keyword_space(self, stream: _Stream, i: int, source: SourceFile,
                             severity: Severity) -> Iterator[Finding]:
        """One space between a control keyword and its '('."""
        tok = stream.tokens[i]
        nxt_sig = stream.next_sig(i)
        if nxt_sig is None or not stream.tokens[nxt_sig].is_punct("("):
            return
        nxt = stream.raw(i + 1)
        if nxt is not None and nxt.is_punct("("):
            yield self._token_finding(source, severity, tok, f"Missing space after '{tok.text}'", f"{tok.text} (")
        elif _is_inline_space(nxt) and nxt.text != " " and nxt_sig == i + 2:
            yield self._token_finding(
                source, severity, nxt, f"Expected exactly one space after '{tok.text}'", " ")

    def _check_braces(self, stream: _Stream, i: int, source: SourceFile, severity: Severity) -> Iterator[Finding]:
        """Bodies of if/else/for/foreach/while/do are braced blocks."""
        tok = stream.tokens[i]
        if tok.text in ("else", "do"):
            body = stream.next_sig(i)
            if body is None:
                return
            body_tok = stream.tokens[body]
            if body_tok.is_punct("{") or (tok.text == "else" and body_tok.text == "if"):
                return
        else:
            paren = stream.next_sig(i)
            if paren is None or paren not in stream.paren_match:
                return
            body = stream.next_sig(stream.paren_match[paren])
            if body is None:
                return
            body_tok = stream.tokens[body]
            # ';' ends a do-while or an intentionally empty loop
            if body_tok.is_punct("{") or body_tok.is_punct(";"):
                return
        yield self._token_finding(
            source, severity, tok,
            f"Body of '{tok.text}' should be enclosed in braces",
            "{ ... }",
        )
