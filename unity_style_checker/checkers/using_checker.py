"""
Ordering checks for the using directives at the top of a file.
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from ..checker_base import BaseChecker
from ..config import StyleConfig
from ..finding import Finding, Severity
from ..lexer import Token, significant
from ..source import SourceFile, Span


@dataclass(frozen=True)
class UsingDirective:
    """One `using X;`, `using static X;` or `using A = X;` directive."""
    namespace: str
    text: str
    span: Span


def top_using_directives(tokens: List[Token]) -> List[UsingDirective]:
    """Using directives before the first namespace, type or attribute of the file."""
    sig = significant(tokens)
    directives: List[UsingDirective] = []
    i = 0
    while i < len(sig):
        tok = sig[i]
        if tok.text == "extern":
            i = _statement_end(sig, i) + 1
            continue
        start = i
        if tok.text == "global" and i + 1 < len(sig) and sig[i + 1].text == "using":
            i += 1
        if sig[i].text != "using" or (i + 1 < len(sig) and sig[i + 1].is_punct("(")):
            break
        end = _statement_end(sig, i)
        body = sig[i + 1:end]
        if body and body[0].text == "static":
            body = body[1:]
        for k, part in enumerate(body):
            if part.is_punct("="):
                body = body[k + 1:]
                break
        namespace = "".join(t.text for t in body)
        text = " ".join(t.text for t in sig[start:end]).replace(" .", ".").replace(". ", ".") + ";"
        last = sig[min(end, len(sig) - 1)]
        span = Span(sig[start].line, sig[start].column, last.end_line, last.end_column)
        if namespace:
            directives.append(UsingDirective(namespace=namespace, text=text, span=span))
        i = end + 1
    return directives


def _statement_end(sig: List[Token], i: int) -> int:
    while i < len(sig) and not sig[i].is_punct(";"):
        i += 1
    return i


def _sort_key(config: StyleConfig, namespace: str) -> Tuple[int, Tuple[str, ...], str]:
    return (config.using_group(namespace), tuple(s.lower() for s in namespace.split(".")), namespace)


class UsingOrderChecker(BaseChecker):
    """System, then Unity, then other namespaces; alphabetical within each group."""

    rule_id = "UsingOrderCheck"
    default_severity = Severity.WARNING
    description = "Using directives are grouped (System, Unity, others) and sorted"

    def inspect_tokens(self, source: SourceFile, config: StyleConfig, severity: Severity) -> Iterator[Finding]:
        directives = top_using_directives(list(source.tokens))
        keys = [_sort_key(config, d.namespace) for d in directives]
        expected = sorted(range(len(directives)), key=lambda idx: keys[idx])
        expected_pos = {idx: pos for pos, idx in enumerate(expected)}

        highest: Optional[int] = None
        for idx, directive in enumerate(directives):
            if highest is not None and keys[idx] < keys[highest]:
                # the first directive seen so far that must come after this one
                blocker = next(j for j in range(idx) if keys[j] > keys[idx])
                yield self._finding(
                    source, severity, directive.span,
                    f"'{directive.text}' ({config.using_group_name(keys[idx][0])} group) is at position "
                    f"{idx + 1} but belongs at position {expected_pos[idx] + 1}: "
                    f"move it before '{directives[blocker].text}'",
                    directive.text,
                )
            elif highest is None or keys[idx] > keys[highest]:
                highest = idx
