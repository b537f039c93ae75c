"""
Comment style checks: marker spacing, TODO/BUG tags, regions and public doc comments.
"""

import re
from typing import Iterator

from ..checker_base import BaseChecker
from ..config import StyleConfig
from ..finding import Finding, Severity
from ..lexer import TokenKind, comment_body, is_banner_comment
from ..parser import Declaration, DeclarationKind
from ..source import SourceFile

# A comment that starts with a TODO/BUG tag (upper case, or any case followed by ':')
TAG_START = re.compile(r"(?P<tag>TODO|BUG)\b|(?P<loose>(?i:todo|bug))\s*:")
# // TODO:[summary] description
TAG_FORMAT = re.compile(r"^(TODO|BUG):\[[^\]\s][^\]]*\] \S")
REGION = re.compile(r"^#\s*(end)?region\b")

_UNDOCUMENTED_KINDS = frozenset({DeclarationKind.FILE, DeclarationKind.NAMESPACE, DeclarationKind.ENUM_MEMBER})


class CommentStyleChecker(BaseChecker):
    """`// comment` spacing, `// TODO:[x] desc` tags, no #region, doc comments on public API."""

    rule_id = "CommentStyleCheck"
    default_severity = Severity.WARNING
    description = "Comment markers, TODO/BUG tags, regions and public doc comments"

    def inspect_tokens(self, source: SourceFile, config: StyleConfig, severity: Severity) -> Iterator[Finding]:
        for tok in source.tokens:
            if tok.kind == TokenKind.PREPROCESSOR:
                match = REGION.match(tok.text.strip())
                if match:
                    directive = "#endregion" if match.group(1) else "#region"
                    yield self._token_finding(source, severity, tok, f"Avoid {directive}: split the class instead")
                continue
            if tok.kind == TokenKind.LINE_COMMENT or (tok.kind == TokenKind.DOC_COMMENT and tok.text.startswith("///")):
                yield from self._check_line_comment(tok, source, severity)

    def _check_line_comment(self, tok, source: SourceFile, severity: Severity) -> Iterator[Finding]:
        """Exactly one space after the marker; tags written as TODO:[summary] description."""
        if is_banner_comment(tok):
            return
        marker = "///" if tok.kind == TokenKind.DOC_COMMENT else "//"
        body = comment_body(tok)
        text = body.strip()
        if not body.startswith(" ") or body.startswith("  "):
            yield self._token_finding(
                source, severity, tok,
                f"Comment marker '{marker}' should be followed by exactly one space",
                f"{marker} {text}",
            )
        if tok.kind != TokenKind.LINE_COMMENT:
            return
        tag = TAG_START.match(text)
        if tag is not None and not TAG_FORMAT.match(text):
            name = (tag.group("tag") or tag.group("loose")).upper()
            yield self._token_finding(
                source, severity, tok,
                f"{name} comment should be written as '// {name}:[summary] description'",
                f"// {name}:[summary] description",
            )

    def inspect_declaration(self, decl: Declaration, source: SourceFile, config: StyleConfig,
                            severity: Severity) -> Iterator[Finding]:
        if decl.kind in _UNDOCUMENTED_KINDS or "public" not in decl.modifiers:
            return
        if decl.doc_comment is None:
            yield self._finding(
                source, severity, decl.span,
                f"Public {decl.kind.value} '{decl.name}' has no documentation comment",
                "/// <summary>\n/// ...\n/// </summary>",
            )
