"""
Base checker class for style rules.
"""

from typing import Iterator, List, Optional

from .config import StyleConfig
from .finding import Finding, Severity
from .lexer import Token
from .parser import Declaration
from .source import SourceFile, Span


class BaseChecker:
    """Base class for all style rules.

    Checkers hold no per-run state: one instance is shared by every worker
    thread. Subclasses override inspect_tokens (lexical rules, which run even
    when the file could not be parsed) and/or inspect_declaration (structural
    rules, called once per declaration of the tree).
    """

    rule_id = "BaseChecker"
    default_severity = Severity.WARNING
    description = ""
    needs_structure = False

    def check(self, source: SourceFile, root: Optional[Declaration], config: StyleConfig) -> List[Finding]:
        """Run this rule on one file. root is None when the file did not parse."""
        severity = config.severity_for(self.rule_id, self.default_severity)
        findings: List[Finding] = []
        if self.needs_structure and root is None:
            return findings
        findings.extend(self.inspect_tokens(source, config, severity))
        if root is not None:
            for decl in root.walk():
                findings.extend(self.inspect_declaration(decl, source, config, severity))
        return findings

    def inspect_tokens(self, source: SourceFile, config: StyleConfig, severity: Severity) -> Iterator[Finding]:
        """Override in lexical rules."""
        return iter(())

    def inspect_declaration(self, decl: Declaration, source: SourceFile, config: StyleConfig,
                            severity: Severity) -> Iterator[Finding]:
        """Override in structural rules."""
        return iter(())

    def _finding(
        self,
        source: SourceFile,
        severity: Severity,
        span: Span,
        message: str,
        suggestion: Optional[str] = None,
    ) -> Finding:
        """Build a finding of this rule at span."""
        return Finding(
            rule_id=self.rule_id,
            severity=severity,
            message=message,
            path=source.path,
            line=span.line,
            column=span.column,
            end_line=span.end_line,
            end_column=span.end_column,
            suggestion=suggestion,
        )

    def _token_finding(self, source: SourceFile, severity: Severity, token: Token, message: str,
                       suggestion: Optional[str] = None) -> Finding:
        return self._finding(source, severity, token.span, message, suggestion)
