"""
Report generation for the style checker.

All output is a pure function of the findings: no timestamps, stable order.
"""

import json
from typing import Any, Dict, Iterable, List, Optional

from .finding import Finding, Severity

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_ERROR = 2


class ReportGenerator:
    """Generate reports from findings."""

    @staticmethod
    def sort_findings(findings: Iterable[Finding]) -> List[Finding]:
        """Order by path, line, column, rule id (message breaks remaining ties)."""
        return sorted(findings, key=Finding.sort_key)

    @staticmethod
    def format_finding(finding: Finding) -> str:
        """`path:line:column: severity rule-id message`"""
        return (f"{finding.path}:{finding.line}:{finding.column}: "
                f"{finding.severity.value} {finding.rule_id} {finding.message}")

    @staticmethod
    def generate_summary(findings: Iterable[Finding], files_checked: Optional[int] = None) -> Dict[str, Any]:
        """Counts by severity and by rule id."""
        findings = list(findings)
        by_rule: Dict[str, int] = {}
        for finding in findings:
            by_rule[finding.rule_id] = by_rule.get(finding.rule_id, 0) + 1
        summary: Dict[str, Any] = {
            "total": len(findings),
            "errors": sum(1 for f in findings if f.severity == Severity.ERROR),
            "warnings": sum(1 for f in findings if f.severity == Severity.WARNING),
            "info": sum(1 for f in findings if f.severity == Severity.INFO),
            "by_rule": dict(sorted(by_rule.items())),
        }
        if files_checked is not None:
            summary["files_checked"] = files_checked
        return summary

    @staticmethod
    def generate_text_report(findings: Iterable[Finding], files_checked: Optional[int] = None,
                             cancelled: bool = False) -> str:
        """Generate the line-oriented report."""
        ordered = ReportGenerator.sort_findings(findings)
        summary = ReportGenerator.generate_summary(ordered, files_checked)
        lines = [ReportGenerator.format_finding(f) for f in ordered]
        tail = f"{summary['errors']} error(s), {summary['warnings']} warning(s), {summary['info']} info"
        if files_checked is not None:
            tail += f" in {files_checked} file(s)"
        if cancelled:
            tail += " (run cancelled, results are partial)"
        lines.append(f"Summary: {tail}")
        return "\n".join(lines) + "\n"

    @staticmethod
    def generate_json_report(findings: Iterable[Finding], files_checked: Optional[int] = None,
                             cancelled: bool = False) -> str:
        """Machine-readable report: one record per finding plus the summary."""
        ordered = ReportGenerator.sort_findings(findings)
        payload = {
            "findings": [f.to_dict() for f in ordered],
            "summary": ReportGenerator.generate_summary(ordered, files_checked),
            "cancelled": cancelled,
        }
        return json.dumps(payload, indent=2) + "\n"

    @staticmethod
    def generate_markdown_report(findings: Iterable[Finding], files_checked: Optional[int] = None,
                                 cancelled: bool = False) -> str:
        """Markdown document grouped by file."""
        ordered = ReportGenerator.sort_findings(findings)
        summary = ReportGenerator.generate_summary(ordered, files_checked)
        lines = ["# Unity C# Style Report", ""]
        lines.append(
            f"**{summary['total']}** finding(s): {summary['errors']} error(s), "
            f"{summary['warnings']} warning(s), {summary['info']} info."
        )
        lines.append("")
        if cancelled:
            lines.append("> The run was cancelled; results are partial.")
            lines.append("")
        if not ordered:
            lines.append("No style issues found.")
            lines.append("")
            return "\n".join(lines)

        current = None
        for finding in ordered:
            if finding.path != current:
                current = finding.path
                lines.append(f"## {current}")
                lines.append("")
            lines.append(f"- **Line {finding.line}:{finding.column}** · {finding.rule_id} · "
                         f"{finding.severity.value}: {finding.message}")
            if finding.suggestion:
                lines.append(f"  - Suggested: `{finding.suggestion}`")
        lines.append("")
        lines.append("## Summary by rule")
        lines.append("")
        lines.append("| Rule | Findings |")
        lines.append("| --- | --- |")
        for rule_id, count in summary["by_rule"].items():
            lines.append(f"| {rule_id} | {count} |")
        lines.append("")
        return "\n".join(lines)

    @staticmethod
    def generate(findings: Iterable[Finding], fmt: str = "text", files_checked: Optional[int] = None,
                 cancelled: bool = False) -> str:
        """Render in the named format: text, json or markdown."""
        generators = {
            "text": ReportGenerator.generate_text_report,
            "json": ReportGenerator.generate_json_report,
            "markdown": ReportGenerator.generate_markdown_report,
        }
        if fmt not in generators:
            raise ValueError(f"Unknown report format: {fmt}")
        return generators[fmt](findings, files_checked, cancelled)

    @staticmethod
    def is_failing(finding: Finding, strict: bool) -> bool:
        if finding.severity == Severity.ERROR:
            return True
        return strict and finding.severity == Severity.WARNING

    @staticmethod
    def exit_status(findings: Iterable[Finding], strict: bool = False, cancelled: bool = False) -> int:
        """0 when nothing fails, 1 on a failing finding, 2 for a cancelled run."""
        if cancelled:
            return EXIT_ERROR
        if any(ReportGenerator.is_failing(f, strict) for f in findings):
            return EXIT_FINDINGS
        return EXIT_OK
