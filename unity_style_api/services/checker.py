"""Checker service: wraps unity_style_checker and maps to API models."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional

from unity_style_checker.checkers import RULE_IDS
from unity_style_checker.config import StyleConfig, check_rule_ids
from unity_style_checker.errors import ConfigError
from unity_style_checker.finding import Finding
from unity_style_checker.main_checker import CheckRun, StyleChecker
from unity_style_checker.reporter import ReportGenerator

from ..config import get_style_config
from ..schemas import FileFindings, FindingOut, SummaryOut

logger = logging.getLogger(__name__)


def finding_to_out(finding: Finding) -> FindingOut:
    return FindingOut(**finding.to_dict())


def summary_to_out(findings: List[Finding], files_checked: Optional[int] = None) -> SummaryOut:
    return SummaryOut(**ReportGenerator.generate_summary(findings, files_checked))


def group_by_file(run: CheckRun) -> List[FileFindings]:
    """Sorted findings grouped per checked file (files without findings included)."""
    grouped: Dict[str, List[FindingOut]] = {path: [] for path in run.files}
    for finding in ReportGenerator.sort_findings(run.findings):
        grouped.setdefault(finding.path, []).append(finding_to_out(finding))
    return [FileFindings(path=path, findings=items) for path, items in sorted(grouped.items())]


class CheckerService:
    """Wraps StyleChecker for use by the API. A fresh checker is built per request."""

    def __init__(self, config: Optional[StyleConfig] = None):
        self.config = config or StyleConfig()

    def _checker(self) -> StyleChecker:
        return StyleChecker(self.config)

    def check_code(self, code: str, filename: Optional[str] = None) -> List[Finding]:
        """Run the rules on inline source."""
        return ReportGenerator.sort_findings(self._checker().check_text(code, filename or "<input>"))

    def check_file(self, file_path: Path) -> List[Finding]:
        """Run the rules on a file path."""
        return ReportGenerator.sort_findings(self._checker().check_file(file_path))

    def check_paths(self, paths: List[Path]) -> CheckRun:
        """Run the rules on files and folders. Raises ConfigError for an unusable single input."""
        return self._checker().check_paths(paths)

    def exit_status(self, findings: List[Finding], cancelled: bool = False) -> int:
        return ReportGenerator.exit_status(findings, self.config.strict, cancelled)


@lru_cache(maxsize=1)
def get_checker_service() -> CheckerService:
    """Shared service built from STYLE_CHECKER_CONFIG; an invalid file falls back to the defaults."""
    try:
        config = get_style_config()
        check_rule_ids(config, RULE_IDS)
    except ConfigError as e:
        logger.warning("Ignoring checker configuration: %s", e)
        config = StyleConfig()
    return CheckerService(config)
