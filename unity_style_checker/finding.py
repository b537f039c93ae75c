"""
Finding data models for the style checker.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class Severity(Enum):
    """Finding severity levels."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @classmethod
    def parse(cls, value: str) -> "Severity":
        """Accept 'error', 'ERROR', 'Warning', ..."""
        return cls(str(value).strip().lower())


@dataclass(frozen=True)
class Finding:
    """One rule violation at a location in a source file."""
    rule_id: str
    severity: Severity
    message: str
    path: str
    line: int
    column: int
    end_line: int = 0
    end_column: int = 0
    suggestion: Optional[str] = None

    def sort_key(self) -> Tuple[str, int, int, str, str]:
        return (self.path, self.line, self.column, self.rule_id, self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Structured record used by the JSON report and the HTTP API."""
        return {
            "path": self.path,
            "line": self.line,
            "column": self.column,
            "severity": self.severity.value,
            "rule_id": self.rule_id,
            "message": self.message,
            "suggested_fix": self.suggestion,
        }
