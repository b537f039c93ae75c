"""
Style-conformance checker for Unity C# scripts.
"""

from .finding import Finding, Severity
from .main_checker import CheckRun, StyleChecker

__all__ = ["CheckRun", "Finding", "Severity", "StyleChecker"]

__version__ = "0.1.0"
