"""
Exception types raised by the checker pipeline.

Only ConfigError is fatal. The per-file errors are turned into findings by
the engine so that one bad file never stops a run.
"""

from typing import List, Optional


class StyleCheckerError(Exception):
    """Base class for checker errors."""


class ConfigError(StyleCheckerError, ValueError):
    """Invalid configuration or unusable run input."""


class SourceReadError(StyleCheckerError, OSError):
    """A source file could not be read."""
    rule_id = "IOError"

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not read {path}: {reason}")


class SourceEncodingError(StyleCheckerError):
    """A source file is not valid UTF-8."""
    rule_id = "EncodingError"

    def __init__(self, path: str, offset: int, reason: str):
        self.path = path
        self.offset = offset
        self.reason = reason
        super().__init__(f"Invalid UTF-8 in {path} at byte {offset}: {reason}")


class LexError(StyleCheckerError):
    """Unterminated string, character literal or block comment."""
    rule_id = "LexError"

    def __init__(self, message: str, line: int, column: int, tokens: Optional[List] = None):
        self.line = line
        self.column = column
        self.tokens = tokens or []
        super().__init__(f"Lexer error at line {line}, column {column}: {message}")
        self.message = message


class StructureError(StyleCheckerError):
    """Unbalanced braces, parentheses or brackets."""
    rule_id = "StructureError"

    def __init__(self, message: str, line: int, column: int):
        self.line = line
        self.column = column
        self.message = message
        super().__init__(f"Structure error at line {line}, column {column}: {message}")
