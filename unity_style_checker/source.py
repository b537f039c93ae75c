"""
Source loading: read a file into an immutable SourceFile.
"""

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Tuple, Union

from .errors import SourceEncodingError, SourceReadError


@dataclass(frozen=True)
class Span:
    """1-based start/end position of a piece of source text (end is exclusive)."""
    line: int
    column: int
    end_line: int
    end_column: int


@dataclass(frozen=True)
class SourceFile:
    """A loaded source file. Tokens are attached with with_tokens()."""
    path: str
    text: str
    tokens: Tuple = ()

    def with_tokens(self, tokens) -> "SourceFile":
        return replace(self, tokens=tuple(tokens))

    @property
    def stem(self) -> str:
        return Path(self.path).stem


def display_path(path: Union[str, Path]) -> str:
    """Path as shown in reports (forward slashes on every platform)."""
    return Path(path).as_posix()


def load_source(path: Union[str, Path]) -> SourceFile:
    """Read and decode a source file.

    Raises:
        SourceReadError: the path is missing, a directory, or unreadable.
        SourceEncodingError: the content is not valid UTF-8.
    """
    shown = display_path(path)
    try:
        raw = Path(path).read_bytes()
    except IsADirectoryError:
        raise SourceReadError(shown, "is a directory") from None
    except OSError as e:
        raise SourceReadError(shown, e.strerror or str(e)) from e
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise SourceEncodingError(shown, e.start, e.reason) from e
    return SourceFile(path=shown, text=text)


def source_from_text(text: str, path: str = "<input>") -> SourceFile:
    """Build a SourceFile from in-memory text (used by the HTTP service and tests)."""
    return SourceFile(path=path, text=text)
