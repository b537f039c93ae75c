"""
Utility functions for the style checker: identifier casing and source discovery.
"""

import os
import re
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional

# Type names treated as boolean for the is/has/can prefix rule.
BOOL_TYPES = frozenset({"bool", "bool?", "Boolean", "Boolean?", "System.Boolean", "System.Boolean?"})

# Directories never scanned (Unity, IDE and VCS output).
DEFAULT_EXCLUDE_DIRS = (
    ".git", ".vs", ".idea", "Library", "Temp", "Logs", "obj", "bin",
    "Build", "Builds", "node_modules",
)


class CasePattern(Enum):
    """Identifier casing conventions."""
    PASCAL = "PascalCase"
    CAMEL = "camelCase"
    UNDERSCORE_CAMEL = "_camelCase"
    SNAKE = "snake_case"
    UPPER_SNAKE = "UPPER_SNAKE_CASE"
    INTERFACE = "IPascalCase"


_CASE_REGEXES = {
    CasePattern.PASCAL: re.compile(r"^[A-Z][A-Za-z0-9]*$"),
    CasePattern.CAMEL: re.compile(r"^[a-z][A-Za-z0-9]*$"),
    CasePattern.UNDERSCORE_CAMEL: re.compile(r"^_[a-z][A-Za-z0-9]*$"),
    CasePattern.SNAKE: re.compile(r"^[a-z][a-z0-9]*(?:_[a-z0-9]+)*$"),
    CasePattern.UPPER_SNAKE: re.compile(r"^[A-Z][A-Z0-9]*(?:_[A-Z0-9]+)*$"),
    CasePattern.INTERFACE: re.compile(r"^I[A-Z][A-Za-z0-9]*$"),
}

# Acronym run, capitalized word, lower-case word, bare upper-case run, digits
_WORD = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|\d+")
_UPPER_RUN = re.compile(r"[A-Z]+")


def matches_case(name: str, pattern: CasePattern) -> bool:
    """True if name follows the casing pattern."""
    return _CASE_REGEXES[pattern].match(name) is not None


def split_words(name: str) -> List[str]:
    """Split an identifier into words: 'myHTTPClient_2' -> ['my', 'HTTP', 'Client', '2']."""
    words: List[str] = []
    for part in re.split(r"[_\W]+", name):
        words.extend(_WORD.findall(part))
    return words


def _capitalize(word: str) -> str:
    # two-letter acronyms stay upper case (IO, ID)
    if word.isupper() and len(word) <= 2:
        return word
    return word[:1].upper() + word[1:].lower()


def convert_case(name: str, pattern: CasePattern) -> str:
    """Rewrite name in the given casing pattern: ('myField', _camelCase) -> '_myField'."""
    words = split_words(name)
    if not words:
        return name
    if pattern == CasePattern.PASCAL:
        return "".join(_capitalize(w) for w in words)
    if pattern in (CasePattern.CAMEL, CasePattern.UNDERSCORE_CAMEL):
        camel = words[0].lower() + "".join(_capitalize(w) for w in words[1:])
        return "_" + camel if pattern == CasePattern.UNDERSCORE_CAMEL else camel
    if pattern == CasePattern.SNAKE:
        return "_".join(w.lower() for w in words)
    if pattern == CasePattern.UPPER_SNAKE:
        return "_".join(w.upper() for w in words)
    # interface: keep an existing I prefix word
    if len(words) > 1 and words[0] == "I":
        words = words[1:]
    return "I" + "".join(_capitalize(w) for w in words)


def has_bool_prefix(name: str, prefixes: Iterable[str]) -> bool:
    """True if name starts with one of the prefixes followed by a word boundary.

    'isGround', 'IsGround' and '_hasBool' match 'is'/'has'; 'island' does not.
    """
    bare = name.lstrip("_")
    for prefix in prefixes:
        if len(bare) > len(prefix) and bare[:len(prefix)].lower() == prefix.lower():
            nxt = bare[len(prefix)]
            if nxt.isupper() or nxt.isdigit():
                return True
    return False


def long_acronyms(name: str) -> List[str]:
    """Acronyms of three or more letters written in upper case: 'HTMLParser' -> ['HTML']."""
    found: List[str] = []
    for match in _UPPER_RUN.finditer(name):
        run = match.group(0)
        end = match.end()
        if end < len(name) and name[end].islower():
            run = run[:-1]
        if len(run) >= 3:
            found.append(run)
    return found


def fix_acronyms(name: str) -> str:
    """Rewrite long acronyms as words: 'HTMLParser' -> 'HtmlParser'."""
    fixed = name
    for acronym in long_acronyms(name):
        fixed = fixed.replace(acronym, acronym[0] + acronym[1:].lower(), 1)
    return fixed


def is_source_file(path: Path, extensions: Iterable[str]) -> bool:
    """True if the file suffix is in the extension allow-list."""
    return path.suffix.lower() in {ext.lower() for ext in extensions}


def iter_source_files(folder: Path, extensions: Iterable[str], exclude_dirs: Iterable[str],
                      on_error: Optional[Callable[[OSError], None]] = None) -> Iterator[Path]:
    """Source files under folder, recursively, sorted, skipping excluded directories.

    Directories that cannot be listed are passed to on_error (the OSError carries the
    directory in its filename); without a handler the error is raised.
    """
    exts = {ext.lower() for ext in extensions}
    excluded = set(exclude_dirs)

    def _raise(error: OSError) -> None:
        raise error

    found: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(folder, onerror=on_error or _raise):
        dirnames[:] = [d for d in dirnames if d not in excluded]
        for name in filenames:
            file_path = Path(dirpath) / name
            if file_path.suffix.lower() in exts and file_path.is_file():
                found.append(file_path)
    yield from sorted(found)
