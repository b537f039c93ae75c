"""
Main checker class that runs every enabled rule over a set of files.
"""

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .checker_base import BaseChecker
from .checkers import ALL_CHECKERS, RULE_IDS
from .config import StyleConfig, check_rule_ids
from .errors import ConfigError, LexError, SourceEncodingError, SourceReadError, StructureError
from .finding import Finding, Severity
from .lexer import tokenize
from .parser import Declaration, parse_declarations
from .source import SourceFile, display_path, load_source, source_from_text
from .utils import is_source_file, iter_source_files

logger = logging.getLogger(__name__)

# Findings produced by the pipeline itself rather than by a rule
PIPELINE_RULE_IDS = ("IOError", "EncodingError", "LexError", "StructureError", "InternalRuleError")


class FindingCollector:
    """Append-only, lock-guarded sink shared by worker threads."""

    def __init__(self):
        self._lock = threading.Lock()
        self._findings: List[Finding] = []
        self._files: List[str] = []

    def add(self, path: str, findings: Iterable[Finding]) -> None:
        with self._lock:
            self._files.append(path)
            self._findings.extend(findings)

    @property
    def findings(self) -> List[Finding]:
        with self._lock:
            return list(self._findings)

    @property
    def files(self) -> List[str]:
        with self._lock:
            return sorted(self._files)


@dataclass
class CheckRun:
    """Result of checking a batch of files. Findings are unsorted; the reporter orders them."""
    findings: List[Finding] = field(default_factory=list)
    files: List[str] = field(default_factory=list)
    cancelled: bool = False


class StyleChecker:
    """Runs the load -> tokenize -> parse -> rules pipeline per file."""

    def __init__(self, config: Optional[StyleConfig] = None, checkers: Sequence[BaseChecker] = ALL_CHECKERS):
        self.config = config or StyleConfig()
        check_rule_ids(self.config, RULE_IDS)
        self.checkers = [c for c in checkers if self.config.is_enabled(c.rule_id)]
        self.cancel_event = threading.Event()

    def cancel(self) -> None:
        """Stop the current run; findings collected so far are kept."""
        self.cancel_event.set()

    def check_source(self, source: SourceFile) -> List[Finding]:
        """Tokenize, parse and run every enabled rule on an already loaded file."""
        findings: List[Finding] = []
        try:
            tokens = tokenize(source.text)
        except LexError as e:
            logger.debug("Lex error in %s: %s", source.path, e)
            findings.append(self._pipeline_finding("LexError", source.path, e.message, e.line, e.column))
            tokens = e.tokens
        source = source.with_tokens(tokens)
        lexed_ok = not findings

        root: Optional[Declaration] = None
        if lexed_ok and not self.cancel_event.is_set():
            try:
                root = parse_declarations(source.tokens, source.path)
            except StructureError as e:
                logger.debug("Structure error in %s: %s", source.path, e)
                findings.append(self._pipeline_finding("StructureError", source.path, e.message, e.line, e.column))

        for checker in self.checkers:
            if self.cancel_event.is_set():
                break
            try:
                findings.extend(checker.check(source, root, self.config))
            except Exception as e:
                logger.exception("Rule %s failed on %s", checker.rule_id, source.path)
                findings.append(self._pipeline_finding(
                    "InternalRuleError", source.path,
                    f"Rule {checker.rule_id} failed: {type(e).__name__}: {e}", 1, 1,
                ))
        return findings

    def check_text(self, text: str, path: str = "<input>") -> List[Finding]:
        """Check in-memory source text."""
        return self.check_source(source_from_text(text, path))

    def check_file(self, file_path: Union[str, Path]) -> List[Finding]:
        """Check one file; load failures become findings."""
        shown = display_path(file_path)
        try:
            source = load_source(file_path)
        except SourceReadError as e:
            return [self._pipeline_finding("IOError", shown, f"Could not read file: {e.reason}", 1, 1)]
        except SourceEncodingError as e:
            return [self._pipeline_finding(
                "EncodingError", shown, f"File is not valid UTF-8 (byte {e.offset}: {e.reason})", 1, 1)]
        if self.cancel_event.is_set():
            return []
        return self.check_source(source)

    def check_files(self, file_paths: Sequence[Union[str, Path]]) -> CheckRun:
        """Check files in parallel, one pipeline per file.

        Args:
            file_paths: Files to check

        Returns:
            CheckRun with every finding; cancelled is set if the run was interrupted
        """
        collector = FindingCollector()
        self.cancel_event.clear()
        if not file_paths:
            return CheckRun()
        workers = self.config.workers or os.cpu_count() or 1
        workers = max(1, min(workers, len(file_paths)))
        logger.debug("Checking %d file(s) with %d worker(s)", len(file_paths), workers)

        executor = ThreadPoolExecutor(max_workers=workers)
        try:
            future_map = {executor.submit(self.check_file, path): path for path in file_paths}
            for future in as_completed(future_map):
                path = future_map[future]
                if future.cancelled():
                    continue
                collector.add(display_path(path), future.result())
                if self.cancel_event.is_set():
                    break
        except KeyboardInterrupt:
            logger.warning("Interrupted; reporting findings collected so far")
            self.cancel_event.set()
        finally:
            executor.shutdown(wait=True, cancel_futures=self.cancel_event.is_set())

        cancelled = self.cancel_event.is_set()
        if cancelled:
            logger.warning("Run cancelled after %d of %d file(s)", len(collector.files), len(file_paths))
        return CheckRun(findings=collector.findings, files=collector.files, cancelled=cancelled)

    def collect_files(self, inputs: Sequence[Union[str, Path]],
                      unreadable: Optional[List[Tuple[Path, str]]] = None) -> List[Path]:
        """Expand input files and directories into the list of files to check.

        Args:
            inputs: Files and directories given by the caller
            unreadable: Receives (directory, reason) for every directory that could not be
                listed. Without it such directories are logged and skipped.

        Raises:
            ConfigError: the only input is missing or not readable. In a batch a missing
                path is kept and reported as an IOError finding.
        """
        def skip_directory(path: Path, reason: str) -> None:
            if unreadable is None:
                logger.warning("Skipping unreadable directory %s: %s", path, reason)
            else:
                unreadable.append((path, reason))

        def on_walk_error(error: OSError) -> None:
            skip_directory(Path(error.filename), error.strerror or str(error))

        files: List[Path] = []
        for item in inputs:
            path = Path(item)
            if path.is_dir():
                if not os.access(path, os.R_OK | os.X_OK):
                    if len(inputs) == 1:
                        raise ConfigError(f"Input directory is not readable: {path}")
                    skip_directory(path, "Permission denied")
                    continue
                files.extend(iter_source_files(
                    path, self.config.extensions, self.config.exclude_dirs, on_error=on_walk_error))
            elif path.is_file():
                if len(inputs) == 1 and not os.access(path, os.R_OK):
                    raise ConfigError(f"Input file is not readable: {path}")
                if is_source_file(path, self.config.extensions) or len(inputs) == 1:
                    files.append(path)
                else:
                    logger.info("Skipping %s: extension not in %s", path, ", ".join(self.config.extensions))
            elif len(inputs) == 1:
                raise ConfigError(f"Input path not found or unreadable: {path}")
            else:
                # reported as an IOError finding for this path
                files.append(path)
        seen = set()
        unique: List[Path] = []
        for path in files:
            key = path.resolve()
            if key not in seen:
                seen.add(key)
                unique.append(path)
        return unique

    def check_paths(self, inputs: Sequence[Union[str, Path]]) -> CheckRun:
        """Check files and directories (recursively)."""
        unreadable: List[Tuple[Path, str]] = []
        run = self.check_files(self.collect_files(inputs, unreadable))
        for directory, reason in unreadable:
            run.findings.append(self._pipeline_finding(
                "IOError", display_path(directory), f"Could not read directory: {reason}", 1, 1))
        return run

    @staticmethod
    def _pipeline_finding(rule_id: str, path: str, message: str, line: int, column: int) -> Finding:
        return Finding(
            rule_id=rule_id,
            severity=Severity.ERROR,
            message=message,
            path=path,
            line=line,
            column=column,
            end_line=line,
            end_column=column,
        )
