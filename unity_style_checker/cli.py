"""
Command-line interface: unity-style-check check|rules|serve.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import uvicorn
from unity_style_api.config import get_host, get_port

from .checkers import ALL_CHECKERS, RULE_IDS
from .config import RulesConfig, StyleConfig, check_rule_ids, load_config
from .errors import ConfigError
from .main_checker import StyleChecker
from .reporter import EXIT_ERROR, EXIT_OK, ReportGenerator

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="unity-style-check",
        description="Check Unity C# scripts against the coding guideline",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser("check", help="Check files and directories")
    check_parser.add_argument("paths", nargs="+", help="C# files or directories (scanned recursively)")
    check_parser.add_argument("--config", default=None, help="JSON configuration file")
    check_parser.add_argument("--strict", action="store_true", default=None, help="Warnings also fail the run")
    check_parser.add_argument("--format", choices=("text", "json", "markdown"), default="text")
    check_parser.add_argument("--json-report", default=None, help="Also write the JSON report to this file")
    check_parser.add_argument(
        "--enable", action="append", default=None, metavar="RULE",
        help="Run only this rule (repeatable)",
    )
    check_parser.add_argument("--workers", type=int, default=None, help="Worker threads (default: CPU count)")
    check_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")

    rules_parser = subparsers.add_parser("rules", help="List the rules and their severities")
    rules_parser.add_argument("--config", default=None, help="JSON configuration file")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service")
    serve_parser.add_argument("--host", default=None)
    serve_parser.add_argument("--port", type=int, default=None)
    serve_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")

    return parser


def _apply_overrides(config: StyleConfig, args: argparse.Namespace) -> StyleConfig:
    """Command-line flags take precedence over the configuration file."""
    update = {}
    if args.strict:
        update["strict"] = True
    if args.workers is not None:
        if args.workers < 1:
            raise ConfigError("--workers must be at least 1")
        update["workers"] = args.workers
    if args.enable:
        update["rules"] = RulesConfig(enabled=tuple(args.enable), settings=config.rules.settings)
    return config.model_copy(update=update) if update else config


def run_check(args: argparse.Namespace) -> int:
    config = _apply_overrides(load_config(args.config), args)
    checker = StyleChecker(config)
    run = checker.check_paths(args.paths)

    report = ReportGenerator.generate(run.findings, args.format, len(run.files), run.cancelled)
    sys.stdout.write(report)
    if args.json_report:
        Path(args.json_report).write_text(
            ReportGenerator.generate_json_report(run.findings, len(run.files), run.cancelled),
            encoding="utf-8",
        )
    return ReportGenerator.exit_status(run.findings, config.strict, run.cancelled)


def run_rules(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    check_rule_ids(config, RULE_IDS)
    width = max(len(rule_id) for rule_id in RULE_IDS)
    for checker in ALL_CHECKERS:
        severity = config.severity_for(checker.rule_id, checker.default_severity)
        state = "enabled" if config.is_enabled(checker.rule_id) else "disabled"
        print(f"{checker.rule_id:<{width}}  {severity.value:<7}  {state:<8}  {checker.description}")
    return EXIT_OK


def run_serve(args: argparse.Namespace) -> int:
    uvicorn.run("unity_style_api.main:app", host=args.host or get_host(), port=args.port or get_port())
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        if args.command == "check":
            return run_check(args)
        if args.command == "rules":
            return run_rules(args)
        if args.command == "serve":
            return run_serve(args)
    except ConfigError as e:
        logger.error("%s", e)
        return EXIT_ERROR
    parser.error(f"Unknown command: {args.command}")
    return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
