"""Utility functions for the API."""

from pathlib import Path

from fastapi import HTTPException

from unity_style_checker.errors import ConfigError

from .schemas import BatchCheckRequest, BatchCheckResponse, CheckRequest, CheckResponse
from .services import CheckerService
from .services.checker import finding_to_out, group_by_file, summary_to_out


def _absolute_path(value: str, field: str) -> Path:
    path = Path(value)
    if not path.is_absolute():
        raise HTTPException(400, f"{field} must be absolute: {value}")
    return path


def run_check(req: CheckRequest, svc: CheckerService) -> CheckResponse:
    """Check inline code or one server-side file."""
    if req.file_path:
        path = _absolute_path(req.file_path, "file_path")
        if not path.exists():
            raise HTTPException(404, f"File not found: {req.file_path}")
        if path.is_dir():
            raise HTTPException(400, f"file_path is a directory, use /check/batch: {req.file_path}")
        findings = svc.check_file(path)
        files_checked = 1
    elif req.code is not None:
        findings = svc.check_code(req.code, req.filename)
        files_checked = 1
    else:
        raise HTTPException(400, "Provide either code (with optional filename) or file_path.")
    return CheckResponse(
        findings=[finding_to_out(f) for f in findings],
        summary=summary_to_out(findings, files_checked),
        exit_status=svc.exit_status(findings),
    )


def run_batch(req: BatchCheckRequest, svc: CheckerService) -> BatchCheckResponse:
    """Check several files and folders; findings grouped per file."""
    if not req.paths:
        raise HTTPException(400, "paths must not be empty")
    paths = [_absolute_path(p, "path") for p in req.paths]
    try:
        run = svc.check_paths(paths)
    except ConfigError as e:
        raise HTTPException(404, str(e)) from e
    return BatchCheckResponse(
        files=group_by_file(run),
        summary=summary_to_out(run.findings, len(run.files)),
        exit_status=svc.exit_status(run.findings, run.cancelled),
        cancelled=run.cancelled,
    )
