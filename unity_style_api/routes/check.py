"""Check routes."""

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from ..schemas import BatchCheckRequest, BatchCheckResponse, CheckRequest, CheckResponse
from ..services import CheckerService, get_checker_service
from ..templates import render_template
from ..utils import run_batch, run_check

router = APIRouter()


@router.get("/check", response_class=HTMLResponse)
def check_get() -> str:
    """GET /check: usage page. Use POST with a JSON body to run the checks."""
    return render_template("check.html", title="Check")


@router.post("/check", response_model=CheckResponse)
def check(req: CheckRequest, svc: CheckerService = Depends(get_checker_service)) -> CheckResponse:
    """Check inline code or a single file."""
    return run_check(req, svc)


@router.post("/check/batch", response_model=BatchCheckResponse)
def check_batch(req: BatchCheckRequest, svc: CheckerService = Depends(get_checker_service)) -> BatchCheckResponse:
    """Check files and folders; findings grouped per file."""
    return run_batch(req, svc)
