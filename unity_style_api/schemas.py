"""Pydantic request/response models."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


# --- Request ---


class CheckRequest(BaseModel):
    """Either inline code (with an optional file name) or a server-side file path."""

    code: Optional[str] = Field(default=None, description="C# source to check")
    filename: Optional[str] = Field(default=None, description="File name used for reporting and the file-name rule")
    file_path: Optional[str] = Field(default=None, description="Absolute path to a source file on the server")


class BatchCheckRequest(BaseModel):
    """Request for checking several files and folders."""

    paths: List[str] = Field(default_factory=list, description="Absolute paths of files or folders")


# --- Finding (response) ---


class FindingOut(BaseModel):
    """Single style finding."""

    path: str
    line: int
    column: int
    severity: str = Field(..., description="error, warning or info")
    rule_id: str
    message: str
    suggested_fix: Optional[str] = None


class SummaryOut(BaseModel):
    total: int = 0
    errors: int = 0
    warnings: int = 0
    info: int = 0
    by_rule: Dict[str, int] = Field(default_factory=dict)
    files_checked: Optional[int] = None


# --- Responses ---


class CheckResponse(BaseModel):
    """Response for POST /check."""

    findings: List[FindingOut] = Field(default_factory=list)
    summary: SummaryOut = Field(default_factory=SummaryOut)
    exit_status: int = Field(0, description="0 clean, 1 failing findings")


class FileFindings(BaseModel):
    """Findings of one file."""

    path: str
    findings: List[FindingOut] = Field(default_factory=list)


class BatchCheckResponse(BaseModel):
    """Response for POST /check/batch."""

    files: List[FileFindings] = Field(default_factory=list, description="Findings grouped by file")
    summary: SummaryOut = Field(default_factory=SummaryOut)
    exit_status: int = 0
    cancelled: bool = False
