"""
Scan Schemas
============
Request and response models for scan endpoints.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from react_triage.policy.fail_on import parse_severity


class ScanRequest(BaseModel):
    """Request to scan a React/Next.js project"""

    path: str = Field(..., description="Local path to the project (must contain package.json)")
    fail_on: Optional[str] = Field(
        default=None,
        description="Exact-match severity gate: critical, performance, best-practice or info",
    )

    @field_validator("fail_on")
    @classmethod
    def _check_fail_on(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return parse_severity(value).value

    class Config:
        json_schema_extra = {
            "example": {
                "path": "/path/to/next-app",
                "fail_on": "critical",
            }
        }


class ScanSummary(BaseModel):
    """Headline numbers of a scan"""

    score: int = Field(default=100, ge=0, le=100)
    elapsed_ms: int = Field(default=0)
    files_scanned: int = Field(default=0)
    issues_found: int = Field(default=0)
    critical: int = Field(default=0)
    performance: int = Field(default=0)
    best_practice: int = Field(default=0)
    info: int = Field(default=0)
    dependency_issues: int = Field(default=0)
    vulnerabilities: int = Field(default=0)


class PolicyOutcome(BaseModel):
    """Fail-on policy breakdown"""

    should_fail: bool
    fail_on: str
    issue_matches: int
    dependency_matches: int
    vulnerability_matches: int
    total_matches: int
    matched_by_severity: Dict[str, int]


class ScanResponse(BaseModel):
    """Response from a scan operation"""

    status: str = Field(..., description="Scan status: complete or failed")
    summary: ScanSummary
    policy: Optional[PolicyOutcome] = None
    result: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Config:
        json_schema_extra = {
            "example": {
                "status": "complete",
                "summary": {
                    "score": 77,
                    "elapsed_ms": 412,
                    "files_scanned": 42,
                    "issues_found": 3,
                    "critical": 2,
                    "performance": 1,
                },
                "policy": None,
                "result": {},
            }
        }
