"""
Scan Router
===========
Endpoints for running project scans.
"""
from pathlib import Path

from fastapi import APIRouter, HTTPException

from react_triage import api as core_api
from react_triage.model import Severity
from react_triage.web_api.config import settings
from react_triage.web_api.schemas.scan import (
    PolicyOutcome,
    ScanRequest,
    ScanResponse,
    ScanSummary,
)

router = APIRouter()


def _within_scan_root(target: Path) -> bool:
    if not settings.SCAN_ROOT:
        return True
    base = Path(settings.SCAN_ROOT).resolve()
    return target == base or base in target.parents


@router.post("/", response_model=ScanResponse)
def run_scan(request: ScanRequest):
    """
    Scan a project directory.

    - **path**: Local path containing package.json
    - **fail_on**: Optional exact-match severity gate
    """
    target = Path(request.path).resolve()
    if not target.exists() or not _within_scan_root(target):
        raise HTTPException(status_code=404, detail=f"Path not found: {request.path}")

    try:
        result, result_dict = core_api.scan_project(target, fail_on=request.fail_on)
    except core_api.MissingManifestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

    def count(sev: Severity) -> int:
        return sum(1 for f in result.findings if f.severity is sev)

    policy = result_dict.get("policy")
    return ScanResponse(
        status="complete",
        summary=ScanSummary(
            score=result.score,
            elapsed_ms=result.elapsed_ms,
            files_scanned=result.stats.total_files,
            issues_found=len(result.findings),
            critical=count(Severity.CRITICAL),
            performance=count(Severity.PERFORMANCE),
            best_practice=count(Severity.BEST_PRACTICE),
            info=count(Severity.INFO),
            dependency_issues=len(result.dependency_issues),
            vulnerabilities=result.security.summary.total,
        ),
        policy=PolicyOutcome(**policy) if policy else None,
        result=result_dict,
    )
