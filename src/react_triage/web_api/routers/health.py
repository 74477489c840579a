"""
Health Check Router
===================
Endpoints for health checks and readiness probes.
"""
from fastapi import APIRouter

from react_triage import __version__
from react_triage.contracts.load import load_schema

router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint.
    Returns OK if the service is running.
    """
    return {"status": "ok", "version": __version__}


@router.get("/ready")
async def readiness_check():
    """
    Readiness check endpoint.
    Ready once the bundled result schema can be loaded.
    """
    load_schema("scan_result.schema.json")
    return {"status": "ready"}
