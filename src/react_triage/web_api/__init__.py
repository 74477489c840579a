"""
React Triage Web API
====================
FastAPI-based REST API exposing the scan pipeline.

Quick Start:
    uvicorn react_triage.web_api.main:app --reload
"""
from .main import app

__all__ = ["app"]
