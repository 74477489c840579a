"""
Pydantic Schemas
================
Request and response models for the API.
"""
from .scan import PolicyOutcome, ScanRequest, ScanResponse, ScanSummary

__all__ = ["PolicyOutcome", "ScanRequest", "ScanResponse", "ScanSummary"]
