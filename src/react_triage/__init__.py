"""react_triage — health check for React and Next.js projects."""

__all__ = [
    "__version__",
    "scan_project",
    "run_gated_scan",
    "run_scan",
    "TriageConfig",
]
__version__ = "0.1.0"

# Programmatic engine entrypoints (backend use).
from react_triage.api import run_gated_scan, scan_project  # noqa: E402, F401
from react_triage.core.config import TriageConfig  # noqa: E402, F401
from react_triage.core.runner import run_scan  # noqa: E402, F401
