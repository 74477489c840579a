"""Reports — terminal dashboard and file exporters for a ScanResult."""

from react_triage.reports.dashboard import DisplayOptions, render_dashboard
from react_triage.reports.exporters import export_result

__all__ = [
    "DisplayOptions",
    "export_result",
    "render_dashboard",
]
