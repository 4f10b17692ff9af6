"""
Shared compute infrastructure for PyPostHoc.

Submodules:
    timing: Execution timing utilities
"""

from pyposthoc.core.compute.timing import Timer

__all__ = [
    "Timer",
]
