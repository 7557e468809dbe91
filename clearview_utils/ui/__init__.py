"""
UI Components Package.

- canvas.py: drawable-canvas wrapper with payload backgrounds
- ui_components (parent package): header, uploader, workspace, comparison
"""

from .canvas import st_canvas

__all__ = [
    'st_canvas'
]
