"""FitConnect client-side coordination: app-resume handlers and bulk client actions."""

__version__ = "0.1.0"
