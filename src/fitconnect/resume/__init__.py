"""App-resume coordination."""

from fitconnect.resume.coordinator import ResumeCoordinator
from fitconnect.resume.handlers import (
    DEFAULT_BACKGROUND_DELAYS_MS,
    ResumeHandler,
    ResumePriority,
)
from fitconnect.resume.schedule import load_resume_schedule
from fitconnect.resume.signals import ResumeSignals

__all__ = [
    "ResumeCoordinator",
    "ResumeHandler",
    "ResumePriority",
    "ResumeSignals",
    "DEFAULT_BACKGROUND_DELAYS_MS",
    "load_resume_schedule",
]
