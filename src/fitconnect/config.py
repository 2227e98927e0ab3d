"""Configuration

Settings are grouped by concern.
- Paths: get_*() methods (computed against cwd at call time)
- Everything else: @dataclass groups (evaluated at module load)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv()


class ConfigurationError(Exception):
    """Invalid or missing configuration values."""

    def __init__(self, missing_vars: List[str]):
        self.missing_vars = missing_vars
        message = f"Invalid or missing settings: {', '.join(missing_vars)}"
        super().__init__(message)


def _get_path(env_var: str, default_subdir: str) -> str:
    """Return the env value, or a subdirectory of the current path."""
    env_value = os.getenv(env_var)
    if env_value:
        return env_value
    return str(Path.cwd() / default_subdir)


def _parse_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.lower() == "true"


def _parse_int(value: str | None, default: int) -> int:
    if value is None or value == "":
        return default
    return int(value)


@dataclass
class ResumeConfig:
    """App-resume coordination timings (milliseconds)"""

    debounce_ms: int = _parse_int(os.getenv("RESUME_DEBOUNCE_MS"), 2000)
    settle_ms: int = _parse_int(os.getenv("RESUME_SETTLE_MS"), 100)
    fast_delay_ms: int = _parse_int(os.getenv("RESUME_FAST_DELAY_MS"), 100)
    background_delay_ms: int = _parse_int(
        os.getenv("RESUME_BACKGROUND_DELAY_MS"), 3000
    )
    native_focus_quiet_ms: int = _parse_int(
        os.getenv("RESUME_NATIVE_FOCUS_QUIET_MS"), 1000
    )
    # 0 = unbounded
    handler_timeout_ms: int = _parse_int(os.getenv("RESUME_HANDLER_TIMEOUT_MS"), 0)


@dataclass
class BatchConfig:
    """Bulk client operations"""

    feature_flag: str = os.getenv("BATCH_FEATURE_FLAG", "BATCH_OPERATIONS")
    # 0 = unbounded
    operation_timeout_ms: int = _parse_int(
        os.getenv("BATCH_OPERATION_TIMEOUT_MS"), 0
    )
    unknown_name: str = os.getenv("BATCH_UNKNOWN_NAME", "Unknown")


class Config:
    """Application settings

    Access:
    - Paths: get_*() methods (computed at runtime against cwd)
    - Everything else: setting groups (evaluated at module load)
    """

    debug: bool = _parse_bool(os.getenv("DEBUG"), False)

    resume = ResumeConfig()
    batch = BatchConfig()

    # ========================================
    # Paths (computed at runtime against cwd)
    # ========================================
    @staticmethod
    def get_log_path() -> str:
        return _get_path("LOG_PATH", "logs")

    @staticmethod
    def get_store_path() -> str:
        """Base directory for the file-backed table store"""
        return _get_path("STORE_PATH", "data/store")

    @staticmethod
    def get_flags_path() -> str:
        return _get_path("FLAGS_PATH", "config/flags.yaml")

    @staticmethod
    def get_resume_schedule_path() -> str:
        """Background handler delay overrides"""
        return _get_path("RESUME_SCHEDULE_PATH", "config/resume.yaml")

    # ========================================
    # Validation
    # ========================================
    @classmethod
    def validate(cls) -> None:
        """Check settings that would break the coordinator or executor.

        Raises:
            ConfigurationError: when a timing is negative or the batch
                feature flag name is empty.
        """
        invalid = []
        for name in (
            "debounce_ms",
            "settle_ms",
            "fast_delay_ms",
            "background_delay_ms",
            "native_focus_quiet_ms",
            "handler_timeout_ms",
        ):
            if getattr(cls.resume, name) < 0:
                invalid.append(f"RESUME_{name.upper()}")

        if cls.batch.operation_timeout_ms < 0:
            invalid.append("BATCH_OPERATION_TIMEOUT_MS")
        if not cls.batch.feature_flag:
            invalid.append("BATCH_FEATURE_FLAG")

        if invalid:
            raise ConfigurationError(invalid)
