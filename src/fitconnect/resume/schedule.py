"""Background delay schedule loading.

resume.yaml overrides the staggered per-id delays that background
handlers fall back to when they do not set their own delay:

    - id: subscription
      delay: 2500
    - id: wearable
      enabled: false      # entry ignored, built-in default stays
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from fitconnect.resume.handlers import DEFAULT_BACKGROUND_DELAYS_MS

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = frozenset({"id", "delay"})


def load_resume_schedule(path: str | Path) -> dict[str, int]:
    """Return the background delay table with resume.yaml applied.

    - File missing     -> built-in defaults (not an error).
    - Root not a list  -> built-in defaults + warning.
    - Entry not a dict -> skip + warning.
    - Required fields missing or delay not a non-negative int -> skip + warning.
    - ``enabled`` is False -> skip.
    """
    schedule = dict(DEFAULT_BACKGROUND_DELAYS_MS)

    path = Path(path)
    if not path.exists():
        return schedule

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return schedule
    if not isinstance(data, list):
        logger.warning("resume.yaml root is not a list, using default schedule")
        return schedule

    for i, entry in enumerate(data):
        if not isinstance(entry, dict):
            logger.warning(f"resume.yaml entry {i} is not a dict, skipping")
            continue

        missing = _REQUIRED_FIELDS - set(entry.keys())
        if missing:
            logger.warning(
                f"resume.yaml entry {i} missing required fields {missing}, skipping: {entry}"
            )
            continue

        delay = entry["delay"]
        if isinstance(delay, bool) or not isinstance(delay, int) or delay < 0:
            logger.warning(f"resume.yaml entry {i} has invalid delay {delay!r}, skipping")
            continue

        if "enabled" in entry and not entry["enabled"]:
            logger.info(f"resume.yaml entry {i} disabled, skipping: {entry['id']}")
            continue

        schedule[str(entry["id"])] = delay

    return schedule
