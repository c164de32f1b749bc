"""
Runtime settings for coframe.

Settings are read once from the environment at import time and can be changed
later with :func:`configure`:

- ``COFRAME_DEBUG``: when set to ``1``, ``true`` or ``yes`` every frame step and
  control transfer is logged at debug level.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

_TRUTHY = ("1", "true", "yes")


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in _TRUTHY


@dataclass
class CoframeSettings:
    """Mutable process-wide settings."""

    debug: bool = field(default_factory=lambda: _env_flag("COFRAME_DEBUG"))


settings = CoframeSettings()


def configure(*, debug: bool | None = None) -> CoframeSettings:
    """Update the process-wide settings and return them.

    Arguments left as ``None`` keep their current value.
    """
    if debug is not None:
        settings.debug = debug
    return settings


__all__ = ["CoframeSettings", "configure", "settings"]
