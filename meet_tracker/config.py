"""Runtime configuration.

Values come from environment variables with defaults; command-line flags can
override the store path and time zone.

Environment:
    MEET_TRACKER_STORE: path of the JSON contact store.
    MEET_TRACKER_TZ: IANA time zone used for displaying timestamps.
    XDG_CONFIG_HOME: base directory for the default store path.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

from meet_tracker.models import (
    DEFAULT_SPAN_DEG,
    DEFAULT_TZ,
    FAN_RADIUS,
    NEARBY_RADIUS_M,
    OVERLAP_EPSILON_DEG,
)


def default_store_path() -> Path:
    config_home = Path(os.path.expanduser(os.getenv("XDG_CONFIG_HOME", "~/.config"))).resolve()
    return (config_home / "meet_tracker" / "contacts.json").resolve()


@dataclass(frozen=True, slots=True)
class TrackerConfig:
    """Settings shared by the CLI and the Streamlit page."""

    store_path: Path
    tz_name: str = DEFAULT_TZ
    nearby_radius_m: float = NEARBY_RADIUS_M
    overlap_epsilon_deg: float = OVERLAP_EPSILON_DEG
    fan_radius: float = FAN_RADIUS
    default_span_deg: float = DEFAULT_SPAN_DEG


def load_config(store: str | None = None, tz_name: str | None = None) -> TrackerConfig:
    """Build the effective configuration.

    Args:
        store: Explicit store path (wins over the environment).
        tz_name: Explicit time zone name (wins over the environment).
    """

    raw = (store or "").strip() or (os.getenv("MEET_TRACKER_STORE") or "").strip()
    path = Path(os.path.expanduser(raw)).resolve() if raw else default_store_path()
    cfg = TrackerConfig(store_path=path)

    tz = (tz_name or "").strip() or (os.getenv("MEET_TRACKER_TZ") or "").strip()
    if tz:
        cfg = replace(cfg, tz_name=tz)
    return cfg
