"""Module entry point: python -m meet_tracker ..."""

from __future__ import annotations

from meet_tracker.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
