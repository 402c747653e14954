from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Callable

import pytest

from meet_tracker.models import Contact
from meet_tracker.store import InMemoryContactStore

BASE_TIME = datetime(2024, 11, 7, 18, 30, tzinfo=UTC)


@pytest.fixture
def make_contact() -> Callable[..., Contact]:
    """Factory for contacts with sequential ids and timestamps one hour apart."""

    counter = {"n": 0}

    def _make(
        lat: float = 48.0,
        lon: float = 11.0,
        name: str | None = None,
        description: str | None = None,
        timestamp: datetime | None = None,
    ) -> Contact:
        counter["n"] += 1
        n = counter["n"]
        return Contact(
            id=f"c{n}",
            name=name or f"Person {n}",
            description=description,
            latitude=lat,
            longitude=lon,
            timestamp=timestamp or BASE_TIME - timedelta(hours=n),
        )

    return _make


@pytest.fixture
def seeded_store(make_contact) -> InMemoryContactStore:
    """Store with three saved contacts."""

    return InMemoryContactStore(
        [
            make_contact(48.1, 11.5, name="Ada", description="conference"),
            make_contact(48.2, 11.6, name="Ben"),
            make_contact(48.3, 11.7, name="Chen", description="coffee"),
        ]
    )
