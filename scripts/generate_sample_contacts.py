from __future__ import annotations

import argparse
import random
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path

from meet_tracker.interchange import export_contacts
from meet_tracker.models import Contact


@dataclass(frozen=True, slots=True)
class Place:
    name: str
    lat: float
    lon: float


FIRST_NAMES = ["Ada", "Ben", "Chen", "Dana", "Emil", "Farah", "Gus", "Hana", "Ivo", "Jun", "Kai", "Lena"]
CONTEXTS = ["conference", "meetup", "coffee", "climbing gym", "", "train", "party", ""]


def generate_contacts(*, count: int, seed: int, start: datetime, places: list[Place]) -> list[Contact]:
    """Generate fake contacts clustered around a few places (privacy-safe)."""

    rng = random.Random(seed)
    cur = start
    out: list[Contact] = []
    for i in range(count):
        place = rng.choice(places)
        # A few contacts share the exact spot so pins stack on the map
        if rng.random() < 0.2:
            lat, lon = place.lat, place.lon
        else:
            lat = place.lat + rng.uniform(-0.003, 0.003)
            lon = place.lon + rng.uniform(-0.003, 0.003)
        cur = cur + timedelta(minutes=rng.uniform(20, 60 * 36))
        context = rng.choice(CONTEXTS)
        out.append(
            Contact(
                id=str(i),
                name=f"{rng.choice(FIRST_NAMES)} {chr(ord('A') + rng.randrange(26))}.",
                description=f"{context} near {place.name}" if context else None,
                latitude=round(lat, 7),
                longitude=round(lon, 7),
                timestamp=cur.replace(microsecond=0),
            )
        )
    # Most recent first, like the store
    out.sort(key=lambda c: c.timestamp, reverse=True)
    return out


def main() -> int:
    p = argparse.ArgumentParser(description="Generate a fake contacts interchange document for demo/testing.")
    p.add_argument("--out", type=str, default="sample_data/contacts.json", help="Output JSON path")
    p.add_argument("--count", type=int, default=60, help="Number of contacts")
    p.add_argument("--seed", type=int, default=42, help="Random seed (reproducible)")
    p.add_argument("--start", type=str, default="2024-11-01T08:00:00", help="First meeting time (UTC)")
    args = p.parse_args()

    start = datetime.fromisoformat(args.start).replace(tzinfo=UTC)
    places = [
        Place("Marienplatz", 48.1373932, 11.5754485),
        Place("Englischer Garten", 48.1642, 11.6056),
        Place("Hauptbahnhof", 48.1402669, 11.5583085),
        Place("Olympiapark", 48.1731, 11.5466),
    ]

    contacts = generate_contacts(count=args.count, seed=args.seed, start=start, places=places)
    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(export_contacts(contacts) + "\n", encoding="utf-8")

    print(f"Generated: {out_path} (contacts={len(contacts)}, seed={args.seed})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
