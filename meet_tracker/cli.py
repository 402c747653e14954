"""Command-line interface for meet_tracker.

Run:
    python -m meet_tracker list --near 48.137 11.575
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from meet_tracker.config import TrackerConfig, load_config
from meet_tracker.contacts import add_contact, delete_contacts, update_contact
from meet_tracker.errors import ContactNotFoundError, ExportError, ParseError, StorageError
from meet_tracker.inspect import inspect_contacts
from meet_tracker.interchange import commit_import, export_store, preview_import
from meet_tracker.layout import layout_offsets
from meet_tracker.location import FixedLocationSource
from meet_tracker.models import Contact, Coordinate, LayoutOffset
from meet_tracker.spatial import filter_by_radius, filter_by_rectangle
from meet_tracker.store import KEEP, JsonFileContactStore
from meet_tracker.timeutils import local_display

logger = logging.getLogger(__name__)


def _open(args: argparse.Namespace) -> tuple[TrackerConfig, JsonFileContactStore]:
    cfg = load_config(store=args.store, tz_name=args.tz)
    logger.debug("Using contact store %s", cfg.store_path)
    return cfg, JsonFileContactStore(cfg.store_path)


def _format_row(c: Contact, tz_name: str, offset: LayoutOffset | None = None) -> str:
    line = f"{c.id}  {local_display(c.timestamp, tz_name) or '-'}  {c.latitude:.6f},{c.longitude:.6f}  {c.name}"
    if c.description:
        line += f"  ({c.description})"
    if offset is not None:
        line += f"  offset=({offset.dx:.1f}, {offset.dy:.1f})"
    return line


def _cmd_add(args: argparse.Namespace) -> int:
    cfg, store = _open(args)
    coordinate = Coordinate(args.lat, args.lon) if args.lat is not None and args.lon is not None else None
    location = FixedLocationSource(Coordinate(*args.fix)) if args.fix else None
    contact = add_contact(
        store,
        name=args.name,
        description=args.description,
        coordinate=coordinate,
        location=location,
    )
    print(f"Added: {_format_row(contact, cfg.tz_name)}")
    return 0


def _cmd_edit(args: argparse.Namespace) -> int:
    cfg, store = _open(args)
    description = None if args.clear_description else (args.description if args.description is not None else KEEP)
    contact = update_contact(store, args.id, name=args.name, description=description)
    print(f"Updated: {_format_row(contact, cfg.tz_name)}")
    return 0


def _cmd_delete(args: argparse.Namespace) -> int:
    _, store = _open(args)
    n = delete_contacts(store, args.ids)
    print(f"Deleted {n} contact(s)")
    return 0


def _cmd_list(args: argparse.Namespace) -> int:
    cfg, store = _open(args)
    contacts = store.fetch_all()
    if args.near is not None:
        radius_m = args.radius_m if args.radius_m is not None else cfg.nearby_radius_m
        visible = filter_by_radius(contacts, Coordinate(*args.near), radius_m)
    elif args.view is not None:
        visible = filter_by_rectangle(
            contacts,
            Coordinate(*args.view),
            args.lat_span if args.lat_span is not None else cfg.default_span_deg,
            args.lon_span if args.lon_span is not None else cfg.default_span_deg,
        )
    else:
        visible = contacts

    if not visible:
        print("No contacts in this area.")
        return 0

    if args.layout:
        for placed in layout_offsets(visible, epsilon=cfg.overlap_epsilon_deg, radius=cfg.fan_radius):
            print(_format_row(placed.contact, cfg.tz_name, placed.offset))
    else:
        for c in visible:
            print(_format_row(c, cfg.tz_name))
    return 0


def _cmd_export(args: argparse.Namespace) -> int:
    _, store = _open(args)
    doc = export_store(store)
    if args.out == "-":
        print(doc)
        return 0
    Path(args.out).write_text(doc + "\n", encoding="utf-8")
    print(f"Exported {store.count()} contact(s) to {args.out}", file=sys.stderr)
    return 0


def _cmd_import(args: argparse.Namespace) -> int:
    _, store = _open(args)
    text = sys.stdin.read() if args.file == "-" else Path(args.file).read_text(encoding="utf-8")
    preview = preview_import(text, store)
    print(f"This will replace {preview.existing_count} existing contact(s) with {preview.import_count} imported.")
    if not args.yes:
        print("Nothing changed. Re-run with --yes to import.")
        return 0
    n = commit_import(text, store)
    print(f"Imported {n} contact(s)")
    return 0


def _cmd_inspect(args: argparse.Namespace) -> int:
    cfg, store = _open(args)
    res = inspect_contacts(store.fetch_all(), epsilon=cfg.overlap_epsilon_deg)

    if args.json:
        payload = asdict(res) | {
            "first_met": res.first_met.isoformat() if res.first_met else None,
            "last_met": res.last_met.isoformat() if res.last_met else None,
            "store": str(cfg.store_path),
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    print(f"store={cfg.store_path}")
    print(f"contacts={res.contacts}, without_timestamp={res.without_timestamp}, stacked={res.stacked}")
    if res.first_met is not None and res.last_met is not None:
        print(f"first={local_display(res.first_met, cfg.tz_name)}, last={local_display(res.last_met, cfg.tz_name)}")
    if res.contacts:
        print(f"lat=[{res.min_lat}, {res.max_lat}], lon=[{res.min_lon}, {res.max_lon}]")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""

    p = argparse.ArgumentParser(prog="meet_tracker")
    p.add_argument("--store", type=str, default=None, help="Contact store path (default: $MEET_TRACKER_STORE or ~/.config)")
    p.add_argument("--tz", type=str, default=None, help="Time zone (IANA) for displayed times")
    p.add_argument("-v", "--verbose", action="count", default=0, help="More log output (-vv for debug)")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_add = sub.add_parser("add", help="Record a new contact")
    p_add.add_argument("--name", type=str, required=True)
    p_add.add_argument("--description", type=str, default=None)
    p_add.add_argument("--lat", type=float, default=None, help="Latitude of the spot picked on the map")
    p_add.add_argument("--lon", type=float, default=None, help="Longitude of the spot picked on the map")
    p_add.add_argument(
        "--fix",
        type=float,
        nargs=2,
        metavar=("LAT", "LON"),
        default=None,
        help="Current device location, used when --lat/--lon are not given",
    )
    p_add.set_defaults(func=_cmd_add)

    p_edit = sub.add_parser("edit", help="Change a contact's name or description")
    p_edit.add_argument("id", type=str)
    p_edit.add_argument("--name", type=str, default=None)
    group = p_edit.add_mutually_exclusive_group()
    group.add_argument("--description", type=str, default=None)
    group.add_argument("--clear-description", action="store_true")
    p_edit.set_defaults(func=_cmd_edit)

    p_del = sub.add_parser("delete", help="Delete contacts by id")
    p_del.add_argument("ids", type=str, nargs="+")
    p_del.set_defaults(func=_cmd_delete)

    p_list = sub.add_parser("list", help="List contacts, optionally only those near a point or in a viewport")
    where = p_list.add_mutually_exclusive_group()
    where.add_argument("--near", type=float, nargs=2, metavar=("LAT", "LON"), default=None)
    where.add_argument("--view", type=float, nargs=2, metavar=("LAT", "LON"), default=None, help="Viewport center")
    p_list.add_argument("--radius-m", type=float, default=None, help="Radius for --near (default 500)")
    p_list.add_argument("--lat-span", type=float, default=None, help="Viewport latitude span in degrees")
    p_list.add_argument("--lon-span", type=float, default=None, help="Viewport longitude span in degrees")
    p_list.add_argument("--layout", action="store_true", help="Show pin offsets for stacked contacts")
    p_list.set_defaults(func=_cmd_list)

    p_exp = sub.add_parser("export", help="Export all contacts as a JSON interchange document")
    p_exp.add_argument("--out", type=str, default="-", help="Output path ('-' for stdout)")
    p_exp.set_defaults(func=_cmd_export)

    p_imp = sub.add_parser("import", help="Replace all contacts with those from an interchange document")
    p_imp.add_argument("file", type=str, help="Document path ('-' for stdin)")
    p_imp.add_argument("--yes", action="store_true", help="Confirm the replace (otherwise preview only)")
    p_imp.set_defaults(func=_cmd_import)

    p_ins = sub.add_parser("inspect", help="Summarize the stored contacts")
    p_ins.add_argument("--json", action="store_true", help="Output JSON")
    p_ins.set_defaults(func=_cmd_inspect)

    return p


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""

    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    try:
        return int(args.func(args))
    except ParseError as exc:
        print(f"Invalid contacts document: {exc}", file=sys.stderr)
        return 2
    except ContactNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    except (StorageError, ExportError) as exc:
        logger.error("%s", exc)
        print("Operation failed; the contact store was not changed.", file=sys.stderr)
        return 1
    except (ValueError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
