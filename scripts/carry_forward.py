#!/usr/bin/env python3
"""
Carry incomplete nested todos from previous daily notes into today's note.

Configuration via environment variables:
- NESTED_TODOS_DAILY_DIR: Directory containing YYYY-MM-DD.md daily notes
- NESTED_TODOS_SETTINGS: Settings JSON file (default: <daily dir>/.nested-todos.json)

Usage:
    python3 scripts/carry_forward.py [--date YYYY-MM-DD] [--days N] [--existing-notes] [--dry-run]
"""

import argparse
import logging
import os
import re
import sys
from datetime import date, datetime, timedelta
from pathlib import Path

# Add lib directory to path for imports
_SCRIPT_DIR = Path(__file__).parent.resolve()
if str(_SCRIPT_DIR / "lib") not in sys.path:
    sys.path.insert(0, str(_SCRIPT_DIR / "lib"))

from nested_todos.fileio import atomic_write
from nested_todos.pipeline import carry_forward
from nested_todos.settings import SettingsError, load_settings, save_settings

logger = logging.getLogger(__name__)

NOTES_DATE_RE = re.compile(r"(\d{4}-\d{2}-\d{2})\.md$")


def get_daily_dir() -> Path:
    return Path(
        os.getenv("NESTED_TODOS_DAILY_DIR", str(Path.home() / "Obsidian" / "Daily"))
    ).expanduser()


def get_settings_path(daily_dir: Path) -> Path:
    env_path = os.getenv("NESTED_TODOS_SETTINGS")
    if env_path:
        return Path(env_path).expanduser()
    return daily_dir / ".nested-todos.json"


def note_path(daily_dir: Path, day: date) -> Path:
    return daily_dir / f"{day.strftime('%Y-%m-%d')}.md"


def list_daily_notes(daily_dir: Path) -> dict[date, Path]:
    """Map note date -> path for every YYYY-MM-DD.md file in ``daily_dir``."""
    if not daily_dir.exists() or not daily_dir.is_dir():
        return {}

    notes = {}
    for path in daily_dir.glob("*.md"):
        match = NOTES_DATE_RE.fullmatch(path.name)
        if not match:
            continue
        try:
            notes[datetime.strptime(match.group(1), "%Y-%m-%d").date()] = path
        except ValueError:
            continue
    return notes


def find_previous_notes(
    daily_dir: Path,
    today: date,
    days_look_back: int,
    existing_notes: bool = False,
) -> list[Path]:
    """
    Pick the notes before ``today`` to check, oldest first.

    By default looks at the ``days_look_back`` calendar days before today and
    keeps the ones that have a note. With ``existing_notes`` it takes the
    ``days_look_back`` most recent notes however old they are.
    """
    notes = list_daily_notes(daily_dir)
    if existing_notes:
        earlier = sorted(d for d in notes if d < today)
        chosen = earlier[-days_look_back:] if days_look_back > 0 else []
    else:
        window = [today - timedelta(days=n) for n in range(days_look_back, 0, -1)]
        chosen = [d for d in window if d in notes]
    return [notes[d] for d in chosen]


def read_previous_notes(paths: list[Path]) -> dict[Path, str]:
    texts = {}
    for path in paths:
        try:
            texts[path] = path.read_text(encoding="utf-8")
        except (PermissionError, UnicodeDecodeError, OSError) as e:
            logger.warning(f"Failed to read {path}: {e}")
    return texts


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Carry incomplete todos into today's daily note")
    parser.add_argument("--date", help="Target date (YYYY-MM-DD), default: today")
    parser.add_argument("--days", type=int, help="Number of previous days (or notes) to check")
    parser.add_argument("--existing-notes", action="store_true", default=None,
                        help="Check the most recent existing notes instead of calendar days")
    parser.add_argument("--no-group-by-section", dest="group_by_section", action="store_false", default=None,
                        help="Append all todos to the end of the note instead of under matching headings")
    parser.add_argument("--keep-empty-todos", dest="remove_empty_todos", action="store_false", default=None,
                        help="Don't strip empty '- [ ]' lines from today's note")
    parser.add_argument("--remove-from-previous", action="store_true", default=None,
                        help="Remove carried todos from the previous notes (destructive)")
    parser.add_argument("--supported-chars", help="Checkbox characters recognised as todos, e.g. 'xX/-'")
    parser.add_argument("--complete-chars", help="Checkbox characters meaning complete, e.g. 'xX-'")
    parser.add_argument("--settings", help="Settings JSON file")
    parser.add_argument("--save-settings", action="store_true", help="Persist the effective settings")
    parser.add_argument("--dry-run", action="store_true", help="Print to stdout instead of writing")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    if args.date:
        try:
            today = datetime.strptime(args.date, "%Y-%m-%d").date()
        except ValueError:
            logger.error(f"Invalid date format: {args.date}")
            return 1
    else:
        today = date.today()

    daily_dir = get_daily_dir()
    settings_path = Path(args.settings).expanduser() if args.settings else get_settings_path(daily_dir)
    try:
        settings = load_settings(settings_path).with_overrides(
            days_look_back=args.days,
            look_back_existing_notes_instead_of_days=args.existing_notes,
            group_by_section=args.group_by_section,
            remove_empty_todos=args.remove_empty_todos,
            remove_incomplete_todos_from_previous_notes=args.remove_from_previous,
            supported_todo_chars=set(args.supported_chars) if args.supported_chars else None,
            complete_todo_chars=set(args.complete_chars) if args.complete_chars else None,
        )
    except SettingsError as e:
        logger.error(str(e))
        return 1

    if args.save_settings and not args.dry_run:
        save_settings(settings, settings_path)
        logger.info(f"Saved settings: {settings_path}")

    today_path = note_path(daily_dir, today)
    if today_path.exists():
        try:
            today_text = today_path.read_text(encoding="utf-8")
        except (PermissionError, UnicodeDecodeError, OSError) as e:
            logger.error(f"Failed to read today's note {today_path}: {e}")
            return 1
    else:
        logger.info("Today's daily note not found. Creating daily note for today")
        today_text = ""

    previous_paths = find_previous_notes(
        daily_dir,
        today,
        settings.days_look_back,
        settings.look_back_existing_notes_instead_of_days,
    )
    logger.info(f"Checking notes: {', '.join(p.stem for p in previous_paths) or '(none)'}")
    previous_texts = read_previous_notes(previous_paths)

    result = carry_forward(previous_texts, today_text, settings)
    print(f"{result.num_incomplete} top-level incomplete todos found in previous days")
    print(f"Of previous todos, {result.num_missing} not found in today's note.")

    if args.dry_run:
        print(result.today_text)
        for path in result.updated_previous:
            print(f"Would update: {path}", file=sys.stderr)
        return 0

    if result.today_text != today_text or not today_path.exists():
        atomic_write(today_path, result.today_text)
        logger.info(f"Updated daily note: {today_path}")
    for path, text in result.updated_previous.items():
        atomic_write(path, text)
        logger.info(f"Updated previous note: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
