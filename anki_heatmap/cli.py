import argparse
import sys
from datetime import date
from pathlib import Path

from anki_heatmap.core.observability import configure_logging
from anki_heatmap.db import SessionLocal
from anki_heatmap.db import init_db
from anki_heatmap.services.colour_service import VALID_COLOUR_SCHEMES
from anki_heatmap.services.grid_renderer import SvgGridRenderer
from anki_heatmap.services.heatmap_service import WIDGET_FAMILY_WEEKS
from anki_heatmap.services.heatmap_service import render_widget
from anki_heatmap.services.setup_service import prompt_for_ankiconnect_url
from anki_heatmap.settings import Settings
from anki_heatmap.stores import ANKICONNECT_URL_KEY
from anki_heatmap.stores import SqlSecretStore
from anki_heatmap.stores import SqlSnapshotStore


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="anki-heatmap",
        description="Anki review heatmap widget tools.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("setup", help="Store the AnkiConnect URL")

    preview = commands.add_parser("preview", help="Render the widget as SVG")
    preview.add_argument(
        "--family",
        default="medium",
        help=f"Widget family ({', '.join(WIDGET_FAMILY_WEEKS)})",
    )
    preview.add_argument(
        "--scheme",
        default=None,
        help=f"Colour scheme ({', '.join(VALID_COLOUR_SCHEMES)})",
    )
    preview.add_argument("--dark", action="store_true", help="Use dark appearance")
    preview.add_argument("--out", default=None, help="Output SVG path (default stdout)")

    commands.add_parser("forget", help="Remove the stored AnkiConnect URL")
    commands.add_parser("about", help="Show the project repository URL")

    return parser.parse_args(argv)


def ask_for_url(current: str) -> str | None:
    """Read a URL from stdin; an empty line or EOF cancels."""

    suffix = f" [{current}]" if current else ""
    try:
        entered = input(f"AnkiConnect URL{suffix}: ")
    except EOFError:
        return None
    return entered.strip() or None


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = Settings()
    configure_logging(settings)

    if args.command == "about":
        print(settings.repository_url)
        return 0

    init_db()
    db = SessionLocal()
    try:
        secret_store = SqlSecretStore(db)

        if args.command == "setup":
            return 0 if prompt_for_ankiconnect_url(secret_store, ask_for_url) else 1

        if args.command == "forget":
            secret_store.remove(ANKICONNECT_URL_KEY)
            print("Credentials removed.")
            return 0

        renderer = SvgGridRenderer(
            args.scheme or settings.colour_scheme,
            mode=settings.colour_mode,
            dark=args.dark,
        )
        svg = render_widget(
            args.family,
            secret_store,
            SqlSnapshotStore(db),
            renderer,
            anchor=date.today(),
            snapshot_window_days=settings.snapshot_window_days,
            timeout=settings.ankiconnect_timeout_seconds,
        )
    finally:
        db.close()

    if args.out:
        Path(args.out).write_text(svg, encoding="utf-8")
        print(f"Wrote {args.out}")
    else:
        sys.stdout.write(svg)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
