"""Command line interface for the ABCU advising assistant."""

from __future__ import annotations

import argparse
import logging
import logging.config
import os
import sys
from pathlib import Path

import yaml
from dotenv import load_dotenv

from advising import (
    AdvisingError,
    AdvisingSession,
    CourseIndex,
    CourseWriter,
    CsvCourseSource,
    SqliteCourseSource,
)
from advising.menu import run_menu

LOGGER = logging.getLogger(__name__)

SOURCE_KINDS = ("csv", "sqlite")
ENVIRONMENT_OVERRIDES = {
    "ADVISING_SOURCE": "kind",
    "ADVISING_CSV_PATH": "csv_path",
    "ADVISING_DATABASE_PATH": "database_path",
}


def configure_logging(logging_path: Path) -> None:
    if not logging_path.exists():
        logging.basicConfig(level=logging.INFO)
        LOGGER.warning("Logging configuration %s not found. Using basicConfig().", logging_path)
        return

    logging.config.fileConfig(logging_path, disable_existing_loggers=False, defaults={"sys": sys})


def read_settings(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Look up ABCU courses and their prerequisites.")
    parser.add_argument(
        "command",
        nargs="?",
        default="menu",
        choices=["menu", "list", "show", "build-db", "export"],
        help="Operation to perform (default: interactive menu)",
    )
    parser.add_argument("code", nargs="?", help="Course code for the show command")
    parser.add_argument("--config", default="config/settings.yaml", help="Path to YAML settings file")
    parser.add_argument("--source", choices=SOURCE_KINDS, help="Override the configured data source")
    parser.add_argument("--csv", help="Override the course CSV path")
    parser.add_argument("--database", help="Override the SQLite database path")
    parser.add_argument("--output", help="Destination CSV for the export command")
    return parser


def apply_environment(settings: dict) -> dict:
    source_cfg = settings.setdefault("source", {})
    for variable, key in ENVIRONMENT_OVERRIDES.items():
        value = os.getenv(variable)
        if value:
            source_cfg[key] = value
    return settings


def apply_overrides(settings: dict, args: argparse.Namespace) -> dict:
    source_cfg = settings.setdefault("source", {})

    if args.source is not None:
        source_cfg["kind"] = args.source
    if args.csv is not None:
        source_cfg["csv_path"] = args.csv
    if args.database is not None:
        source_cfg["database_path"] = args.database

    return settings


def create_source(source_cfg: dict) -> CsvCourseSource | SqliteCourseSource:
    kind = source_cfg.get("kind", "csv")
    if kind == "csv":
        return CsvCourseSource(source_cfg.get("csv_path", "data/Program_Input.csv"))
    if kind == "sqlite":
        return SqliteCourseSource(source_cfg.get("database_path", "data/ABCU.db"))
    raise ValueError(f"Unknown source kind {kind!r}; expected one of {', '.join(SOURCE_KINDS)}")


def format_summary(report: dict) -> str:
    total = report.get("total_courses", 0)
    lines = ["\nCatalog summary:", f"Total courses: {total}"]
    lines.append(f"  - with prerequisites: {report.get('with_prerequisites', 0)}/{total}")
    lines.append(f"  - without prerequisites: {report.get('without_prerequisites', 0)}/{total}")
    unresolved = report.get("unresolved_prerequisites", [])
    if unresolved:
        lines.append(f"  - unknown prerequisite codes: {', '.join(unresolved)}")
    return "\n".join(lines)


def run_command(args: argparse.Namespace, source_cfg: dict) -> int:
    if args.command == "build-db":
        index = CourseIndex()
        AdvisingSession(CsvCourseSource(source_cfg.get("csv_path", "data/Program_Input.csv")), index).load()
        writer = CourseWriter()
        destination = writer.write_sqlite(index.records(), source_cfg.get("database_path", "data/ABCU.db"))
        print(format_summary(writer.build_catalog_report(index.records())))
        LOGGER.info("Database stored at %s", destination)
        return 0

    session = AdvisingSession(create_source(source_cfg))
    session.load()

    if args.command == "list":
        for line in session.course_lines():
            print(line)
    elif args.command == "show":
        for line in session.describe(args.code):
            print(line)
    elif args.command == "export":
        destination = CourseWriter().write_csv(session.index.records(), args.output)
        LOGGER.info("Results stored at %s", destination)
    return 0


def main(argv: list[str] | None = None) -> int:
    load_dotenv()

    parser = build_argument_parser()
    args = parser.parse_args(argv)

    if args.command == "show" and not args.code:
        parser.error("the show command requires a course code")
    if args.command == "export" and not args.output:
        parser.error("the export command requires --output")

    settings = read_settings(Path(args.config))
    settings = apply_overrides(apply_environment(settings), args)

    configure_logging(Path("logging.conf"))

    source_cfg = settings.get("source", {})

    if args.command == "menu":
        run_menu(AdvisingSession(create_source(source_cfg)), read_line=input)
        return 0

    try:
        return run_command(args, source_cfg)
    except AdvisingError as exc:
        print(f"SYSTEM ERROR: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
