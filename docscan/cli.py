"""Command-line interface for the document processing service.

Subcommands:
    worker        Run the polling worker (default).
    search        Print documents matching a JSON search filter.
    stats         Print document counts per processing status.
    reset-failed  Return failed documents to pending so they are retried.
    process-text  Structure a plain-text file and print the payload.
"""

import argparse
import json
import sys
from collections.abc import Callable
from dataclasses import asdict
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from docscan.config.settings import Settings
from docscan.database.connection import close_pool, init_pool
from docscan.database.repositories.documents_repository import DocumentsRepository
from docscan.logging.logger import Log
from docscan.main import build_worker
from docscan.search.models import SearchFilter
from docscan.structuring.processor import structure_text


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _with_repository(settings: Settings, action: Callable[[DocumentsRepository], int]) -> int:
    init_pool(settings)
    try:
        return action(DocumentsRepository())
    finally:
        close_pool()


def cmd_worker(args: argparse.Namespace, settings: Settings) -> int:
    def run(repo: DocumentsRepository) -> int:
        build_worker(settings, repo).run()
        return 0

    return _with_repository(settings, run)


def cmd_search(args: argparse.Namespace, settings: Settings) -> int:
    try:
        search = SearchFilter.model_validate_json(args.filter)
    except ValidationError as exc:
        Log.error(f"Invalid search filter: {exc}")
        return 2

    def run(repo: DocumentsRepository) -> int:
        _print_json([doc.to_dict() for doc in repo.search(search)])
        return 0

    return _with_repository(settings, run)


def cmd_stats(args: argparse.Namespace, settings: Settings) -> int:
    def run(repo: DocumentsRepository) -> int:
        _print_json(asdict(repo.stats()))
        return 0

    return _with_repository(settings, run)


def cmd_reset_failed(args: argparse.Namespace, settings: Settings) -> int:
    def run(repo: DocumentsRepository) -> int:
        count = repo.reset_failed()
        Log.info(f"Reset {count} failed documents to pending")
        return 0

    return _with_repository(settings, run)


def cmd_process_text(args: argparse.Namespace, settings: Settings) -> int:
    path = Path(args.path)
    if not path.is_file():
        Log.error(f"Text file not found: {path}")
        return 1
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        Log.error(f"Text file is not valid UTF-8: {path}: {exc}")
        return 1
    _print_json(structure_text(text).to_dict())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docscan",
        description="Document text extraction worker and structured search",
    )
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("worker", help="Run the polling worker")

    search = subparsers.add_parser("search", help="Search documents")
    search.add_argument(
        "filter",
        nargs="?",
        default="{}",
        help='JSON filter, e.g. \'{"documentType": "invoice", "hasEmails": true}\'',
    )

    subparsers.add_parser("stats", help="Show document counts")
    subparsers.add_parser("reset-failed", help="Retry failed documents")

    process_text = subparsers.add_parser("process-text", help="Structure a text file")
    process_text.add_argument("path", help="Path to a UTF-8 text file")

    return parser


COMMANDS: dict[str, Callable[[argparse.Namespace, Settings], int]] = {
    "worker": cmd_worker,
    "search": cmd_search,
    "stats": cmd_stats,
    "reset-failed": cmd_reset_failed,
    "process-text": cmd_process_text,
}


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    return COMMANDS[args.command or "worker"](args, settings)


if __name__ == "__main__":
    sys.exit(main())
