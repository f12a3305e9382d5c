"""Application entry point for insightscope."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from rich.console import Console

import settings
from adapters.files import load_input_file
from adapters.litellm_analyzer import LiteLLMAnalyzer
from adapters.sqlite_storage import SQLiteStorage
from core.highlight import build_segments
from core.history import HistoryStore
from core.models import AnalysisMode
from core.processor import AnalysisProcessor
from core.validation import validate
from frontend.render import insight_rows, render_recommendations, render_segments, render_summary

NAME = "INSIGHTSCOPE"
FONT = "tarty-1"

console = Console()


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", False):
        return []
    values = []
    for name in redact_cfg.get("patterns", []):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging(console_allowed: bool = True) -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config)
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    # The TUI owns the terminal, so console output would corrupt the screen.
    if console_allowed and config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/insightscope.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _has_api_key() -> bool:
    return bool(os.getenv(settings.API_KEY_ENV))


def _build_history() -> HistoryStore:
    storage = SQLiteStorage(settings.DB_PATH)
    storage.init_db()
    return HistoryStore(storage, settings.HISTORY.storage_key, settings.HISTORY.limit)


def _build_processor(history: HistoryStore) -> AnalysisProcessor:
    analyzer = LiteLLMAnalyzer(
        model=settings.ANALYSIS.model,
        temperature=settings.ANALYSIS.temperature,
    )
    return AnalysisProcessor(analyzer, history, snippet_chars=settings.ANALYSIS.snippet_chars)


def _tui() -> None:
    _print_banner()
    _configure_logging(console_allowed=False)
    logger = logging.getLogger(__name__)
    if not _has_api_key():
        logger.warning("%s is not set; analysis requests will fail", settings.API_KEY_ENV)

    from frontend.app import InsightScopeApp

    history = _build_history()
    logger.info("Starting TUI with %s history records", len(history.load()))
    InsightScopeApp(
        processor=_build_processor(history),
        history=history,
        export_dir=settings.EXPORT_DIR,
        model_name=settings.ANALYSIS.model,
    ).run()


def _check(path: str, mode: AnalysisMode) -> int:
    _configure_logging()
    loaded = load_input_file(path)
    if loaded.error or loaded.content is None:
        console.print(loaded.error, style="bold red", markup=False)
        return 1

    outcome = validate(loaded.content, mode)
    if outcome.ok:
        console.print(f"{loaded.file_name}: valid for {mode.value} analysis", style="green", markup=False)
        return 0

    console.print(outcome.message, style="bold red", markup=False)
    if outcome.ranges:
        console.rule("highlighted input")
        console.print(render_segments(build_segments(loaded.content, outcome.ranges)))
    return 1


def _analyze(path: str, mode: AnalysisMode) -> int:
    _configure_logging()
    if not _has_api_key():
        raise RuntimeError(f"Missing {settings.API_KEY_ENV} in environment")

    loaded = load_input_file(path)
    if loaded.error or loaded.content is None:
        console.print(loaded.error, style="bold red", markup=False)
        return 1

    history = _build_history()
    processor = _build_processor(history)
    submission = asyncio.run(processor.submit(loaded.content, mode, loaded.file_name))
    if not submission.outcome.ok:
        console.print(submission.outcome.message, style="bold red", markup=False)
        if submission.outcome.ranges:
            console.print(render_segments(build_segments(loaded.content, submission.outcome.ranges)))
        return 1
    if submission.error:
        console.print(submission.error, style="bold red", markup=False)
        return 1

    results = submission.results or {}
    console.print(render_summary(results))
    for insight_type, title, confidence in insight_rows(results):
        console.print(f"- [{insight_type}] {title} ({confidence})", markup=False)
    console.print(render_recommendations(results))
    return 0


def _history(action: str, record_id: Optional[int]) -> int:
    _configure_logging()
    history = _build_history()
    if action == "delete":
        if record_id is None:
            console.print("history delete requires an id", style="bold red")
            return 2
        removed = history.remove(record_id)
        console.print(f"deleted {record_id}" if removed else f"no record with id {record_id}")
        return 0
    if action == "clear":
        history.clear()
        console.print("history cleared")
        return 0

    records = history.load()
    if not records:
        console.print("No analysis history found.")
        return 0
    for record in records:
        snippet = record.input_snippet.replace("\n", " ")
        console.print(
            f"{record.id} | {record.timestamp[:19]} | {record.mode.value} | "
            f"{record.file_name or '-'} | {snippet}",
            markup=False,
        )
    return 0


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="insightscope")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("tui", help="Launch the analysis TUI")

    modes = [mode.value for mode in AnalysisMode]
    check_parser = subparsers.add_parser("check", help="Validate a file and highlight defects")
    check_parser.add_argument("path")
    check_parser.add_argument("--mode", choices=modes, default=AnalysisMode.QUANTUM.value)

    analyze_parser = subparsers.add_parser("analyze", help="Validate and analyze a file")
    analyze_parser.add_argument("path")
    analyze_parser.add_argument("--mode", choices=modes, default=AnalysisMode.QUANTUM.value)

    history_parser = subparsers.add_parser("history", help="List or delete stored analyses")
    history_parser.add_argument("action", choices=["list", "delete", "clear"], nargs="?", default="list")
    history_parser.add_argument("id", type=int, nargs="?")

    args = parser.parse_args(argv)
    if args.command == "check":
        sys.exit(_check(args.path, AnalysisMode.parse(args.mode)))
    if args.command == "analyze":
        sys.exit(_analyze(args.path, AnalysisMode.parse(args.mode)))
    if args.command == "history":
        sys.exit(_history(args.action, args.id))
    _tui()


if __name__ == "__main__":
    main()
