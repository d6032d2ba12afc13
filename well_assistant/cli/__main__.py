from __future__ import annotations

import argparse
import json
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import psycopg2
from dotenv import load_dotenv

from well_assistant.config.loader import DEFAULT_CONFIG_PATH, AppConfig, ConfigError, load_config
from well_assistant.db.well_store import create_schema, fetch_well_rows, get_well, record_chat
from well_assistant.logging.init import enable_debug, log_summary, setup_logging
from well_assistant.models.well import WellDataset, WellSummary
from well_assistant.services.chat import ChatService
from well_assistant.services.ingest import IngestError, ingest_directory
from well_assistant.services.llm import OpenAIGenerator
from well_assistant.services.statistics import compute_statistics
from well_assistant.services.summary import render_summary_line
from well_assistant.services.upload import UploadRejected, process_upload

"""CLI entrypoint.

Sub-commands:
- upload FILE: run the upload pipeline and print the JSON payload
- chat MESSAGE: answer one chat message (LLM, or the offline responder)
- ingest: import every spreadsheet in ``source_directory`` into PostgreSQL

Exit codes: 0 success, 1 fatal (config, missing file, unreadable directory),
2 rejected upload / partial ingest failure.
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2


class DatabaseUnavailable(Exception):
    pass


@contextmanager
def _db_connection(cfg: AppConfig) -> Iterator[Any]:  # pragma: no cover (thin wrapper)
    """Yield a psycopg2 cursor on an autocommit connection.

    Connection parameters: DATABASE_URL / PGDSN, PG* variables, then the
    ``database`` section of the config file (see DatabaseConfig.resolve_dsn).
    """
    try:
        conn = psycopg2.connect(cfg.database.resolve_dsn())
    except psycopg2.Error as e:
        raise DatabaseUnavailable(str(e)) from e
    # ingest が BEGIN/COMMIT をファイル単位で発行する
    conn.autocommit = True
    try:
        with conn.cursor() as cur:
            yield cur
    finally:
        conn.close()


def _db_disabled() -> bool:
    return os.getenv("DISABLE_DB_CONNECT") == "1"


def _report_db_fallback(logger, e: Exception) -> None:
    if os.getenv("SUPPRESS_DB_WARNING") == "1":
        logger.debug(f"DB connection failed (suppressed warn) -> fallback to mock mode: {e}")
    else:
        logger.warning(f"DB connection failed -> fallback to mock mode: {e}")


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env (OPENAI_API_KEY, DATABASE_URL, PG*) with python-dotenv."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _print_json(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _resolve_config(path: Path, *, required: bool) -> AppConfig:
    """Load the config file; upload/chat run on defaults when it is absent."""
    if not required and not path.exists():
        return AppConfig(source_directory=".")
    return load_config(path)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--debug", action="store_true", help="Enable debug logging")
    common.add_argument(
        "--config", type=Path, default=DEFAULT_CONFIG_PATH,
        help=f"Config YAML (default: {DEFAULT_CONFIG_PATH})",
    )

    p = argparse.ArgumentParser(
        prog="well-assistant",
        description="Well drilling data upload & chat assistant",
    )
    sub = p.add_subparsers(dest="command", required=True)

    up = sub.add_parser("upload", parents=[common], help="Validate and summarise a spreadsheet")
    up.add_argument("file", type=Path)

    chat = sub.add_parser("chat", parents=[common], help="Ask the drilling assistant")
    chat.add_argument("message")
    chat.add_argument("--data", type=Path, help="Spreadsheet to use as chat context")
    chat.add_argument("--well-name")
    chat.add_argument("--well-depth", type=float)
    chat.add_argument("--well-status", default="Active")
    chat.add_argument("--well-id", type=int, help="Load well and rows from the database")
    chat.add_argument("--session-id")
    chat.add_argument("--offline", action="store_true", help="Skip the LLM, use the offline responder")
    chat.add_argument("--save-history", action="store_true", help="Store the exchange in chat_history")

    ing = sub.add_parser("ingest", parents=[common], help="Import source_directory into PostgreSQL")
    ing.add_argument("--create-schema", action="store_true", help="Create tables before importing")
    return p.parse_args(argv)


def _cmd_upload(args: argparse.Namespace, cfg: AppConfig, logger) -> int:
    if not args.file.exists():
        logger.error(f"file not found: {args.file}")
        return EXIT_FATAL
    try:
        result = process_upload(args.file, max_file_size_bytes=cfg.max_file_size_bytes)
    except UploadRejected as e:
        _print_json(e.to_payload())
        return EXIT_PARTIAL_FAILURE
    _print_json(result.to_payload())
    return EXIT_SUCCESS_ALL


def _load_well_from_db(cur: Any, well_id: int, logger) -> tuple[WellSummary | None, WellDataset | None]:
    well = get_well(cur, well_id)
    if well is None:
        logger.warning(f"well not found: id={well_id}")
        return None, None
    rows = fetch_well_rows(cur, well_id)
    if not rows:
        return well, None
    return well, WellDataset(rows=tuple(rows), statistics=compute_statistics(rows))


def _cmd_chat(args: argparse.Namespace, cfg: AppConfig, logger) -> int:
    well: WellSummary | None = None
    dataset: WellDataset | None = None

    if args.well_name:
        well = WellSummary(name=args.well_name, depth=args.well_depth, status=args.well_status)

    if args.data is not None:
        if not args.data.exists():
            logger.error(f"file not found: {args.data}")
            return EXIT_FATAL
        try:
            dataset = process_upload(args.data, max_file_size_bytes=cfg.max_file_size_bytes).dataset
        except UploadRejected as e:
            _print_json(e.to_payload())
            return EXIT_PARTIAL_FAILURE

    generate = None if args.offline else OpenAIGenerator(cfg.openai_api_key, cfg.llm)
    service = ChatService(generate)

    use_db = (args.well_id is not None or args.save_history) and not _db_disabled()
    if not use_db:
        result = service.respond(args.message, well, dataset, session_id=args.session_id)
        _print_json(result.to_payload())
        return EXIT_SUCCESS_ALL

    result = None
    try:
        with _db_connection(cfg) as cur:
            try:
                if args.well_id is not None:
                    db_well, db_dataset = _load_well_from_db(cur, args.well_id, logger)
                    well = well or db_well
                    dataset = dataset or db_dataset
                result = service.respond(args.message, well, dataset, session_id=args.session_id)
                if args.save_history:
                    record_chat(
                        cur, result.session_id, args.message, result.response,
                        well_id=well.id if well is not None else None,
                    )
            except psycopg2.Error as e:
                logger.warning(f"DB query failed -> answering without stored data: {e}")
    except DatabaseUnavailable as e:
        _report_db_fallback(logger, e)
    # DB 障害時も応答は必ず返す
    if result is None:
        result = service.respond(args.message, well, dataset, session_id=args.session_id)
    _print_json(result.to_payload())
    return EXIT_SUCCESS_ALL


def _cmd_ingest(args: argparse.Namespace, cfg: AppConfig, logger) -> int:
    directory = Path(cfg.source_directory)
    if not directory.exists():
        logger.error(f"directory not found: {directory}")
        return EXIT_FATAL
    logger.info(f"Processing files from: {directory}")

    db_mode = "mock"
    try:
        if _db_disabled():
            logger.debug("DB connect disabled via DISABLE_DB_CONNECT=1 -> mock mode")
            result = ingest_directory(cfg, cursor=None)
        else:
            try:
                with _db_connection(cfg) as cur:
                    db_mode = "live"
                    if args.create_schema:
                        create_schema(cur)
                    result = ingest_directory(cfg, cursor=cur)
            except DatabaseUnavailable as e:
                _report_db_fallback(logger, e)
                db_mode = "mock"
                result = ingest_directory(cfg, cursor=None)
    except IngestError as e:
        logger.error(f"ingest: {e}")
        return EXIT_FATAL

    logger.info(f"mode={db_mode} total_rows={result.total_rows}")
    # log_summary が "SUMMARY " を付与する
    log_summary(render_summary_line(result)[len("SUMMARY "):])

    if result.rejected_files or result.failed_files:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


COMMANDS = {
    "upload": _cmd_upload,
    "chat": _cmd_chat,
    "ingest": _cmd_ingest,
}


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # NOTE: [] が渡された場合に sys.argv を読まないよう None のみ判定
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        enable_debug(logger)
        logger.debug("debug mode enabled")

    try:
        cfg = _resolve_config(args.config, required=args.command == "ingest")
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    return COMMANDS[args.command](args, cfg, logger)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
