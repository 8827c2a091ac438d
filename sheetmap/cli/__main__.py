from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from sheetmap.config.loader import DEFAULT_CONFIG_PATH, AppConfig, ConfigError, load_config
from sheetmap.core.schema import to_json_dict
from sheetmap.core.schema_validator import validate_spreadsheet_id
from sheetmap.domains.registry import get_domain
from sheetmap.logging.init import log_message, log_summary, setup_logging
from sheetmap.logging.message_log import MessageLogBuffer
from sheetmap.models.message import Message
from sheetmap.requests.generator import generate_sheets_request
from sheetmap.services.manager import DEFAULT_SHEET_TITLE, SheetManager
from sheetmap.services.summary import render_summary_line
from sheetmap.services.workbook_service import WorkbookSheetService
from sheetmap.workbook.reader import entities_to_frame

"""CLI entrypoint.

Commands run against the offline workbook named in the config:
- layout: print the batch request that creates the domain sheets
- check: report missing sheets and header mismatches
- read: map sheets to entities and print them as JSON (or CSV with --output)
- create: create the domain sheets in the workbook and save it

Exit codes: 0 success, 1 fatal (config/setup), 2 finished with errors.
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_ERRORS = 2

COMMANDS = ("layout", "check", "read", "create")


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env so SHEETMAP_* variables override the config file."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="sheetmap", description="Spreadsheet sheet layouts and entity mapping")
    p.add_argument("command", choices=COMMANDS, help="Operation to run")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to the YAML config")
    p.add_argument("--output", type=Path, default=None, help="read: write one CSV per sheet into this directory")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _open_workbook(cfg: AppConfig, create: bool) -> WorkbookSheetService | None:
    if not cfg.workbook:
        return None
    path = Path(cfg.workbook)
    if path.exists():
        return WorkbookSheetService.from_file(path, spreadsheet_id=cfg.spreadsheet_id)
    if create:
        return WorkbookSheetService({DEFAULT_SHEET_TITLE: []}, title=path.stem, spreadsheet_id=cfg.spreadsheet_id)
    return None


def _read(manager: SheetManager, cfg: AppConfig, output: Path | None) -> list[Message]:
    data = manager.get_sheets(list(cfg.sheets) if cfg.sheets else None)
    if output is None:
        payload = {name: [to_json_dict(e) for e in entities] for name, entities in data.entities.items()}
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        output.mkdir(parents=True, exist_ok=True)
        for name, entities in data.entities.items():
            entities_to_frame(entities).to_csv(output / f"{name}.csv", index=False)
    return data.messages


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # An explicit empty list must not fall back to sys.argv (pytest arguments).
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        setup_logging(logging.DEBUG)
        logger.debug("debug mode enabled")

    try:
        cfg = load_config(args.config)
        domain = get_domain(cfg.domain)
    except (ConfigError, ValueError) as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    sheet_names = list(cfg.sheets) if cfg.sheets else domain.sheet_names()
    if args.command == "layout":
        layouts = SheetManager(WorkbookSheetService(), domain).get_sheet_layouts(sheet_names)
        print(json.dumps(generate_sheets_request(layouts), ensure_ascii=False, indent=2))
        log_summary(render_summary_line(len(layouts), [])[len("SUMMARY "):])
        return EXIT_SUCCESS

    service = _open_workbook(cfg, create=args.command == "create")
    if service is None:
        logger.error(f"workbook not found: {cfg.workbook}")
        return EXIT_FATAL
    logger.info(f"Using workbook: {cfg.workbook} (domain={domain.name})")

    messages: list[Message] = []
    if cfg.spreadsheet_id:
        for warning in validate_spreadsheet_id(cfg.spreadsheet_id).warnings:
            logger.warning(warning)

    manager = SheetManager(service, domain)
    if args.command == "check":
        messages.extend(manager.check_sheets(check_headers=True))
    elif args.command == "read":
        messages.extend(_read(manager, cfg, args.output))
    else:
        messages.extend(manager.create_sheets(sheet_names).messages)
        service.save(Path(cfg.workbook))

    for message in messages:
        log_message(message)
    buffer = MessageLogBuffer(Path(cfg.log_directory))
    buffer.extend(messages)
    log_path = buffer.flush()
    if log_path is not None:
        logger.debug(f"messages written to {log_path}")

    summary_line = render_summary_line(len(sheet_names), messages)
    log_summary(summary_line[len("SUMMARY "):])

    if any(m.is_error for m in messages):
        return EXIT_ERRORS
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
