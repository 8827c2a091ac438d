from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from ..core.header_validator import check_sheet_headers, check_sheets, get_sheet_headers, get_spreadsheet_title
from ..core.row_mapper import map_from_range_data, map_to_range_data
from ..domains.base import DomainDefinition, SheetDefinition
from ..models.enums import ActionType, MessageType, try_get_value_from_name
from ..models.message import Message, create_error_message, create_info_message, create_warning_message
from ..models.sheet_model import SheetModel
from ..models.spreadsheet import SpreadsheetData
from ..requests.data_requests import (
    generate_delete_requests,
    generate_delete_sheet_requests,
    generate_update_sheet_index,
    generate_update_value_request,
)
from ..requests.generator import generate_sheets_request
from ..requests.styles import HEADER_RANGE
from .progress import ProgressTracker
from .sheet_service import SheetService

"""Domain sheet manager.

Composes the row mapper, the header validator and the request generator for
the sheets of one domain, delegating every read and write to a SheetService.
A None from the service is never raised: it becomes an Error message in the
returned SpreadsheetData.
"""

__all__ = [
    "DEFAULT_SHEET_TITLE",
    "SheetManager",
]

logger = logging.getLogger(__name__)

DEFAULT_SHEET_TITLE = "Sheet1"


def _join(names: Iterable[str]) -> str:
    return ", ".join(names)


class SheetManager:
    """Read, check, create and change the sheets of a domain."""

    def __init__(self, service: SheetService, domain: DomainDefinition) -> None:
        self.service = service
        self.domain = domain

    def get_sheet(self, name: str) -> SpreadsheetData:
        if self.domain.get(name) is None:
            return SpreadsheetData(
                messages=[create_error_message(f"Sheet {name.upper()} does not exist", MessageType.GET_SHEETS)]
            )
        return self.get_sheets([name])

    def get_sheets(self, names: Sequence[str] | None = None) -> SpreadsheetData:
        """Read sheets and map them to entities.

        Unknown names are reported and skipped. When the batch read fails the
        spreadsheet is checked for missing sheets instead.
        """
        definitions, unknown = self.domain.resolve(names)
        data = SpreadsheetData()
        data.messages.extend(
            create_error_message(f"Sheet {name.upper()} does not exist", MessageType.GET_SHEETS) for name in unknown
        )
        if not definitions:
            return data

        sheet_names = [d.name for d in definitions]
        response = self.service.get_batch_data(sheet_names)
        if response is None:
            logger.warning("batch read failed for %s", _join(sheet_names))
            info = self.service.get_sheet_info()
            data.messages.append(
                create_error_message(f"Unable to retrieve sheet(s): {_join(sheet_names)}", MessageType.GET_SHEETS)
            )
            if info is not None:
                data.messages.extend(m for m in check_sheets(info, sheet_names) if m.is_error)
            data.name = get_spreadsheet_title(info)
            return data

        data.messages.append(create_info_message(f"Retrieved sheet(s): {_join(sheet_names)}", MessageType.GET_SHEETS))
        info = self.service.get_sheet_info([f"{name}!{HEADER_RANGE}" for name in sheet_names])
        if info is not None:
            data.name = get_spreadsheet_title(info)
            data.messages.extend(self.check_sheet_headers(info))

        value_ranges = {
            vr.get("valueRange", {}).get("range", "").partition("!")[0].strip("'").casefold(): vr.get("valueRange", {})
            for vr in response.get("valueRanges", []) or []
        }
        with ProgressTracker(len(definitions), description="Reading") as progress:
            for definition in definitions:
                progress.start_sheet(definition.name)
                values = value_ranges.get(definition.name.casefold(), {}).get("values")
                data.entities[definition.attribute] = map_from_range_data(values, definition.entity_cls)
                progress.finish_sheet()
        logger.info("read %d sheet(s)", len(definitions))
        return data

    def create_sheets(self, names: Sequence[str] | None = None) -> SpreadsheetData:
        """Create sheets with headers, formats, validations and protections.

        A default ``Sheet1`` tab is moved behind the new sheets in the same batch.
        """
        definitions, unknown = self.domain.resolve(names)
        data = SpreadsheetData()
        data.messages.extend(
            create_error_message(f"Sheet {name.upper()} does not exist", MessageType.CREATE_SHEET) for name in unknown
        )
        if not definitions:
            return data

        with ProgressTracker(len(definitions), description="Layout") as progress:
            sheets: list[SheetModel] = []
            for definition in definitions:
                progress.start_sheet(definition.name)
                sheets.append(definition.build())
                progress.finish_sheet()
        body = generate_sheets_request(sheets)

        info = self.service.get_sheet_info()
        if info is not None:
            data.name = get_spreadsheet_title(info)
            existing = info.get("sheets", []) or []
            default = next(
                (s for s in existing if s.get("properties", {}).get("title", "").casefold() == DEFAULT_SHEET_TITLE.casefold()),
                None,
            )
            if default is not None:
                end_index = len(existing) + len(sheets) - 1
                body["requests"].append(generate_update_sheet_index(default["properties"]["sheetId"], end_index))

        response = self.service.batch_update_spreadsheet(body)
        if response is None:
            data.messages.extend(
                create_error_message(f"{d.name.upper()} not created", MessageType.CREATE_SHEET) for d in definitions
            )
            return data

        for reply in response.get("replies", []) or []:
            title = reply.get("addSheet", {}).get("properties", {}).get("title")
            if title:
                data.messages.append(create_info_message(f"{title.upper()} created", MessageType.CREATE_SHEET))
        logger.info("created %d sheet(s)", len(sheets))
        return data

    def delete_sheets(self, names: Sequence[str] | None = None) -> SpreadsheetData:
        definitions, unknown = self.domain.resolve(names)
        data = SpreadsheetData()
        data.messages.extend(
            create_error_message(f"Sheet {name.upper()} does not exist", MessageType.DELETE_SHEET) for name in unknown
        )
        info = self.service.get_sheet_info()
        if info is None:
            data.messages.append(create_error_message("Unable to retrieve sheet(s)", MessageType.GET_SHEETS))
            return data
        data.name = get_spreadsheet_title(info)

        wanted = {d.name.casefold() for d in definitions}
        ids = [
            s["properties"]["sheetId"]
            for s in info.get("sheets", []) or []
            if s.get("properties", {}).get("title", "").casefold() in wanted
        ]
        if not ids:
            data.messages.append(create_warning_message("No sheets to delete", MessageType.DELETE_SHEET))
            return data

        response = self.service.batch_update_spreadsheet({"requests": generate_delete_sheet_requests(ids)})
        if response is None:
            data.messages.append(create_error_message("Sheet deletion failed", MessageType.DELETE_SHEET))
        else:
            data.messages.append(create_info_message(f"Deleted {len(ids)} sheet(s)", MessageType.DELETE_SHEET))
        return data

    def check_sheets(self, check_headers: bool = False) -> list[Message]:
        """Report missing domain sheets and, optionally, header mismatches."""
        names = self.domain.sheet_names()
        ranges = [f"{name}!{HEADER_RANGE}" for name in names] if check_headers else None
        info = self.service.get_sheet_info(ranges)
        messages = check_sheets(info, names)
        if check_headers and info is not None:
            messages.extend(self.check_sheet_headers(info))
        return messages

    def check_sheet_headers(self, info: Mapping[str, Any] | None) -> list[Message]:
        """Validate the header row of every domain sheet present in ``info``."""
        messages: list[Message] = []
        header_messages: list[Message] = []
        for title, headers in get_sheet_headers(info).items():
            definition = self.domain.get(title)
            if definition is None:
                messages.append(
                    create_warning_message(f"Sheet {title} does not match any known sheet name", MessageType.CHECK_SHEET)
                )
                continue
            header_messages.extend(check_sheet_headers(headers, definition.build()))

        if header_messages:
            messages.append(create_warning_message("Found sheet header issue(s)", MessageType.CHECK_SHEET))
            messages.extend(header_messages)
        else:
            messages.append(create_info_message("No sheet header issues found", MessageType.CHECK_SHEET))
        return messages

    def change_sheet_data(self, names: Sequence[str], data: SpreadsheetData) -> SpreadsheetData:
        """Write entity changes by their action.

        UPDATE rows are rewritten in place first, DELETE rows are removed
        bottom-up next and INSERT rows are appended last, so row ids stay valid
        throughout. Messages are added to ``data`` which is also returned.
        """
        definitions, unknown = self.domain.resolve(names)
        data.messages.extend(
            create_error_message(f"Sheet {name.upper()} does not exist", MessageType.GENERAL) for name in unknown
        )
        changes = [(d, data.entities.get(d.attribute) or []) for d in definitions]
        changes = [(d, entities) for d, entities in changes if entities]
        if not changes:
            data.messages.append(create_warning_message("No data to change", MessageType.GENERAL))
            return data

        info = self.service.get_sheet_info([f"{d.name}!{HEADER_RANGE}" for d, _ in changes])
        if info is None:
            data.messages.append(create_error_message("Unable to retrieve sheet(s)", MessageType.GET_SHEETS))
            return data
        sheet_ids = {
            s.get("properties", {}).get("title", "").casefold(): s.get("properties", {}).get("sheetId")
            for s in info.get("sheets", []) or []
        }
        live_headers = {title.casefold(): headers for title, headers in get_sheet_headers(info).items()}

        with ProgressTracker(len(changes), description="Saving") as progress:
            for definition, entities in changes:
                progress.start_sheet(definition.name)
                key = definition.name.casefold()
                if key not in sheet_ids:
                    data.messages.append(
                        create_error_message(f"Unable to find sheet {definition.name.upper()}", MessageType.MISSING_SHEETS)
                    )
                    progress.finish_sheet()
                    continue
                headers = live_headers.get(key) or definition.build().header_names()
                data.messages.extend(self._change_sheet(definition, sheet_ids[key], headers, entities))
                progress.finish_sheet()
        return data

    def _change_sheet(
        self, definition: SheetDefinition, sheet_id: int, headers: Sequence[str], entities: Sequence[Any]
    ) -> list[Message]:
        sheet = definition.name.upper()
        grouped: dict[ActionType, list[Any]] = {action: [] for action in ActionType}
        messages: list[Message] = []
        for entity in entities:
            action = try_get_value_from_name(ActionType, entity.action)
            if action is None:
                messages.append(
                    create_warning_message(
                        f"Unknown action [{entity.action}] for {sheet} row {entity.row_id}", MessageType.GENERAL
                    )
                )
                continue
            grouped[action].append(entity)

        updates = grouped[ActionType.UPDATE]
        if updates:
            rows = map_to_range_data(updates, headers)
            body = generate_update_value_request(
                definition.name, {e.row_id: [row] for e, row in zip(updates, rows, strict=True)}
            )
            if self.service.batch_update_data(body) is None:
                messages.append(create_error_message(f"Unable to update data in {sheet}", MessageType.UPDATE_DATA))
            else:
                messages.append(create_info_message(f"Updated {len(updates)} row(s) in {sheet}", MessageType.UPDATE_DATA))

        deletes = grouped[ActionType.DELETE]
        if deletes:
            requests = generate_delete_requests(sheet_id, [e.row_id for e in deletes])
            if self.service.batch_update_spreadsheet({"requests": requests}) is None:
                messages.append(create_error_message(f"Unable to delete data from {sheet}", MessageType.DELETE_DATA))
            else:
                messages.append(
                    create_info_message(f"Deleted {len(deletes)} row(s) from {sheet}", MessageType.DELETE_DATA)
                )

        inserts = grouped[ActionType.INSERT]
        if inserts:
            rows = map_to_range_data(inserts, headers)
            if self.service.append_data(rows, f"{definition.name}!A1") is None:
                messages.append(create_error_message(f"Unable to add data to {sheet}", MessageType.ADD_DATA))
            else:
                for entity in inserts:
                    entity.saved = True
                messages.append(create_info_message(f"Added {len(inserts)} row(s) to {sheet}", MessageType.ADD_DATA))

        logger.debug(
            "%s: %d update(s), %d delete(s), %d insert(s)", sheet, len(updates), len(deletes), len(inserts)
        )
        return messages

    def get_sheet_layout(self, name: str) -> SheetModel | None:
        """Expected layout (headers, formulas, colours) of one sheet."""
        definition = self.domain.get(name)
        return definition.build() if definition is not None else None

    def get_sheet_layouts(self, names: Sequence[str] | None = None) -> list[SheetModel]:
        definitions, _ = self.domain.resolve(names)
        return [d.build() for d in definitions]
