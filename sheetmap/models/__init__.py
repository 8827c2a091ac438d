"""Models shared by the sheet mapping layer.

Sheet layouts, diagnostics and the spreadsheet result container. Enum types
and their label helpers live in ``sheetmap.models.enums``.
"""

from .entities import RowEntity
from .message import Message, create_error_message, create_info_message, create_warning_message
from .sheet_model import SheetCellModel, SheetModel, column_index, column_name
from .spreadsheet import SpreadsheetData
from .validation_result import ValidationResult

__all__ = [
    # Layout models
    "SheetCellModel",
    "SheetModel",
    "column_index",
    "column_name",
    # Row bookkeeping
    "RowEntity",
    # Diagnostics
    "Message",
    "ValidationResult",
    "create_error_message",
    "create_info_message",
    "create_warning_message",
    # Results
    "SpreadsheetData",
]
