"""Domain models for the spreadsheet merge tool.

Tables, template geometry, sheet cells, uploads and batch results.
"""

from .cell import BlankCell, BooleanCell, FormulaCell, NumberCell, SheetCell, TextCell
from .processing_result import BatchResult, FileStat, FileStatus, UploadMode
from .table import Table
from .template_config import TemplateConfig, TemplateConfigError
from .uploaded_file import UploadedFile

__all__ = [
    # Cell variants
    "BlankCell",
    "BooleanCell",
    "FormulaCell",
    "NumberCell",
    "SheetCell",
    "TextCell",
    # Data models
    "Table",
    "TemplateConfig",
    "TemplateConfigError",
    "UploadedFile",
    # Processing models
    "BatchResult",
    "FileStat",
    "FileStatus",
    "UploadMode",
]
