from .engine import ReviewEngine
from .filters import FileSelection, filter_files
from .findings import count_by_severity, filter_by_severity, parse_findings
from .parser import DiffFile, parse_diff

__all__ = [
    "ReviewEngine",
    "FileSelection",
    "filter_files",
    "count_by_severity",
    "filter_by_severity",
    "parse_findings",
    "DiffFile",
    "parse_diff",
]
