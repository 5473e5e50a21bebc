"""Utility modules.

Includes:
- Logging configuration
- Structured pipeline logging
- JSON file I/O helpers
"""

from .logging_config import setup_logging, get_logger
from .file_io import read_json, write_json
from .pipeline_logger import PipelineLogger, timed_operation

__all__ = [
    "setup_logging",
    "get_logger",
    "read_json",
    "write_json",
    "PipelineLogger",
    "timed_operation",
]
