"""JSON file helpers for export documents and datasets."""

import json
import logging
from pathlib import Path
from typing import Any, Union

logger = logging.getLogger(__name__)


def read_json(file_path: Union[str, Path]) -> Any:
    """Read and decode a UTF-8 JSON file.

    Raises:
        OSError: If the file cannot be read
        json.JSONDecodeError: If the content is not valid JSON
    """
    with open(file_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    logger.debug(f"Read {file_path}", extra={"file_path": str(file_path)})
    return data


def write_json(data: Any, output_path: Union[str, Path], indent: int = 2) -> dict:
    """Write a value as UTF-8 JSON, creating parent directories.

    Args:
        data: JSON-serializable value
        output_path: Output file path
        indent: Indentation width

    Returns:
        Metadata dict with file info
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=indent)
        f.write("\n")

    metadata = {
        "file_path": str(output_path),
        "file_size_bytes": output_path.stat().st_size,
    }
    logger.info(f"Wrote {output_path}", extra=metadata)
    return metadata
