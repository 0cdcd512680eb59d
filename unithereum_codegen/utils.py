"""Utility functions for reading JSON configuration files.

Errors carry enough context (file, position) to be turned into a
configuration error pointing at the offending field.
"""

import json
from pathlib import Path
from typing import Any

from .logging_config import get_logger

logger = get_logger(__name__)


class JSONLoaderError(Exception):
    """Raised when a JSON file cannot be read or parsed."""

    def __init__(self, message: str, path: Path, position: str | None = None):
        super().__init__(message)
        self.path = path
        self.position = position


def load_json_file(file_path: str | Path) -> Any:
    """Load JSON data from a local file.

    Args:
        file_path: Path to the JSON file.

    Returns:
        Parsed JSON data.

    Raises:
        FileNotFoundError: If file doesn't exist.
        JSONLoaderError: If file cannot be read or JSON is invalid.
    """
    file_path = Path(file_path)
    logger.debug("Attempting to load JSON from file: %s", file_path)

    if not file_path.exists():
        logger.error("File not found: %s", file_path)
        raise FileNotFoundError(f"File not found: {file_path}")

    try:
        with file_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        logger.debug("Loaded JSON from %s", file_path)
        return data
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in file %s: %s", file_path, e)
        raise JSONLoaderError(
            f"Invalid JSON in file {file_path}: {e.msg}",
            file_path,
            position=f"line {e.lineno}, column {e.colno}",
        ) from e
    except UnicodeDecodeError as e:
        logger.error("File %s is not valid UTF-8: %s", file_path, e)
        raise JSONLoaderError(
            f"File {file_path} is not valid UTF-8",
            file_path,
            position=f"byte {e.start}",
        ) from e
    except OSError as e:
        logger.error("Error reading file %s: %s", file_path, e)
        raise JSONLoaderError(f"Error reading file {file_path}: {e}", file_path) from e


def load_json_object(file_path: str | Path) -> dict[str, Any]:
    """Load a JSON file whose root must be an object."""
    data = load_json_file(file_path)
    if not isinstance(data, dict):
        raise JSONLoaderError(
            f"Configuration file must contain a JSON object: {file_path}",
            Path(file_path),
        )
    return data
