"""
Output Writer - Delivers converted SICORE text.

This module handles:
- Writing the record text to disk unchanged (no newline translation)
- Refusing to overwrite existing files unless allowed
- Rendering a short preview of the first lines
"""

from pathlib import Path
from typing import Optional, Union

from .exceptions import OutputError
from .logging_config import get_logger

logger = get_logger("writer")

DEFAULT_OUTPUT_NAME = "sicore_retenciones.txt"
DEFAULT_ENCODING = "utf-8"
DEFAULT_PREVIEW_LINES = 20


def resolve_output_path(path: Optional[Union[str, Path]] = None) -> Path:
    """Return the file a conversion writes to.

    No path means the default name in the current directory; an
    existing directory gets the default name inside it.
    """
    output_path = Path(path) if path is not None else Path(DEFAULT_OUTPUT_NAME)
    if output_path.is_dir():
        output_path = output_path / DEFAULT_OUTPUT_NAME
    return output_path


def write_output(
    text: str,
    path: Optional[Union[str, Path]] = None,
    encoding: str = DEFAULT_ENCODING,
    overwrite: bool = True,
) -> Path:
    """
    Write converted text to a file.

    Args:
        text: The newline-joined record lines
        path: Output file (default: sicore_retenciones.txt in the
            current directory). A directory gets the default name.
        encoding: Output encoding
        overwrite: Replace an existing file

    Returns:
        The path written

    Raises:
        OutputError: If the file exists and overwrite is False, or the
            text cannot be written
    """
    output_path = resolve_output_path(path)
    if output_path.exists() and not overwrite:
        raise OutputError(output_path, "File already exists (use overwrite to replace it)")

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding=encoding, newline="") as f:
            f.write(text)
    except (OSError, UnicodeEncodeError, LookupError) as e:
        raise OutputError(output_path, f"Cannot write output: {e}") from e

    logger.info("Wrote %s", output_path)
    return output_path


def preview(text: str, max_lines: int = DEFAULT_PREVIEW_LINES) -> str:
    """
    Return the first lines of the converted text.

    Args:
        text: The newline-joined record lines
        max_lines: Number of lines to show

    Returns:
        The preview, with a trailer counting the lines left out
    """
    lines = text.split("\n")
    shown = "\n".join(lines[:max_lines])
    if len(lines) > max_lines:
        return f"{shown}\n\n... and {len(lines) - max_lines} more lines"
    return shown
