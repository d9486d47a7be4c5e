"""Local file access for pull request content."""

from pathlib import Path
from typing import Union

from ..errors import LocalIOError


def read_text_file(local_path: Union[str, Path]) -> str:
    """Read a local UTF-8 text file.

    Args:
        local_path: Path to the file

    Returns:
        File content

    Raises:
        LocalIOError: If the file cannot be read or decoded
    """
    path = Path(local_path)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise LocalIOError(f"Failed to read file {path}: {e}", operation="read file", cause=e) from e
