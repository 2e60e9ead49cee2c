"""Utility functions for PDF Toolbox."""

from pathlib import Path
from typing import Iterable, Union


def format_size(size_bytes: int) -> str:
    """
    Format bytes to human-readable string.

    Args:
        size_bytes: Size in bytes

    Returns:
        Human-readable size string
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / (1024 * 1024):.2f} MB"
    else:
        return f"{size_bytes / (1024 * 1024 * 1024):.2f} GB"


def calculate_compression_ratio(original_size: int, compressed_size: int) -> float:
    """
    Calculate compression ratio.

    Args:
        original_size: Original file size in bytes
        compressed_size: Compressed file size in bytes

    Returns:
        Compression ratio (e.g., 0.65 means 65% reduction, negative if larger)
    """
    if original_size == 0:
        return 0.0
    return 1 - (compressed_size / original_size)


def get_output_path(
    output_path: Union[str, Path, None],
    default_name: str,
    directory: Union[str, Path, None] = None,
) -> Path:
    """
    Determine output file path.

    Args:
        output_path: Explicit output path or None
        default_name: Fixed artifact filename used when no path is given
        directory: Directory for the default name (default: current directory)

    Returns:
        Output file path
    """
    if output_path:
        return Path(output_path)
    return Path(directory or ".") / default_name


def allowed_file(filename: str, extensions: Iterable[str] = ("pdf",)) -> bool:
    """Check if file extension is allowed."""
    return "." in filename and filename.rsplit(".", 1)[1].lower() in set(extensions)
