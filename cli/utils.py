"""Utility functions for CLI operations."""

import mimetypes
from typing import Optional

from cli.constants import GREEN, RESET
from pipeline.progress import PipelineProgress

PROGRESS_BAR_WIDTH = 30


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in bytes to human-readable format with appropriate unit.

    Uses binary units (1024-based) and automatically selects the most
    appropriate unit (B, KiB, MiB, GiB, TiB).

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string with size and unit (e.g., "1.50 MiB", "512 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"

    units = ['KiB', 'MiB', 'GiB', 'TiB']
    size = size_bytes / 1024.0

    for unit in units:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0

    return f"{size:.2f} PiB"


def format_progress(progress: PipelineProgress) -> str:
    """Render a progress snapshot as a one-line bar."""
    filled = int(PROGRESS_BAR_WIDTH * progress.percentage / 100)
    bar = '#' * filled + '-' * (PROGRESS_BAR_WIDTH - filled)
    return f"[{bar}] {GREEN}{progress.percentage:5.1f}%{RESET} {progress.message}"


def guess_media_type(file_path: str) -> Optional[str]:
    media_type, _ = mimetypes.guess_type(file_path)
    return media_type


def marketplace_url(base_url: str, contract: str, token_id: int) -> str:
    """
    Build the marketplace link for a token.

    Args:
        base_url: Marketplace base URL for the network
        contract: Token contract address
        token_id: Token id

    Returns:
        URL of the token page
    """
    return f"{base_url}/tokens/{contract}/{token_id}"
