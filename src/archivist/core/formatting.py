"""Formatting utilities for domain logic."""


def stage_to_color(stage: str) -> str:
    """Map a pipeline stage to a color name.

    Args:
        stage: Export, import or object stage name.

    Returns:
        Color name string:
        - "COMPLETE" -> "green"
        - "QUEUED" -> "dim"
        - any other known stage -> "yellow"
        - invalid -> empty string
    """
    color_map = {
        "COMPLETE": "green",
        "QUEUED": "dim",
        "BUILDING": "yellow",
        "BUILDING_MANIFEST": "yellow",
        "EXTRACTING": "yellow",
        "VALIDATING": "yellow",
        "IMPORTING": "yellow",
        "INITIALISING": "yellow",
        "PROCESSING": "yellow",
    }
    return color_map.get(stage, "")


def format_size(size_bytes: int) -> str:
    """Format size in bytes to human-readable format."""
    size = float(size_bytes)
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0
    return f"{size:.1f} TB"
