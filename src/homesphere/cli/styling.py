"""CLI output styling.

Visual language:
- Cyan bold for section headers and labels
- Green for success messages (with checkmark)
- Dim for neutral/empty state messages
- Yellow star for favorites
"""

from __future__ import annotations

__all__ = [
    "format_price",
    "format_rating",
    "style_dim",
    "style_favorite",
    "style_header",
    "style_label",
    "style_success",
]

from typing import Any

import click


def style_header(title: str) -> str:
    """Style a section header as "--- Title ---".

    Example:
        >>> click.echo(style_header("Properties"))
        --- Properties ---
    """
    return click.style(f"--- {title} ---", fg="cyan", bold=True)


def style_label(label: str) -> str:
    """Style a label with a colon suffix."""
    return click.style(f"{label}:", fg="cyan", bold=True)


def style_success(message: str) -> str:
    """Style a success message with a checkmark prefix."""
    return click.style(f"✓ {message}", fg="green")


def style_dim(message: str) -> str:
    return click.style(message, dim=True)


def style_favorite(is_favorite: bool) -> str:
    """Star marker for listing rows; blank padding when not a favorite."""
    return click.style("★", fg="yellow") if is_favorite else " "


def format_price(value: Any) -> str:
    """Format a price for display ("$1,250,000"); unparseable values pass through."""
    try:
        return f"${float(value):,.0f}"
    except (TypeError, ValueError):
        return str(value) if value is not None else "?"


def format_rating(value: Any) -> str:
    """Render a 1-5 rating as filled and empty stars."""
    try:
        stars = max(0, min(5, int(value)))
    except (TypeError, ValueError):
        return "?"
    return "★" * stars + "☆" * (5 - stars)
