from __future__ import annotations

"""Number formatting shared by the chat context and fallback responses."""

__all__ = [
    "format_number",
]


def format_number(value: float | int | None) -> str:
    """Render a measurement the way users typed it: ``100`` not ``100.0``."""
    if value is None:
        return "unknown"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
