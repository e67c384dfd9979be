# Area: Shared
"""Error formatting for structured game error logs."""

from __future__ import annotations
import json
from typing import Any, Dict, Optional


def format_error_block(
    kind: str,
    message: str,
    session_id: Optional[int],
    field: Optional[str],
    value: Any,
    details: Optional[Dict[str, Any]],
) -> str:
    """Format a structured error block for terminal and log output."""
    from datetime import datetime, timezone

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    lines = [
        "",
        "=" * 64,
        " TRAP GRID ERROR",
        "=" * 64,
        f" Timestamp:    {timestamp}",
        f" Error Kind:   {kind}",
        f" Message:      {message}",
    ]

    if session_id is not None:
        lines.append(f" Session:      {session_id}")
    if field is not None:
        lines.append(f" Field:        {field} = {value!r}")

    if details:
        lines.append("")
        lines.append(" ── DETAILS " + "─" * 52)
        lines.append(indent_json(details))

    lines.append("")
    lines.append("=" * 64)
    lines.append("")

    return "\n".join(lines)


def indent_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Format JSON with indentation for error logs."""
    try:
        formatted = json.dumps(data, indent=indent, default=str)
        return "\n".join(" " + line for line in formatted.split("\n"))
    except (TypeError, ValueError):
        return f" {repr(data)}"
