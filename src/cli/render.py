"""Plain-text rendering of the dictionary index and entry details."""

from datetime import datetime

from domain.model.dictionary import CloudStatus
from domain.model.entry import Entry


def format_timestamp(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000).strftime('%Y-%m-%d %H:%M')


def render_index(entries: list[Entry], selected_id: str | None = None) -> str:
    if not entries:
        return "No entries."
    lines = []
    for entry in entries:
        marker = '>' if entry.id == selected_id else ' '
        audio = ' ♪' if entry.has_recording else ''
        lines.append(f"{marker} {entry.word}{audio}")
    return "\n".join(lines)


def render_entry(entry: Entry) -> str:
    lines = [
        entry.word,
        "=" * len(entry.word),
        entry.definition,
        "",
        f"  “{entry.illustration}”" if entry.illustration else "  (no illustration)",
        "",
        f"id: {entry.id}",
        f"created: {format_timestamp(entry.created_at)}  updated: {format_timestamp(entry.updated_at)}",
        f"recording: {'yes' if entry.has_recording else 'no'}",
    ]
    return "\n".join(lines)


def render_cloud_status(status: CloudStatus, error: str = '') -> str:
    if status == CloudStatus.ERROR and error:
        return f"cloud: error ({error})"
    return f"cloud: {status.value}"
