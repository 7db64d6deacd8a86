from typing import Any, Optional, Sequence

from src.domain.models import DisplayRecord

NOT_APPLICABLE = "N/A"
ELLIPSIS = "…"

# (title, width, right aligned)
COLUMNS = (
    ("Rank", 4, True),
    ("Name", 30, False),
    ("Stars", 6, True),
    ("Forks", 6, True),
    ("Description", 50, False),
    ("Language", 12, False),
)


def format_count(count: Any) -> str:
    """Abbreviates counts of a thousand or more, e.g. 15300 -> "15k"."""
    if isinstance(count, int) and count >= 1000:
        return f"{count // 1000}k"
    return str(count)


def format_language(language: Optional[str]) -> str:
    return str(language) if language else NOT_APPLICABLE


def truncate(text: Any, width: int) -> str:
    text = " ".join(str(text or "").split())
    if len(text) <= width:
        return text
    return text[: width - 1] + ELLIPSIS


def _format_line(cells: Sequence[str]) -> str:
    parts = []
    for cell, (_, width, right) in zip(cells, COLUMNS):
        cell = truncate(cell, width)
        parts.append(cell.rjust(width) if right else cell.ljust(width))
    return "  ".join(parts).rstrip()


def render_table(records: Sequence[DisplayRecord], title: str) -> str:
    header = _format_line([name for name, _, _ in COLUMNS])
    lines = [title, "", header, "-" * len(header)]

    if not records:
        lines.append("No data")
        return "\n".join(lines)

    for record in records:
        lines.append(_format_line([
            str(record.rank),
            record.name,
            format_count(record.stars),
            format_count(record.forks),
            record.description,
            format_language(record.language),
        ]))
        owner = record.owner
        lines.append(f"{'':4}  {record.url} (owner: {owner.url}, avatar: {owner.avatar_url})")
    return "\n".join(lines)
