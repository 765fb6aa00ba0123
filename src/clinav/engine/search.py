"""Search Filter - incremental, case-insensitive narrowing of menu entries.

An entry matches when its label, description or id contains the query.
The empty query matches everything, and entries always keep their original
order. Highlighting is a separate presentation helper that never affects
which entries match.
"""

from collections.abc import Sequence

from clinav.catalog.types import MenuEntry


def entry_matches(entry: MenuEntry, query: str) -> bool:
    if not query:
        return True
    needle = query.lower()
    return needle in entry.label.lower() or needle in entry.description.lower() or needle in entry.id.lower()


def matching_indexes(entries: Sequence[MenuEntry], query: str) -> tuple[int, ...]:
    """Positions in ``entries`` of every entry matching ``query``, in order."""
    return tuple(index for index, entry in enumerate(entries) if entry_matches(entry, query))


def filter_entries(entries: Sequence[MenuEntry], query: str) -> list[MenuEntry]:
    """Entries matching ``query``. The empty query returns every entry unchanged."""
    return [entries[index] for index in matching_indexes(entries, query)]


def highlight_span(text: str, query: str) -> tuple[int, int] | None:
    """Start and end of the first case-insensitive occurrence of ``query`` in ``text``."""
    if not query:
        return None
    start = text.lower().find(query.lower())
    if start < 0:
        return None
    return start, start + len(query)
