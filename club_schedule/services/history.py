from datetime import timedelta

from club_schedule.codec.values import as_utc
from club_schedule.core.config import settings
from club_schedule.models.history import RemovalHistoryEntry


def dedupe_removal_history(
    entries: list[RemovalHistoryEntry],
    *,
    window_ms: int | None = None,
) -> list[RemovalHistoryEntry]:
    """Collapse entries written twice for the same removal, for display only.

    Entries whose ``removed_at`` lies within the window of a kept entry are the
    same event. The first one is kept unless a later duplicate carries the
    restoration details the kept one lacks. Passes repeat until nothing merges,
    which makes the result stable under another call.
    """
    window = timedelta(
        milliseconds=settings.history_merge_window_ms if window_ms is None else window_ms
    )
    result = list(entries)
    while True:
        merged = _merge_pass(result, window)
        if len(merged) == len(result):
            return merged
        result = merged


def count_removal_events(entries: list[RemovalHistoryEntry], *, window_ms: int | None = None) -> int:
    return len(dedupe_removal_history(entries, window_ms=window_ms))


def _merge_pass(entries: list[RemovalHistoryEntry], window: timedelta) -> list[RemovalHistoryEntry]:
    kept: list[RemovalHistoryEntry] = []
    for entry in entries:
        index = _find_cluster(kept, entry, window)
        if index is None:
            kept.append(entry)
            continue
        if entry.has_restoration_info and not kept[index].has_restoration_info:
            kept[index] = entry
    return kept


def _find_cluster(
    kept: list[RemovalHistoryEntry],
    entry: RemovalHistoryEntry,
    window: timedelta,
) -> int | None:
    if entry.removed_at is None:
        return None
    removed_at = as_utc(entry.removed_at)
    for index, candidate in enumerate(kept):
        if candidate.removed_at is None:
            continue
        if abs(as_utc(candidate.removed_at) - removed_at) < window:
            return index
    return None
