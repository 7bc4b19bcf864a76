# backend/leaderboard/ranking.py
"""
Leaderboard ranking: sort a watchtime snapshot, locate a user and pick the
anonymised entries shown around them.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, NamedTuple, Sequence, Tuple

WINDOW_RADIUS = 2
MIN_WINDOWED_SIZE = 5


class WatchtimeRecord(NamedTuple):
    user_id: str
    total_watchtime: int


@dataclass(frozen=True)
class AnonRankingEntry:
    position: int
    total_watchtime: int


@dataclass(frozen=True)
class RankingResult:
    position: int
    total_watchtime: int
    neighbors: List[AnonRankingEntry] = field(default_factory=list)


class RankingError(Exception):
    pass


class UserNotFoundError(RankingError):
    """Raised when the target user has no watchtime record."""

    def __init__(self, user_id: str):
        super().__init__(f"user {user_id!r} not found")
        self.user_id = user_id


class InvalidRankingError(RankingError):
    """Raised when a rank index falls outside every neighbor window."""


class NeighborWindow(Enum):
    SMALL = "small"
    INTERIOR = "interior"
    NEAR_BOTTOM = "near_bottom"
    NEAR_TOP = "near_top"


def compute_rank(records: Sequence[WatchtimeRecord], target_user_id: str) -> Tuple[int, List[WatchtimeRecord]]:
    """
    Sort ``records`` by watchtime, highest first, and return the 0-based
    index of ``target_user_id`` together with the sorted copy.

    Raises ``UserNotFoundError`` when the user has no record, including for
    an empty leaderboard. Callers are expected to handle it as a regular
    outcome of the lookup.
    """
    # sorted() is stable, equal watchtimes keep their input order
    ordered = sorted(records, key=lambda r: r.total_watchtime, reverse=True)
    for idx, rec in enumerate(ordered):
        if rec.user_id == target_user_id:
            return idx, ordered
    raise UserNotFoundError(target_user_id)


def classify_window(rank_index: int, size: int) -> NeighborWindow:
    if not 0 <= rank_index < size:
        raise InvalidRankingError(f"rank index {rank_index} outside leaderboard of {size}")
    if size < MIN_WINDOWED_SIZE:
        return NeighborWindow.SMALL

    has_room_above = rank_index - WINDOW_RADIUS >= 0
    has_room_below = rank_index + WINDOW_RADIUS < size
    if has_room_above and has_room_below:
        return NeighborWindow.INTERIOR
    if not has_room_below:
        return NeighborWindow.NEAR_BOTTOM
    return NeighborWindow.NEAR_TOP


def _small_window(rank_index: int, size: int) -> range:
    return range(0, size)


def _interior_window(rank_index: int, size: int) -> range:
    return range(rank_index - WINDOW_RADIUS, rank_index + WINDOW_RADIUS + 1)


def _near_bottom_window(rank_index: int, size: int) -> range:
    return range(size - MIN_WINDOWED_SIZE, size)


def _near_top_window(rank_index: int, size: int) -> range:
    return range(0, MIN_WINDOWED_SIZE)


_WINDOWS: Dict[NeighborWindow, Callable[[int, int], range]] = {
    NeighborWindow.SMALL: _small_window,
    NeighborWindow.INTERIOR: _interior_window,
    NeighborWindow.NEAR_BOTTOM: _near_bottom_window,
    NeighborWindow.NEAR_TOP: _near_top_window,
}


def select_closest_neighbors(sorted_records: Sequence[WatchtimeRecord], rank_index: int) -> List[AnonRankingEntry]:
    """
    Entries around ``rank_index`` in an already sorted leaderboard, without
    the target itself and without user ids. Positions are 1-based.
    """
    size = len(sorted_records)
    kind = classify_window(rank_index, size)
    window = _WINDOWS.get(kind)
    if window is None:
        raise InvalidRankingError(f"no window for {kind}")

    return [
        AnonRankingEntry(position=i + 1, total_watchtime=sorted_records[i].total_watchtime)
        for i in window(rank_index, size)
        if i != rank_index
    ]


def rank_user(records: Sequence[WatchtimeRecord], target_user_id: str) -> RankingResult:
    rank_index, ordered = compute_rank(records, target_user_id)
    return RankingResult(
        position=rank_index + 1,
        total_watchtime=ordered[rank_index].total_watchtime,
        neighbors=select_closest_neighbors(ordered, rank_index),
    )
