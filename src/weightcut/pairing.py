"""Generic interval join over weight log entries.

Every drift measurement pairs an "anchor" entry (e.g. a morning weigh-in)
with a "candidate" entry of another kind whose time gap falls inside an open
window. Rules differ only in window, direction, tie-break, calendar scope and
whether a matched candidate may be reused, so all of them run through
``interval_join``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from weightcut.clock import DEFAULT_TIMEZONE, local_date_for_timezone
from weightcut.models import LogKind, WeightLogEntry
from weightcut.utils import hours_between

logger = logging.getLogger(__name__)


class TieBreak(Enum):
    FIRST_FOUND = "first_found"  # first candidate in scan order inside the window
    CLOSEST = "closest"  # smallest gap inside the window


@dataclass(frozen=True)
class PairingRule:
    """How anchors of one kind are matched to candidates of another.

    The gap is measured from anchor to candidate, or from candidate to
    anchor when ``candidate_before_anchor`` is set, and must fall strictly
    between ``min_gap_hours`` and ``max_gap_hours``.
    """

    name: str
    anchor_kind: LogKind
    candidate_kind: LogKind
    min_gap_hours: float
    max_gap_hours: float
    candidate_before_anchor: bool = False
    tie_break: TieBreak = TieBreak.FIRST_FOUND
    same_day: bool = False
    consume: bool = True
    candidates_newest_first: bool = False

    def gap_hours(self, anchor: WeightLogEntry, candidate: WeightLogEntry) -> float:
        if self.candidate_before_anchor:
            return hours_between(candidate.timestamp, anchor.timestamp)
        return hours_between(anchor.timestamp, candidate.timestamp)

    def in_window(self, gap: float) -> bool:
        return self.min_gap_hours < gap < self.max_gap_hours


@dataclass(frozen=True)
class LogPair:
    anchor: WeightLogEntry
    candidate: WeightLogEntry
    gap_hours: float


def _entries_of_kind(
    logs: Iterable[WeightLogEntry], kind: LogKind, *, newest_first: bool = False
) -> list[WeightLogEntry]:
    return sorted(
        (entry for entry in logs if entry.kind is kind),
        key=lambda entry: entry.timestamp,
        reverse=newest_first,
    )


def interval_join(
    logs: Iterable[WeightLogEntry],
    rule: PairingRule,
    *,
    timezone_name: str = DEFAULT_TIMEZONE,
) -> list[LogPair]:
    """Match anchors (oldest first) to candidates according to ``rule``.

    With ``rule.consume`` set, a candidate id is used by at most one pair in
    the pass. Returns pairs in anchor order.
    """
    logs = list(logs)
    anchors = _entries_of_kind(logs, rule.anchor_kind)
    candidates = _entries_of_kind(
        logs, rule.candidate_kind, newest_first=rule.candidates_newest_first
    )

    used_ids: set[str] = set()
    pairs: list[LogPair] = []
    for anchor in anchors:
        anchor_day = local_date_for_timezone(anchor.timestamp, timezone_name) if rule.same_day else None
        best: WeightLogEntry | None = None
        best_gap: float | None = None

        for candidate in candidates:
            if rule.consume and candidate.id in used_ids:
                continue
            if anchor_day is not None and local_date_for_timezone(candidate.timestamp, timezone_name) != anchor_day:
                continue
            gap = rule.gap_hours(anchor, candidate)
            if not rule.in_window(gap):
                continue
            if rule.tie_break is TieBreak.FIRST_FOUND:
                best, best_gap = candidate, gap
                break
            if best_gap is None or gap < best_gap:
                best, best_gap = candidate, gap

        if best is None or best_gap is None:
            continue
        if rule.consume:
            used_ids.add(best.id)
        pairs.append(LogPair(anchor=anchor, candidate=best, gap_hours=best_gap))

    logger.debug(
        "Pairing pass %s matched %d of %d anchors",
        rule.name,
        len(pairs),
        len(anchors),
        extra={"weightcut_pairing_rule": rule.name},
    )
    return pairs
