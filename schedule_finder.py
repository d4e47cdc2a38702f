# schedule_finder.py
# Enumerates conflict-free timetables (one section per course) using a backtracking DFS.

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from meeting_times import Course, MeetingEntry, Section

__all__ = [
    "DEFAULT_LIMIT", "entries_conflict", "sections_conflict", "conflicts_with_any",
    "generate_timetables", "find_unresolvable_pairs",
]

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 999


def entries_conflict(a: MeetingEntry, b: MeetingEntry) -> bool:
    # Two meeting entries clash when they share a weekday and their time ranges overlap.
    if a.is_dated or b.is_dated:
        # A single dated event does not recur weekly, so it is only compared
        # against other dated events on the very same date.
        return a.is_dated and b.is_dated and _dated_conflict(a, b)

    if not any(da and db for da, db in zip(a.days, b.days)):
        return False

    # Back-to-back meetings (one ends exactly when the other starts) are fine.
    return a.start < b.end and b.start < a.end


def _dated_conflict(a: MeetingEntry, b: MeetingEntry) -> bool:
    if a.single_date != b.single_date:
        return False

    a_instant, b_instant = a.start == a.end, b.start == b.end
    if a_instant and b_instant:
        return a.start == b.start
    if a_instant:
        return b.start <= a.start < b.end
    if b_instant:
        return a.start <= b.start < a.end
    return a.start < b.end and b.start < a.end


def sections_conflict(a: Section, b: Section) -> bool:
    # Determines if any meeting of one section clashes with any meeting of the other.
    for ea in a.entries:
        for eb in b.entries:
            if entries_conflict(ea, eb):
                return True
    return False


def conflicts_with_any(section: Section, chosen: Sequence[Section]) -> bool:
    return any(sections_conflict(section, other) for other in chosen)


def generate_timetables(
    courses: Sequence[Course],
    limit: int = DEFAULT_LIMIT,
    should_stop: Optional[Callable[[], bool]] = None,
) -> List[List[Section]]:
    # Return up to `limit` clash-free timetables, in the order sections are listed per course.
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")

    # A course nobody can take means no timetable can exist.
    empty = [c.key for c in courses if not c.sections]
    if empty:
        logger.debug("No timetables possible, courses without sections: %s", empty)
        return []

    timetables: List[List[Section]] = []  # Final list of valid timetables.
    stack: List[Section] = []  # The current path (partial timetable) in the DFS traversal.
    aborted = False

    def dfs(i: int) -> bool:
        # Returns False once the search must halt at every level.
        nonlocal aborted
        if len(timetables) >= limit:
            return False
        if should_stop is not None and should_stop():
            aborted = True
            return False

        if i == len(courses):
            # Base case: a full assignment survived every check.
            timetables.append(list(stack))
            return len(timetables) < limit

        for sec in courses[i].sections:
            # Prune this branch if the section clashes with anything already chosen.
            if conflicts_with_any(sec, stack):
                continue
            stack.append(sec)
            keep_going = dfs(i + 1)
            stack.pop()
            if not keep_going:
                return False
        return True

    dfs(0)
    logger.debug(
        "Searched %d courses: %d timetables found (limit=%d, limit_hit=%s, aborted=%s)",
        len(courses), len(timetables), limit, len(timetables) >= limit, aborted,
    )
    return timetables


def find_unresolvable_pairs(courses: Sequence[Course]) -> List[Tuple[str, str]]:
    # Identifies pairs of courses for which no non-conflicting section combination exists.
    relevant = [c for c in courses if c.sections]
    bad_pairs: List[Tuple[str, str]] = []

    for i in range(len(relevant)):
        for j in range(i + 1, len(relevant)):
            a, b = relevant[i], relevant[j]
            # If every pairing of a's and b's sections conflicts, the pair is unresolvable.
            if not any(
                not sections_conflict(sa, sb)
                for sa in a.sections
                for sb in b.sections
            ):
                bad_pairs.append((a.key, b.key))
    return bad_pairs
