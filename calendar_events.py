# calendar_events.py
# Turns the sections of a timetable into display-ready FullCalendar events.

from typing import Any, Dict, List, Sequence

from meeting_times import DAY_TAGS, MeetingEntry, Section

__all__ = ["DAY_NUMBERS", "course_color", "format_clock", "entry_events", "timetable_events", "hidden_days"]

# FullCalendar counts days from Sunday = 0. Sunday never shows up upstream.
DAY_NUMBERS = {"M": 1, "T": 2, "W": 3, "R": 4, "F": 5, "S": 6}
SATURDAY_SLOT = DAY_TAGS.index("S")

SATURATION = 50
LIGHTNESS = 50


def _to_int32(n: int) -> int:
    return (n + 2**31) % 2**32 - 2**31


def course_color(subject: str, course_code: str) -> str:
    # Same course, same color: hash "SUBJCODE" into a hue.
    h = 0
    for ch in f"{subject}{course_code}":
        h = ord(ch) + (_to_int32(_to_int32(h) << 5) - h)
    hue = h % 360
    return f"hsl({hue}, {SATURATION}%, {LIGHTNESS}%)"


def format_clock(minutes: int) -> str:
    # 1110 -> "18:30:00"
    return f"{minutes // 60:02d}:{minutes % 60:02d}:00"


def entry_events(entry: MeetingEntry, section: Section) -> List[Dict[str, Any]]:
    # One event per meeting day of the entry.
    color = course_color(section.subject, section.course_code)
    events: List[Dict[str, Any]] = []

    for slot in entry.meeting_days:
        day_number = DAY_NUMBERS.get(DAY_TAGS[slot])
        if day_number is None:
            continue

        event: Dict[str, Any] = {
            "title": f"{section.course_key}\n{entry.kind}",
            "daysOfWeek": [day_number],
            "backgroundColor": color,
            "borderColor": color,
            "extendedProps": {
                "instructor": entry.instructor,
                "type": entry.kind,
                "section": section.label,
            },
        }

        # A recurring start/end time would make the calendar repeat a dated
        # event every week, so dated events only get their date bounds.
        if not entry.is_dated:
            event["startTime"] = format_clock(entry.start)
            event["endTime"] = format_clock(entry.end)

        if entry.start_date is not None:
            event["start"] = entry.start_date.isoformat()
        if entry.end_date is not None:
            event["end"] = entry.end_date.isoformat()

        events.append(event)
    return events


def timetable_events(sections: Sequence[Section], include_exams: bool = True) -> List[Dict[str, Any]]:
    events: List[Dict[str, Any]] = []
    for section in sections:
        for entry in section.entries:
            if entry.is_exam and not include_exams:
                continue
            events.extend(entry_events(entry, section))
    return events


def hidden_days(sections: Sequence[Section], include_exams: bool = True) -> List[int]:
    # Sunday is always hidden; Saturday only when nothing shown meets on it.
    has_saturday = any(
        entry.days[SATURDAY_SLOT]
        for section in sections
        for entry in section.entries
        if include_exams or not entry.is_exam
    )
    return [0] if has_saturday else [0, 6]
