# meeting_times.py
# Decodes upstream section schedules into immutable meeting entries, once, at ingestion.

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

__all__ = [
    "DAY_TAGS", "MalformedSchedule", "MeetingEntry", "Section", "Course",
    "parse_days", "parse_clock", "parse_time_range", "parse_date",
    "parse_entry", "parse_section", "parse_course", "parse_courses",
]

DAY_TAGS = "MTWRFSU"  # Monday..Sunday, one slot per weekday.
NO_MEETING = "-"
EXAM_KIND = "exam"


class MalformedSchedule(ValueError):
    # Raised when an upstream day pattern, time or date cannot be decoded.

    def __init__(self, field: str, value: Any, reason: str):
        super().__init__(f"{field}: {reason} (got {value!r})")
        self.field = field
        self.value = value
        self.reason = reason


@dataclass(frozen=True)
class MeetingEntry:
    days: Tuple[bool, ...]
    start: int  # Minutes since midnight.
    end: int
    kind: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    room: str = ""
    instructor: str = ""
    entry_id: str = ""

    @property
    def single_date(self) -> Optional[date]:
        # A dated one-off event (e.g. a final exam) rather than a weekly block.
        if self.start_date is not None and self.start_date == self.end_date:
            return self.start_date
        return None

    @property
    def is_dated(self) -> bool:
        return self.single_date is not None

    @property
    def is_exam(self) -> bool:
        return self.kind.strip().lower() == EXAM_KIND

    @property
    def meeting_days(self) -> List[int]:
        return [i for i, meets in enumerate(self.days) if meets]


@dataclass(frozen=True)
class Section:
    section_id: str
    subject: str
    course_code: str
    title: str = ""
    label: str = ""
    crn: Optional[int] = None
    entries: Tuple[MeetingEntry, ...] = ()

    @property
    def course_key(self) -> str:
        return f"{self.subject} {self.course_code}"


@dataclass(frozen=True)
class Course:
    subject: str
    course_code: str
    sections: Tuple[Section, ...] = ()

    @property
    def key(self) -> str:
        return f"{self.subject} {self.course_code}"


def parse_days(pattern: str) -> Tuple[bool, ...]:
    # "M-W----" -> (True, False, True, False, False, False, False)
    if not isinstance(pattern, str) or len(pattern) != len(DAY_TAGS):
        raise MalformedSchedule("days", pattern, f"expected {len(DAY_TAGS)} day slots")

    slots = []
    for tag, ch in zip(DAY_TAGS, pattern):
        if ch == NO_MEETING:
            slots.append(False)
        elif ch.upper() == tag:
            slots.append(True)
        else:
            raise MalformedSchedule("days", pattern, f"slot for {tag} holds {ch!r}")
    return tuple(slots)


def parse_clock(hhmm: str) -> int:
    # "1830" -> 1110 minutes since midnight.
    if not (isinstance(hhmm, str) and len(hhmm) == 4 and hhmm.isdigit()):
        raise MalformedSchedule("time", hhmm, "expected a 4-digit HHMM clock")

    hours, minutes = int(hhmm[:2]), int(hhmm[2:])
    if hours > 24 or minutes > 59 or (hours == 24 and minutes):
        raise MalformedSchedule("time", hhmm, "clock out of range")
    return hours * 60 + minutes


def parse_time_range(text: str) -> Tuple[int, int]:
    # "1830-2120" -> (1110, 1280)
    if not isinstance(text, str):
        raise MalformedSchedule("time", text, "expected an HHMM-HHMM string")

    parts = text.strip().split("-")
    if len(parts) != 2:
        raise MalformedSchedule("time", text, "expected an HHMM-HHMM range")

    start, end = parse_clock(parts[0].strip()), parse_clock(parts[1].strip())
    if start > end:
        raise MalformedSchedule("time", text, "range ends before it starts")
    return start, end


def parse_date(value: Any, field: str) -> Optional[date]:
    if value in (None, ""):
        return None
    if not isinstance(value, str):
        raise MalformedSchedule(field, value, "expected an ISO date string")
    try:
        return datetime.fromisoformat(value.strip()).date()
    except ValueError:
        raise MalformedSchedule(field, value, "not an ISO date") from None


def parse_entry(raw: Dict[str, Any]) -> MeetingEntry:
    # One row of a section's weekly schedule.
    if not isinstance(raw, dict):
        raise MalformedSchedule("schedule", raw, "expected an object")

    days = parse_days(raw.get("days"))
    time_text = raw.get("time") or ""

    # TBA / asynchronous rows carry no time; they are only valid with no meeting day.
    if isinstance(time_text, str) and not time_text.strip():
        if any(days):
            raise MalformedSchedule("time", time_text, "meeting days given without a time")
        start, end = 0, 0
    else:
        start, end = parse_time_range(time_text)

    return MeetingEntry(
        days=days,
        start=start,
        end=end,
        kind=str(raw.get("type") or ""),
        start_date=parse_date(raw.get("start"), "start"),
        end_date=parse_date(raw.get("end"), "end"),
        room=str(raw.get("room") or ""),
        instructor=str(raw.get("instructor") or ""),
        entry_id=str(raw.get("id") or ""),
    )


def _required(raw: Dict[str, Any], key: str) -> str:
    value = raw.get(key)
    if value is None or str(value).strip() == "":
        raise MalformedSchedule(key, value, "required field is missing")
    return str(value).strip()


def parse_section(raw: Dict[str, Any]) -> Section:
    if not isinstance(raw, dict):
        raise MalformedSchedule("section", raw, "expected an object")

    schedule = raw.get("schedule") or []
    if not isinstance(schedule, list):
        raise MalformedSchedule("schedule", schedule, "expected a list")

    crn = raw.get("crn")
    if crn is not None and not isinstance(crn, int):
        raise MalformedSchedule("crn", crn, "expected an integer")

    subject = _required(raw, "subject")
    course_code = _required(raw, "course_code")
    # Fall back to the CRN when the upstream id is absent.
    section_id = str(raw.get("id") or crn or "").strip()
    if not section_id:
        raise MalformedSchedule("id", raw.get("id"), "section has neither id nor crn")

    return Section(
        section_id=section_id,
        subject=subject,
        course_code=course_code,
        title=str(raw.get("abbreviated_title") or ""),
        label=str(raw.get("section") or ""),
        crn=crn,
        entries=tuple(parse_entry(row) for row in schedule),
    )


def parse_course(raw: Dict[str, Any]) -> Course:
    if not isinstance(raw, dict):
        raise MalformedSchedule("course", raw, "expected an object")

    sections = raw.get("sections") or []
    if not isinstance(sections, list):
        raise MalformedSchedule("sections", sections, "expected a list")

    return Course(
        subject=_required(raw, "subject"),
        course_code=_required(raw, "course_code"),
        sections=tuple(parse_section(s) for s in sections),
    )


def parse_courses(raw_courses: List[Dict[str, Any]]) -> List[Course]:
    if not isinstance(raw_courses, list):
        raise MalformedSchedule("courses", raw_courses, "expected a list")
    return [parse_course(c) for c in raw_courses]
