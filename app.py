# app.py
# Provides a minimal Flask-based REST API around the timetable engine.

import logging

from flask import Flask, request, jsonify

from calendar_events import hidden_days, timetable_events
from log_config import setup_logging
from meeting_times import MalformedSchedule, parse_courses
from schedule_finder import DEFAULT_LIMIT, find_unresolvable_pairs, generate_timetables

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config.from_mapping(
    TIMETABLE_LIMIT=DEFAULT_LIMIT,
    MAX_TIMETABLE_LIMIT=5000,
    ENVIRONMENT="development",
)
# PLANNER_TIMETABLE_LIMIT=50 etc. override the defaults above.
app.config.from_prefixed_env("PLANNER")


@app.get("/api/health")
def api_health():
    return jsonify({"status": "ok"})


@app.post("/api/timetables")
def api_timetables():
    # Generates timetables from a JSON payload of courses and their candidate sections.
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return jsonify({"error": "request body must be a JSON object"}), 400
    raw_courses = body.get("courses", [])
    if not (isinstance(raw_courses, list) and raw_courses):
        return jsonify({"error": "courses must be a non-empty list"}), 400

    limit = body.get("limit", app.config["TIMETABLE_LIMIT"])
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
        return jsonify({"error": "limit must be a non-negative integer"}), 400
    limit = min(limit, app.config["MAX_TIMETABLE_LIMIT"])
    include_exams = body.get("includeExams", True)
    if not isinstance(include_exams, bool):
        return jsonify({"error": "includeExams must be a boolean"}), 400

    try:
        courses = parse_courses(raw_courses)
    except MalformedSchedule as exc:
        logger.warning("Rejected malformed schedule: %s", exc)
        return jsonify({"error": str(exc), "field": exc.field, "value": exc.value}), 400

    timetables = generate_timetables(courses, limit)
    if timetables or limit == 0:
        return jsonify({
            "count": len(timetables),
            "timetables": [
                {
                    "sections": [sec.section_id for sec in tt],
                    "events": timetable_events(tt, include_exams=include_exams),
                    "hiddenDays": hidden_days(tt, include_exams=include_exams),
                }
                for tt in timetables
            ],
        })

    # If no timetable is possible, say whether a course had no offerings at all
    # and which pairs of courses can never be taken together.
    return jsonify({
        "error": "No valid timetables found",
        "emptyCourses": [c.key for c in courses if not c.sections],
        "unresolvablePairs": [list(pair) for pair in find_unresolvable_pairs(courses)],
    })


if __name__ == "__main__":
    setup_logging(environment=app.config["ENVIRONMENT"])
    app.run(debug=app.config["ENVIRONMENT"] != "production")
