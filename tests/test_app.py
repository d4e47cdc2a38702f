import unittest

from app import app


def raw_section(section_id, days, time, course_code="100", schedule_type="Lecture"):
    return {
        "id": section_id,
        "subject": "CSC",
        "course_code": course_code,
        "section": section_id,
        "schedule": [{"type": schedule_type, "days": days, "time": time}],
    }


def raw_course(course_code, *sections):
    return {"subject": "CSC", "course_code": course_code, "sections": list(sections)}


class TimetablesApiTest(unittest.TestCase):

    def setUp(self):
        app.config.update(TESTING=True, TIMETABLE_LIMIT=999, MAX_TIMETABLE_LIMIT=5000)
        self.client = app.test_client()
        self.course_a = raw_course(
            "100",
            raw_section("A1", "M-W----", "0900-1000"),
            raw_section("A2", "M-W----", "1000-1100"),
        )
        self.course_b = raw_course("200", raw_section("B1", "M------", "0930-1000", course_code="200"))

    def test_health(self):
        resp = self.client.get("/api/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json(), {"status": "ok"})

    def test_generates_timetables(self):
        resp = self.client.post("/api/timetables", json={"courses": [self.course_a, self.course_b]})
        self.assertEqual(resp.status_code, 200)
        data = resp.get_json()
        self.assertEqual(data["count"], 1)
        timetable = data["timetables"][0]
        self.assertEqual(timetable["sections"], ["A2", "B1"])
        self.assertEqual(timetable["hiddenDays"], [0, 6])
        self.assertEqual(len(timetable["events"]), 3)

    def test_limit_is_clamped(self):
        app.config["MAX_TIMETABLE_LIMIT"] = 1
        free = raw_course("300", raw_section("C1", "-T-----", "0900-1000"), raw_section("C2", "--W----", "1200-1300"))
        resp = self.client.post("/api/timetables", json={"courses": [free], "limit": 50})
        self.assertEqual(resp.get_json()["count"], 1)

    def test_zero_limit(self):
        resp = self.client.post("/api/timetables", json={"courses": [self.course_a], "limit": 0})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json(), {"count": 0, "timetables": []})

    def test_rejects_bad_limit(self):
        for limit in (-1, "10", True, 2.5):
            with self.subTest(limit=limit):
                resp = self.client.post("/api/timetables", json={"courses": [self.course_a], "limit": limit})
                self.assertEqual(resp.status_code, 400)

    def test_rejects_empty_courses(self):
        resp = self.client.post("/api/timetables", json={"courses": []})
        self.assertEqual(resp.status_code, 400)
        resp = self.client.post("/api/timetables", data="not json")
        self.assertEqual(resp.status_code, 400)
        resp = self.client.post("/api/timetables", json=[{"subject": "CSC"}])
        self.assertEqual(resp.status_code, 400)
        self.assertIn("error", resp.get_json())

    def test_malformed_schedule(self):
        bad = raw_course("100", raw_section("A1", "M-W----", "9am-10am"))
        resp = self.client.post("/api/timetables", json={"courses": [bad]})
        self.assertEqual(resp.status_code, 400)
        data = resp.get_json()
        self.assertEqual(data["field"], "time")
        self.assertIn("error", data)

    def test_excludes_exams_from_events(self):
        course = raw_course("100", raw_section("A1", "M------", "0900-1000"))
        course["sections"][0]["schedule"].append(
            {"type": "Exam", "days": "---R---", "time": "1400-1700", "start": "2024-12-12", "end": "2024-12-12"}
        )
        with_exams = self.client.post("/api/timetables", json={"courses": [course]}).get_json()
        without = self.client.post("/api/timetables", json={"courses": [course], "includeExams": False}).get_json()
        self.assertEqual(len(with_exams["timetables"][0]["events"]), 2)
        self.assertEqual(len(without["timetables"][0]["events"]), 1)

    def test_reports_why_nothing_fits(self):
        clash = raw_course("200", raw_section("B1", "M------", "0930-1030", course_code="200"))
        only_a1 = raw_course("100", raw_section("A1", "M-W----", "0900-1000"))
        resp = self.client.post("/api/timetables", json={"courses": [only_a1, clash, raw_course("300")]})
        self.assertEqual(resp.status_code, 200)
        data = resp.get_json()
        self.assertEqual(data["error"], "No valid timetables found")
        self.assertEqual(data["emptyCourses"], ["CSC 300"])
        self.assertEqual(data["unresolvablePairs"], [["CSC 100", "CSC 200"]])

    def test_rejects_non_boolean_include_exams(self):
        for flag in ("false", 0, None):
            with self.subTest(flag=flag):
                resp = self.client.post("/api/timetables", json={"courses": [self.course_a], "includeExams": flag})
                self.assertEqual(resp.status_code, 400)

    def test_hidden_days_follow_displayed_entries(self):
        course = raw_course("100", raw_section("A1", "M------", "0900-1000"))
        course["sections"][0]["schedule"].append(
            {"type": "Exam", "days": "-----S-", "time": "0900-1200", "start": "2024-12-14", "end": "2024-12-14"}
        )
        shown = self.client.post("/api/timetables", json={"courses": [course]}).get_json()
        hidden = self.client.post("/api/timetables", json={"courses": [course], "includeExams": False}).get_json()
        self.assertEqual(shown["timetables"][0]["hiddenDays"], [0])
        self.assertEqual(hidden["timetables"][0]["hiddenDays"], [0, 6])
