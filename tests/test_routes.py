import io
from datetime import date

import pytest

from conftest import Factory
from unirecords.extensions import db
from unirecords.models import Enrollment


@pytest.fixture
def seeded(app):
    """Ids of a small world: one admin, one teacher with a course, two students."""
    with app.app_context():
        f = Factory()
        teacher = f.teacher()
        course = f.course(first_teacher_id=teacher.id)
        other_course = f.course()
        s1 = f.student(current_semester=1)
        s2 = f.student(current_semester=1)
        e1 = f.enrollment(course, s1)
        f.account("admin", "admin")
        f.account("prof", "teacher", teacher_id=teacher.id)
        f.account("s1", "student", student_id=s1.id)
        return {"teacher": teacher.id, "course": course.id, "other_course": other_course.id,
                "s1": s1.id, "s2": s2.id, "e1": e1.id}


def login(client, username, password="secret1"):
    resp = client.post("/auth/login", data={"username": username, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return resp


def test_login_failure_and_anonymous_access(client, seeded):
    resp = client.post("/auth/login", data={"username": "admin", "password": "nope"})
    assert resp.status_code == 401
    assert client.get("/admin/courses").status_code == 401


def test_me(client, seeded):
    login(client, "prof")
    body = client.get("/auth/me").get_json()
    assert body == {"username": "prof", "role": "teacher",
                    "teacher_id": seeded["teacher"], "student_id": None}


def test_admin_enroll_and_deactivate(app, client, seeded):
    login(client, "admin")
    cid = seeded["course"]
    resp = client.get(f"/admin/courses/{cid}/period", query_string={"year": 2024, "semester": "Zimski"})
    body = resp.get_json()
    assert body["semester"] == "Winter"
    assert {s["id"] for s in body["candidates"]} == {seeded["s1"], seeded["s2"]}
    assert body["selected_student_ids"] == [seeded["s1"]]

    data = {"year": "2024", "semester": "winter", "student_ids": [str(seeded["s1"]), str(seeded["s2"])]}
    assert client.post(f"/admin/courses/{cid}/enroll", data=data).get_json()["enrolled"] == 1
    assert client.post(f"/admin/courses/{cid}/enroll", data=data).get_json()["enrolled"] == 0

    resp = client.post(f"/admin/courses/{cid}/deactivate", data={
        "year": "2024", "semester": "Winter", "enrollment_ids": [str(seeded["e1"])],
        "finish_date": "2025-02-01"})
    assert resp.get_json()["deactivated"] == 1
    with app.app_context():
        assert db.session.get(Enrollment, seeded["e1"]).finish_date == date(2025, 2, 1)


def test_deactivate_with_bad_date(client, seeded):
    login(client, "admin")
    resp = client.post(f"/admin/courses/{seeded['course']}/deactivate", data={
        "year": "2024", "enrollment_ids": [str(seeded["e1"])], "finish_date": "01/02/2025"})
    assert resp.status_code == 400
    assert resp.get_json()["field"] == "finish_date"


def test_admin_routes_reject_other_roles(client, seeded):
    login(client, "prof")
    assert client.get("/admin/courses").status_code == 403
    assert client.post(f"/admin/courses/{seeded['course']}/enroll", data={}).status_code == 403


def test_teacher_grading_sheet(app, client, seeded):
    login(client, "prof")
    courses = client.get("/teacher/courses").get_json()
    assert [c["id"] for c in courses] == [seeded["course"]]

    eid = seeded["e1"]
    resp = client.post(f"/teacher/courses/{seeded['course']}/grades", data={
        "year": "2024", "enrollment_ids": [str(eid)],
        f"exam_points-{eid}": "45", f"grade-{eid}": "8", f"seminar_points-{eid}": ""})
    assert resp.get_json()["updated"] == 1
    with app.app_context():
        e = db.session.get(Enrollment, eid)
        assert (e.exam_points, e.grade, e.seminar_points) == (45, 8, None)

    sheet = client.get(f"/teacher/courses/{seeded['course']}", query_string={"year": 2024}).get_json()
    assert [r["id"] for r in sheet["rows"]] == [eid]


def test_teacher_cannot_grade_foreign_course(client, seeded):
    login(client, "prof")
    resp = client.post(f"/teacher/courses/{seeded['other_course']}/grades",
                       data={"year": "2024", "enrollment_ids": []})
    assert resp.status_code == 403


def test_student_views_and_uploads(app, client, seeded):
    login(client, "s1")
    assert [c["id"] for c in client.get("/student/courses").get_json()] == [seeded["course"]]
    view = client.get(f"/student/courses/{seeded['course']}").get_json()
    assert view["enrollment"]["id"] == seeded["e1"]
    assert client.get(f"/student/courses/{seeded['other_course']}").status_code == 404

    resp = client.post(f"/student/enrollments/{seeded['e1']}", data={
        "project_url": "https://github.com/s1/project",
        "seminar_file": (io.BytesIO(b"%PDF-1.4"), "seminar.pdf")},
        content_type="multipart/form-data")
    assert resp.status_code == 200
    assert resp.get_json()["seminar_url"].startswith("/uploads/seminars/")

    resp = client.post(f"/student/enrollments/{seeded['e1']}", data={
        "seminar_file": (io.BytesIO(b"text"), "seminar.txt")},
        content_type="multipart/form-data")
    assert resp.status_code == 400


def test_admin_people_crud(client, seeded):
    login(client, "admin")
    resp = client.post("/admin/students", data={
        "student_no": "230001", "first_name": "Nova", "last_name": "Studentka",
        "enrollment_date": "2023-10-01", "current_semester": "1",
        "username": "nova", "password": "secret1"})
    assert resp.status_code == 201
    student = resp.get_json()

    resp = client.post(f"/admin/students/{student['id']}/update",
                       data={"first_name": "Nove", "version": str(student["version"])})
    assert resp.get_json()["first_name"] == "Nove"
    resp = client.post(f"/admin/students/{student['id']}/update",
                       data={"first_name": "Stale", "version": str(student["version"])})
    assert resp.status_code == 409

    resp = client.post(f"/admin/teachers/{seeded['teacher']}/delete")
    assert resp.status_code == 200
    course = client.get(f"/admin/courses/{seeded['course']}").get_json()["course"]
    assert course["first_teacher_id"] is None
    assert client.get("/admin/teachers/999").status_code == 404
