from datetime import date

import pytest

from conftest import upload
from unirecords.errors import Forbidden, NotFound, ValidationFailure
from unirecords.extensions import db, storage
from unirecords.services import grading
from unirecords.services.visibility import Principal


@pytest.fixture
def course_setup(make):
    teacher = make.teacher()
    course = make.course(first_teacher_id=teacher.id)
    active = make.enrollment(course, make.student(), exam_points=10, grade=5)
    finished = make.enrollment(course, make.student(), exam_points=40, grade=9,
                               finish_date=date(2024, 6, 30))
    return Principal("teacher", teacher_id=teacher.id), course, active, finished


def test_active_row_takes_every_value_including_nulls(course_setup):
    principal, course, active, _ = course_setup
    changed = grading.update_grades(principal, course.id, 2024, {
        active.id: {"exam_points": None, "seminar_points": 20, "project_points": 15,
                    "additional_points": 2, "grade": 7},
    })
    assert changed == 1
    db.session.expire_all()
    assert active.exam_points is None
    assert (active.seminar_points, active.project_points, active.additional_points) == (20, 15, 2)
    assert active.grade == 7
    assert active.is_active


def test_finished_row_is_left_untouched(course_setup):
    principal, course, _, finished = course_setup
    changed = grading.update_grades(principal, course.id, 2024, {
        finished.id: {"exam_points": 0, "grade": 5, "finish_date": None},
    })
    assert changed == 0
    db.session.expire_all()
    assert finished.exam_points == 40
    assert finished.grade == 9
    assert finished.finish_date == date(2024, 6, 30)


def test_teacher_can_finish_an_enrollment(course_setup):
    principal, course, active, _ = course_setup
    grading.update_grades(principal, course.id, 2024, {
        active.id: {"grade": 8, "finish_date": date(2024, 7, 1)},
    })
    db.session.expire_all()
    assert not active.is_active
    assert active.grade == 8


def test_rows_outside_course_or_year_are_ignored(course_setup, make):
    principal, course, _, _ = course_setup
    other = make.enrollment(make.course(first_teacher_id=principal.teacher_id), make.student(), grade=6)
    assert grading.update_grades(principal, course.id, 2024, {other.id: {"grade": 10}}) == 0
    assert grading.update_grades(principal, course.id, 2023, {}) == 0


def test_second_teacher_may_grade(make):
    first, second = make.teacher(), make.teacher()
    course = make.course(first_teacher_id=first.id, second_teacher_id=second.id)
    e = make.enrollment(course, make.student())
    assert grading.update_grades(Principal("teacher", teacher_id=second.id), course.id, 2024,
                                 {e.id: {"grade": 6}}) == 1


def test_other_teacher_is_forbidden(course_setup, make):
    _, course, active, _ = course_setup
    stranger = Principal("teacher", teacher_id=make.teacher().id)
    with pytest.raises(Forbidden):
        grading.update_grades(stranger, course.id, 2024, {active.id: {"grade": 10}})
    with pytest.raises(Forbidden):
        grading.update_grades(Principal("student", student_id=active.student_id),
                              course.id, 2024, {active.id: {"grade": 10}})


def test_unknown_course(course_setup):
    principal = course_setup[0]
    with pytest.raises(NotFound):
        grading.update_grades(principal, 999, 2024, {})


def test_roster_lists_years_and_rows(course_setup):
    principal, course, active, finished = course_setup
    _, years, rows = grading.teacher_roster(principal, course.id, 2026)
    assert years == [2026, 2024]
    assert rows == []
    _, years, rows = grading.teacher_roster(principal, course.id, 2024)
    assert years == [2024]
    assert {e.id for e in rows} == {active.id, finished.id}
    _, years, _ = grading.teacher_roster(principal, course.id, 2020)
    assert years == [2024, 2020]


def test_seminar_with_wrong_extension_is_rejected(make):
    course = make.course()
    s = make.student()
    e = make.enrollment(course, s, seminar_url="/uploads/seminars/old.pdf", project_url="old")
    me = Principal("student", student_id=s.id)
    with pytest.raises(ValidationFailure) as exc:
        grading.update_own_enrollment(me, e.id, project_url="new", seminar_file=upload("notes.txt"))
    assert exc.value.field == "seminar_file"
    db.session.expire_all()
    assert e.seminar_url == "/uploads/seminars/old.pdf"
    assert e.project_url == "old"


def test_pdf_upload_replaces_previous_artifact(make):
    course = make.course()
    s = make.student()
    e = make.enrollment(course, s, finish_date=date(2024, 6, 1))
    me = Principal("student", student_id=s.id)

    grading.update_own_enrollment(me, e.id, seminar_file=upload("first.PDF"))
    first = e.seminar_url
    assert first.startswith("/uploads/seminars/") and first.endswith(".pdf")
    assert storage.exists(first)

    grading.update_own_enrollment(me, e.id, project_url="  https://github.com/x/y  ",
                                  seminar_file=upload("second.docx"))
    db.session.expire_all()
    assert e.seminar_url != first
    assert e.seminar_url.endswith(".docx")
    assert not storage.exists(first)
    assert storage.exists(e.seminar_url)
    assert e.project_url == "https://github.com/x/y"


def test_blank_project_url_clears_it(make):
    s = make.student()
    e = make.enrollment(make.course(), s, project_url="https://old")
    grading.update_own_enrollment(Principal("student", student_id=s.id), e.id, project_url="   ")
    db.session.expire_all()
    assert e.project_url is None


def test_student_cannot_touch_someone_elses_enrollment(make):
    course = make.course()
    mine, theirs = make.student(), make.student()
    e = make.enrollment(course, theirs)
    with pytest.raises(NotFound):
        grading.update_own_enrollment(Principal("student", student_id=mine.id), e.id, project_url="x")


def test_student_course_view_falls_back_to_latest_year(make):
    course = make.course()
    s = make.student()
    e = make.enrollment(course, s, year=2023)
    me = Principal("student", student_id=s.id)
    _, years, found = grading.student_course_view(me, course.id, 2030)
    assert years == [2023]
    assert found.id == e.id
    with pytest.raises(NotFound):
        grading.student_course_view(me, make.course().id)
