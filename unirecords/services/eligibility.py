"""Which students may be enrolled in a course for an academic period.

A student qualifies for ``(year, semester)`` when they were enrolled at the
university in ``year`` and their current semester has the period's parity:
odd semesters study in Winter, even ones in Summer. Students without an
enrollment date or a current semester never qualify.
"""
from ..extensions import db
from ..models import Enrollment, Student, PASSING_GRADE
from .periods import wants_odd_semester


def eligible_student_ids(year, semester):
    parity = 1 if wants_odd_semester(semester) else 0
    rows = db.session.execute(
        db.select(Student.id).where(
            Student.enrollment_date.isnot(None),
            db.extract("year", Student.enrollment_date) == year,
            Student.current_semester.isnot(None),
            Student.current_semester % 2 == parity,
        )
    ).scalars()
    return set(rows)


def passed_student_ids(course_id):
    rows = db.session.execute(
        db.select(Enrollment.student_id).where(
            Enrollment.course_id == course_id,
            Enrollment.grade >= PASSING_GRADE,
        )
    ).scalars()
    return set(rows)


def eligible_candidates(course_id, year, semester):
    ids = eligible_student_ids(year, semester) - passed_student_ids(course_id)
    if not ids:
        return []
    return (Student.query
            .filter(Student.id.in_(ids))
            .order_by(Student.last_name.asc(), Student.first_name.asc())
            .all())
