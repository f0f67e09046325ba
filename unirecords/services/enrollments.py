"""Enrollment lifecycle: enrolling students for a period and finishing them.

An enrollment is *active* until it receives a finish date. Only one row may
exist per (course, student) pair, so year and semester describe the period
of that single row rather than keying it.
"""
import logging

from sqlalchemy.exc import IntegrityError

from ..errors import ConstraintViolation, NotFound, ValidationFailure
from ..extensions import db
from ..models import Course, Enrollment, Student
from .eligibility import eligible_student_ids, passed_student_ids
from .periods import normalize_semester
from .visibility import require_admin

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "semester", "year", "grade", "seminar_url", "project_url",
    "exam_points", "seminar_points", "project_points", "additional_points",
    "finish_date",
)


def _require_course(course_id):
    course = db.session.get(Course, course_id)
    if course is None:
        raise NotFound("Course does not exist")
    return course


def _period_filter(course_id, year, semester):
    return (Enrollment.course_id == course_id,
            Enrollment.year == year,
            Enrollment.semester == semester)


def enroll_students(principal, course_id, year, semester, student_ids):
    """Enroll the eligible subset of ``student_ids``; returns rows inserted."""
    require_admin(principal)
    semester = normalize_semester(semester)
    if not student_ids:
        return 0
    _require_course(course_id)

    eligible = eligible_student_ids(year, semester)
    passed = passed_student_ids(course_id)
    selected = [sid for sid in dict.fromkeys(student_ids)
                if sid in eligible and sid not in passed]
    if not selected:
        return 0

    in_period = set(db.session.execute(
        db.select(Enrollment.student_id).where(*_period_filter(course_id, year, semester))
    ).scalars())
    # any other row on the course blocks a second one
    elsewhere = set(db.session.execute(
        db.select(Enrollment.student_id).where(
            Enrollment.course_id == course_id,
            Enrollment.student_id.in_(selected),
        )
    ).scalars()) - in_period
    for sid in elsewhere:
        logger.debug("Student %s already holds an enrollment on course %s", sid, course_id)

    to_add = [
        Enrollment(course_id=course_id, student_id=sid, year=year, semester=semester)
        for sid in selected if sid not in in_period and sid not in elsewhere
    ]
    if not to_add:
        return 0

    db.session.add_all(to_add)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        logger.warning("Enrollment batch for course %s rejected by the store", course_id)
        raise ConstraintViolation("Student is already enrolled in this course")
    logger.info("Enrolled %d students in course %s for %s %s",
                len(to_add), course_id, semester, year)
    return len(to_add)


def deactivate_students(principal, course_id, year, semester, enrollment_ids, finish_date):
    """Set ``finish_date`` on the chosen enrollments of one period."""
    require_admin(principal)
    semester = normalize_semester(semester)
    if not enrollment_ids:
        return 0
    if finish_date is None:
        raise ValidationFailure("Finish date is required", field="finish_date")

    rows = (Enrollment.query
            .filter(*_period_filter(course_id, year, semester))
            .filter(Enrollment.id.in_(set(enrollment_ids)))
            .all())
    for e in rows:
        e.finish_date = finish_date
    db.session.commit()
    logger.info("Deactivated %d enrollments in course %s for %s %s",
                len(rows), course_id, semester, year)
    return len(rows)


def period_enrollments(course_id, year, semester):
    semester = normalize_semester(semester)
    return (Enrollment.query
            .join(Student, Enrollment.student_id == Student.id)
            .filter(*_period_filter(course_id, year, semester))
            .order_by(Student.last_name.asc(), Student.first_name.asc())
            .all())


def course_years(course_id, student_id=None):
    query = db.select(Enrollment.year).where(
        Enrollment.course_id == course_id, Enrollment.year.isnot(None))
    if student_id is not None:
        query = query.where(Enrollment.student_id == student_id)
    years = db.session.execute(query.distinct()).scalars()
    return sorted(years, reverse=True)


# ---------- administration ----------

def list_enrollments(principal):
    require_admin(principal)
    return (Enrollment.query
            .order_by(Enrollment.year.desc(), Enrollment.semester.asc(), Enrollment.id.asc())
            .all())


def get_enrollment(principal, enrollment_id):
    require_admin(principal)
    e = db.session.get(Enrollment, enrollment_id)
    if e is None:
        raise NotFound("Enrollment does not exist")
    return e


def _apply(enrollment, fields):
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationFailure(f"Unknown field {sorted(unknown)[0]}", field=sorted(unknown)[0])
    for name, value in fields.items():
        if name == "semester" and value is not None:
            value = normalize_semester(value)
        setattr(enrollment, name, value)


def create_enrollment(principal, course_id, student_id, **fields):
    require_admin(principal)
    _require_course(course_id)
    if db.session.get(Student, student_id) is None:
        raise NotFound("Student does not exist")
    exists = Enrollment.query.filter_by(course_id=course_id, student_id=student_id).count()
    if exists:
        logger.warning("Student %s already enrolled in course %s", student_id, course_id)
        raise ConstraintViolation("Student is already enrolled in this course")

    e = Enrollment(course_id=course_id, student_id=student_id)
    _apply(e, fields)
    db.session.add(e)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConstraintViolation("Student is already enrolled in this course")
    logger.info("Created enrollment %s (course %s, student %s)", e.id, course_id, student_id)
    return e


def update_enrollment(principal, enrollment_id, **fields):
    e = get_enrollment(principal, enrollment_id)
    _apply(e, fields)
    db.session.commit()
    logger.info("Updated enrollment %s", enrollment_id)
    return e


def delete_enrollment(principal, enrollment_id):
    e = get_enrollment(principal, enrollment_id)
    db.session.delete(e)
    db.session.commit()
    logger.info("Deleted enrollment %s", enrollment_id)
