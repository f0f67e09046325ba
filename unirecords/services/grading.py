"""Points, grades and submissions on enrollments.

Teachers grade the enrollments of their own courses; once an enrollment has a
finish date it is frozen for them. Students maintain the project link and the
seminar document of their own enrollment regardless of its state.
"""
import logging

from ..errors import NotFound, ValidationFailure
from ..extensions import db, storage
from ..models import Course, Enrollment, Student
from ..storage import SEMINAR_EXTENSIONS, extension_allowed
from .enrollments import course_years
from .visibility import require_own_enrollment, require_student, require_teaching

logger = logging.getLogger(__name__)

GRADED_FIELDS = (
    "exam_points", "seminar_points", "project_points", "additional_points",
    "grade", "finish_date",
)


def teacher_roster(principal, course_id, year):
    course = require_teaching(principal, course_id)
    rows = (Enrollment.query
            .join(Student, Enrollment.student_id == Student.id)
            .filter(Enrollment.course_id == course_id, Enrollment.year == year)
            .order_by(Student.student_no.asc())
            .all())
    years = course_years(course_id)
    if year not in years:
        years = sorted(years + [year], reverse=True)
    return course, years, rows


def update_grades(principal, course_id, year, rows):
    """Apply a grading sheet; ``rows`` maps enrollment ids to field values.

    Every field of :data:`GRADED_FIELDS` is overwritten, missing ones with
    ``None``. Finished enrollments are left untouched. Returns rows changed.
    """
    require_teaching(principal, course_id)
    if not rows:
        return 0

    enrollments = (Enrollment.query
                   .filter(Enrollment.course_id == course_id,
                           Enrollment.year == year,
                           Enrollment.id.in_(list(rows)))
                   .all())
    changed = 0
    for e in enrollments:
        if not e.is_active:
            logger.debug("Skipping finished enrollment %s", e.id)
            continue
        values = rows[e.id]
        for name in GRADED_FIELDS:
            setattr(e, name, values.get(name))
        changed += 1
    db.session.commit()
    logger.info("Teacher %s graded %d enrollments in course %s (%s)",
                principal.teacher_id, changed, course_id, year)
    return changed


def student_course_view(principal, course_id, year=None):
    require_student(principal)
    course = db.session.get(Course, course_id)
    if course is None:
        raise NotFound("Course does not exist")
    years = course_years(course_id, student_id=principal.student_id)
    if not years:
        raise NotFound("You are not enrolled in this course")
    if year not in years:
        year = years[0]
    e = Enrollment.query.filter_by(course_id=course_id, student_id=principal.student_id,
                                   year=year).first()
    if e is None:
        raise NotFound("You are not enrolled in this course")
    return course, years, e


def update_own_enrollment(principal, enrollment_id, project_url=None, seminar_file=None):
    e = require_own_enrollment(principal, enrollment_id)

    has_file = seminar_file is not None and bool(seminar_file.filename)
    if has_file and not extension_allowed(seminar_file.filename, SEMINAR_EXTENSIONS):
        raise ValidationFailure("Seminar file must be .doc, .docx or .pdf", field="seminar_file")

    project_url = (project_url or "").strip()
    if len(project_url) > 255:
        raise ValidationFailure("Project URL is too long", field="project_url")
    e.project_url = project_url or None

    if has_file:
        if e.seminar_url:
            storage.delete(e.seminar_url)
        e.seminar_url = storage.store(seminar_file, "seminars")
        logger.info("Student %s uploaded seminar for enrollment %s", principal.student_id, e.id)

    db.session.commit()
    return e
