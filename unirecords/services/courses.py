import logging

from ..errors import NotFound, ValidationFailure
from ..extensions import db
from ..models import Course, Enrollment, Student, Teacher
from .visibility import require_admin, require_course_access, teaches, visible_courses

logger = logging.getLogger(__name__)

COURSE_FIELDS = (
    "title", "credits", "semester", "programme", "education_level",
    "first_teacher_id", "second_teacher_id",
)


def list_courses(principal, title=None, semester=None, programme=None, teacher_id=None):
    q = visible_courses(principal)
    if title:
        q = q.filter(Course.title.ilike(f"%{title}%"))
    if semester:
        q = q.filter(Course.semester == semester)
    if programme:
        q = q.filter(Course.programme.ilike(f"%{programme}%"))
    if teacher_id:
        q = q.filter(teaches(teacher_id))
    return q.order_by(Course.semester.asc(), Course.title.asc()).all()


def get_course(principal, course_id):
    course = require_course_access(principal, course_id)
    enrollments = (Enrollment.query
                   .join(Student, Enrollment.student_id == Student.id)
                   .filter(Enrollment.course_id == course_id)
                   .order_by(Enrollment.year.desc(), Enrollment.semester.asc(),
                             Student.last_name.asc(), Student.first_name.asc())
                   .all())
    return course, enrollments


def _validate(fields):
    unknown = set(fields) - set(COURSE_FIELDS)
    if unknown:
        name = sorted(unknown)[0]
        raise ValidationFailure(f"Unknown field {name}", field=name)
    if "title" in fields and not (fields["title"] or "").strip():
        raise ValidationFailure("Title is required", field="title")
    for key in ("credits", "semester"):
        if key in fields and fields[key] is None:
            raise ValidationFailure(f"{key.capitalize()} is required", field=key)
    for key in ("first_teacher_id", "second_teacher_id"):
        tid = fields.get(key)
        if tid is not None and db.session.get(Teacher, tid) is None:
            raise NotFound("Teacher does not exist")


def create_course(principal, **fields):
    require_admin(principal)
    fields = {k: v for k, v in fields.items() if v is not None or k.endswith("_teacher_id")}
    if "title" not in fields:
        raise ValidationFailure("Title is required", field="title")
    _validate(fields)
    c = Course(**fields)
    db.session.add(c)
    db.session.commit()
    logger.info("Created course %s (%s)", c.id, c.title)
    return c


def update_course(principal, course_id, **fields):
    require_admin(principal)
    c = db.session.get(Course, course_id)
    if c is None:
        raise NotFound("Course does not exist")
    _validate(fields)
    for name, value in fields.items():
        setattr(c, name, value)
    db.session.commit()
    logger.info("Updated course %s", course_id)
    return c


def delete_course(principal, course_id):
    require_admin(principal)
    c = db.session.get(Course, course_id)
    if c is None:
        raise NotFound("Course does not exist")
    db.session.delete(c)
    db.session.commit()
    logger.info("Deleted course %s", course_id)
