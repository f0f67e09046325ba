"""Role-scoped access to courses and enrollments.

Every check takes a :class:`Principal` describing the caller. Administrators
see everything, teachers see the courses they teach (as first or second
teacher) and the enrollments on them, students see the courses they are
enrolled in and their own enrollments. Anything else is refused.
"""
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import false, or_

from ..errors import Forbidden, NotFound
from ..extensions import db
from ..models import Course, Enrollment, Student

ADMIN = "admin"
TEACHER = "teacher"
STUDENT = "student"


@dataclass(frozen=True)
class Principal:
    role: str
    teacher_id: Optional[int] = None
    student_id: Optional[int] = None

    @property
    def is_admin(self):
        return self.role == ADMIN

    @property
    def is_teacher(self):
        return self.role == TEACHER and self.teacher_id is not None

    @property
    def is_student(self):
        return self.role == STUDENT and self.student_id is not None


def principal_for(user):
    """Build the principal for a logged-in user (or anonymous user)."""
    if user is None or not getattr(user, "is_authenticated", False):
        return Principal(role="anonymous")
    return Principal(role=user.role, teacher_id=user.teacher_id, student_id=user.student_id)


def require_admin(principal):
    if not principal.is_admin:
        raise Forbidden("Administrator privileges required")


def require_teacher(principal):
    if not principal.is_teacher:
        raise Forbidden("Teacher account required")


def require_student(principal):
    if not principal.is_student:
        raise Forbidden("Student account required")


def teaches(teacher_id):
    return or_(Course.first_teacher_id == teacher_id, Course.second_teacher_id == teacher_id)


def visible_courses(principal):
    query = Course.query
    if principal.is_admin:
        return query
    if principal.is_teacher:
        return query.filter(teaches(principal.teacher_id))
    if principal.is_student:
        return query.filter(Course.enrollments.any(Enrollment.student_id == principal.student_id))
    return query.filter(false())


def visible_enrollments(principal):
    query = Enrollment.query
    if principal.is_admin:
        return query
    if principal.is_teacher:
        return query.join(Course, Enrollment.course_id == Course.id).filter(teaches(principal.teacher_id))
    if principal.is_student:
        return query.filter(Enrollment.student_id == principal.student_id)
    return query.filter(false())


def require_course_access(principal, course_id):
    course = db.session.get(Course, course_id)
    if course is None:
        raise NotFound("Course does not exist")
    if not visible_courses(principal).filter(Course.id == course_id).count():
        raise Forbidden("No access to this course")
    return course


def require_teaching(principal, course_id):
    require_teacher(principal)
    course = db.session.get(Course, course_id)
    if course is None:
        raise NotFound("Course does not exist")
    if not course.is_taught_by(principal.teacher_id):
        raise Forbidden("You do not teach this course")
    return course


def require_own_enrollment(principal, enrollment_id):
    require_student(principal)
    enrollment = db.session.get(Enrollment, enrollment_id)
    if enrollment is None or enrollment.student_id != principal.student_id:
        raise NotFound("Enrollment does not exist")
    return enrollment


def require_student_access(principal, student_id):
    student = db.session.get(Student, student_id)
    if student is None:
        raise NotFound("Student does not exist")
    if principal.is_admin:
        return student
    if principal.is_student and principal.student_id == student_id:
        return student
    if principal.is_teacher:
        taught = (visible_enrollments(principal)
                  .filter(Enrollment.student_id == student_id).count())
        if taught:
            return student
    raise Forbidden("No access to this student")
