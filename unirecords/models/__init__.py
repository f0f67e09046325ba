from ..extensions import db
from .people import Student, Teacher
from .course import Course
from .enrollment import Enrollment, PASSING_GRADE
from .user import User

__all__ = [
    "Student", "Teacher", "Course", "Enrollment", "User",
    "PASSING_GRADE",
]
