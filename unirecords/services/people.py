"""Students and teachers together with their login accounts.

Both entities carry a version counter: an edit made against a stale copy is
refused with :class:`ConcurrencyConflict` instead of silently overwriting.
"""
import logging

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from ..errors import ConcurrencyConflict, ConstraintViolation, Forbidden, NotFound, ValidationFailure
from ..extensions import db, storage
from ..models import Course, Enrollment, Student, Teacher, User
from ..storage import IMAGE_EXTENSIONS, extension_allowed
from .visibility import require_admin

logger = logging.getLogger(__name__)

STUDENT_FIELDS = (
    "student_no", "first_name", "last_name", "enrollment_date",
    "acquired_credits", "current_semester", "education_level",
)
TEACHER_FIELDS = (
    "first_name", "last_name", "degree", "academic_rank", "office_number", "hire_date",
)
MIN_PASSWORD_LENGTH = 6


def _check_fields(fields, allowed, required=()):
    for name in fields:
        if name not in allowed:
            raise ValidationFailure(f"Unknown field {name}", field=name)
    for name in required:
        if name in fields and not (fields[name] or "").strip():
            raise ValidationFailure(f"{name.replace('_', ' ').capitalize()} is required", field=name)


def _check_image(image):
    if image is None or not image.filename:
        return None
    if not extension_allowed(image.filename, IMAGE_EXTENSIONS):
        raise ValidationFailure("Only image files (.jpg, .jpeg, .png, .webp) are allowed.",
                                field="profile_image")
    return image


def _check_account(username, password):
    username = (username or "").strip()
    if not username:
        raise ValidationFailure("Username is required", field="username")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationFailure(f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                                field="password")
    if User.query.filter_by(username=username).count():
        raise ConstraintViolation("This username is already in use.", field="username")
    return username


def _save_versioned(entity, label, new_image=None, old_image=None):
    """Commit a versioned edit; the replaced image is removed only once the row is saved."""
    entity_id = entity.id
    try:
        db.session.commit()
    except StaleDataError:
        db.session.rollback()
        storage.delete(new_image)
        if db.session.get(type(entity), entity_id) is None:
            raise NotFound(f"{label} does not exist")
        raise ConcurrencyConflict(f"{label} was changed by someone else; reload and retry")
    except IntegrityError:
        db.session.rollback()
        storage.delete(new_image)
        raise ConstraintViolation(f"{label} conflicts with an existing record")
    if new_image:
        storage.delete(old_image)


def _check_version(entity, version, label):
    if version is not None and version != entity.version_id:
        raise ConcurrencyConflict(f"{label} was changed by someone else; reload and retry")


# ---------- Students ----------

def list_students(principal, index=None, first_name=None, last_name=None, course_id=None):
    require_admin(principal)
    q = Student.query
    if index:
        q = q.filter(Student.student_no.contains(index))
    if first_name:
        q = q.filter(Student.first_name.ilike(f"%{first_name}%"))
    if last_name:
        q = q.filter(Student.last_name.ilike(f"%{last_name}%"))
    if course_id:
        q = q.filter(Student.enrollments.any(Enrollment.course_id == course_id))
    return q.order_by(Student.student_no.asc()).all()


def create_student(principal, fields, username, password, profile_image=None):
    require_admin(principal)
    _check_fields(fields, STUDENT_FIELDS)
    for name in ("student_no", "first_name", "last_name"):
        if not (fields.get(name) or "").strip():
            raise ValidationFailure(f"{name.replace('_', ' ').capitalize()} is required", field=name)
    if Student.query.filter_by(student_no=fields["student_no"]).count():
        logger.warning("Duplicate student index %s", fields["student_no"])
        raise ConstraintViolation("Student index already exists.", field="student_no")
    username = _check_account(username, password)
    image = _check_image(profile_image)

    s = Student(**fields)
    if image:
        s.profile_image_path = storage.store(image, "students")
    u = User(username=username, role="student", student=s)
    u.set_password(password)
    db.session.add_all([s, u])
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        storage.delete(s.profile_image_path)
        raise ConstraintViolation("Student index and username must be unique")
    logger.info("Created student %s: %s", s.id, s.display_name)
    return s


def update_student(principal, student_id, fields, version=None, profile_image=None):
    require_admin(principal)
    s = db.session.get(Student, student_id)
    if s is None:
        raise NotFound("Student does not exist")
    _check_version(s, version, "Student")
    _check_fields(fields, STUDENT_FIELDS, required=("student_no", "first_name", "last_name"))
    new_no = fields.get("student_no")
    if new_no and new_no != s.student_no and Student.query.filter_by(student_no=new_no).count():
        raise ConstraintViolation("Student index already exists.", field="student_no")
    image = _check_image(profile_image)

    for name, value in fields.items():
        setattr(s, name, value)
    old_image = new_image = None
    if image:
        old_image, new_image = s.profile_image_path, storage.store(image, "students")
        s.profile_image_path = new_image
    _save_versioned(s, "Student", new_image, old_image)
    logger.info("Updated student %s", student_id)
    return s


def delete_student(principal, student_id):
    require_admin(principal)
    s = db.session.get(Student, student_id)
    if s is None:
        raise NotFound("Student does not exist")
    image = s.profile_image_path
    for u in User.query.filter_by(student_id=s.id).all():
        db.session.delete(u)
    db.session.delete(s)
    db.session.commit()
    storage.delete(image)
    logger.info("Deleted student %s", student_id)


# ---------- Teachers ----------

def list_teachers(principal, first_name=None, last_name=None, degree=None, academic_rank=None):
    require_admin(principal)
    q = Teacher.query
    if first_name:
        q = q.filter(Teacher.first_name.ilike(f"%{first_name}%"))
    if last_name:
        q = q.filter(Teacher.last_name.ilike(f"%{last_name}%"))
    if degree:
        q = q.filter(Teacher.degree.ilike(f"%{degree}%"))
    if academic_rank:
        q = q.filter(Teacher.academic_rank.ilike(f"%{academic_rank}%"))
    return q.order_by(Teacher.last_name.asc(), Teacher.first_name.asc()).all()


def get_teacher(teacher_id):
    t = db.session.get(Teacher, teacher_id)
    if t is None:
        raise NotFound("Teacher does not exist")
    return t


def create_teacher(principal, fields, username, password, profile_image=None):
    require_admin(principal)
    _check_fields(fields, TEACHER_FIELDS)
    for name in ("first_name", "last_name"):
        if not (fields.get(name) or "").strip():
            raise ValidationFailure(f"{name.replace('_', ' ').capitalize()} is required", field=name)
    username = _check_account(username, password)
    image = _check_image(profile_image)

    t = Teacher(**fields)
    if image:
        t.profile_image_path = storage.store(image, "teachers")
    u = User(username=username, role="teacher", teacher=t)
    u.set_password(password)
    db.session.add_all([t, u])
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        storage.delete(t.profile_image_path)
        raise ConstraintViolation("Username must be unique", field="username")
    logger.info("Created teacher %s (%s)", t.id, t.full_name)
    return t


def update_teacher(principal, teacher_id, fields, version=None, profile_image=None):
    require_admin(principal)
    t = get_teacher(teacher_id)
    _check_version(t, version, "Teacher")
    _check_fields(fields, TEACHER_FIELDS, required=("first_name", "last_name"))
    image = _check_image(profile_image)

    for name, value in fields.items():
        setattr(t, name, value)
    old_image = new_image = None
    if image:
        old_image, new_image = t.profile_image_path, storage.store(image, "teachers")
        t.profile_image_path = new_image
    _save_versioned(t, "Teacher", new_image, old_image)
    logger.info("Updated teacher %s", teacher_id)
    return t


def delete_teacher(principal, teacher_id):
    """Detach the teacher from its courses, then remove it and its account."""
    require_admin(principal)
    t = get_teacher(teacher_id)
    image = t.profile_image_path
    courses = Course.query.filter(or_(Course.first_teacher_id == teacher_id,
                                      Course.second_teacher_id == teacher_id)).all()
    for c in courses:
        if c.first_teacher_id == teacher_id:
            c.first_teacher_id = None
        if c.second_teacher_id == teacher_id:
            c.second_teacher_id = None
    for u in User.query.filter_by(teacher_id=t.id).all():
        db.session.delete(u)
    db.session.delete(t)
    db.session.commit()
    storage.delete(image)
    logger.info("Deleted teacher %s, detached from %d courses", teacher_id, len(courses))


# ---------- self service ----------

def upload_profile_image(principal, image):
    if image is None or not image.filename:
        raise ValidationFailure("Please select an image first.", field="profile_image")
    _check_image(image)
    if principal.is_student:
        person, folder = db.session.get(Student, principal.student_id), "students"
    elif principal.is_teacher:
        person, folder = db.session.get(Teacher, principal.teacher_id), "teachers"
    else:
        raise Forbidden("Only students and teachers have profile images")
    if person is None:
        raise NotFound("Profile does not exist")

    old_image, new_image = person.profile_image_path, storage.store(image, folder)
    person.profile_image_path = new_image
    _save_versioned(person, "Profile", new_image, old_image)
    logger.info("Updated profile image of %s %s", principal.role, person.id)
    return person
