from datetime import date
from flask import request, jsonify
from flask_login import login_required
from unirecords.blueprints.auth.routes import role_required, current_principal
from ...forms import clean_str, parse_int, parse_date, parse_id_list, submitted
from ...serializers import (serialize_course, serialize_enrollment,
                            serialize_student, serialize_teacher)
from ...services import courses as course_service
from ...services import enrollments as enrollment_service
from ...services import people
from ...services.eligibility import eligible_candidates
from ...services.periods import normalize_semester
from ...services.visibility import require_student_access
from . import bp

COURSE_PARSERS = {
    "title": clean_str, "credits": parse_int, "semester": parse_int,
    "programme": clean_str, "education_level": clean_str,
    "first_teacher_id": parse_int, "second_teacher_id": parse_int,
}
STUDENT_PARSERS = {
    "student_no": clean_str, "first_name": clean_str, "last_name": clean_str,
    "enrollment_date": parse_date, "acquired_credits": parse_int,
    "current_semester": parse_int, "education_level": clean_str,
}
TEACHER_PARSERS = {
    "first_name": clean_str, "last_name": clean_str, "degree": clean_str,
    "academic_rank": clean_str, "office_number": clean_str, "hire_date": parse_date,
}
ENROLLMENT_PARSERS = {
    "semester": clean_str, "year": parse_int, "grade": parse_int,
    "seminar_url": clean_str, "project_url": clean_str,
    "exam_points": parse_int, "seminar_points": parse_int,
    "project_points": parse_int, "additional_points": parse_int,
    "finish_date": parse_date,
}

def _period_args(source):
    year = parse_int(source, "year") or date.today().year
    semester = normalize_semester(source.get("semester"))
    return year, semester

# ---------- Courses ----------
@bp.get("/courses")
@login_required
@role_required("admin")
def courses():
    items = course_service.list_courses(
        current_principal(),
        title=clean_str(request.args, "title"),
        semester=parse_int(request.args, "semester"),
        programme=clean_str(request.args, "programme"),
        teacher_id=parse_int(request.args, "teacher_id"),
    )
    return jsonify([serialize_course(c) for c in items])

@bp.post("/courses")
@login_required
@role_required("admin")
def create_course():
    c = course_service.create_course(current_principal(), **submitted(request.form, COURSE_PARSERS))
    return jsonify(serialize_course(c)), 201

@bp.get("/courses/<int:cid>")
@login_required
@role_required("admin")
def course_detail(cid):
    c, enrollments = course_service.get_course(current_principal(), cid)
    return jsonify({"course": serialize_course(c),
                    "enrollments": [serialize_enrollment(e) for e in enrollments]})

@bp.post("/courses/<int:cid>/update")
@login_required
@role_required("admin")
def update_course(cid):
    c = course_service.update_course(current_principal(), cid, **submitted(request.form, COURSE_PARSERS))
    return jsonify(serialize_course(c))

@bp.post("/courses/<int:cid>/delete")
@login_required
@role_required("admin")
def delete_course(cid):
    course_service.delete_course(current_principal(), cid)
    return jsonify({"status": "deleted"})

@bp.get("/courses/<int:cid>/period")
@login_required
@role_required("admin")
def course_period(cid):
    c, _ = course_service.get_course(current_principal(), cid)
    year, semester = _period_args(request.args)
    current = enrollment_service.period_enrollments(cid, year, semester)
    return jsonify({
        "course": serialize_course(c),
        "year": year,
        "semester": semester,
        "candidates": [serialize_student(s) for s in eligible_candidates(cid, year, semester)],
        "enrollments": [serialize_enrollment(e) for e in current],
        "selected_student_ids": [e.student_id for e in current],
    })

@bp.post("/courses/<int:cid>/enroll")
@login_required
@role_required("admin")
def enroll_students(cid):
    year, semester = _period_args(request.form)
    added = enrollment_service.enroll_students(
        current_principal(), cid, year, semester, parse_id_list(request.form, "student_ids"))
    return jsonify({"enrolled": added, "year": year, "semester": semester})

@bp.post("/courses/<int:cid>/deactivate")
@login_required
@role_required("admin")
def deactivate_students(cid):
    year, semester = _period_args(request.form)
    ids = parse_id_list(request.form, "enrollment_ids")
    finish = parse_date(request.form, "finish_date", required=bool(ids))
    changed = enrollment_service.deactivate_students(
        current_principal(), cid, year, semester, ids, finish)
    return jsonify({"deactivated": changed, "year": year, "semester": semester})

# ---------- Students ----------
@bp.get("/students")
@login_required
@role_required("admin")
def students():
    items = people.list_students(
        current_principal(),
        index=clean_str(request.args, "index"),
        first_name=clean_str(request.args, "first_name"),
        last_name=clean_str(request.args, "last_name"),
        course_id=parse_int(request.args, "course_id"),
    )
    return jsonify([serialize_student(s) for s in items])

@bp.post("/students")
@login_required
@role_required("admin")
def create_student():
    s = people.create_student(
        current_principal(),
        submitted(request.form, STUDENT_PARSERS),
        username=request.form.get("username"),
        password=request.form.get("password"),
        profile_image=request.files.get("profile_image"),
    )
    return jsonify(serialize_student(s)), 201

@bp.get("/students/<int:sid>")
@login_required
@role_required("admin")
def student_detail(sid):
    return jsonify(serialize_student(require_student_access(current_principal(), sid)))

@bp.post("/students/<int:sid>/update")
@login_required
@role_required("admin")
def update_student(sid):
    s = people.update_student(
        current_principal(), sid,
        submitted(request.form, STUDENT_PARSERS),
        version=parse_int(request.form, "version"),
        profile_image=request.files.get("profile_image"),
    )
    return jsonify(serialize_student(s))

@bp.post("/students/<int:sid>/delete")
@login_required
@role_required("admin")
def delete_student(sid):
    people.delete_student(current_principal(), sid)
    return jsonify({"status": "deleted"})

# ---------- Teachers ----------
@bp.get("/teachers")
@login_required
@role_required("admin")
def teachers():
    items = people.list_teachers(
        current_principal(),
        first_name=clean_str(request.args, "first_name"),
        last_name=clean_str(request.args, "last_name"),
        degree=clean_str(request.args, "degree"),
        academic_rank=clean_str(request.args, "academic_rank"),
    )
    return jsonify([serialize_teacher(t) for t in items])

@bp.post("/teachers")
@login_required
@role_required("admin")
def create_teacher():
    t = people.create_teacher(
        current_principal(),
        submitted(request.form, TEACHER_PARSERS),
        username=request.form.get("username"),
        password=request.form.get("password"),
        profile_image=request.files.get("profile_image"),
    )
    return jsonify(serialize_teacher(t)), 201

@bp.get("/teachers/<int:tid>")
@login_required
@role_required("admin")
def teacher_detail(tid):
    return jsonify(serialize_teacher(people.get_teacher(tid)))

@bp.post("/teachers/<int:tid>/update")
@login_required
@role_required("admin")
def update_teacher(tid):
    t = people.update_teacher(
        current_principal(), tid,
        submitted(request.form, TEACHER_PARSERS),
        version=parse_int(request.form, "version"),
        profile_image=request.files.get("profile_image"),
    )
    return jsonify(serialize_teacher(t))

@bp.post("/teachers/<int:tid>/delete")
@login_required
@role_required("admin")
def delete_teacher(tid):
    people.delete_teacher(current_principal(), tid)
    return jsonify({"status": "deleted"})

# ---------- Enrollments ----------
@bp.get("/enrollments")
@login_required
@role_required("admin")
def enrollments():
    items = enrollment_service.list_enrollments(current_principal())
    return jsonify([serialize_enrollment(e) for e in items])

@bp.post("/enrollments")
@login_required
@role_required("admin")
def create_enrollment():
    e = enrollment_service.create_enrollment(
        current_principal(),
        parse_int(request.form, "course_id", required=True),
        parse_int(request.form, "student_id", required=True),
        **submitted(request.form, ENROLLMENT_PARSERS),
    )
    return jsonify(serialize_enrollment(e)), 201

@bp.get("/enrollments/<int:eid>")
@login_required
@role_required("admin")
def enrollment_detail(eid):
    return jsonify(serialize_enrollment(enrollment_service.get_enrollment(current_principal(), eid)))

@bp.post("/enrollments/<int:eid>/update")
@login_required
@role_required("admin")
def update_enrollment(eid):
    e = enrollment_service.update_enrollment(
        current_principal(), eid, **submitted(request.form, ENROLLMENT_PARSERS))
    return jsonify(serialize_enrollment(e))

@bp.post("/enrollments/<int:eid>/delete")
@login_required
@role_required("admin")
def delete_enrollment(eid):
    enrollment_service.delete_enrollment(current_principal(), eid)
    return jsonify({"status": "deleted"})
