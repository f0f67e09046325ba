from flask import request, jsonify
from flask_login import login_required
from unirecords.blueprints.auth.routes import role_required, current_principal
from ...forms import parse_int
from ...serializers import serialize_course, serialize_enrollment, serialize_student
from ...services import courses as course_service
from ...services import grading, people
from ...services.visibility import visible_enrollments
from . import bp

@bp.get("/courses")
@login_required
@role_required("student")
def my_courses():
    items = course_service.list_courses(current_principal())
    return jsonify([serialize_course(c) for c in items])

@bp.get("/courses/<int:course_id>")
@login_required
@role_required("student")
def course_view(course_id):
    course, years, e = grading.student_course_view(
        current_principal(), course_id, parse_int(request.args, "year"))
    return jsonify({
        "course": serialize_course(course),
        "year": e.year,
        "years": years,
        "enrollment": serialize_enrollment(e),
    })

@bp.get("/me/enrollments")
@login_required
@role_required("student")
def my_enrollments():
    items = visible_enrollments(current_principal()).all()
    return jsonify([serialize_enrollment(e) for e in items])

@bp.post("/enrollments/<int:enrollment_id>")
@login_required
@role_required("student")
def update_enrollment(enrollment_id):
    e = grading.update_own_enrollment(
        current_principal(), enrollment_id,
        project_url=request.form.get("project_url"),
        seminar_file=request.files.get("seminar_file"),
    )
    return jsonify(serialize_enrollment(e))

@bp.post("/profile-image")
@login_required
@role_required("student")
def profile_image():
    s = people.upload_profile_image(current_principal(), request.files.get("profile_image"))
    return jsonify(serialize_student(s))
