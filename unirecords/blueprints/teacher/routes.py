from datetime import date
from flask import request, jsonify
from flask_login import login_required
from unirecords.blueprints.auth.routes import role_required, current_principal
from ...forms import parse_int, parse_date, parse_id_list
from ...serializers import serialize_course, serialize_enrollment, serialize_teacher
from ...services import courses as course_service
from ...services import grading, people
from . import bp

POINT_FIELDS = ("exam_points", "seminar_points", "project_points", "additional_points", "grade")

def _sheet_rows(form):
    # one row per enrollment: "<field>-<enrollment id>" keys, blank clears
    rows = {}
    for eid in parse_id_list(form, "enrollment_ids"):
        row = {name: parse_int(form, f"{name}-{eid}") for name in POINT_FIELDS}
        row["finish_date"] = parse_date(form, f"finish_date-{eid}")
        rows[eid] = row
    return rows

@bp.get("/courses")
@login_required
@role_required("teacher")
def my_courses():
    items = course_service.list_courses(current_principal())
    return jsonify([serialize_course(c) for c in items])

@bp.get("/courses/<int:course_id>")
@login_required
@role_required("teacher")
def course_sheet(course_id):
    year = parse_int(request.args, "year") or date.today().year
    course, years, rows = grading.teacher_roster(current_principal(), course_id, year)
    return jsonify({
        "course": serialize_course(course),
        "year": year,
        "years": years,
        "rows": [serialize_enrollment(e) for e in rows],
    })

@bp.post("/courses/<int:course_id>/grades")
@login_required
@role_required("teacher")
def update_grades(course_id):
    year = parse_int(request.form, "year", required=True)
    changed = grading.update_grades(current_principal(), course_id, year, _sheet_rows(request.form))
    return jsonify({"updated": changed, "year": year})

@bp.post("/profile-image")
@login_required
@role_required("teacher")
def profile_image():
    t = people.upload_profile_image(current_principal(), request.files.get("profile_image"))
    return jsonify(serialize_teacher(t))
