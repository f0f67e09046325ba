def _date(value):
    return value.isoformat() if value is not None else None


def serialize_student(s):
    return {
        "id": s.id,
        "student_no": s.student_no,
        "first_name": s.first_name,
        "last_name": s.last_name,
        "full_name": s.full_name,
        "enrollment_date": _date(s.enrollment_date),
        "acquired_credits": s.acquired_credits,
        "current_semester": s.current_semester,
        "education_level": s.education_level,
        "profile_image_path": s.profile_image_path,
        "version": s.version_id,
    }


def serialize_teacher(t):
    return {
        "id": t.id,
        "first_name": t.first_name,
        "last_name": t.last_name,
        "full_name": t.full_name,
        "degree": t.degree,
        "academic_rank": t.academic_rank,
        "office_number": t.office_number,
        "hire_date": _date(t.hire_date),
        "profile_image_path": t.profile_image_path,
        "version": t.version_id,
    }


def serialize_course(c):
    return {
        "id": c.id,
        "title": c.title,
        "credits": c.credits,
        "semester": c.semester,
        "programme": c.programme,
        "education_level": c.education_level,
        "first_teacher_id": c.first_teacher_id,
        "first_teacher": c.first_teacher.full_name if c.first_teacher else None,
        "second_teacher_id": c.second_teacher_id,
        "second_teacher": c.second_teacher.full_name if c.second_teacher else None,
    }


def serialize_enrollment(e):
    return {
        "id": e.id,
        "course_id": e.course_id,
        "course": e.course.title if e.course else None,
        "student_id": e.student_id,
        "student_no": e.student.student_no if e.student else None,
        "student": e.student.full_name if e.student else None,
        "year": e.year,
        "semester": e.semester,
        "grade": e.grade,
        "exam_points": e.exam_points,
        "seminar_points": e.seminar_points,
        "project_points": e.project_points,
        "additional_points": e.additional_points,
        "seminar_url": e.seminar_url,
        "project_url": e.project_url,
        "finish_date": _date(e.finish_date),
        "is_active": e.is_active,
    }
