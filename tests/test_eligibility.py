from datetime import date

from unirecords.services.eligibility import (eligible_candidates, eligible_student_ids,
                                             passed_student_ids)


def test_odd_semester_students_study_in_winter(make):
    s = make.student(enrollment_date=date(2023, 10, 1), current_semester=3)
    assert s.id in eligible_student_ids(2023, "Winter")
    assert s.id not in eligible_student_ids(2023, "Summer")


def test_even_semester_students_study_in_summer(make):
    s = make.student(enrollment_date=date(2023, 10, 1), current_semester=4)
    assert s.id in eligible_student_ids(2023, "Summer")
    assert s.id not in eligible_student_ids(2023, "Winter")


def test_year_must_match_enrollment_date(make):
    s = make.student(enrollment_date=date(2022, 10, 1), current_semester=3)
    assert s.id not in eligible_student_ids(2023, "Winter")


def test_missing_enrollment_date_is_never_eligible(make):
    s = make.student(enrollment_date=None, current_semester=3)
    for semester in ("Winter", "Summer"):
        assert s.id not in eligible_student_ids(2024, semester)


def test_missing_current_semester_is_never_eligible(make):
    s = make.student(enrollment_date=date(2024, 10, 1), current_semester=None)
    for semester in ("Winter", "Summer"):
        assert s.id not in eligible_student_ids(2024, semester)


def test_semester_label_is_normalized(make):
    s = make.student(enrollment_date=date(2024, 10, 1), current_semester=2)
    assert s.id in eligible_student_ids(2024, "летен")


def test_passed_students(make):
    course = make.course()
    passed = make.student()
    failed = make.student()
    ungraded = make.student()
    make.enrollment(course, passed, grade=6)
    make.enrollment(course, failed, grade=5)
    make.enrollment(course, ungraded)
    assert passed_student_ids(course.id) == {passed.id}


def test_candidates_exclude_passed_and_are_sorted(make):
    course = make.course()
    b = make.student(last_name="Bojadzi", first_name="Ana")
    a = make.student(last_name="Angelov", first_name="Ilija")
    done = make.student(last_name="Aaa")
    make.enrollment(course, done, grade=9)
    names = [s.id for s in eligible_candidates(course.id, 2024, "Winter")]
    assert names == [a.id, b.id]
