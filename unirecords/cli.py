from datetime import date

import click
from flask import current_app

from .extensions import db
from .models import Course, Enrollment, Student, Teacher, User

TEACHERS = [
    # first, last, degree, rank, office
    ("Ivan", "Petrovski", "PhD", "Professor", "A101"),
    ("Ana", "Stojanova", "MSc", "Assistant", "B202"),
    ("Marko", "Iliev", "PhD", "Associate Professor", "A203"),
    ("Elena", "Kostova", "MSc", "Lecturer", "C104"),
    ("Stefan", "Dimitrov", "PhD", "Professor", "A105"),
]
STUDENTS = [
    # index, first, last, current semester, enrolled on
    ("201001", "Petar", "Nikolov", 3, date(2022, 10, 1)),
    ("201002", "Marija", "Stankova", 3, date(2022, 10, 1)),
    ("201003", "Jovan", "Trajkov", 5, date(2021, 10, 1)),
    ("201004", "Sara", "Mihajlova", 5, date(2021, 10, 1)),
    ("201005", "David", "Kirilov", 6, date(2020, 10, 1)),
]
COURSES = [
    # title, credits, semester, programme, teacher position in TEACHERS
    ("Databases", 6, 3, "IT", 0),
    ("Web Programming", 6, 4, "IT", 1),
    ("Software Engineering", 7, 5, "SE", 2),
    ("Computer Networks", 6, 4, "IT", 3),
    ("Artificial Intelligence", 7, 6, "SE", 4),
]
ENROLLMENTS = [
    # course, student, semester, year, grade
    (0, 0, "Winter", 2023, 8),
    (1, 0, "Winter", 2023, 9),
    (0, 1, "Winter", 2023, 7),
    (2, 2, "Summer", 2024, 10),
    (3, 3, "Summer", 2024, 8),
]


def _account(username, role, password, **links):
    u = User(username=username, role=role, **links)
    u.set_password(password)
    return u


def seed_database(admin_password):
    """Create the schema, the admin account and sample records; safe to rerun."""
    db.create_all()
    if not User.query.filter_by(username="admin").count():
        db.session.add(_account("admin", "admin", admin_password))
        click.echo("Created admin account")
    if Student.query.count() or Teacher.query.count():
        db.session.commit()
        click.echo("Sample data already present")
        return

    password = current_app.config["DEFAULT_ACCOUNT_PASSWORD"]
    teachers = [Teacher(first_name=f, last_name=l, degree=d, academic_rank=r, office_number=o)
                for f, l, d, r, o in TEACHERS]
    students = [Student(student_no=no, first_name=f, last_name=l, current_semester=sem,
                        enrollment_date=when, education_level="Undergraduate")
                for no, f, l, sem, when in STUDENTS]
    courses = [Course(title=t, credits=c, semester=s, programme=p, education_level="Undergraduate",
                      first_teacher=teachers[ti])
               for t, c, s, p, ti in COURSES]
    enrollments = [Enrollment(course=courses[ci], student=students[si], semester=sem, year=y, grade=g)
                   for ci, si, sem, y, g in ENROLLMENTS]
    accounts = ([_account(t.last_name.lower(), "teacher", password, teacher=t) for t in teachers]
                + [_account(s.student_no, "student", password, student=s) for s in students])
    db.session.add_all(teachers + students + courses + enrollments + accounts)
    db.session.commit()
    click.echo(f"Seeded {len(teachers)} teachers, {len(students)} students, "
               f"{len(courses)} courses, {len(enrollments)} enrollments")


def register_commands(app):
    @app.cli.command("seed")
    @click.option("--admin-password", default="Admin123!", show_default=True)
    def seed(admin_password):
        """Create tables and load sample records."""
        seed_database(admin_password)
