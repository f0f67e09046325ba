import io
from datetime import date

import pytest
from werkzeug.datastructures import FileStorage

from config import TestConfig
from unirecords import create_app
from unirecords.extensions import db
from unirecords.models import Course, Enrollment, Student, Teacher, User
from unirecords.services.visibility import Principal

ADMIN = Principal(role="admin")


@pytest.fixture
def app(tmp_path):
    class Config(TestConfig):
        UPLOAD_FOLDER = str(tmp_path / "uploads")

    app = create_app(Config)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield app
        db.session.remove()


@pytest.fixture
def client(app):
    return app.test_client()


def upload(filename, data=b"payload"):
    return FileStorage(stream=io.BytesIO(data), filename=filename)


class Factory:
    """Persist small records with sensible defaults; needs an app context."""

    def __init__(self):
        self._seq = 0

    def _next(self):
        self._seq += 1
        return self._seq

    def teacher(self, **kw):
        n = self._next()
        kw.setdefault("first_name", f"Teacher{n}")
        kw.setdefault("last_name", f"Last{n}")
        t = Teacher(**kw)
        db.session.add(t)
        db.session.commit()
        return t

    def student(self, **kw):
        n = self._next()
        kw.setdefault("student_no", f"2100{n:02d}")
        kw.setdefault("first_name", f"Student{n}")
        kw.setdefault("last_name", f"Last{n}")
        kw.setdefault("enrollment_date", date(2024, 10, 1))
        kw.setdefault("current_semester", 1)
        s = Student(**kw)
        db.session.add(s)
        db.session.commit()
        return s

    def course(self, **kw):
        n = self._next()
        kw.setdefault("title", f"Course{n}")
        kw.setdefault("credits", 6)
        kw.setdefault("semester", 1)
        c = Course(**kw)
        db.session.add(c)
        db.session.commit()
        return c

    def enrollment(self, course, student, **kw):
        kw.setdefault("year", 2024)
        kw.setdefault("semester", "Winter")
        e = Enrollment(course_id=course.id, student_id=student.id, **kw)
        db.session.add(e)
        db.session.commit()
        return e

    def account(self, username, role, password="secret1", **links):
        u = User(username=username, role=role, **links)
        u.set_password(password)
        db.session.add(u)
        db.session.commit()
        return u


@pytest.fixture
def make(ctx):
    return Factory()
