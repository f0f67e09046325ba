from ..extensions import db

class Student(db.Model):
    __tablename__ = "student"
    id = db.Column(db.Integer, primary_key=True)
    student_no = db.Column(db.String(10), unique=True, nullable=False)   # index
    first_name = db.Column(db.String(50), nullable=False)
    last_name = db.Column(db.String(50), nullable=False)
    enrollment_date = db.Column(db.Date)
    acquired_credits = db.Column(db.Integer)
    current_semester = db.Column(db.Integer)
    education_level = db.Column(db.String(25))
    profile_image_path = db.Column(db.String(255))
    version_id = db.Column(db.Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}

    enrollments = db.relationship(
        "Enrollment", back_populates="student", cascade="all, delete-orphan"
    )

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    @property
    def display_name(self):
        return f"{self.full_name} ({self.student_no})"

class Teacher(db.Model):
    __tablename__ = "teacher"
    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(50), nullable=False)
    last_name = db.Column(db.String(50), nullable=False)
    degree = db.Column(db.String(50))
    academic_rank = db.Column(db.String(25))
    office_number = db.Column(db.String(10))
    hire_date = db.Column(db.Date)
    profile_image_path = db.Column(db.String(255))
    version_id = db.Column(db.Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}

    first_teacher_courses = db.relationship(
        "Course", back_populates="first_teacher", foreign_keys="Course.first_teacher_id"
    )
    second_teacher_courses = db.relationship(
        "Course", back_populates="second_teacher", foreign_keys="Course.second_teacher_id"
    )

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"
