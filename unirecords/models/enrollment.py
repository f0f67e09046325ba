from ..extensions import db

PASSING_GRADE = 6

class Enrollment(db.Model):
    __tablename__ = "enrollment"
    id = db.Column(db.Integer, primary_key=True)
    course_id = db.Column(db.Integer, db.ForeignKey("course.id"), nullable=False)
    student_id = db.Column(db.Integer, db.ForeignKey("student.id"), nullable=False)
    semester = db.Column(db.String(10))    # Winter / Summer
    year = db.Column(db.Integer)
    grade = db.Column(db.Integer)          # 5..10, >= 6 passes
    seminar_url = db.Column(db.String(255))
    project_url = db.Column(db.String(255))
    exam_points = db.Column(db.Integer)
    seminar_points = db.Column(db.Integer)
    project_points = db.Column(db.Integer)
    additional_points = db.Column(db.Integer)
    finish_date = db.Column(db.Date)
    __table_args__ = (
        db.UniqueConstraint("course_id", "student_id", name="uq_course_student"),
    )

    course = db.relationship("Course", back_populates="enrollments")
    student = db.relationship("Student", back_populates="enrollments")

    @property
    def is_active(self):
        return self.finish_date is None

    @property
    def is_passed(self):
        return self.grade is not None and self.grade >= PASSING_GRADE
