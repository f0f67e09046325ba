from ..extensions import db

class Course(db.Model):
    __tablename__ = "course"
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(100), nullable=False)
    credits = db.Column(db.Integer, nullable=False, default=0)
    semester = db.Column(db.Integer, nullable=False, default=1)   # 1..8
    programme = db.Column(db.String(100))
    education_level = db.Column(db.String(25))
    first_teacher_id = db.Column(db.Integer, db.ForeignKey("teacher.id", ondelete="SET NULL"))
    second_teacher_id = db.Column(db.Integer, db.ForeignKey("teacher.id", ondelete="SET NULL"))

    first_teacher = db.relationship("Teacher", back_populates="first_teacher_courses",
                                    foreign_keys=[first_teacher_id])
    second_teacher = db.relationship("Teacher", back_populates="second_teacher_courses",
                                     foreign_keys=[second_teacher_id])
    enrollments = db.relationship("Enrollment", back_populates="course",
                                  cascade="all, delete-orphan")

    def is_taught_by(self, teacher_id):
        return teacher_id is not None and teacher_id in (self.first_teacher_id, self.second_teacher_id)
