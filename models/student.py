from extensions import db


class Student(db.Model):
    __tablename__ = "students"

    student_id = db.Column(db.Integer, primary_key=True)
    roll = db.Column(db.String(30), unique=True, nullable=False)
    name = db.Column(db.String(100), nullable=False)

    # Grade label, e.g. "6". Not a foreign key to classes.
    grade = db.Column(db.String(20), nullable=False)

    attendance = db.Column(db.Integer, nullable=False, default=0)
    phone = db.Column(db.String(20), nullable=False)

    # Class whose seat this student holds; plain id, no foreign key.
    allocated_class_id = db.Column(db.Integer, nullable=True)

    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime,
        server_default=db.func.now(),
        onupdate=db.func.now()
    )

    __table_args__ = (
        db.CheckConstraint("attendance >= 0 AND attendance <= 100", name="ck_student_attendance"),
    )

    def __repr__(self):
        return f"<Student {self.roll}>"
