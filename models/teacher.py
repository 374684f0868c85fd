from extensions import db


class Teacher(db.Model):
    __tablename__ = "teachers"

    teacher_id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.String(30), unique=True, nullable=False)
    name = db.Column(db.String(100), nullable=False)
    subject = db.Column(db.String(50), nullable=False)
    classes = db.Column(db.Integer, nullable=False, default=0)
    experience = db.Column(db.Integer, nullable=False, default=0)
    phone = db.Column(db.String(20), nullable=False)

    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime,
        server_default=db.func.now(),
        onupdate=db.func.now()
    )

    __table_args__ = (
        db.CheckConstraint("classes >= 0", name="ck_teacher_classes"),
        db.CheckConstraint("experience >= 0", name="ck_teacher_experience"),
    )

    def __repr__(self):
        return f"<Teacher {self.employee_id}>"
