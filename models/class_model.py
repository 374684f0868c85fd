from extensions import db
from utils.formatting import percent


class SchoolClass(db.Model):
    __tablename__ = "classes"

    class_id = db.Column(db.Integer, primary_key=True)
    class_name = db.Column(db.String(20), unique=True, nullable=False)
    grade = db.Column(db.String(20), nullable=False, index=True)
    room = db.Column(db.String(30), nullable=False)

    # Free-text teacher name, not linked to the teachers table.
    class_teacher = db.Column(db.String(100), nullable=False)

    capacity = db.Column(db.Integer, nullable=False)
    enrolled = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime,
        server_default=db.func.now(),
        onupdate=db.func.now()
    )

    __table_args__ = (
        db.CheckConstraint("capacity >= 1", name="ck_class_capacity"),
        db.CheckConstraint("enrolled >= 0", name="ck_class_enrolled"),
    )

    @property
    def seats_label(self):
        return f"{self.enrolled}/{self.capacity}"

    @property
    def occupancy(self):
        return percent(self.enrolled, self.capacity)

    def __repr__(self):
        return f"<SchoolClass {self.class_name}>"
