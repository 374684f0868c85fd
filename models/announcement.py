from extensions import db


class Announcement(db.Model):
    __tablename__ = "announcements"

    announcement_id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(150), unique=True, nullable=False)
    message = db.Column(db.Text, nullable=False)
    type = db.Column(db.String(20), nullable=False)  # Notice | Event | Campaign | Reminder
    audience = db.Column(db.String(30), nullable=False)

    # ISO date string (YYYY-MM-DD) so ordering is lexicographic.
    date = db.Column(db.String(10), nullable=False)

    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime,
        server_default=db.func.now(),
        onupdate=db.func.now()
    )

    def __repr__(self):
        return f"<Announcement {self.title}>"
