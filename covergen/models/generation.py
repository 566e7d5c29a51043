from datetime import datetime
from covergen.extensions import db


class GenerationAction(db.Model):
    __tablename__ = "generation_actions"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    kind = db.Column(db.String(32), nullable=False, default="cover_letter")
    job_title = db.Column(db.String(255), nullable=True)
    company_name = db.Column(db.String(255), nullable=True)
    # Server-local time: monthly usage windows are local calendar months
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now, index=True)

    __table_args__ = (
        db.Index("ix_generation_actions_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<GenerationAction id={self.id} user_id={self.user_id!r} kind={self.kind!r}>"
