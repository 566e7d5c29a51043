import uuid
from flask_login import UserMixin
from sqlalchemy import func
from covergen.extensions import db, login_manager


def _new_account_id() -> str:
    return str(uuid.uuid4())


class User(db.Model, UserMixin):
    __tablename__ = "users"

    # Account ids travel through checkout metadata as strings (metadata.user_id)
    id = db.Column(db.String(64), primary_key=True, default=_new_account_id)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    def get_id(self) -> str:
        return str(self.id)

    def __repr__(self) -> str:
        return f"<User id={self.id!r} email={self.email!r}>"


@login_manager.user_loader
def load_user(user_id: str):
    if not user_id:
        return None
    return db.session.get(User, str(user_id))
