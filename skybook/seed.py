import logging
import uuid

from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import OperationalError, ProgrammingError

from skybook.db.session import SessionLocal
from skybook.core.config import settings
from skybook.core.security import hash_password
from skybook.models.user import User

logger = logging.getLogger(__name__)


def ensure_user(db: Session, email: str, password: str, role: str, name: str) -> User:
    email = email.strip().lower()
    u = db.query(User).filter(User.email == email).first()
    if u:
        if u.role != role:
            u.role = role
            db.commit()
        return u
    u = User(
        id=str(uuid.uuid4()),
        email=email,
        name=name,
        role=role,
        password_hash=hash_password(password),
        is_active=True,
    )
    db.add(u)
    db.commit()
    return u


def run(db=None):
    own_session = db is None
    if own_session:
        db = SessionLocal()
    try:
        # If migrations haven't been applied yet, seeding must not crash the API.
        try:
            db.execute(text("SELECT 1 FROM users LIMIT 1"))
        except (ProgrammingError, OperationalError):
            db.rollback()
            logger.warning("[seed] users table not found yet. Skipping seeding (run alembic upgrade head).")
            return

        if settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD:
            admin = ensure_user(db, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD, "admin", settings.ADMIN_NAME)
            logger.info("[seed] admin account %s ready", admin.email)
        else:
            logger.info("[seed] ADMIN_EMAIL/ADMIN_PASSWORD not set; no admin account seeded")
    finally:
        if own_session:
            db.close()
