import logging
import uuid
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from skybook.db.session import get_db
from skybook.api.responses import ok
from skybook.schemas.auth import LoginRequest, RegisterRequest, TokenOut
from skybook.models.user import User
from skybook.core.errors import AuthenticationError, ValidationError
from skybook.core.security import hash_password, verify_password, create_access_token
from skybook.api.deps import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

@router.post("/auth/register", response_model=TokenOut, status_code=201)
def register(body: RegisterRequest, db: Session = Depends(get_db)):
    email = body.email.strip().lower()
    if db.query(User).filter(User.email == email).first():
        raise ValidationError("Email already registered")
    # Self-service accounts are always plain users; admins come from the seed.
    user = User(
        id=str(uuid.uuid4()),
        email=email,
        name=body.name.strip(),
        role="user",
        password_hash=hash_password(body.password),
        is_active=True,
    )
    db.add(user)
    db.commit()
    logger.info("user %s registered", user.id)
    return TokenOut(token=create_access_token(user.id))


@router.post("/auth/login", response_model=TokenOut)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == body.email.strip().lower()).first()
    if not user or not user.is_active:
        raise AuthenticationError("Invalid credentials")
    if not verify_password(body.password, user.password_hash):
        raise AuthenticationError("Invalid credentials")
    return TokenOut(token=create_access_token(user.id))


@router.get("/auth/me")
def me(me: User = Depends(get_current_user)):
    """Return current user info including role."""
    return ok({
        "id": me.id,
        "name": me.name or "",
        "email": me.email,
        "role": me.role,
    })
