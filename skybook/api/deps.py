from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from skybook.db.session import get_db
from skybook.core.errors import AuthenticationError, UnauthorizedError
from skybook.core.security import decode_token
from skybook.models.user import User

bearer = HTTPBearer(auto_error=False)

def resolve_caller(db: Session, credential: str | None) -> User:
    """Bearer token -> active user, or AuthenticationError."""
    if not credential:
        raise AuthenticationError("Not authorized to access this route")
    payload = decode_token(credential)
    user = db.get(User, payload.get("sub"))
    if not user or not user.is_active:
        raise AuthenticationError("Not authorized to access this route")
    return user

def get_current_user(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: Session = Depends(get_db),
) -> User:
    return resolve_caller(db, creds.credentials if creds else None)

def require_roles(*roles: str):
    def _guard(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise UnauthorizedError(f"User role {user.role} is not authorized to access this route")
        return user
    return _guard
