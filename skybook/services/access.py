from skybook.core.errors import UnauthorizedError

ADMIN_ROLE = "admin"


def ensure_owner_or_admin(owner_id: str, caller_id: str, caller_role: str, message: str) -> None:
    if owner_id != caller_id and caller_role != ADMIN_ROLE:
        raise UnauthorizedError(message)
