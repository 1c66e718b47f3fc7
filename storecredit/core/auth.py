from uuid import UUID

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from storecredit.core.database import get_db
from storecredit.models.user import User
from storecredit.repositories.user_repository import UserRepository


def get_current_admin(
    request: Request,
    db: Session = Depends(get_db),
) -> User:
    """Resolve the administrator named by the X-Admin-User-Id header."""
    header = request.headers.get("X-Admin-User-Id")
    if not header:
        raise HTTPException(status_code=401, detail="X-Admin-User-Id header is required")

    try:
        user_id = UUID(header)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid X-Admin-User-Id header") from None

    user = UserRepository(db).get_by_id(user_id)
    if not user:
        raise HTTPException(status_code=401, detail="Unknown administrator")
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Administrator access required")
    return user
