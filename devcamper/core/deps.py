from uuid import UUID

from fastapi import Cookie, Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from devcamper.core.config import settings
from devcamper.core.security import decode_jwt
from devcamper.db.session import get_db
from devcamper.models.user import User

bearer = HTTPBearer(auto_error=False)

NOT_AUTHORIZED = "Not authorized to access this route"


def _token_from_request(creds: HTTPAuthorizationCredentials | None, cookie_token: str | None) -> str | None:
    if creds and creds.credentials:
        return creds.credentials
    return cookie_token or None


def get_current_user(
    creds: HTTPAuthorizationCredentials = Depends(bearer),
    token: str | None = Cookie(default=None, alias=settings.TOKEN_COOKIE_NAME),
    db: Session = Depends(get_db),
) -> User:
    raw = _token_from_request(creds, token)
    if not raw:
        raise HTTPException(status_code=401, detail=NOT_AUTHORIZED)
    try:
        claims = decode_jwt(raw, settings.JWT_SECRET)
        user_id = UUID(str(claims.get("sub") or ""))
    except Exception:
        raise HTTPException(status_code=401, detail=NOT_AUTHORIZED)
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=401, detail=NOT_AUTHORIZED)
    return user


def authorize(*roles: str):
    def _inner(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise HTTPException(status_code=403, detail=f"User role {user.role} is not authorized to access this route")
        return user
    return _inner
