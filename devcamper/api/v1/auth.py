import logging
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from devcamper.api.v1.common import _apply_fields, _detail, _ok
from devcamper.core.config import settings
from devcamper.core.deps import get_current_user
from devcamper.core.errors import ErrorResponse
from devcamper.core.security import (
    create_jwt,
    generate_reset_token,
    hash_password,
    hash_reset_token,
    verify_password,
)
from devcamper.db.session import get_db
from devcamper.models.user import User
from devcamper.schemas.auth import (
    ForgotPasswordIn,
    LoginIn,
    RegisterIn,
    ResetPasswordIn,
    UpdateDetailsIn,
    UpdatePasswordIn,
)
from devcamper.services.email_service import EmailDeliveryError, send_email

router = APIRouter()
_LOG = logging.getLogger("devcamper.auth")


def _token_response(user: User, status_code: int = 200) -> JSONResponse:
    token = create_jwt(
        {"sub": str(user.id), "role": user.role},
        settings.JWT_SECRET,
        timedelta(days=settings.JWT_EXPIRE_DAYS),
    )
    response = JSONResponse(status_code=status_code, content={"success": True, "token": token})
    response.set_cookie(
        settings.TOKEN_COOKIE_NAME,
        token,
        max_age=settings.JWT_COOKIE_EXPIRE_DAYS * 24 * 3600,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return response


@router.post("/register")
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    user = User(
        name=payload.name,
        email=payload.email,
        role=payload.role,
        password_hash=hash_password(payload.password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return _token_response(user)


@router.post("/login")
def login(payload: LoginIn, db: Session = Depends(get_db)):
    if not payload.email or not payload.password:
        raise ErrorResponse("Please provide an email and password", 400)
    email = payload.email.strip().lower()
    user = db.query(User).filter(User.email == email).first()
    if user is None or not verify_password(payload.password, user.password_hash):
        raise ErrorResponse("Invalid credentials", 401)
    return _token_response(user)


@router.get("/logout")
def logout():
    response = JSONResponse(content=_ok())
    response.delete_cookie(settings.TOKEN_COOKIE_NAME)
    return response


@router.get("/me")
def get_me(user: User = Depends(get_current_user)):
    return _detail(user)


@router.put("/updatedetails")
def update_details(
    payload: UpdateDetailsIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    values = {key: value for key, value in payload.model_dump(exclude_unset=True).items() if value is not None}
    if "email" in values:
        values["email"] = values["email"].strip().lower()
    _apply_fields(user, values)
    db.add(user)
    db.commit()
    db.refresh(user)
    return _detail(user)


@router.put("/updatepassword")
def update_password(
    payload: UpdatePasswordIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not verify_password(payload.current_password, user.password_hash):
        raise ErrorResponse("Password is incorrect", 401)
    user.password_hash = hash_password(payload.new_password)
    db.add(user)
    db.commit()
    return _token_response(user)


@router.post("/forgotpassword")
def forgot_password(payload: ForgotPasswordIn, request: Request, db: Session = Depends(get_db)):
    email = payload.email.strip().lower()
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        raise ErrorResponse("There is no user with that email", 404)

    reset_token, token_hash = generate_reset_token()
    user.reset_password_token = token_hash
    user.reset_password_expire = datetime.now(timezone.utc) + timedelta(minutes=settings.RESET_TOKEN_TTL_MINUTES)
    db.add(user)
    db.commit()

    reset_url = f"{str(request.base_url).rstrip('/')}/api/v1/auth/resetpassword/{reset_token}"
    message = (
        "You are receiving this email because you (or someone else) has requested the reset of a password. "
        f"Please make a PUT request to: \n\n {reset_url}"
    )
    try:
        send_email(email=user.email, subject="Password reset token", message=message)
    except EmailDeliveryError as exc:
        _LOG.error("password reset email failed for user=%s: %s", user.id, exc)
        user.reset_password_token = None
        user.reset_password_expire = None
        db.add(user)
        db.commit()
        raise ErrorResponse("Email could not be sent", 500)
    return _ok("Email sent")


@router.put("/resetpassword/{reset_token}")
def reset_password(reset_token: str, payload: ResetPasswordIn, db: Session = Depends(get_db)):
    user = (
        db.query(User)
        .filter(
            User.reset_password_token == hash_reset_token(reset_token),
            User.reset_password_expire > datetime.now(timezone.utc),
        )
        .first()
    )
    if user is None:
        raise ErrorResponse("Invalid token", 400)
    user.password_hash = hash_password(payload.password)
    user.reset_password_token = None
    user.reset_password_expire = None
    db.add(user)
    db.commit()
    return _token_response(user)
