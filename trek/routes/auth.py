"""Authentication routes.

Sign-in is by username only; there are no passwords. The session is a JWT
cookie carrying the user id.
"""

from typing import Annotated

from fastapi import APIRouter, Cookie, Depends, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from trek import schemas
from trek.database import get_db
from trek.errors import NotFoundError
from trek.services import users as users_service
from trek.utils.auth import (
    SESSION_COOKIE,
    create_session_token,
    decode_access_token,
    session_cookie_options,
)

router = APIRouter(prefix="/auth", tags=["auth"])


async def get_current_user(
    session_token: Annotated[str | None, Cookie(alias=SESSION_COOKIE)] = None,
    db: AsyncSession = Depends(get_db),
) -> schemas.User | None:
    """Get current user from session token."""
    if not session_token:
        return None

    user_id = decode_access_token(session_token)
    if user_id is None:
        return None

    try:
        return await users_service.get_user(db, user_id)
    except NotFoundError:
        return None


async def require_auth(
    current_user: schemas.User | None = Depends(get_current_user),
) -> schemas.User:
    """Require authentication."""
    if not current_user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return current_user


async def _read_username(request: Request) -> str | None:
    content_type = request.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            payload = await request.json()
        except ValueError:
            payload = {}
        value = payload.get("username") if isinstance(payload, dict) else None
    else:
        form = await request.form()
        value = form.get("username")
    if not isinstance(value, str):
        return None
    return value.strip() or None


@router.post("/sign-in")
async def sign_in(request: Request, db: AsyncSession = Depends(get_db)) -> Response:
    """Start a session for an existing user."""
    username = await _read_username(request)
    if not username:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username is required",
        )

    user = await users_service.get_user_by_name(db, username)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown user",
        )

    response = JSONResponse(user.model_dump(by_alias=True))
    response.set_cookie(
        value=create_session_token(user.id), **session_cookie_options()
    )
    return response


@router.post("/sign-out")
async def sign_out() -> Response:
    """End the session."""
    response = JSONResponse({"status": "ok"})
    response.delete_cookie(**session_cookie_options())
    return response


@router.get("/me", response_model=schemas.User)
async def me(current_user: schemas.User = Depends(require_auth)) -> schemas.User:
    """Get current user info."""
    return current_user
