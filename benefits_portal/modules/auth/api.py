from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from benefits_portal.core.config import settings
from benefits_portal.core.dependencies import get_db, get_current_user
from benefits_portal.models import user_model
from benefits_portal.modules.auth import service as auth_service
from benefits_portal.schemas import user_schema
from benefits_portal.schemas.base_schema import MessageResponse
from benefits_portal.utils.auth import create_session_token

router = APIRouter(
    tags=["Authentication"],
)


def _start_session(response: Response, user: user_model.Users) -> None:
    token = create_session_token(user.id)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token["access_token"],
        max_age=token["expires_in"],
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


@router.post("/register", response_model=user_schema.User, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: user_schema.UserRegistration,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """
    Creates an employee account in an existing company and signs it in.
    """
    user = await auth_service.register_user(db, user_data=user_data)
    _start_session(response, user)
    return user


@router.post("/login", response_model=user_schema.User)
async def login(
    credentials: user_schema.UserLogin,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    user = await auth_service.authenticate_user(db, username=credentials.username, password=credentials.password)
    _start_session(response, user)
    return user


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"message": "Logged out"}


@router.get("/user", response_model=user_schema.User)
async def read_current_user(current_user: user_model.Users = Depends(get_current_user)):
    return current_user
