from fastapi import APIRouter, Depends, HTTPException, status

from spartec.config import settings
from spartec.schemas import UserLogin, Token, UserInfo
from spartec.services.dependency import get_storage, get_current_user
from spartec.storage.base import Storage, StorageError
from spartec.utils.security import create_access_token, verify_password
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=Token)
async def login(user_credentials: UserLogin, storage: Storage = Depends(get_storage)):
    try:
        user = storage.users.get_by_username(user_credentials.username)
    except StorageError:
        raise HTTPException(status_code=500, detail="Error during login")

    if not user or not verify_password(user_credentials.password, user["password"]):
        logger.info(f"Failed login for '{user_credentials.username}'")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(user["username"])
    logger.info(f"User {user['username']} logged in")

    return {
        "access_token": access_token,
        "token_type": "bearer",
        "expires_in": settings.access_token_expire_minutes * 60,
        "user": user,
    }


@router.get("/user", response_model=UserInfo)
async def read_current_user(user: dict = Depends(get_current_user)):
    return user
