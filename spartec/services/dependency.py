import logging
from typing import Optional, Dict, Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from spartec.config import settings
from spartec.database import SessionLocal
from spartec.storage.base import Storage
from spartec.storage.database import DatabaseStorage
from spartec.storage.memory import MemoryStorage
from spartec.services.lifecycle import WorkOrderLifecycle
from spartec.utils.security import verify_token

logger = logging.getLogger(__name__)

security = HTTPBearer()

_memory_storage: Optional[MemoryStorage] = None


def seed_admin(storage: Storage, username: str, password_hash: str, full_name: str) -> Optional[Dict[str, Any]]:
    """Create the configured beheerder unless that username already exists"""
    if storage.users.get_by_username(username):
        return None
    admin = storage.users.create({
        "username": username,
        "full_name": full_name,
        "password": password_hash,
        "role": "beheerder",
    })
    logger.info(f"Seeded administrator {username} from settings")
    return admin


def get_memory_storage() -> MemoryStorage:
    global _memory_storage
    if _memory_storage is None:
        _memory_storage = MemoryStorage()
        if settings.admin_username and settings.admin_password_hash:
            seed_admin(
                _memory_storage, settings.admin_username,
                settings.admin_password_hash, settings.admin_full_name
            )
        else:
            logger.warning("Memory storage has no users; set ADMIN_USERNAME and ADMIN_PASSWORD_HASH to log in")
    return _memory_storage


def get_storage():
    """Storage backend selected by settings.storage_backend"""
    if settings.storage_backend == "memory":
        yield get_memory_storage()
        return

    db = SessionLocal()
    try:
        yield DatabaseStorage(db)
    finally:
        db.close()


def get_lifecycle(storage: Storage = Depends(get_storage)) -> WorkOrderLifecycle:
    return WorkOrderLifecycle(storage, strict=settings.strict_work_order_transitions)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    storage: Storage = Depends(get_storage)
):
    """Get the current authenticated user"""
    username = verify_token(credentials.credentials)

    if not username:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = storage.users.get_by_username(username)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user
