# app/core/dependencies.py

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.user import UserPrivate
from app.services.user_service import UserService
from app.core.auth import verify_token
from app.core.exceptions import UnauthenticatedException, NotAuthorizedException

security = HTTPBearer(auto_error=False)


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


async def _resolve_user(
    credentials: Optional[HTTPAuthorizationCredentials], user_service: UserService
) -> Optional[UserPrivate]:
    if not credentials:
        return None

    user_id = verify_token(credentials.credentials)
    if not user_id:
        return None

    user_model = await user_service.get_user_by_id(user_id)
    return UserPrivate.from_orm(user_model) if user_model else None


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    user_service: UserService = Depends(get_user_service),
) -> UserPrivate:
    """현재 로그인한 사용자 조회"""
    if not credentials:
        raise UnauthenticatedException("토큰이 필요합니다")

    user = await _resolve_user(credentials, user_service)
    if not user:
        raise UnauthenticatedException("유효하지 않은 토큰입니다")

    return user


async def get_current_admin(current_user: UserPrivate = Depends(get_current_user)) -> UserPrivate:
    """관리자 권한 확인"""
    if not current_user.is_admin:
        raise NotAuthorizedException("관리자만 접근할 수 있습니다")
    return current_user
