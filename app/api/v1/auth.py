# app/api/v1/auth.py

from fastapi import APIRouter, Depends, status
from app.schemas.user import UserPrivate, UserCreateEmail, UserLoginEmail, TokenResponse
from app.services.user_service import UserService
from app.core.auth import create_access_token
from app.core.dependencies import get_user_service, get_current_user
from app.core.exceptions import UnauthenticatedException

router = APIRouter()


# 이메일 회원가입
@router.post(
    "/signup/email",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="이메일 회원가입",
    description="이메일, 사용자 이름, 비밀번호로 회원가입합니다.",
)
async def signup_email(
    user_data: UserCreateEmail, user_service: UserService = Depends(get_user_service)
):
    user = await user_service.create_user_email(user_data)
    access_token = create_access_token(data={"sub": user.user_id})

    return TokenResponse(access_token=access_token, user=user)


# 이메일 로그인
@router.post(
    "/login/email",
    response_model=TokenResponse,
    summary="이메일 로그인",
    description="이메일과 비밀번호로 로그인합니다.",
)
async def login_email(
    login_data: UserLoginEmail, user_service: UserService = Depends(get_user_service)
):
    user = await user_service.authenticate_user_email(
        email=login_data.email, password=login_data.password
    )

    if not user:
        raise UnauthenticatedException("이메일 또는 비밀번호가 잘못되었습니다")

    access_token = create_access_token(data={"sub": user.user_id})

    return TokenResponse(access_token=access_token, user=user)


@router.get(
    "/me",
    response_model=UserPrivate,
    summary="내 정보",
    description="현재 로그인한 사용자의 정보를 조회합니다.",
)
async def get_me(current_user: UserPrivate = Depends(get_current_user)):
    return current_user
