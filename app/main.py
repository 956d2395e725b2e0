# app/main.py

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.core.config import get_settings
from app.core.logging_config import setup_logging
from app.core.exceptions import (
    MovieReviewException,
    movie_review_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    global_exception_handler,
)
from app.api.v1 import api_router
from app.database import engine, Base
from app.middleware import RequestContextMiddleware
from app import models  # noqa: F401  테이블 메타데이터 등록

# 설정 로드
settings = get_settings()

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # 시작 시 데이터베이스 테이블 생성
    Base.metadata.create_all(bind=engine)
    logger.info("영화 리뷰 서비스 시작됨")

    yield

    # 종료 시
    engine.dispose()
    logger.info("영화 리뷰 서비스 종료됨")


# FastAPI 앱 생성
app = FastAPI(
    title=settings.app_name,
    description="Movie Review Service",
    version="1.0.0",
    docs_url="/docs",
    openapi_url="/openapi.json",
    debug=settings.debug,
    lifespan=lifespan,
)

# 예외 핸들러
app.add_exception_handler(MovieReviewException, movie_review_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# 미들웨어
app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API v1 라우터 등록
app.include_router(api_router, prefix="/api/v1")


@app.get("/")
def read_root():
    """서비스 루트"""
    return {
        "service": settings.app_name,
        "description": "Movie Review Service",
        "version": "1.0.0",
        "docs": "/docs",
    }
