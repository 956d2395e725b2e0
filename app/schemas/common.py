# app/schemas/common.py

import math
from pydantic import BaseModel, Field

# 24자리 16진수 문서 ID
OBJECT_ID_PATTERN = r"^[0-9a-f]{24}$"


class Pagination(BaseModel):
    current_page: int = Field(description="현재 페이지")
    total_pages: int = Field(description="전체 페이지 수")
    total_items: int = Field(description="전체 항목 수")
    has_next_page: bool = Field(description="다음 페이지 존재 여부")
    has_prev_page: bool = Field(description="이전 페이지 존재 여부")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = math.ceil(total / limit) if limit else 0
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_items=total,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


class MessageResponse(BaseModel):
    message: str = Field(description="처리 결과 메시지")
    success: bool = Field(default=True, description="성공 여부")
