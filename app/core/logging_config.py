# app/core/logging_config.py

import json
import logging
import sys
from typing import Any

from app.core.config import get_settings

EXTRA_FIELDS = ("request_id", "path", "method", "status_code", "duration_ms")


class JSONFormatter(logging.Formatter):
    """
    LogRecord를 JSON 문자열로 출력하는 포매터
    """

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "funcName": record.funcName,
            "line": record.lineno,
        }

        # extra 인자로 넘어온 속성
        for field in EXTRA_FIELDS:
            if hasattr(record, field):
                log_obj[field] = getattr(record, field)

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_obj, ensure_ascii=False, default=str)


def setup_logging():
    """
    루트 로거를 stdout으로 출력하도록 설정
    """
    settings = get_settings()

    logger = logging.getLogger()
    logger.setLevel(settings.log_level.upper())

    handler = logging.StreamHandler(sys.stdout)
    if settings.log_json:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )

    # Uvicorn 등에서 붙인 핸들러 중복 제거
    logger.handlers = []
    logger.addHandler(handler)

    logging.getLogger("uvicorn.access").handlers = []
    logging.getLogger("uvicorn.access").propagate = True
