"""로깅 설정 - 'shopfeed' 로거와 원격 본문/검색어 로깅 헬퍼"""
import logging
import re
import sys
from typing import Optional

from shopfeed.core.config import settings


_VERBOSE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
_COMPACT_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

# key=value / "key": "value" 형태의 자격 증명 값만 가림
_SECRET_PAIR = re.compile(
    r"""(?P<key>password|token|api_key|secret)(?P<sep>["']?\s*[:=]\s*["']?)(?P<value>[^\s"'&,}]+)""",
    re.IGNORECASE,
)
_WHITESPACE = re.compile(r"\s+")


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """'shopfeed' 로거 초기화

    production 환경에서는 DEBUG를 INFO로 올리고 포맷을 줄입니다.
    핸들러는 한 번만 붙습니다.
    """
    logger = logging.getLogger("shopfeed")

    log_level = (level or settings.log_level).upper()
    if settings.is_production and log_level == "DEBUG":
        log_level = "INFO"
    logger.setLevel(getattr(logging, log_level))

    if not logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(
            logging.Formatter(
                fmt=_COMPACT_FORMAT if settings.is_production else _VERBOSE_FORMAT,
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(console_handler)

    return logger


logger = setup_logging()


def sanitize_for_log(value: str, max_length: int = 100) -> str:
    """한 줄 로그용 정리 (검색어, 원격 오류 본문)

    - 개행/탭/연속 공백을 공백 하나로 접음
    - password/token/api_key/secret 의 값만 *** 로 가림 ("token ring" 같은 일반 단어는 유지)
    - max_length 초과분은 "..." 로 자름
    """
    if not value:
        return "[empty]"

    result = _WHITESPACE.sub(" ", value).strip()
    result = _SECRET_PAIR.sub(lambda m: f"{m.group('key')}{m.group('sep')}***", result)

    if len(result) > max_length:
        result = result[:max_length] + "..."
    return result
