"""
로깅 등 공용 헬퍼
"""
import logging
import os
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

logger = logging.getLogger("txverify")


def setup_logging(level: Optional[str] = None, force: bool = False) -> None:
    """LOG_LEVEL 환경 변수(기본 INFO) 기준으로 루트 로거 설정"""
    level_str = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    log_level = getattr(logging, level_str, logging.INFO)
    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=force,
    )


def ensure_logger_setup():
    """패키지 로거가 루트 로거로 전파되도록 하고, 루트에 핸들러가 없으면 추가"""
    root = logging.getLogger()
    logger.propagate = True
    logger.handlers.clear()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(logging.INFO)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        root.addHandler(handler)
        root.setLevel(logging.INFO)


def short_hash(tx_hash) -> str:
    """로그용 축약 해시"""
    if not isinstance(tx_hash, str):
        return repr(tx_hash)
    return f"{tx_hash[:12]}..." if len(tx_hash) > 16 else tx_hash
