"""
로깅 유틸리티
"""
import logging
import os
from datetime import datetime

from common.config import LOG_DIR, LOG_LEVEL

LOGGER_NAME = 'role_bot'


def setup_logger(log_dir: str = LOG_DIR, level: str = LOG_LEVEL):
    """로거 설정 (파일 + 콘솔)"""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # 기존 핸들러 제거
    if logger.handlers:
        logger.handlers.clear()

    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, f'bot_{datetime.now().strftime("%Y%m%d")}.log')

    # 파일 핸들러
    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setLevel(level)
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    file_handler.setFormatter(file_formatter)

    # 콘솔 핸들러
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(console_formatter)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger


def get_logger():
    """로거 가져오기"""
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        return setup_logger()
    return logger
