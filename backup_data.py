"""
허용 역할 데이터 백업 스크립트
다른 PC로 데이터를 옮기거나 백업할 때 사용
"""
import json
import logging
import os
import shutil
import sys
from datetime import datetime
from typing import Optional

from dotenv import load_dotenv

from common.config import DATA_FILE, LOG_DIR, LOG_LEVEL, ROOT_DIR, resolve_data_file
from common.logger import LOGGER_NAME, setup_logger
from common.store import parse_document

logger = logging.getLogger(LOGGER_NAME)


def default_data_file() -> str:
    return resolve_data_file(os.getenv('DATA_FILE') or DATA_FILE)


def backup_database(data_file: Optional[str] = None, backup_dir: str = 'backups') -> Optional[str]:
    """허용 역할 파일을 백업. 백업 파일 경로 반환 (백업할 파일이 없으면 None)"""
    data_file = data_file or default_data_file()

    if not os.path.exists(data_file):
        logger.error(f"❌ 백업할 데이터 파일이 없습니다: {data_file}")
        return None

    os.makedirs(backup_dir, exist_ok=True)

    # 타임스탬프 추가한 백업 파일명
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    backup_path = os.path.join(backup_dir, f'db_backup_{timestamp}.json')
    shutil.copy2(data_file, backup_path)
    logger.info(f"✅ 허용 역할 백업 완료: {backup_path}")
    return backup_path


def restore_database(backup_file: str, data_file: Optional[str] = None) -> bool:
    """백업 파일에서 허용 역할 복원"""
    data_file = data_file or default_data_file()

    if not os.path.exists(backup_file):
        logger.error(f"❌ 백업 파일을 찾을 수 없습니다: {backup_file}")
        return False

    # 손상된 백업으로 덮어쓰지 않도록 먼저 검증
    try:
        with open(backup_file, 'r', encoding='utf-8') as f:
            parse_document(json.load(f))
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError) as e:
        logger.error(f"❌ 올바른 허용 역할 파일이 아닙니다: {backup_file} ({e})")
        return False

    # 기존 파일 백업 (덮어쓰기 전)
    if os.path.exists(data_file):
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        old_backup = f'{data_file}.old_{timestamp}'
        shutil.copy2(data_file, old_backup)
        logger.warning(f"⚠️ 기존 파일을 백업했습니다: {old_backup}")

    shutil.copy2(backup_file, data_file)
    logger.info(f"✅ 데이터 복원 완료: {data_file}")
    return True


if __name__ == '__main__':
    load_dotenv(os.path.join(ROOT_DIR, '.env'))
    setup_logger(os.getenv('LOG_DIR') or LOG_DIR, (os.getenv('LOG_LEVEL') or LOG_LEVEL).upper())

    if len(sys.argv) > 1:
        # 복원 모드
        ok = restore_database(sys.argv[1])
        sys.exit(0 if ok else 1)
    else:
        # 백업 모드
        backup_database()
        print("\n💡 사용법:")
        print("  백업: python backup_data.py")
        print("  복원: python backup_data.py <백업파일경로>")
