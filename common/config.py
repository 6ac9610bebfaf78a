"""
봇 설정 파일
환경변수에서 필수 설정을 읽어 Settings 객체로 반환
"""
import os
from dataclasses import dataclass
from typing import List, Mapping, Optional

# 필수 환경변수
REQUIRED_ENV_VARS = ('TOKEN', 'ADMIN', 'SUPPORT', 'GUILD_ID')

# 프로젝트 루트 (main.py, backup_data.py 위치)
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# 허용 역할 데이터 파일 경로 (상대 경로는 ROOT_DIR 기준)
DATA_FILE = 'db.json'

# 로그 디렉토리
LOG_DIR = 'logs'
LOG_LEVEL = 'INFO'


class ConfigError(Exception):
    """필수 설정이 없거나 잘못된 경우"""


@dataclass(frozen=True)
class Settings:
    token: str
    admin_role_id: int
    support_role_id: int
    guild_id: int
    data_file: str = DATA_FILE
    log_dir: str = LOG_DIR
    log_level: str = LOG_LEVEL


def _parse_snowflake(name: str, value: str) -> int:
    value = value.strip()
    if not value.isdigit():
        raise ConfigError(f'{name} must be a numeric Discord ID, got {value!r}')
    return int(value)


def resolve_data_file(path: str) -> str:
    """상대 경로는 실행 위치가 아니라 프로젝트 루트 기준으로 변환"""
    if os.path.isabs(path):
        return path
    return os.path.join(ROOT_DIR, path)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    환경변수에서 설정 로드

    Args:
        environ: 환경변수 매핑 (기본값: os.environ)

    Raises:
        ConfigError: 필수 환경변수가 하나라도 없을 때 (누락된 이름을 모두 표시)
    """
    if environ is None:
        environ = os.environ

    missing: List[str] = [name for name in REQUIRED_ENV_VARS if not environ.get(name)]
    if missing:
        raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

    return Settings(
        token=environ['TOKEN'],
        admin_role_id=_parse_snowflake('ADMIN', environ['ADMIN']),
        support_role_id=_parse_snowflake('SUPPORT', environ['SUPPORT']),
        guild_id=_parse_snowflake('GUILD_ID', environ['GUILD_ID']),
        data_file=environ.get('DATA_FILE') or DATA_FILE,
        log_dir=environ.get('LOG_DIR') or LOG_DIR,
        log_level=(environ.get('LOG_LEVEL') or LOG_LEVEL).upper(),
    )
