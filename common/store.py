"""
허용 역할 저장소
JSON 파일 하나에 부여 가능한 역할 ID 목록을 저장
"""
import asyncio
import json
import logging
import os
import shutil
from datetime import datetime
from typing import Iterable, List, Optional

from common.logger import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)

ROLES_KEY = 'allowed_roles'


class AllowedRoleStore:
    """
    부여 가능한 역할 ID 집합

    - 메모리의 dict(삽입 순서 유지)와 JSON 파일을 함께 관리
    - add/remove는 lock 안에서 수정 후 바로 파일에 저장
    """

    def __init__(self, path: str):
        self.path = path
        self._roles = {}
        self._lock = asyncio.Lock()

    @classmethod
    def open(cls, path: str) -> 'AllowedRoleStore':
        store = cls(path)
        store.load()
        return store

    def __contains__(self, role_id) -> bool:
        return str(role_id) in self._roles

    def __len__(self) -> int:
        return len(self._roles)

    def roles(self) -> List[str]:
        """허용 역할 ID 목록 (추가된 순서)"""
        return list(self._roles)

    def load(self):
        """
        파일에서 허용 역할 로드

        파일이 없으면 빈 목록으로 시작합니다.
        파일을 열 수 없거나(디렉토리, 권한 없음) 손상된 경우에도 빈 목록으로 시작합니다.
        손상된 파일은 다음 저장 때 덮어쓰지 않도록 `<path>.corrupt_<timestamp>` 로 복사해 둡니다.
        """
        if not os.path.exists(self.path):
            logger.info(f'허용 역할 파일이 없습니다. 빈 목록으로 시작합니다: {self.path}')
            self._roles = {}
            return

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            role_ids = parse_document(data)
        except OSError as e:
            logger.warning(f'허용 역할 파일을 열 수 없습니다 ({e}). 빈 목록으로 시작합니다: {self.path}')
            self._roles = {}
            return
        except ValueError as e:
            backup_path = self._preserve_corrupt_file()
            logger.warning(
                f'허용 역할 파일을 읽을 수 없습니다 ({e}). '
                f'빈 목록으로 시작합니다. 원본 보관: {backup_path}'
            )
            self._roles = {}
            return

        self._roles = dict.fromkeys(role_ids)
        logger.info(f'허용 역할 {len(self._roles)}개 로드: {self.path}')

    async def add(self, role_id) -> bool:
        """역할 추가. 새로 추가되었으면 True"""
        role_id = str(role_id)
        async with self._lock:
            if role_id in self._roles:
                return False
            roles = dict(self._roles)
            roles[role_id] = None
            self._commit(roles)
            return True

    async def remove(self, role_id) -> bool:
        """역할 제거. 실제로 제거되었으면 True"""
        role_id = str(role_id)
        async with self._lock:
            if role_id not in self._roles:
                return False
            roles = dict(self._roles)
            del roles[role_id]
            self._commit(roles)
            return True

    def _commit(self, roles):
        # 파일 저장에 성공한 뒤에만 메모리 반영
        self._save(roles)
        self._roles = roles

    def _save(self, roles):
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)

        # 임시 파일에 쓴 뒤 교체 (쓰는 도중 종료돼도 파일이 잘리지 않음)
        tmp_path = f'{self.path}.tmp'
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump({ROLES_KEY: list(roles)}, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self.path)

    def _preserve_corrupt_file(self) -> Optional[str]:
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        backup_path = f'{self.path}.corrupt_{timestamp}'
        try:
            shutil.copy2(self.path, backup_path)
        except OSError as e:
            logger.warning(f'손상된 허용 역할 파일을 보관하지 못했습니다: {e}')
            return None
        return backup_path


def parse_document(data) -> List[str]:
    """
    `{"allowed_roles": [...]}` 문서에서 역할 ID 목록 추출

    중복은 제거하고 숫자 ID는 문자열로 변환합니다.

    Raises:
        ValueError: 문서 형식이 맞지 않을 때
    """
    if not isinstance(data, dict):
        raise ValueError('document is not a JSON object')

    role_ids = data.get(ROLES_KEY, [])
    if not isinstance(role_ids, list):
        raise ValueError(f'{ROLES_KEY} is not a list')

    for role_id in role_ids:
        if not isinstance(role_id, (str, int)) or isinstance(role_id, bool):
            raise ValueError(f'invalid role id: {role_id!r}')

    return _unique(str(role_id) for role_id in role_ids)


def _unique(role_ids: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(role_ids))
