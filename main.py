"""
역할 부여용 Discord 봇
- 서포트/관리자가 허용된 역할을 멤버에게 부여/회수
- 관리자가 허용 역할 목록을 관리
"""

import os
import sys

import discord
from discord.ext import commands
from dotenv import load_dotenv

from common.config import ConfigError, Settings, load_settings, resolve_data_file
from common.logger import get_logger, setup_logger
from common.store import AllowedRoleStore

# 환경변수 로드 (스크립트 파일 위치 기준으로 .env 파일 찾기)
script_dir = os.path.dirname(os.path.abspath(__file__))
env_path = os.path.join(script_dir, '.env')


class RoleBot(commands.Bot):
    def __init__(self, settings: Settings, store: AllowedRoleStore):
        intents = discord.Intents.default()
        intents.members = True
        intents.guilds = True
        super().__init__(command_prefix=commands.when_mentioned, intents=intents)
        self.settings = settings
        self.store = store
        self._commands_synced = False

    async def setup_hook(self) -> None:
        """
        discord.py가 내부 이벤트 루프를 준비한 뒤 호출됨.
        명령어는 여기서 트리에 올리고, 길드 등록(sync)은 on_ready에서 한 번만 수행.
        """
        from domain import role

        role.setup(self, self.settings, self.store)

    async def on_ready(self):
        logger = get_logger()
        logger.info(f'{self.user}로 로그인했습니다!')

        # 재연결 시 on_ready가 다시 호출되므로 한 번만 등록
        if self._commands_synced:
            return
        self._commands_synced = True

        from domain.role import sync_commands
        await sync_commands(self.tree, self.settings.guild_id)


def main():
    load_dotenv(env_path)

    try:
        settings = load_settings()
    except ConfigError as e:
        get_logger().error(f'설정 오류: {e}')
        print("   .env 파일에 TOKEN, ADMIN, SUPPORT, GUILD_ID 를 설정해주세요.")
        sys.exit(1)

    logger = setup_logger(settings.log_dir, settings.log_level)
    store = AllowedRoleStore.open(resolve_data_file(settings.data_file))
    logger.info(f'허용 역할 {len(store)}개로 시작합니다')

    bot = RoleBot(settings, store)
    bot.run(settings.token)


# 봇 실행
if __name__ == '__main__':
    main()
