"""
역할 부여 명령어
- grant / ungrant : 허용된 역할을 사용자에게 부여/회수 (서포트, 관리자)
- roles           : 허용 역할 목록 (누구나)
- add / remove    : 허용 역할 목록 관리 (관리자 전용)
"""
import logging

import discord
from discord import app_commands

from common.config import Settings
from common.logger import LOGGER_NAME
from common.store import AllowedRoleStore
from domain.permission import AuthorizationContext, resolve_authorization

logger = logging.getLogger(LOGGER_NAME)

ACCESS_DENIED = 'Access denied'
ROLE_NOT_ALLOWED = 'Role not allowed'
ADMIN_ONLY = 'Admin only'
NOT_A_MEMBER = 'User is not a member of this server'
NO_ROLES_CONFIGURED = '*No roles configured*'
UNEXPECTED_ERROR = 'Something went wrong while running this command'


def role_mention(role_id) -> str:
    return f'<@&{role_id}>'


def format_allowed_roles(role_ids) -> str:
    """허용 역할 목록 메시지"""
    listing = '\n'.join(role_mention(role_id) for role_id in role_ids) or NO_ROLES_CONFIGURED
    return f'Allowed roles:\n{listing}'


async def reply(interaction: discord.Interaction, content: str):
    """실행자에게만 보이는 응답"""
    if interaction.response.is_done():
        await interaction.followup.send(content, ephemeral=True)
    else:
        await interaction.response.send_message(content, ephemeral=True)


class RoleCommands:
    """역할 명령어 처리기 (허용 역할 저장소를 소유)"""

    def __init__(self, settings: Settings, store: AllowedRoleStore):
        self.settings = settings
        self.store = store

    def authorize(self, interaction: discord.Interaction) -> AuthorizationContext:
        return resolve_authorization(
            interaction.user,
            self.settings.admin_role_id,
            self.settings.support_role_id,
        )

    async def grant(self, interaction: discord.Interaction, user: discord.abc.User, role: discord.Role):
        await self._change_member_role(interaction, user, role, grant=True)

    async def ungrant(self, interaction: discord.Interaction, user: discord.abc.User, role: discord.Role):
        await self._change_member_role(interaction, user, role, grant=False)

    async def list_roles(self, interaction: discord.Interaction):
        await reply(interaction, format_allowed_roles(self.store.roles()))

    async def add(self, interaction: discord.Interaction, role: discord.Role):
        if not self.authorize(interaction).is_admin:
            await reply(interaction, ADMIN_ONLY)
            return

        if await self.store.add(role.id):
            logger.info(f'허용 역할 추가: {role.name}({role.id}) by {interaction.user}')
        await reply(interaction, f'Added {role_mention(role.id)} to allowed roles')

    async def remove(self, interaction: discord.Interaction, role: discord.Role):
        if not self.authorize(interaction).is_admin:
            await reply(interaction, ADMIN_ONLY)
            return

        if await self.store.remove(role.id):
            logger.info(f'허용 역할 제거: {role.name}({role.id}) by {interaction.user}')
        await reply(interaction, f'Removed {role_mention(role.id)} from allowed roles')

    async def _change_member_role(self, interaction, user, role, grant: bool):
        if not self.authorize(interaction).can_grant:
            await reply(interaction, ACCESS_DENIED)
            return

        # 관리자라도 허용 목록에 없는 역할은 부여/회수할 수 없음
        if role.id not in self.store:
            await reply(interaction, ROLE_NOT_ALLOWED)
            return

        try:
            member = await interaction.guild.fetch_member(user.id)
        except discord.NotFound:
            await reply(interaction, NOT_A_MEMBER)
            return
        except discord.HTTPException as e:
            logger.error(f'멤버 조회 실패: {user.id} - {e}')
            await reply(interaction, f'Discord API error: {e.text or e.status}')
            return

        reason = f'{"grant" if grant else "ungrant"} by {interaction.user} ({interaction.user.id})'
        try:
            if grant:
                await member.add_roles(role, reason=reason)
            else:
                await member.remove_roles(role, reason=reason)
        except discord.Forbidden:
            logger.error(f'역할 변경 권한 없음: {role.name}({role.id}) - {member}')
            await reply(interaction, f'Missing permission to manage {role_mention(role.id)}')
            return
        except discord.HTTPException as e:
            logger.error(f'역할 변경 실패: {role.name}({role.id}) - {member} - {e}')
            await reply(interaction, f'Discord API error: {e.text or e.status}')
            return

        if grant:
            logger.info(f'역할 부여: {role.name}({role.id}) -> {member} by {interaction.user}')
            await reply(interaction, f'Granted {role_mention(role.id)} to {user.mention}')
        else:
            logger.info(f'역할 회수: {role.name}({role.id}) <- {member} by {interaction.user}')
            await reply(interaction, f'Removed {role_mention(role.id)} from {user.mention}')


async def sync_commands(tree: app_commands.CommandTree, guild_id: int) -> bool:
    """
    길드 전용 슬래시 명령어 등록

    실패해도 봇은 계속 동작합니다 (기존에 등록된 명령어는 그대로 사용 가능).
    """
    try:
        synced = await tree.sync(guild=discord.Object(id=guild_id))
    except (discord.HTTPException, app_commands.AppCommandError) as e:
        logger.error(f'슬래시 명령어 등록 실패: {e}')
        return False

    logger.info(f'슬래시 명령어 {len(synced)}개를 길드 {guild_id}에 등록했습니다')
    return True


def setup(bot, settings: Settings, store: AllowedRoleStore) -> RoleCommands:
    """봇에 명령어 등록"""
    handler = RoleCommands(settings, store)
    guild = discord.Object(id=settings.guild_id)

    @bot.tree.command(name='grant', description='Grant an allowed role to a user', guild=guild)
    @app_commands.describe(user='User to grant the role', role='Role to grant')
    async def grant(interaction: discord.Interaction, user: discord.User, role: discord.Role):
        await handler.grant(interaction, user, role)

    @bot.tree.command(name='ungrant', description='Remove a granted role from a user', guild=guild)
    @app_commands.describe(user='User to remove the role from', role='Role to remove')
    async def ungrant(interaction: discord.Interaction, user: discord.User, role: discord.Role):
        await handler.ungrant(interaction, user, role)

    @bot.tree.command(name='roles', description='List all allowed roles', guild=guild)
    async def roles(interaction: discord.Interaction):
        await handler.list_roles(interaction)

    @bot.tree.command(name='add', description='Admin: Allow a role to be grantable', guild=guild)
    @app_commands.describe(role='Role to allow')
    async def add(interaction: discord.Interaction, role: discord.Role):
        await handler.add(interaction, role)

    @bot.tree.command(name='remove', description='Admin: Disallow a role from being granted', guild=guild)
    @app_commands.describe(role='Role to disallow')
    async def remove(interaction: discord.Interaction, role: discord.Role):
        await handler.remove(interaction, role)

    @bot.tree.error
    async def on_app_command_error(interaction: discord.Interaction, error: app_commands.AppCommandError):
        """명령어 처리 중 예상하지 못한 오류"""
        # 등록되지 않은 명령어는 응답하지 않음
        if isinstance(error, app_commands.CommandNotFound):
            logger.warning(f'알 수 없는 명령어 무시: /{error.name} - {interaction.user}')
            return

        command = interaction.command.name if interaction.command else '?'
        logger.error(f'명령어 오류: {interaction.user} - /{command} - {error}', exc_info=error)
        await reply(interaction, UNEXPECTED_ERROR)

    return handler
