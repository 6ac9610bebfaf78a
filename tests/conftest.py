"""
Pytest configuration and shared fixtures
"""
from unittest.mock import AsyncMock, MagicMock

import pytest

from common.config import Settings
from common.store import AllowedRoleStore

ADMIN_ROLE_ID = 1000
SUPPORT_ROLE_ID = 2000
GUILD_ID = 3000


def make_role(role_id, name=None):
    """Fake discord.Role"""
    role = MagicMock()
    role.id = role_id
    role.name = name or f'role-{role_id}'
    return role


def make_member(member_id, role_ids=(), administrator=False):
    """Fake discord.Member holding the given roles"""
    member = MagicMock()
    member.id = member_id
    member.mention = f'<@{member_id}>'
    member.roles = [make_role(role_id) for role_id in role_ids]
    member.guild_permissions.administrator = administrator
    member.add_roles = AsyncMock()
    member.remove_roles = AsyncMock()
    return member


def make_interaction(invoker, target=None):
    """Fake discord.Interaction; guild.fetch_member resolves to `target`"""
    interaction = MagicMock()
    interaction.user = invoker
    interaction.response.is_done.return_value = False
    interaction.response.send_message = AsyncMock()
    interaction.followup.send = AsyncMock()
    interaction.guild.fetch_member = AsyncMock(return_value=target)
    return interaction


def sent_content(interaction):
    """Content of the single ephemeral reply sent to the interaction"""
    interaction.response.send_message.assert_awaited_once()
    args, kwargs = interaction.response.send_message.call_args
    assert kwargs.get('ephemeral') is True
    return args[0]


@pytest.fixture
def data_file(tmp_path):
    return str(tmp_path / 'db.json')


@pytest.fixture
def settings(data_file):
    return Settings(
        token='test-token',
        admin_role_id=ADMIN_ROLE_ID,
        support_role_id=SUPPORT_ROLE_ID,
        guild_id=GUILD_ID,
        data_file=data_file,
    )


@pytest.fixture
def store(data_file):
    return AllowedRoleStore.open(data_file)


@pytest.fixture
def admin():
    return make_member(1, role_ids=[ADMIN_ROLE_ID])


@pytest.fixture
def support():
    return make_member(2, role_ids=[SUPPORT_ROLE_ID])


@pytest.fixture
def outsider():
    return make_member(3, role_ids=[42])


@pytest.fixture
def target():
    return make_member(99)
