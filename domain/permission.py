"""
명령어 실행 권한 판별
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class AuthorizationContext:
    is_admin: bool
    is_support: bool

    @property
    def can_grant(self) -> bool:
        return self.is_admin or self.is_support


def has_role(member, role_id: int) -> bool:
    return any(role.id == role_id for role in getattr(member, 'roles', []))


def is_administrator(member) -> bool:
    permissions = getattr(member, 'guild_permissions', None)
    return bool(permissions and permissions.administrator)


def resolve_authorization(member, admin_role_id: int, support_role_id: int) -> AuthorizationContext:
    """
    실행자의 권한 계산

    관리자 권한(administrator)이 있으면 admin과 support 모두 True입니다.
    DM 등에서 들어온 discord.User는 역할/권한 정보가 없으므로 둘 다 False가 됩니다.
    """
    administrator = is_administrator(member)
    return AuthorizationContext(
        is_admin=administrator or has_role(member, admin_role_id),
        is_support=administrator or has_role(member, support_role_id),
    )
