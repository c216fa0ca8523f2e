from typing import Iterable, Union

from civic.models.enums import UserRole

MODERATION_ROLES = frozenset({UserRole.MODERATOR, UserRole.ADMIN})


def has_role(role: Union[UserRole, str, None], allowed: Iterable[UserRole]) -> bool:
    """Проверка права по закрытому набору ролей; неизвестная строка роли не проходит."""
    if role is None:
        return False
    try:
        role = UserRole(role)
    except ValueError:
        return False
    return role in set(allowed)
