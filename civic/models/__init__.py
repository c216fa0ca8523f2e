# civic/models/__init__.py
# Регистрируем все модели в Base.metadata (relationship-и ссылаются друг на друга по имени)

from .user import User
from .issue import Issue
from .media import Media
from .comment import Comment
from .vote import Vote

__all__ = [
    "User",
    "Issue",
    "Media",
    "Comment",
    "Vote",
]
