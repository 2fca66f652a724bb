"""
Flatmatch — ORM model registry.

Importing every model here ensures that Alembic (and any other tool that
inspects ``Base.metadata``) discovers all tables automatically.
"""

from flatmatch.models.user import User
from flatmatch.models.quiz_result import QuizResult

__all__ = [
    "User",
    "QuizResult",
]
