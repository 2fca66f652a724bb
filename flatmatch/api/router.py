"""
Flatmatch — Main API Router

Aggregates all sub-routers under a single prefix so that ``flatmatch.main``
can mount the entire API surface with one ``include_router`` call.
"""

from fastapi import APIRouter

from flatmatch.api import matching, quiz, users

router = APIRouter()

router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(quiz.router, prefix="/quiz", tags=["Quiz"])
router.include_router(matching.router, prefix="/match", tags=["Matching"])
