"""
Flatmatch — QuizResult model (raw answers + derived traits and preferences).
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, func
from sqlalchemy.dialects.postgresql import JSONB, UUID as PgUUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from flatmatch.database import Base


class QuizResult(Base):
    __tablename__ = "quiz_results"

    id: Mapped[uuid.UUID] = mapped_column(
        PgUUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        PgUUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    answers: Mapped[dict] = mapped_column(
        JSONB, nullable=False, comment="Validated quiz answers"
    )
    personality_traits: Mapped[dict] = mapped_column(
        JSONB, nullable=False, comment="12 categorical traits"
    )
    match_preferences: Mapped[dict] = mapped_column(JSONB, nullable=False)
    property_preferences: Mapped[dict] = mapped_column(JSONB, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), onupdate=func.now(), nullable=True
    )

    # ── Relationships ──────────────────────────────────────────────
    user: Mapped["User"] = relationship("User", back_populates="quiz_result", lazy="selectin")

    def __repr__(self) -> str:
        return f"<QuizResult user={self.user_id} v={self.version}>"
