from datetime import datetime
from typing import Any

from sqlalchemy import ForeignKey, Index, Integer, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base


class FormSessionResponse(Base):
    """A visitor's answer to one block within a session.

    ``value`` holds whatever the interaction produced:
        "Free text here"      # input
        ["Option A", "B"]     # checkbox
        4                     # rating
        true                  # consent
    """

    __tablename__ = "form_session_responses"
    __table_args__ = (
        Index("ix_form_session_responses_session_id", "form_session_id"),
        Index("ix_form_session_responses_block_id", "form_block_id"),
        Index("ix_form_session_responses_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    form_session_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("form_sessions.id", ondelete="CASCADE"), nullable=False
    )
    form_block_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("form_blocks.id", ondelete="CASCADE"), nullable=False
    )
    form_block_interaction_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("form_block_interactions.id", ondelete="SET NULL")
    )
    value: Mapped[Any] = mapped_column(JSONB)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())

    session: Mapped["FormSession"] = relationship(back_populates="responses")
    block: Mapped["FormBlock"] = relationship(back_populates="responses")

    def __repr__(self) -> str:
        return f"<FormSessionResponse session={self.form_session_id} block={self.form_block_id}>"
