import uuid
from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

INTERACTION_TYPES = ("button", "input", "checkbox", "radio", "consent")


class FormBlockInteraction(Base):
    __tablename__ = "form_block_interactions"
    __table_args__ = (Index("ix_form_block_interactions_block_id", "form_block_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uuid: Mapped[str] = mapped_column(String(64), nullable=False, default=lambda: str(uuid.uuid4()))
    form_block_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("form_blocks.id", ondelete="CASCADE"), nullable=False
    )
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    label: Mapped[str | None] = mapped_column(String(255))
    reply: Mapped[str | None] = mapped_column(Text)
    message: Mapped[str | None] = mapped_column(Text)
    sequence: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    is_disabled: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false", nullable=False)
    options: Mapped[dict | None] = mapped_column(JSONB)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())

    block: Mapped["FormBlock"] = relationship(back_populates="interactions")

    def __repr__(self) -> str:
        return f"<FormBlockInteraction {self.type} ({self.uuid})>"
