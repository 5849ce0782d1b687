import uuid
from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

BLOCK_TYPES = (
    "group",
    "chat",
    "button",
    "input",
    "checkbox",
    "radio",
    "rating",
    "date",
    "consent",
)

GROUP_BLOCK_TYPE = "group"


class FormBlock(Base):
    """One element of a form's storyboard.

    ``parent_block`` holds the ``uuid`` of a group block in the same form.
    It is not a foreign key: it may dangle while the owner edits the form.
    """

    __tablename__ = "form_blocks"
    __table_args__ = (
        Index("ix_form_blocks_form_id", "form_id"),
        Index("ix_form_blocks_form_sequence", "form_id", "sequence"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uuid: Mapped[str] = mapped_column(String(64), nullable=False, default=lambda: str(uuid.uuid4()))
    form_id: Mapped[int] = mapped_column(Integer, ForeignKey("forms.id", ondelete="CASCADE"), nullable=False)
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    parent_block: Mapped[str | None] = mapped_column(String(64))
    sequence: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    title: Mapped[str | None] = mapped_column(String(255))
    message: Mapped[str | None] = mapped_column(Text)
    is_required: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false", nullable=False)
    is_disabled: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false", nullable=False)
    options: Mapped[dict | None] = mapped_column(JSONB)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(server_default=func.now(), onupdate=func.now())

    form: Mapped["Form"] = relationship(back_populates="blocks")
    interactions: Mapped[list["FormBlockInteraction"]] = relationship(
        back_populates="block",
        cascade="all, delete-orphan",
        order_by="FormBlockInteraction.sequence",
    )
    logics: Mapped[list["FormBlockLogic"]] = relationship(back_populates="block", cascade="all, delete-orphan")
    responses: Mapped[list["FormSessionResponse"]] = relationship(back_populates="block", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<FormBlock {self.type} ({self.uuid})>"
