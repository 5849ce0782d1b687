import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, Index, Integer, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base


class FormBlockLogic(Base):
    """Conditional behaviour attached to a block.

    ``conditions`` is a list of dicts:
        {
            "source": "<block uuid whose answer is inspected>",
            "operator": "equals" | "not_equals" | "contains" | "is_empty",
            "value": <any>
        }
    ``action_target`` is the uuid of the block a ``goto`` jumps to.
    """

    __tablename__ = "form_block_logics"
    __table_args__ = (Index("ix_form_block_logics_block_id", "form_block_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uuid: Mapped[str] = mapped_column(String(64), nullable=False, default=lambda: str(uuid.uuid4()))
    form_block_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("form_blocks.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str | None] = mapped_column(String(255))
    evaluate: Mapped[str] = mapped_column(String(10), default="and", server_default="and", nullable=False)
    action: Mapped[str] = mapped_column(String(20), nullable=False)
    action_target: Mapped[str | None] = mapped_column(String(64))
    conditions: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())

    block: Mapped["FormBlock"] = relationship(back_populates="logics")

    def __repr__(self) -> str:
        return f"<FormBlockLogic {self.action} ({self.uuid})>"
