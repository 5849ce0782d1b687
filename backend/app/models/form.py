from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base


def _random_token() -> str:
    return str(uuid4())


class Form(Base):
    """Form definition owned by one user (and optionally a team).

    ``uuid`` is the public identifier. It holds a random token between insert
    and flush, and is then replaced with the hashid of the sequential ``id``
    (see ``app.services.forms.create_form``).

    Publication and trash state are derived from ``published_at`` and
    ``deleted_at`` by comparing against the current time.
    """

    __tablename__ = "forms"
    __table_args__ = (
        Index("ix_forms_user_id", "user_id"),
        Index("ix_forms_team_id", "team_id"),
        Index("ix_forms_published_at", "published_at"),
        Index("ix_forms_deleted_at", "deleted_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uuid: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, default=_random_token)
    user_id: Mapped[UUID] = mapped_column(postgresql.UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    team_id: Mapped[UUID | None] = mapped_column(postgresql.UUID(as_uuid=True), ForeignKey("teams.id"))
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Copyable configuration (see FORM_TEMPLATE_ATTRIBUTES)
    description: Mapped[str | None] = mapped_column(Text)
    language: Mapped[str | None] = mapped_column(String(10))
    avatar_path: Mapped[str | None] = mapped_column(String(500))
    background_path: Mapped[str | None] = mapped_column(String(500))
    brand_color: Mapped[str | None] = mapped_column(String(20))
    text_color: Mapped[str | None] = mapped_column(String(20))
    background_color: Mapped[str | None] = mapped_column(String(20))
    eoc_text: Mapped[str | None] = mapped_column(Text)
    eoc_headline: Mapped[str | None] = mapped_column(String(255))
    data_retention_days: Mapped[int | None] = mapped_column(Integer)
    is_auto_delete_enabled: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false", nullable=False)
    legal_notice_link: Mapped[str | None] = mapped_column(String(500))
    privacy_link: Mapped[str | None] = mapped_column(String(500))
    cta_label: Mapped[str | None] = mapped_column(String(255))
    cta_link: Mapped[str | None] = mapped_column(String(500))
    cta_append_params: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false", nullable=False)
    cta_redirect_delay: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    use_cta_redirect: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false", nullable=False)
    cta_append_session_id: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false", nullable=False)
    linkedin: Mapped[str | None] = mapped_column(String(500))
    github: Mapped[str | None] = mapped_column(String(500))
    instagram: Mapped[str | None] = mapped_column(String(500))
    facebook: Mapped[str | None] = mapped_column(String(500))
    twitter: Mapped[str | None] = mapped_column(String(500))
    show_cta_link: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false", nullable=False)
    show_social_links: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false", nullable=False)
    use_brighter_inputs: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false", nullable=False)
    show_form_progress: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false", nullable=False)

    is_notification_via_mail: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false", nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(server_default=func.now(), onupdate=func.now())

    user: Mapped["User"] = relationship(back_populates="forms")
    team: Mapped["Team | None"] = relationship(back_populates="forms")
    blocks: Mapped[list["FormBlock"]] = relationship(
        back_populates="form",
        cascade="all, delete-orphan",
        order_by="FormBlock.sequence",
    )
    sessions: Mapped[list["FormSession"]] = relationship(back_populates="form", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Form {self.name} ({self.uuid})>"
