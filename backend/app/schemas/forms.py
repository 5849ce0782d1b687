import uuid
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

BlockType = Literal["group", "chat", "button", "input", "checkbox", "radio", "rating", "date", "consent"]
InteractionType = Literal["button", "input", "checkbox", "radio", "consent"]
LogicAction = Literal["show", "hide", "goto"]
LogicEvaluate = Literal["and", "or"]
PublicationFilter = Literal["published", "unpublished", "trashed"]

_COLOR_PATTERN = r"^#[0-9a-fA-F]{6}$"


# ---------------------------------------------------------------------------
# Form configuration
# ---------------------------------------------------------------------------


class FormConfig(BaseModel):
    """Styling and behaviour fields shared by create and update payloads."""

    description: str | None = None
    language: str | None = Field(None, max_length=10)
    avatar_path: str | None = Field(None, max_length=500)
    background_path: str | None = Field(None, max_length=500)
    brand_color: str | None = Field(None, pattern=_COLOR_PATTERN)
    text_color: str | None = Field(None, pattern=_COLOR_PATTERN)
    background_color: str | None = Field(None, pattern=_COLOR_PATTERN)
    eoc_text: str | None = None
    eoc_headline: str | None = Field(None, max_length=255)
    data_retention_days: int | None = Field(None, ge=1)
    is_auto_delete_enabled: bool = False
    legal_notice_link: str | None = Field(None, max_length=500)
    privacy_link: str | None = Field(None, max_length=500)
    cta_label: str | None = Field(None, max_length=255)
    cta_link: str | None = Field(None, max_length=500)
    cta_append_params: bool = False
    cta_redirect_delay: int = Field(0, ge=0)
    use_cta_redirect: bool = False
    cta_append_session_id: bool = False
    linkedin: str | None = Field(None, max_length=500)
    github: str | None = Field(None, max_length=500)
    instagram: str | None = Field(None, max_length=500)
    facebook: str | None = Field(None, max_length=500)
    twitter: str | None = Field(None, max_length=500)
    show_cta_link: bool = False
    show_social_links: bool = False
    use_brighter_inputs: bool = False
    show_form_progress: bool = False
    is_notification_via_mail: bool = False


class FormCreate(FormConfig):
    name: str = Field(..., min_length=1, max_length=255)
    team_id: uuid.UUID | None = None


class FormUpdate(FormConfig):
    name: str | None = Field(None, min_length=1, max_length=255)


class FormDuplicateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------


class InteractionCreate(BaseModel):
    type: InteractionType
    label: str | None = Field(None, max_length=255)
    reply: str | None = None
    message: str | None = None
    sequence: int = 0
    is_disabled: bool = False
    options: dict[str, Any] | None = None


class InteractionOut(InteractionCreate):
    model_config = ConfigDict(from_attributes=True)

    uuid: str


class LogicOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    uuid: str
    name: str | None
    evaluate: LogicEvaluate
    action: LogicAction
    action_target: str | None
    conditions: list[dict[str, Any]]


class BlockCreate(BaseModel):
    type: BlockType
    parent_block: str | None = Field(None, max_length=64)
    sequence: int | None = None
    title: str | None = Field(None, max_length=255)
    message: str | None = None
    is_required: bool = False
    is_disabled: bool = False
    options: dict[str, Any] | None = None
    interactions: list[InteractionCreate] = Field(default_factory=list)


class BlockUpdate(BaseModel):
    type: BlockType | None = None
    parent_block: str | None = Field(None, max_length=64)
    sequence: int | None = None
    title: str | None = Field(None, max_length=255)
    message: str | None = None
    is_required: bool | None = None
    is_disabled: bool | None = None
    options: dict[str, Any] | None = None
    interactions: list[InteractionCreate] | None = None


class BlockOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    uuid: str
    type: BlockType
    parent_block: str | None
    sequence: int
    title: str | None
    message: str | None
    is_required: bool
    is_disabled: bool
    options: dict[str, Any] | None
    interactions: list[InteractionOut]
    logics: list[LogicOut]


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


class InteractionTemplate(BaseModel):
    type: str
    label: str | None = None
    reply: str | None = None
    message: str | None = None
    sequence: int = 0
    is_disabled: bool = False
    options: dict[str, Any] | None = None


class LogicTemplate(BaseModel):
    name: str | None = None
    evaluate: LogicEvaluate = "and"
    action: LogicAction
    action_target: str | None = None
    conditions: list[dict[str, Any]] = Field(default_factory=list)


class BlockTemplate(BaseModel):
    uuid: str = Field(..., min_length=1, max_length=64)
    type: str
    parent_block: str | None = None
    sequence: int = 0
    title: str | None = None
    message: str | None = None
    is_required: bool = False
    is_disabled: bool = False
    options: dict[str, Any] | None = None
    interactions: list[InteractionTemplate] = Field(default_factory=list)
    logics: list[LogicTemplate] = Field(default_factory=list)


class FormTemplate(BaseModel):
    """Transportable form structure: allow-listed attributes plus the block graph."""

    attributes: dict[str, Any] = Field(default_factory=dict)
    blocks: list[BlockTemplate] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Owner-facing form views
# ---------------------------------------------------------------------------


class FormMetrics(BaseModel):
    total_sessions: int
    completed_sessions: int
    completion_rate: float
    sessions_current_month: int


class FormOut(FormConfig):
    uuid: str
    name: str
    team_id: uuid.UUID | None
    published_at: datetime | None
    deleted_at: datetime | None
    is_published: bool
    is_trashed: bool
    avatar: str | bool
    background: str | bool
    contrast_color: str
    initials: str
    route: str
    block_count: int
    action_block_count: int
    created_at: datetime
    updated_at: datetime


class FormDetailOut(FormOut):
    metrics: FormMetrics


class FormListResponse(BaseModel):
    items: list[FormOut]
    total: int
    page: int
    page_size: int


# ---------------------------------------------------------------------------
# Public form views
# ---------------------------------------------------------------------------


class PublicBlock(BaseModel):
    uuid: str
    type: BlockType
    parent_block: str | None
    sequence: int
    title: str | None
    message: str | None
    is_required: bool
    options: dict[str, Any] | None
    interactions: list[InteractionOut]
    logics: list[LogicOut]


class PublicStoryboard(BaseModel):
    count: int
    blocks: list[PublicBlock]


class PublicForm(BaseModel):
    uuid: str
    name: str
    description: str | None
    language: str | None
    avatar: str | bool
    background: str | bool
    brand_color: str
    contrast_color: str
    text_color: str | None
    background_color: str | None
    eoc_text: str | None
    eoc_headline: str | None
    cta_label: str | None
    cta_link: str | None
    cta_append_params: bool
    cta_redirect_delay: int
    use_cta_redirect: bool
    cta_append_session_id: bool
    show_cta_link: bool
    show_social_links: bool
    social_links: dict[str, str | None]
    use_brighter_inputs: bool
    show_form_progress: bool
    company_name: str | None
    company_description: str | None
    privacy_link: str | None
    legal_notice_link: str | None
    privacy_contact_person: str | None
    privacy_contact_email: str | None
    initials: str
    storyboard: PublicStoryboard


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


class SessionStart(BaseModel):
    params: dict[str, Any] | None = None


class SessionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    token: str
    is_completed: bool
    created_at: datetime


class ResponseSubmission(BaseModel):
    block: str = Field(..., min_length=1, max_length=64, description="Block uuid")
    interaction: str | None = Field(None, max_length=64, description="Interaction uuid")
    value: Any = None


class SessionResponseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    value: Any
    created_at: datetime
