"""Computed form views: colors, initials, links and the public payload.

Nothing here is stored: every value is derived from the form (and its owner)
each time it is requested. Asset lookups go through an injected
``AssetStorage`` so these helpers run without an HTTP context.
"""

import json
from datetime import datetime

from app.core.config import settings
from app.models.form import Form
from app.models.form_block import FormBlock
from app.schemas.forms import (
    FormDetailOut,
    FormMetrics,
    FormOut,
    InteractionOut,
    LogicOut,
    PublicBlock,
    PublicForm,
    PublicStoryboard,
)
from app.services.assets import AssetStorage
from app.services.forms.lifecycle import is_published, is_trashed
from app.services.forms.storyboard import resolve_storyboard
from app.services.forms.templates import FORM_TEMPLATE_ATTRIBUTES

SOCIAL_LINK_FIELDS = ("linkedin", "github", "instagram", "facebook", "twitter")


# ---------------------------------------------------------------------------
# Accessors
# ---------------------------------------------------------------------------


def brand_color(form: Form) -> str:
    return form.brand_color or settings.DEFAULT_BRAND_COLOR


def contrast_color(hex_color: str) -> str:
    """Readable text color on ``hex_color`` using the YIQ brightness formula."""
    value = hex_color.lstrip("#")
    if len(value) == 3:
        value = "".join(c * 2 for c in value)
    try:
        r, g, b = (int(value[i : i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        return "white"
    yiq = (r * 299 + g * 587 + b * 114) / 1000
    return "black" if yiq >= 128 else "white"


def initials(name: str) -> str:
    """First two characters of the first two words, e.g. "Customer Survey" -> "Cu Su"."""
    return " ".join(word[:2] for word in name.split(" ")[:2])


def active_privacy_link(form: Form) -> str | None:
    return form.privacy_link or form.user.privacy_link


def active_legal_notice_link(form: Form) -> str | None:
    return form.legal_notice_link or form.user.legal_notice_link


def form_route(form: Form) -> str:
    return f"{settings.PUBLIC_FORM_BASE_URL.rstrip('/')}/{form.uuid}"


def block_count(form: Form) -> int:
    return len(form.blocks)


def action_block_count(form: Form) -> int:
    """Blocks that collect a response (have at least one interaction)."""
    return sum(1 for block in form.blocks if block.interactions)


def is_empty(form: Form) -> bool:
    return block_count(form) <= 0


# ---------------------------------------------------------------------------
# Owner view
# ---------------------------------------------------------------------------


def build_form_out(form: Form, assets: AssetStorage, now: datetime | None = None) -> FormOut:
    config = {name: getattr(form, name) for name in FORM_TEMPLATE_ATTRIBUTES}
    return FormOut(
        **config,
        is_notification_via_mail=form.is_notification_via_mail,
        uuid=form.uuid,
        name=form.name,
        team_id=form.team_id,
        published_at=form.published_at,
        deleted_at=form.deleted_at,
        is_published=is_published(form, now),
        is_trashed=is_trashed(form, now),
        avatar=assets.public_url(form.avatar_path),
        background=assets.public_url(form.background_path),
        contrast_color=contrast_color(brand_color(form)),
        initials=initials(form.name),
        route=form_route(form),
        block_count=block_count(form),
        action_block_count=action_block_count(form),
        created_at=form.created_at,
        updated_at=form.updated_at,
    )


def build_form_detail(
    form: Form, assets: AssetStorage, metrics: FormMetrics, now: datetime | None = None
) -> FormDetailOut:
    return FormDetailOut(**build_form_out(form, assets, now).model_dump(), metrics=metrics)


# ---------------------------------------------------------------------------
# Public view
# ---------------------------------------------------------------------------


def _public_block(block: FormBlock) -> PublicBlock:
    return PublicBlock(
        uuid=block.uuid,
        type=block.type,
        parent_block=block.parent_block,
        sequence=block.sequence,
        title=block.title,
        message=block.message,
        is_required=block.is_required,
        options=block.options,
        interactions=[
            InteractionOut.model_validate(interaction)
            for interaction in block.interactions
            if not interaction.is_disabled
        ],
        logics=[LogicOut.model_validate(logic) for logic in block.logics],
    )


def build_public_storyboard(form: Form) -> PublicStoryboard:
    storyboard = resolve_storyboard(form.blocks)
    return PublicStoryboard(
        count=storyboard.count,
        blocks=[_public_block(block) for block in storyboard.blocks],
    )


def build_public_form(form: Form, assets: AssetStorage) -> PublicForm:
    owner = form.user
    color = brand_color(form)
    return PublicForm(
        uuid=form.uuid,
        name=form.name,
        description=form.description,
        language=form.language,
        avatar=assets.public_url(form.avatar_path),
        background=assets.public_url(form.background_path),
        brand_color=color,
        contrast_color=contrast_color(color),
        text_color=form.text_color,
        background_color=form.background_color,
        eoc_text=form.eoc_text,
        eoc_headline=form.eoc_headline,
        cta_label=form.cta_label,
        cta_link=form.cta_link,
        cta_append_params=form.cta_append_params,
        cta_redirect_delay=form.cta_redirect_delay,
        use_cta_redirect=form.use_cta_redirect,
        cta_append_session_id=form.cta_append_session_id,
        show_cta_link=form.show_cta_link,
        show_social_links=form.show_social_links,
        social_links={name: getattr(form, name) for name in SOCIAL_LINK_FIELDS},
        use_brighter_inputs=form.use_brighter_inputs,
        show_form_progress=form.show_form_progress,
        company_name=owner.company_name,
        company_description=owner.company_description,
        privacy_link=active_privacy_link(form),
        legal_notice_link=active_legal_notice_link(form),
        privacy_contact_person=owner.privacy_contact_person,
        privacy_contact_email=owner.privacy_contact_email,
        initials=initials(form.name),
        storyboard=build_public_storyboard(form),
    )


def build_embed_script(form: Form, assets: AssetStorage) -> str:
    """JavaScript bootstrap that exposes the public form as ``window.iptSettings``."""
    settings_json = json.dumps(build_public_form(form, assets).model_dump(mode="json"))
    return f"window.iptSettings = window.iptSettings || [];window.iptSettings = {settings_json}"
