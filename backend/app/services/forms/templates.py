"""Form templates: export a form's configuration and block graph, apply it elsewhere.

The template is the single definition of what travels between forms: the
allow-listed configuration attributes plus every block with its interactions
and logic. Applying a template never reuses a source identity; every block,
interaction and logic gets a fresh uuid and block references are remapped.
"""

import logging
from uuid import uuid4

from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.models.form import Form
from app.models.form_block import BLOCK_TYPES, FormBlock
from app.models.form_block_interaction import INTERACTION_TYPES, FormBlockInteraction
from app.models.form_block_logic import FormBlockLogic
from app.schemas.forms import (
    BlockTemplate,
    FormConfig,
    FormTemplate,
    InteractionTemplate,
    LogicTemplate,
)
from app.services.forms.exceptions import InvalidTemplate

logger = logging.getLogger(__name__)

# Configuration copied by templates and duplication. Ownership, publication,
# trash state and the public identifier are never part of a template.
FORM_TEMPLATE_ATTRIBUTES: tuple[str, ...] = (
    "description",
    "language",
    "avatar_path",
    "background_path",
    "brand_color",
    "text_color",
    "background_color",
    "eoc_text",
    "eoc_headline",
    "data_retention_days",
    "is_auto_delete_enabled",
    "legal_notice_link",
    "privacy_link",
    "cta_label",
    "cta_link",
    "cta_append_params",
    "cta_redirect_delay",
    "use_cta_redirect",
    "cta_append_session_id",
    "linkedin",
    "github",
    "instagram",
    "facebook",
    "twitter",
    "show_cta_link",
    "show_social_links",
    "use_brighter_inputs",
    "show_form_progress",
)


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


def _export_block(block: FormBlock) -> BlockTemplate:
    return BlockTemplate(
        uuid=block.uuid,
        type=block.type,
        parent_block=block.parent_block,
        sequence=block.sequence,
        title=block.title,
        message=block.message,
        is_required=block.is_required,
        is_disabled=block.is_disabled,
        options=block.options,
        interactions=[
            InteractionTemplate(
                type=interaction.type,
                label=interaction.label,
                reply=interaction.reply,
                message=interaction.message,
                sequence=interaction.sequence,
                is_disabled=interaction.is_disabled,
                options=interaction.options,
            )
            for interaction in block.interactions
        ],
        logics=[
            LogicTemplate(
                name=logic.name,
                evaluate=logic.evaluate,
                action=logic.action,
                action_target=logic.action_target,
                conditions=list(logic.conditions or []),
            )
            for logic in block.logics
        ],
    )


def export_form_template(form: Form) -> FormTemplate:
    return FormTemplate(
        attributes={name: getattr(form, name) for name in FORM_TEMPLATE_ATTRIBUTES},
        blocks=[_export_block(block) for block in form.blocks],
    )


# ---------------------------------------------------------------------------
# Apply
# ---------------------------------------------------------------------------


def _validate(template: FormTemplate) -> dict:
    """Check the template and return its allow-listed attributes, coerced to column types."""
    attributes = {k: v for k, v in template.attributes.items() if k in FORM_TEMPLATE_ATTRIBUTES}
    try:
        config = FormConfig.model_validate(attributes)
    except ValidationError as exc:
        raise InvalidTemplate(f"Invalid form attributes: {exc.error_count()} error(s)") from exc

    seen: set[str] = set()
    for block in template.blocks:
        if block.type not in BLOCK_TYPES:
            raise InvalidTemplate(f"Unknown block type: {block.type}")
        if block.uuid in seen:
            raise InvalidTemplate(f"Duplicate block uuid: {block.uuid}")
        seen.add(block.uuid)
        for interaction in block.interactions:
            if interaction.type not in INTERACTION_TYPES:
                raise InvalidTemplate(f"Unknown interaction type: {interaction.type}")

    return config.model_dump(include=set(attributes))


def _remap_conditions(conditions: list[dict], uuid_map: dict[str, str]) -> list[dict]:
    remapped = []
    for condition in conditions:
        condition = dict(condition)
        source = condition.get("source")
        if source is not None:
            condition["source"] = uuid_map.get(source, source)
        remapped.append(condition)
    return remapped


def apply_form_template(db: Session, form: Form, template: FormTemplate) -> Form:
    """Copy ``template`` onto ``form``, appending its blocks after existing ones.

    References to uuids outside the template (dangling parents, logic targets)
    are carried over unchanged, so they stay dangling in the target form.
    Flushes but does not commit.
    """
    attributes = _validate(template)

    for name, value in attributes.items():
        setattr(form, name, value)
    for name in template.attributes.keys() - attributes.keys():
        logger.debug("Ignoring non-template attribute %s for form %s", name, form.id)

    uuid_map = {block.uuid: str(uuid4()) for block in template.blocks}
    offset = max((block.sequence for block in form.blocks), default=-1) + 1

    for source in template.blocks:
        block = FormBlock(
            uuid=uuid_map[source.uuid],
            type=source.type,
            parent_block=uuid_map.get(source.parent_block, source.parent_block),
            sequence=offset + source.sequence,
            title=source.title,
            message=source.message,
            is_required=source.is_required,
            is_disabled=source.is_disabled,
            options=source.options,
        )
        block.interactions = [
            FormBlockInteraction(
                uuid=str(uuid4()),
                type=interaction.type,
                label=interaction.label,
                reply=interaction.reply,
                message=interaction.message,
                sequence=interaction.sequence,
                is_disabled=interaction.is_disabled,
                options=interaction.options,
            )
            for interaction in source.interactions
        ]
        block.logics = [
            FormBlockLogic(
                uuid=str(uuid4()),
                name=logic.name,
                evaluate=logic.evaluate,
                action=logic.action,
                action_target=uuid_map.get(logic.action_target, logic.action_target),
                conditions=_remap_conditions(logic.conditions, uuid_map),
            )
            for logic in source.logics
        ]
        form.blocks.append(block)

    db.flush()
    logger.info("Applied template to form %s (%d blocks)", form.id, len(template.blocks))
    return form
