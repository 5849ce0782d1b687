"""Form service: storyboard resolution, session metrics, templates and lifecycle."""

from app.services.forms.exceptions import (
    BlockNotFound,
    FormError,
    FormNotFound,
    InvalidTemplate,
    SessionAlreadyCompleted,
    SessionNotFound,
)
from app.services.forms.lifecycle import (
    PUBLICATION_FILTERS,
    apply_publication_filter,
    create_block,
    create_form,
    delete_block,
    duplicate_form,
    get_block,
    get_form_by_public_id,
    get_published_form,
    is_owner,
    is_published,
    is_trashed,
    publish_form,
    restore_form,
    soft_delete_form,
    unpublish_form,
    update_block,
    update_form_config,
)
from app.services.forms.sessions import (
    complete_session,
    completion_rate,
    count_completed_sessions,
    count_distinct_sessions,
    count_sessions_in_month,
    get_form_metrics,
    get_session,
    record_response,
    start_session,
)
from app.services.forms.storyboard import Storyboard, resolve_storyboard
from app.services.forms.templates import (
    FORM_TEMPLATE_ATTRIBUTES,
    apply_form_template,
    export_form_template,
)

__all__ = [
    "FORM_TEMPLATE_ATTRIBUTES",
    "PUBLICATION_FILTERS",
    "BlockNotFound",
    "FormError",
    "FormNotFound",
    "InvalidTemplate",
    "SessionAlreadyCompleted",
    "SessionNotFound",
    "Storyboard",
    "apply_form_template",
    "apply_publication_filter",
    "complete_session",
    "completion_rate",
    "count_completed_sessions",
    "count_distinct_sessions",
    "count_sessions_in_month",
    "create_block",
    "create_form",
    "delete_block",
    "duplicate_form",
    "export_form_template",
    "get_block",
    "get_form_by_public_id",
    "get_form_metrics",
    "get_published_form",
    "get_session",
    "is_owner",
    "is_published",
    "is_trashed",
    "publish_form",
    "record_response",
    "resolve_storyboard",
    "restore_form",
    "soft_delete_form",
    "start_session",
    "unpublish_form",
    "update_block",
    "update_form_config",
]
