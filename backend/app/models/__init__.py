from app.models.form import Form
from app.models.form_block import FormBlock
from app.models.form_block_interaction import FormBlockInteraction
from app.models.form_block_logic import FormBlockLogic
from app.models.form_session import FormSession
from app.models.form_session_response import FormSessionResponse
from app.models.team import Team
from app.models.user import User

__all__ = [
    "Form",
    "FormBlock",
    "FormBlockInteraction",
    "FormBlockLogic",
    "FormSession",
    "FormSessionResponse",
    "Team",
    "User",
]
