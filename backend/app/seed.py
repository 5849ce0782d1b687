"""Seed the database with a demo owner and a sample contact form."""

from app.core.database import SessionLocal
from app.models import Form, User
from app.schemas.forms import FormTemplate
from app.services.auth import hash_password
from app.services.forms import apply_form_template, create_form, publish_form

SEED_TEMPLATE = {
    "attributes": {
        "description": "Tell us a little about yourself and we'll get back to you.",
        "language": "en",
        "brand_color": "#2563eb",
        "eoc_headline": "Thank you!",
        "eoc_text": "We received your answers and will be in touch shortly.",
        "show_form_progress": True,
    },
    "blocks": [
        {"uuid": "welcome", "type": "chat", "sequence": 0, "message": "Hi there! This takes about a minute."},
        {"uuid": "contact", "type": "group", "sequence": 1, "title": "Contact details"},
        {
            "uuid": "name",
            "type": "input",
            "parent_block": "contact",
            "sequence": 2,
            "title": "What's your name?",
            "is_required": True,
            "interactions": [{"type": "input", "label": "Full name"}],
        },
        {
            "uuid": "email",
            "type": "input",
            "parent_block": "contact",
            "sequence": 3,
            "title": "And your email?",
            "is_required": True,
            "interactions": [{"type": "input", "label": "Email", "options": {"format": "email"}}],
        },
        {
            "uuid": "topic",
            "type": "radio",
            "sequence": 4,
            "title": "What can we help with?",
            "interactions": [
                {"type": "radio", "label": "Sales", "sequence": 0},
                {"type": "radio", "label": "Support", "sequence": 1},
                {"type": "radio", "label": "Something else", "sequence": 2},
            ],
            "logics": [
                {
                    "action": "goto",
                    "action_target": "details",
                    "conditions": [{"source": "topic", "operator": "equals", "value": "Something else"}],
                }
            ],
        },
        {"uuid": "details", "type": "input", "sequence": 5, "title": "Tell us more"},
        {
            "uuid": "consent",
            "type": "consent",
            "sequence": 6,
            "is_required": True,
            "interactions": [{"type": "consent", "label": "I agree to the privacy policy"}],
        },
    ],
}


def seed_forms() -> list[Form]:
    """Insert a demo owner with one published form. Returns created forms."""
    db = SessionLocal()
    created: list[Form] = []
    try:
        owner = db.query(User).filter(User.email == "demo@storyform.local").first()
        if owner is None:
            owner = User(
                first_name="Demo",
                last_name="Owner",
                username="demo",
                email="demo@storyform.local",
                password_hash=hash_password("demo-password"),
                company_name="Storyform Demo",
            )
            db.add(owner)
            db.commit()
            db.refresh(owner)

        form = create_form(db, owner, "Contact Us")
        apply_form_template(db, form, FormTemplate.model_validate(SEED_TEMPLATE))
        db.commit()
        created.append(publish_form(db, form))
        return created
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    forms = seed_forms()
    for f in forms:
        print(f"Created: {f.name} (uuid={f.uuid})")
    print(f"\nSeeded {len(forms)} forms.")
