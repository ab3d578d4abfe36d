"""Canned WhatsApp replies.

Only `display_name` may be interpolated; everything else is static text.
"""

from typing import Any

DEFAULT_DISPLAY_NAME = "there"

TEMPLATES: dict[str, dict[str, Any]] = {
    "welcome": {
        "text": (
            "*👋 Hello, {display_name}! I am your AI Medical Assistant.*\n\n"
            "I am here to help answer your general health and medical questions. "
            "I can provide information on:\n"
            "* Symptoms\n"
            "* Diseases (e.g., Malaria, TB)\n"
            "* General treatment options\n"
            "* Health tips\n\n"
            "*❗ Important Disclaimer:*\n"
            "I am an AI and *not* a real doctor. My answers are for *informational "
            "purposes only* and should *never* replace advice from a qualified "
            "healthcare professional. For any medical emergency or personal advice, "
            "please contact a clinic or doctor immediately.\n\n"
            "*How to use me:*\n"
            "Just ask your health question!\n"
            '_Example: "What are the early symptoms of malaria?"_\n\n'
            "*What happens if you ask a non-medical question?*\n"
            "I will politely tell you that I only answer medical questions.\n\n"
            "How can I help you today?"
        ),
        "allowed_params": ["display_name"],
    },
    "non_medical_rejection": {
        "text": (
            "I am a medical bot and can only answer questions related to health "
            "and medicine. Please ask a health-related question!"
        ),
        "allowed_params": [],
    },
    "maintenance": {
        "text": (
            "Sorry, our medical assistant is under maintenance right now. "
            "Please try again in a little while."
        ),
        "allowed_params": [],
    },
    "internal_error": {
        "text": (
            "Sorry, something went wrong while processing your message. "
            "Please try again later."
        ),
        "allowed_params": [],
    },
}


def render(template_key: str, params: dict[str, Any] | None = None) -> str:
    """Render a template.

    Raises:
        ValueError: If template_key is unknown or params has keys the
            template does not allow.
    """
    if template_key not in TEMPLATES:
        raise ValueError(f"Unknown template: {template_key}")

    params = params or {}
    template = TEMPLATES[template_key]
    extras = set(params) - set(template["allowed_params"])
    if extras:
        raise ValueError(f"Disallowed params for {template_key}: {extras}")

    return template["text"].format(**params)


def welcome_message(display_name: str | None) -> str:
    return render("welcome", {"display_name": display_name or DEFAULT_DISPLAY_NAME})
