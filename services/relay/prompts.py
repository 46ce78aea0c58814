"""Prompt builders for image description."""

DEFAULT_QUESTION = "Describe this image in detail."


def build_system_prompt() -> str:
    """Return the system prompt for the describer."""
    return (
        "You describe images for people who cannot see them. "
        "Be accurate and concrete, mention the main subject first, "
        "and never invent details that are not visible."
    )


def build_user_prompt(question: str | None = None) -> str:
    """Return the question asked about the uploaded image."""
    question = (question or "").strip()
    return question or DEFAULT_QUESTION
