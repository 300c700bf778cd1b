"""Priming instruction templates."""

PERSONA_PROMPT_TEMPLATE = (
    "You are the candidate in a job interview. Respond based on this resume:\n\n"
    "{document}\n\n"
    "Use casual Indian English, be conversational, and maintain the persona of the "
    "actual candidate. Don't give textbook answers, use examples where possible, "
    "and keep responses concise and natural."
)


def build_persona_prompt(document: str, template: str = PERSONA_PROMPT_TEMPLATE) -> str:
    """
    Render the system instruction for a session.

    Args:
        document: Uploaded resume or context text.
        template: Format string with a ``{document}`` placeholder.

    Returns:
        The priming instruction text.
    """
    return template.format(document=document)
