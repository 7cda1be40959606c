# libs/relay_shared/guardrails.py
"""
Input guardrails applied to chat messages before any model is called.

Violations are raised as GuardrailViolation; the chat app maps them to 400.
"""


class GuardrailViolation(Exception):
    """Input rejected by a guardrail; `violation_type` names the rule."""

    def __init__(self, message: str, violation_type: str = "general"):
        self.message = message
        self.violation_type = violation_type
        super().__init__(message)

    def __str__(self):
        return f"Guardrail violation ({self.violation_type}): {self.message}"


def validate_required_text(text: str) -> None:
    """
    Reject messages that are empty or whitespace only.

    Raises:
        GuardrailViolation: If text is blank
    """
    if not text or not text.strip():
        raise GuardrailViolation(
            "Please provide a message before submitting.",
            violation_type="required_text",
        )


def validate_input_length(text: str, max_length: int = 10000) -> None:
    """
    Reject messages longer than max_length characters.

    Raises:
        GuardrailViolation: If text is too long
    """
    if len(text) > max_length:
        raise GuardrailViolation(
            f"Input text too long: {len(text)} characters (max: {max_length})",
            violation_type="length",
        )


def handle_guardrail_violation(violation: GuardrailViolation) -> str:
    """Message shown to the user for a rejected input."""
    return f"I'm unable to process that: {violation.message}"
