import html
import re


def validate_and_sanitize_input(value: str, max_length: int = 500) -> str:
    """
    Trim, length-check and HTML-escape free text typed by a user
    (chat messages, cancellation reasons).

    Raises:
        ValueError: If input is blank or too long
    """
    value = str(value or "").strip()

    if not value:
        raise ValueError("El texto no puede estar vacío")

    if len(value) > max_length:
        raise ValueError(f"El texto excede el máximo de {max_length} caracteres")

    value = re.sub(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]", "", value)

    return html.escape(value, quote=True)
