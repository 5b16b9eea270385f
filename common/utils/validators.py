import re
import logging

logger = logging.getLogger(__name__)

# Regular expression for email validation
# This regex follows the RFC 5322 standard for email addresses
EMAIL_REGEX = re.compile(r"""(?:[a-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[a-z0-9!#$%&'*+/=?^_`{|}~-]+)*|"(?:[\x01-\x08\x0b\x0c\x0e-\x1f\x21\x23-\x5b\x5d-\x7f]|\\[\x01-\x09\x0b\x0c\x0e-\x7f])*")@(?:(?:[a-z0-9](?:[a-z0-9-]*[a-z0-9])?\.)+[a-z0-9](?:[a-z0-9-]*[a-z0-9])?|\[(?:(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?|[a-z0-9-]*[a-z0-9]:(?:[\x01-\x08\x0b\x0c\x0e-\x1f\x21-\x5a\x53-\x7f]|\\[\x01-\x09\x0b\x0c\x0e-\x7f])+)\])""", re.IGNORECASE)

def validate_email(email):
    """
    Validate an email address.

    Args:
    email (str): The email address to validate.

    Returns:
    bool: True if the email is valid, False otherwise.
    """
    if not isinstance(email, str):
        logger.warning(f"Invalid email type: {type(email)}")
        return False

    if not email or len(email) > 254:
        return False

    return re.fullmatch(EMAIL_REGEX, email) is not None

def sanitize_string(input_string, max_length=None):
    """
    Sanitize a form value by trimming whitespace and optionally truncating.

    Numbers are accepted and converted; any other non-string value
    (None, lists, objects) sanitizes to an empty string.

    Args:
    input_string: The value to sanitize.
    max_length (int, optional): The maximum length of the string.

    Returns:
    str: The sanitized string.
    """
    if isinstance(input_string, bool) or input_string is None:
        return ""
    if isinstance(input_string, (int, float)):
        input_string = str(input_string)
    if not isinstance(input_string, str):
        logger.warning(f"Invalid input type for sanitization: {type(input_string)}")
        return ""

    sanitized = input_string.strip()

    if max_length is not None and len(sanitized) > max_length:
        sanitized = sanitized[:max_length]
        logger.info(f"String truncated to {max_length} characters")

    return sanitized
