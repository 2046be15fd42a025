"""Field rules for subscription input.

Both checks are pure predicates; the value objects in
``newsletter_api.domain.value_objects`` turn a ``False`` into an error.
"""

import unicodedata
from typing import FrozenSet

from email_validator import EmailNotValidError, validate_email as _check_email_syntax

MAX_NAME_LENGTH = 256
FORBIDDEN_NAME_CHARACTERS: FrozenSet[str] = frozenset('/()"<>\\{}')


def validate_name(value: str) -> bool:
    """Return ``True`` when ``value`` is an acceptable subscriber name.

    A name is rejected when it is empty or whitespace only, longer than
    256 characters, or contains any of ``/ ( ) " < > \\ { }``.
    """
    if not isinstance(value, str) or not value.strip():
        return False
    if len(unicodedata.normalize("NFC", value)) > MAX_NAME_LENGTH:
        return False
    return not any(char in FORBIDDEN_NAME_CHARACTERS for char in value)


def validate_email(value: str) -> bool:
    """Return ``True`` when ``value`` has the shape of an email address.

    Syntax only: no DNS lookup is made for the domain.
    """
    if not isinstance(value, str) or not value:
        return False
    try:
        _check_email_syntax(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True
