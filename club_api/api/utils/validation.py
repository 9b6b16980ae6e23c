"""Validation utilities."""
from typing import Tuple

# Width of users.first_name and users.last_name
MAX_NAME_PART_LENGTH = 50


def normalize_email(email: str) -> str:
    """
    Normalize email address for consistent storage and comparison.

    - Converts to lowercase for case-insensitive comparison
    - Strips leading/trailing whitespace
    - Gmail/Google Workspace specific normalization:
      - Removes periods (.) from local part (before @)
      - PRESERVES plus addressing (+tag) for email delivery and filtering

    Examples:
        >>> normalize_email("  John.Doe@EXAMPLE.COM  ")
        "john.doe@example.com"
        >>> normalize_email("Wes.Huang@Gmail.com")
        "weshuang@gmail.com"
        >>> normalize_email("wes+work@gmail.com")
        "wes+work@gmail.com"
    """
    if not email:
        return email

    email = email.strip().lower()

    if '@' not in email:
        return email

    local_part, domain = email.rsplit('@', 1)

    # Gmail ignores periods in the local part
    gmail_domains = {'gmail.com', 'googlemail.com'}
    if domain in gmail_domains or domain.endswith('.google.com'):
        local_part = local_part.replace('.', '')

    return f"{local_part}@{domain}"


def normalize_external_id(external_id: str) -> str:
    """Student numbers are compared without surrounding whitespace and case."""
    if not external_id:
        return external_id
    return external_id.strip().upper()


def split_display_name(name: str) -> Tuple[str, str]:
    """
    Split a display name into first and last name.

    Examples:
        >>> split_display_name("Ada Lovelace")
        ("Ada", "Lovelace")
        >>> split_display_name("Maria de la Cruz")
        ("Maria", "de la Cruz")
        >>> split_display_name("Plato")
        ("Plato", "")
    """
    parts = name.split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


def check_display_name(name: str) -> Tuple[str, str]:
    """
    Split a display name and make sure both parts fit the user columns.

    Raises:
        ValueError: Name is blank, or its first or last part is too long
    """
    first_name, last_name = split_display_name(name)
    if not first_name:
        raise ValueError("Name must not be blank")
    if len(first_name) > MAX_NAME_PART_LENGTH:
        raise ValueError(f"First name must be at most {MAX_NAME_PART_LENGTH} characters")
    if len(last_name) > MAX_NAME_PART_LENGTH:
        raise ValueError(f"Last name must be at most {MAX_NAME_PART_LENGTH} characters")
    return first_name, last_name
