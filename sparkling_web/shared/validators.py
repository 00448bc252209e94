"""Shared validation utilities"""

import re
from typing import Optional

EMAIL_PATTERN = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

# Characters that never belong in an uploaded filename
DANGEROUS_FILENAME_CHARS = ["..", "/", "\\", "<", ">", ":", '"', "|", "?", "*"]


def validate_us_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate a US phone number and return it as entered.

    Accepts 10 digits, or 11 digits with a leading 1, ignoring punctuation.

    Raises:
        ValueError: If phone number is invalid
    """
    if not phone:
        return phone

    digits = re.sub(r"\D", "", phone)

    if digits.startswith("1") and len(digits) == 11:
        digits = digits[1:]

    if len(digits) != 10:
        raise ValueError("Please enter a valid US phone number")

    return phone.strip()


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    if not re.match(EMAIL_PATTERN, email):
        raise ValueError("Please enter a valid email address")

    return email


def validate_filename(filename: Optional[str]) -> Optional[str]:
    """
    Reject filenames with path traversal or shell-special characters.

    Raises:
        ValueError: If the filename is unsafe or too long
    """
    if not filename:
        return filename

    for char in DANGEROUS_FILENAME_CHARS:
        if char in filename:
            raise ValueError(f"Invalid filename - contains dangerous character '{char}'")

    if len(filename) > 255:
        raise ValueError("Filename too long - maximum 255 characters")

    return filename
