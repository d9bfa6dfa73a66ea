"""Input normalization for homeowner and claim contact fields."""

import re
from typing import Optional


def normalize_text(value: Optional[str]) -> Optional[str]:
    """
    Strip leading/trailing whitespace; empty becomes None.

    Internal spacing is kept as entered. Claim snapshots are matched to
    homeowners on the exact stored name/address, so both sides go through
    this same function before they are saved.
    """
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def normalize_phone(phone: Optional[str]) -> Optional[str]:
    """
    Normalize a US phone number to E.164 (+15551234567).

    Accepts 10 digits, 11 digits starting with 1, or an E.164 value.

    Raises:
        ValueError: If phone is not a valid US phone number
    """
    if not phone:
        return None

    cleaned = phone.strip()
    digits = re.sub(r"\D", "", cleaned)
    if len(digits) == 10 and not cleaned.startswith("+"):
        return f"+1{digits}"
    if len(digits) == 11 and digits.startswith("1"):
        return f"+{digits}"

    raise ValueError(f"Invalid phone number '{phone}'. Use 10-digit US format (e.g., 5551234567).")


def normalize_email(email: Optional[str]) -> Optional[str]:
    """Lower-case and strip an email; empty becomes None."""
    if not email:
        return None
    return email.strip().lower() or None
