import re

COUNTRY_CODE = "55"


def normalize_phone(phone: str) -> str:
    """Bring a recipient phone to international dialing form (+55...).

    Bare local numbers (area code + 8 or 9 digit subscriber) get the
    country code prepended; anything else is only stripped and prefixed.
    """
    digits = re.sub(r"\D", "", phone or "")
    if len(digits) in (10, 11):
        digits = COUNTRY_CODE + digits
    return f"+{digits}"
