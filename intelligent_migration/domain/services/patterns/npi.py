NPI_LENGTH = 10
NPI_ISSUER_PREFIX = "80840"


def validate_npi(value: str) -> bool:
    """Check a National Provider Identifier with the Luhn algorithm.

    The check digit is computed over the NPI prefixed with the card issuer
    identifier 80840, as published by CMS.

    Example:
        >>> validate_npi("1234567893")
        True
        >>> validate_npi("1234567890")
        False
    """
    if len(value) != NPI_LENGTH or not value.isascii() or not value.isdigit():
        return False
    digits = NPI_ISSUER_PREFIX + value
    total = 0
    for offset, char in enumerate(reversed(digits)):
        digit = int(char)
        if offset % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0
