def to_uppercase(value: str | None) -> str | None:
    """
    Strip surrounding whitespace and convert to uppercase; None passes through.
    """
    if value is None:
        return None
    return value.strip().upper()


def to_lowercase(value: str | None) -> str | None:
    """
    Strip surrounding whitespace and convert to lowercase; None passes through.
    """
    if value is None:
        return None
    return value.strip().lower()
