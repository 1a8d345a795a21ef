def to_uppercase(value: str | None) -> str | None:
    """
    Uppercase a raw setting value, passing None through untouched.
    """
    if value is None:
        return None
    return value.strip().upper()


def to_lowercase(value: str | None) -> str | None:
    """
    Lowercase a raw setting value, passing None through untouched.
    """
    if value is None:
        return None
    return value.strip().lower()
