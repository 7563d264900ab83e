# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================


# =============================================================================
# Query Flag Parsing
# =============================================================================

def parse_flag(value: str | None) -> bool:
    """
    Interpret a query-string flag.

    Only "1" and "true" (any case) switch a flag on; anything else,
    including "yes" or an empty string, leaves it off.

    Example:
        parse_flag("1")     # True
        parse_flag("TRUE")  # True
        parse_flag("0")     # False
        parse_flag(None)    # False
    """
    if value is None:
        return False
    value = value.strip()
    return value == "1" or value.lower() == "true"

