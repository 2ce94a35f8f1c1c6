"""
Display name helpers.
"""


def full_name_to_short_name(full_name: str) -> str:
    """
    Shorten a full name to its first token plus the last token's initial.

    "Jane Q. Doe" becomes "Jane D."; a single token is treated as both
    first and last ("Jane" becomes "Jane J."). Blank names stay blank.
    """
    parts = full_name.split()
    if not parts:
        return ""
    return f"{parts[0]} {parts[-1][0]}."
