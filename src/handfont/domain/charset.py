"""Character groups and glyph naming."""

from fontTools.agl import UV2AGL

UPPERCASE = tuple("ABCDEFGHIJKLMNOPQRSTUVWXYZ")
LOWERCASE = tuple("abcdefghijklmnopqrstuvwxyz")
DIGITS = tuple("0123456789")
PUNCTUATION = tuple("!@#$%&*()-_=+[]{}|;:'\",./<>?")

CHARACTER_GROUPS: dict[str, tuple[str, ...]] = {
    "uppercase": UPPERCASE,
    "lowercase": LOWERCASE,
    "digits": DIGITS,
    "punctuation": PUNCTUATION,
}

ALL_CHARACTERS = UPPERCASE + LOWERCASE + DIGITS + PUNCTUATION


def resolve_charset(groups: str) -> list[str]:
    """Expand a comma-separated list of group names into characters.

    ``"all"`` selects every group. Unknown names are taken literally, so
    ``"uppercase,ÄÖÜ"`` adds three extra characters. Duplicates are dropped
    while keeping first-seen order.

    Args:
        groups: Group names and/or literal characters separated by commas

    Returns:
        Ordered list of single characters
    """
    characters: list[str] = []
    for part in (p.strip() for p in groups.split(",")):
        if not part:
            continue
        key = part.lower()
        if key == "all":
            group: tuple[str, ...] = ALL_CHARACTERS
        elif key in CHARACTER_GROUPS:
            group = CHARACTER_GROUPS[key]
        else:
            group = tuple(part)
        for ch in group:
            if ch not in characters:
                characters.append(ch)
    return characters


def glyph_name_for(char: str) -> str:
    """Production glyph name for a single character.

    Uses the Adobe Glyph List ("A", "zero", "exclam") with a ``uniXXXX``
    fallback for code points the list does not name.
    """
    code_point = ord(char)
    name = UV2AGL.get(code_point)
    if name:
        return name
    if code_point > 0xFFFF:
        return f"u{code_point:05X}"
    return f"uni{code_point:04X}"
