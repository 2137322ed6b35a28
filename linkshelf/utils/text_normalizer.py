import re


def normalize_text(text: str | None, max_chars: int | None = None) -> str:
    """Collapse scraped text to a single trimmed line.

    Converts line breaks, tabs and runs of spaces into single spaces and
    optionally caps the length, cutting at the last word boundary that fits.

    Args:
        text: Raw text pulled from HTML (may be None).
        max_chars: Optional maximum length of the result.

    Returns:
        str: Normalized text, empty when there is nothing to keep.
    """
    if not text:
        return ""
    text = re.sub(r"\s+", " ", text).strip()
    if max_chars is None or len(text) <= max_chars:
        return text
    cut = text[:max_chars]
    if " " in cut:
        cut = cut.rsplit(" ", 1)[0]
    return cut.rstrip()
