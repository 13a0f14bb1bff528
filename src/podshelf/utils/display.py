"""Display helpers for terminal output."""


def truncate_text(text: str, max_length: int = 80) -> str:
    """Collapse whitespace and cut ``text`` to ``max_length`` characters.

    Args:
        text: Text to shorten
        max_length: Maximum length of the result, ellipsis included

    Returns:
        Shortened text ending in "…" when it was cut
    """
    collapsed = " ".join(text.split())
    if len(collapsed) <= max_length:
        return collapsed
    return collapsed[: max(max_length - 1, 0)].rstrip() + "…"
