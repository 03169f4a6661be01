"""Counting nouns for display."""


def tally(noun: str, count: int) -> str:
    """Return ``count`` followed by ``noun``, pluralised unless the count is one."""
    if count == 1:
        return f"{count} {noun}"
    return f"{count} {noun}s"