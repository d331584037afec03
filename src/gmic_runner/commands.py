"""
Command String Assembly

Joins positional command-line tokens into the single script handed to
the engine.
"""

from collections.abc import Sequence


def build_command_string(commands: Sequence[str | None]) -> str:
    """
    Join command tokens with single spaces, skipping empty tokens.

    A separator follows every emitted token except the one at the last
    index, so empty tokens in the middle vanish without leaving a double
    space, while a trailing empty token leaves the separator of the token
    before it in place.

    Args:
        commands: Tokens in the order supplied by the caller. ``None`` and
            ``""`` entries are dropped.

    Returns:
        The joined command string.

    Examples:
        >>> build_command_string(["blur", "3", "", "sharpen", "10"])
        'blur 3 sharpen 10'
        >>> build_command_string(["a", "b", ""])
        'a b '
    """
    last_index = len(commands) - 1
    parts: list[str] = []

    for index, command in enumerate(commands):
        if not command:
            continue

        parts.append(command)

        if index < last_index:
            # Separator keyed to the index, not to what follows.
            parts.append(" ")

    return "".join(parts)
