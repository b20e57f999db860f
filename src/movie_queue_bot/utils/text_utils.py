"""Text processing utilities."""

import re
from typing import Optional

_TYPOGRAPHIC_QUOTES = str.maketrans(
    {
        "‘": "'",
        "’": "'",
        "“": '"',
        "”": '"',
    }
)

_PLACEHOLDER_PATTERN = re.compile(r"\{(\d+)\}")


def normalize_quotes(text: str) -> str:
    """Replace typographic quotation marks with plain ASCII quotes.

    Chat clients tend to "smarten" quotes as the user types, which would
    otherwise defeat the quoted-title patterns.

    Args:
        text: Raw message text.

    Returns:
        Text with curly single and double quotes mapped to ' and ".
    """
    return text.translate(_TYPOGRAPHIC_QUOTES)


def clean_query(query: Optional[str]) -> Optional[str]:
    """Strip surrounding whitespace and trailing question marks from a query.

    Args:
        query: Captured query text.

    Returns:
        Cleaned query, or None if nothing usable remains.
    """
    if query is None:
        return None

    cleaned = query.strip().rstrip("?").strip()
    return cleaned or None


def mentions_user(text: str, user_id: str) -> bool:
    """Check whether a message mentions the given user id.

    Args:
        text: Message text.
        user_id: User identifier to look for.

    Returns:
        True if the identifier appears in the text.
    """
    return bool(user_id) and user_id in text


def format_mention(user_id: str) -> str:
    """Format a user id as a chat mention."""
    return f"<@{user_id}>"


def fill_template(template: str, *args: str) -> str:
    """Substitute positional ``{N}`` placeholders in a template.

    Placeholders without a matching argument are left untouched, and braces
    that are not placeholders are never interpreted.

    Args:
        template: Template text.
        *args: Values for ``{0}``, ``{1}``, ...

    Returns:
        Filled template.
    """

    def _replace(match: "re.Match[str]") -> str:
        index = int(match.group(1))
        if index < len(args):
            return str(args[index])
        return match.group(0)

    return _PLACEHOLDER_PATTERN.sub(_replace, template)
