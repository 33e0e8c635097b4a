from __future__ import annotations

import re

_WHITESPACE = re.compile(r"\s+")


def sanitize_text(value: object, max_len: int = 2000) -> str:
    """Collapse whitespace, trim and truncate free text.

    Non-string input yields ``""``. No HTML escaping happens here.
    """
    if not isinstance(value, str):
        return ""
    text = _WHITESPACE.sub(" ", value).strip()
    return text[:max_len]
