from __future__ import annotations

import re

_whitespace_re = re.compile(r"\s+")

FLAG_URL_TEMPLATE = "https://media.api-sports.io/flags/{code}.svg"
DEFAULT_FLAG_CODE = "xx"


def slugify_country(name: str) -> str:
    """Stable country id: lowercased, whitespace runs replaced by hyphens."""

    return _whitespace_re.sub("-", name.lower())


def flag_url(code: str | None) -> str:
    return FLAG_URL_TEMPLATE.format(code=(code or DEFAULT_FLAG_CODE).lower())
