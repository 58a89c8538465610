"""URL slug helpers."""

import re
import unicodedata
from typing import Awaitable, Callable

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str, max_length: int = 200) -> str:
    """Lowercase ASCII slug: ``"Hello, World!"`` -> ``"hello-world"``."""
    ascii_text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    slug = _NON_ALNUM.sub("-", ascii_text.lower()).strip("-")
    return slug[:max_length].rstrip("-") or "item"


async def unique_slug(text: str, exists: Callable[[str], Awaitable[bool]]) -> str:
    """Slugify ``text`` and append ``-2``, ``-3``... until ``exists`` reports the slug free."""
    base = slugify(text)
    slug = base
    suffix = 1
    while await exists(slug):
        suffix += 1
        slug = f"{base}-{suffix}"
    return slug
