"""URL slugs for Chinese category names."""

import re
import time

from pypinyin import Style, lazy_pinyin

_NON_SLUG = re.compile(r"[^a-z0-9]")


def generate_slug(name: str) -> str:
    """Toneless pinyin, lowercased, with everything outside ``[a-z0-9]`` removed.

    >>> generate_slug("明前茶")
    'mingqiancha'

    Names that reduce to nothing fall back to ``category-<epoch ms>``.
    """
    slug = "".join(lazy_pinyin(name, style=Style.NORMAL))
    slug = _NON_SLUG.sub("", slug.lower())
    return slug or f"category-{int(time.time() * 1000)}"
