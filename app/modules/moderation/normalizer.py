# app/modules/moderation/normalizer.py

import re
from typing import Optional

NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")
WHITESPACE_RE = re.compile(r"\s+")


def normalize_text(text: Optional[str]) -> str:
    """
    Canonicalize text before word matching.

    Lowercases, drops everything that is not an ASCII letter, digit or
    whitespace, and collapses whitespace runs into single spaces. Letters
    outside ASCII (accents, Turkish dotless i, Arabic script) are dropped too.
    """
    if not text:
        return ""
    text = text.lower()
    text = NON_ALNUM_RE.sub("", text)
    return WHITESPACE_RE.sub(" ", text).strip()
