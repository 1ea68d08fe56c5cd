# app/modules/moderation/profanity.py

import re
from typing import Optional

from pydantic import BaseModel

from app.modules.moderation.normalizer import normalize_text
from app.modules.moderation.word_lists import DEFAULT_WORD_LIST, ModerationWordList

# Leetspeak character classes. Only these five letters are substituted.
OBFUSCATION_CLASSES = {
    "a": "[a@4]",
    "e": "[e3]",
    "i": "[i1!]",
    "o": "[o0]",
    "s": "[s5$]",
}


class ProfanityScan(BaseModel):
    detected: bool
    word: Optional[str] = None
    language: Optional[str] = None


def build_exact_pattern(word: str) -> re.Pattern:
    return re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE)


def build_obfuscated_pattern(word: str) -> re.Pattern:
    """Substring pattern with each of a/e/i/o/s widened to its leetspeak class."""
    pattern = "".join(OBFUSCATION_CLASSES.get(ch, re.escape(ch)) for ch in word)
    return re.compile(pattern, re.IGNORECASE)


class ProfanityMatcher:
    """
    Checks text against per-language word lists.

    For every language (in list order) and every word (in list order) the
    normalized text is tested first with a whole-word match, then with the
    leetspeak-widened substring match. The first hit is returned.
    """

    def __init__(self, word_list: ModerationWordList = DEFAULT_WORD_LIST):
        self.word_list = word_list
        self._patterns: list[tuple[str, str, re.Pattern, re.Pattern]] = [
            (language, word, build_exact_pattern(word), build_obfuscated_pattern(word))
            for language, words in word_list.items()
            for word in words
        ]

    def scan(self, text: Optional[str]) -> ProfanityScan:
        normalized = normalize_text(text)
        if not normalized:
            return ProfanityScan(detected=False)

        for language, word, exact, obfuscated in self._patterns:
            if exact.search(normalized) or obfuscated.search(normalized):
                return ProfanityScan(detected=True, word=word, language=language)

        return ProfanityScan(detected=False)


default_matcher = ProfanityMatcher()
