# app/modules/moderation/word_lists.py

from collections.abc import Iterator, Mapping
from types import MappingProxyType


class ModerationWordList(Mapping):
    """
    Read-only mapping of language code -> banned terms.

    Languages and terms keep the order they were given in; the matcher reports
    the first hit in that order. Duplicate terms within a language are dropped.
    """

    def __init__(self, lists: Mapping[str, "list[str] | tuple[str, ...]"]):
        frozen = {}
        for language, words in lists.items():
            unique = dict.fromkeys(word.strip().lower() for word in words if word and word.strip())
            frozen[language] = tuple(unique)
        self._lists = MappingProxyType(frozen)

    def __getitem__(self, language: str) -> tuple[str, ...]:
        return self._lists[language]

    def __iter__(self) -> Iterator[str]:
        return iter(self._lists)

    def __len__(self) -> int:
        return len(self._lists)

    def __repr__(self) -> str:
        counts = ", ".join(f"{lang}={len(words)}" for lang, words in self._lists.items())
        return f"ModerationWordList({counts})"


# English
EN_WORDS = ("damn", "hell", "crap", "stupid", "idiot", "moron", "loser")
# Turkish
TR_WORDS = ("aptal", "salak", "gerizekalı", "mal", "beyinsiz")
# Arabic. These can never match: the normalizer keeps ASCII only.
AR_WORDS = ("غبي", "أحمق", "مغفل")

DEFAULT_WORD_LIST = ModerationWordList({"en": EN_WORDS, "tr": TR_WORDS, "ar": AR_WORDS})
