"""Text normalization strategies for keyword matching."""

import re
import unicodedata
from typing import Iterable, Optional

from catalog_discovery.core.errors import InvalidArgumentError
from catalog_discovery.core.interfaces import TextNormalizer

_NON_WORD_RE = re.compile(r"[^\w\s]|_", re.UNICODE)

STOP_WORDS: dict[str, frozenset[str]] = {
    "en": frozenset({
        "a", "about", "above", "after", "again", "against", "all", "am", "an",
        "and", "any", "are", "as", "at", "be", "because", "been", "before",
        "being", "below", "between", "both", "but", "by", "can", "did", "do",
        "does", "doing", "don", "down", "during", "each", "few", "for", "from",
        "further", "had", "has", "have", "having", "he", "her", "here", "hers",
        "him", "his", "how", "i", "if", "in", "into", "is", "it", "its",
        "just", "me", "more", "most", "my", "no", "nor", "not", "now", "of",
        "off", "on", "once", "only", "or", "other", "our", "ours", "out",
        "over", "own", "s", "same", "she", "should", "so", "some", "such", "t",
        "than", "that", "the", "their", "theirs", "them", "then", "there",
        "these", "they", "this", "those", "through", "to", "too", "under",
        "until", "up", "very", "was", "we", "were", "what", "when", "where",
        "which", "while", "who", "whom", "why", "will", "with", "you", "your",
    }),
    "cs": frozenset({
        "a", "aby", "ale", "ani", "ano", "asi", "bez", "bude", "by", "byl",
        "byla", "byli", "bylo", "být", "co", "což", "do", "ho", "i", "jak",
        "jako", "je", "jeho", "jej", "její", "jen", "ještě", "jestli", "jí",
        "již", "jsem", "jsi", "jsou", "k", "kde", "kdo", "kdy", "když", "má",
        "mají", "mám", "máme", "mít", "může", "na", "nad", "náš", "ne", "nebo",
        "než", "ní", "nic", "o", "od", "pak", "po", "pod", "podle", "pokud",
        "pouze", "pro", "proč", "před", "přes", "při", "s", "se", "si", "sice",
        "své", "svůj", "ta", "tak", "také", "takže", "tam", "tato", "tedy",
        "ten", "tento", "to", "tohle", "toho", "tom", "tu", "tuto", "ty",
        "tyto", "u", "už", "v", "ve", "více", "však", "vy", "z", "za", "zde",
        "že",
    }),
}


def stop_words_for(language: str) -> frozenset[str]:
    """Get the built-in stop words for a language code."""
    try:
        return STOP_WORDS[language]
    except KeyError:
        raise InvalidArgumentError(f"No stop words for language {language!r}") from None


class CaseFoldNormalizer(TextNormalizer):
    """Unicode NFKC normalization followed by case folding."""

    def normalize(self, text: str) -> str:
        return unicodedata.normalize("NFKC", text or "").casefold()


class StopWordNormalizer(TextNormalizer):
    """Strip punctuation and drop stop words and short tokens."""

    def __init__(
        self,
        stop_words: Iterable[str],
        base: Optional[TextNormalizer] = None,
        min_length: int = 1,
    ) -> None:
        self.base = base or CaseFoldNormalizer()
        self.stop_words = frozenset(self.base.normalize(word) for word in stop_words)
        self.min_length = min_length

    def normalize(self, text: str) -> str:
        cleaned = _NON_WORD_RE.sub(" ", self.base.normalize(text))
        tokens = [
            token
            for token in cleaned.split()
            if len(token) >= self.min_length and token not in self.stop_words
        ]
        return " ".join(tokens)
