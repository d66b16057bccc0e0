"""
Text preprocessing shared by the matcher and the lexical scorers.
"""

import re
from functools import lru_cache
from typing import Iterable, List

from nltk.stem import PorterStemmer
from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS

_TOKEN_RE = re.compile(r"[a-z0-9]+")


def normalize_message(message: str) -> str:
    """Lower-case and trim; no other rewriting."""
    return message.strip().lower()


class TextPreprocessor:
    """
    Tokenizer for the relevance index.

    Splits on non-alphanumerics, drops English stop words and one-character
    tokens, and Porter-stems what remains so word forms like "suspend",
    "suspended" and "suspending" land on one term.
    """

    def __init__(self, stopwords: Iterable[str] = ENGLISH_STOP_WORDS, min_token_length: int = 2):
        self.stopwords = frozenset(stopwords)
        self.min_token_length = min_token_length
        self.stemmer = PorterStemmer()
        self._stem = lru_cache(maxsize=20000)(self.stemmer.stem)

    def tokenize(self, text: str) -> List[str]:
        return [
            token for token in _TOKEN_RE.findall(text.lower())
            if len(token) >= self.min_token_length and token not in self.stopwords
        ]

    def stem_tokens(self, tokens: List[str]) -> List[str]:
        return [self._stem(token) for token in tokens]

    def __call__(self, text: str) -> List[str]:
        return self.stem_tokens(self.tokenize(text))


def count_terms_present(terms: Iterable[str], text: str) -> int:
    """Number of vocabulary terms occurring anywhere in ``text``, each counted once."""
    return sum(1 for term in terms if term in text)
