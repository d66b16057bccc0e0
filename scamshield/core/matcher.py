"""
Multi-strategy pattern matcher.

A message matches a corpus pattern when any of three strategies fires:

1. relevance: the pattern text contains more than ``relevance_threshold`` of
   the message's distinct terms (stemmed, stop words removed). Only the
   ``relevance_limit`` best of those, ranked by TF-IDF cosine similarity,
   are returned, so hundreds of near-identical corpus variants collapse to
   their top few hits,
2. regex: the pattern's regular expression matches the message,
3. keyword: one of the pattern's keywords is a substring of the message.

The union is capped for cost control. Index structures are built lazily from
the pattern store and cached against the corpus version.
"""

import re
import threading
from collections import OrderedDict, defaultdict
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

import numpy as np
from sklearn.feature_extraction.text import TfidfVectorizer

from scamshield.core.logging import get_logger
from scamshield.core.patterns import PatternStore, ScamPattern
from scamshield.core.text_processing import TextPreprocessor

logger = get_logger(__name__)

DEFAULT_MATCH_LIMIT = 50
DEFAULT_RELEVANCE_THRESHOLD = 0.5
DEFAULT_RELEVANCE_LIMIT = 2


def split_wildcard_segments(pattern: str) -> List[str]:
    """
    Split a regex on its top-level ``.*`` runs.

    ``.*`` inside groups or character classes and escaped dots are left
    alone. Empty segments are dropped.
    """
    segments = []
    current = []
    depth = 0
    in_class = False
    i = 0
    n = len(pattern)
    while i < n:
        char = pattern[i]
        if char == "\\" and i + 1 < n:
            current.append(pattern[i:i + 2])
            i += 2
            continue
        if in_class:
            if char == "]":
                in_class = False
        elif char == "[":
            in_class = True
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif depth == 0 and pattern.startswith(".*", i):
            segments.append("".join(current))
            current = []
            i += 2
            # Lazy and possessive forms behave the same for existence checks
            if i < n and pattern[i] in "?+":
                i += 1
            continue
        current.append(char)
        i += 1
    segments.append("".join(current))
    return [segment for segment in segments if segment]


class SegmentedRegex:
    """
    Case-insensitive regex evaluated one wildcard-free segment at a time.

    Each segment is searched from where the previous one ended, which keeps
    long messages linear instead of letting nested ``.*`` runs backtrack.
    Newlines do not break a match.
    """

    def __init__(self, pattern: str):
        self.pattern = pattern
        self.segments = tuple(
            re.compile(segment, re.IGNORECASE) for segment in split_wildcard_segments(pattern)
        )

    def search(self, text: str) -> bool:
        position = 0
        for segment in self.segments:
            found = segment.search(text, position)
            if found is None:
                return False
            position = found.end()
        return True


class _PatternIndex:
    """Immutable lookup structures over one corpus snapshot."""

    def __init__(self, patterns: Sequence[ScamPattern], preprocessor: TextPreprocessor):
        self.patterns = tuple(patterns)
        self.preprocessor = preprocessor
        self.vectorizer: Optional[TfidfVectorizer] = None
        self.matrix = None
        self.term_presence = None

        texts = [pattern.pattern_text for pattern in self.patterns]
        if texts:
            self.vectorizer = TfidfVectorizer(
                tokenizer=preprocessor,
                token_pattern=None,
                lowercase=False,
                sublinear_tf=True,
            )
            try:
                self.matrix = self.vectorizer.fit_transform(texts).tocsr()
            except ValueError as e:
                # Every pattern text reduced to stop words
                logger.warning(f"Relevance index disabled: {e}")
                self.vectorizer = None
            else:
                presence = self.matrix.copy()
                presence.data = np.ones_like(presence.data)
                self.term_presence = presence.tocsc()

        self.keywords: Dict[str, List[int]] = defaultdict(list)
        regex_targets: Dict[str, List[int]] = OrderedDict()
        for idx, pattern in enumerate(self.patterns):
            for keyword in dict.fromkeys(pattern.keywords):
                self.keywords[keyword].append(idx)
            if pattern.regex:
                regex_targets.setdefault(pattern.regex, []).append(idx)

        self.regexes: List[Tuple[SegmentedRegex, List[int]]] = []
        for raw, targets in regex_targets.items():
            try:
                self.regexes.append((SegmentedRegex(raw), targets))
            except re.error as e:
                logger.warning(
                    f"Skipping invalid pattern regex: {e}",
                    extra={"regex": raw, "pattern_count": len(targets)}
                )

    def relevance_scores(self, message: str) -> np.ndarray:
        if self.vectorizer is None:
            return np.zeros(len(self.patterns))
        query = self.vectorizer.transform([message])
        if query.nnz == 0:
            return np.zeros(len(self.patterns))
        return np.asarray((self.matrix @ query.T).todense()).ravel()

    def relevant(self, message: str, similarities: np.ndarray, min_coverage: float, limit: int) -> List[int]:
        """Best-ranked patterns covering more than ``min_coverage`` of the message's terms."""
        if self.vectorizer is None or limit < 1:
            return []

        terms = set(self.preprocessor(message))
        vocabulary = self.vectorizer.vocabulary_
        columns = [vocabulary[term] for term in terms if term in vocabulary]
        if not columns:
            return []

        covered = np.asarray(self.term_presence[:, columns].sum(axis=1)).ravel()
        eligible = np.flatnonzero(covered > min_coverage * len(terms)).tolist()
        eligible.sort(key=lambda idx: (-similarities[idx], idx))
        return eligible[:limit]

    def candidates(self, message: str, min_coverage: float, relevance_limit: int) -> Dict[int, float]:
        """Indices of all matching patterns mapped to their relevance similarity."""
        similarities = self.relevance_scores(message)
        found = {
            int(idx): float(similarities[idx])
            for idx in self.relevant(message, similarities, min_coverage, relevance_limit)
        }

        for keyword, targets in self.keywords.items():
            if keyword in message:
                for idx in targets:
                    found.setdefault(idx, float(similarities[idx]))

        for regex, targets in self.regexes:
            if regex.search(message):
                for idx in targets:
                    found.setdefault(idx, float(similarities[idx]))

        return found


class PatternMatcher:
    """
    Matches normalized messages against the scam corpus.

    ``match`` never raises: store or index failures are logged and produce an
    empty result so analysis can fall back to lexical signals.
    """

    def __init__(
        self,
        store: PatternStore,
        limit: int = DEFAULT_MATCH_LIMIT,
        relevance_threshold: float = DEFAULT_RELEVANCE_THRESHOLD,
        relevance_limit: int = DEFAULT_RELEVANCE_LIMIT,
        preprocessor: Optional[TextPreprocessor] = None
    ):
        if limit < 1:
            raise ValueError("limit must be positive")
        self.store = store
        self.limit = limit
        self.relevance_threshold = relevance_threshold
        self.relevance_limit = relevance_limit
        self.preprocessor = preprocessor or TextPreprocessor()
        self._index: Optional[_PatternIndex] = None
        self._index_version: Optional[str] = None
        self._lock = threading.Lock()

    def warm_up(self) -> bool:
        """
        Build the index ahead of the first request.

        Returns False when the store cannot be read yet; the index is then
        built lazily by the first ``match``.
        """
        try:
            self._get_index()
        except Exception as e:
            logger.warning(f"Pattern index warm-up failed: {e}")
            return False
        return True

    def match(self, normalized_message: str) -> FrozenSet[ScamPattern]:
        if not normalized_message:
            return frozenset()

        try:
            index = self._get_index()
            found = index.candidates(normalized_message, self.relevance_threshold, self.relevance_limit)
        except Exception as e:
            logger.error(
                f"Pattern matching unavailable, continuing without matches: {e}",
                exc_info=True
            )
            return frozenset()

        selected = self._select(found, index.patterns)
        return frozenset(index.patterns[idx] for idx in selected)

    def _get_index(self) -> _PatternIndex:
        version = self.store.corpus_version()
        if self._index is not None and self._index_version == version:
            return self._index

        with self._lock:
            if self._index is None or self._index_version != version:
                patterns = self.store.load_patterns()
                self._index = _PatternIndex(patterns, self.preprocessor)
                self._index_version = version
                logger.info(
                    f"Built pattern index over {len(patterns)} patterns",
                    extra={"corpus_version": version}
                )
            return self._index

    def _select(self, found: Dict[int, float], patterns: Sequence[ScamPattern]) -> List[int]:
        """Cap the candidates, interleaving categories so no archetype crowds out the rest."""
        if len(found) <= self.limit:
            return list(found)

        ranked = sorted(found, key=lambda idx: (-found[idx], idx))
        by_category: Dict[object, List[int]] = OrderedDict()
        for idx in ranked:
            by_category.setdefault(patterns[idx].category, []).append(idx)

        queues = [list(reversed(group)) for group in by_category.values()]
        selected: List[int] = []
        while len(selected) < self.limit:
            for queue in queues:
                if queue and len(selected) < self.limit:
                    selected.append(queue.pop())
            queues = [queue for queue in queues if queue]
        return selected
