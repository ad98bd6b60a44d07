"""
BM25-style term weighting over a small corpus of tab documents.

The model keeps the raw document texts and derives one sparse weight
vector per document on first use. Vectors depend on corpus-wide
statistics (document frequencies, average length), so any mutation of the
corpus throws the whole table away; it is never patched in place.
"""

import math
import re
from collections import Counter
from typing import Iterable, Iterator, Mapping, Optional

import numpy as np

from tab_topics.config import get_logger

logger = get_logger(__name__)

# Sparse weight vector: term -> weight, absent terms weigh 0
DocumentVector = dict[str, float]

STOP_WORDS: frozenset[str] = frozenset({
    "i", "a", "me", "my", "we", "you", "he", "she", "it", "they",
    "am", "is", "are", "was", "were", "be", "been", "have", "has",
    "had", "do", "does", "did", "the", "and", "but", "if", "or",
    "as", "of", "at", "by", "for", "with", "to", "from", "in",
    "out", "on", "off", "this", "that", "what", "which", "who",
    "when", "where",
})

# URL and site boilerplate that shows up in tab titles
DOMAIN_STOP_WORDS: frozenset[str] = frozenset({
    "com", "org", "net", "io", "dev", "co", "www",
    "http", "https",
    "page", "home", "index", "view", "site",
})

K1 = 2.0
B = 0.75

# Runs of Unicode letters and digits
_TOKEN = re.compile(r"[^\W_]+")
_SHORT_WORDS = frozenset({"i", "a"})


def tokenize(text: str, stop_words: Iterable[str] = ()) -> list[str]:
    """
    Split text into lowercase terms.

    Drops single-character tokens (except "i" and "a"), ASCII-numeric
    tokens, and any token in ``stop_words``.

    Args:
        text: Text to tokenize
        stop_words: Lowercase words to discard

    Returns:
        Terms in text order, duplicates kept
    """
    stop_words = stop_words if isinstance(stop_words, (set, frozenset)) else set(stop_words)
    tokens = []
    for match in _TOKEN.findall(text or ""):
        word = match.lower()
        if len(word) <= 1 and word not in _SHORT_WORDS:
            continue
        if word.isascii() and word.isdigit():
            continue
        if word in stop_words:
            continue
        tokens.append(word)
    return tokens


class Vocabulary:
    """Bidirectional term <-> column index mapping for one corpus snapshot."""

    def __init__(self, terms: Iterable[str] = ()):
        self._terms: list[str] = []
        self._index: dict[str, int] = {}
        for term in terms:
            if term not in self._index:
                self._index[term] = len(self._terms)
                self._terms.append(term)

    def index_of(self, term: str) -> Optional[int]:
        return self._index.get(term)

    def term_at(self, index: int) -> str:
        return self._terms[index]

    def __len__(self) -> int:
        return len(self._terms)

    def __contains__(self, term: object) -> bool:
        return term in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._terms)


class TermWeightModel:
    """
    Corpus of documents with lazily computed BM25 term weights.

    Weight of a term in a document:

        idf * tf * (K1 + 1) / (K1 * (1 - B + B * len / avg_len) + tf)

    with ``idf = ln((N + 1) / df)``. Vectors, vocabulary and the dense
    weight matrix are computed together on first access and discarded as
    a whole whenever a document is added.

    Attributes:
        stop_words: Base stop words merged with the caller's extras
    """

    def __init__(
        self,
        docs: Optional[Mapping[str, str]] = None,
        stop_words: Iterable[str] = (),
    ):
        """
        Initialize the model.

        Args:
            docs: Initial documents, id -> cleaned text
            stop_words: Extra stop words merged with STOP_WORDS
        """
        self._docs: dict[str, str] = dict(docs or {})
        self.stop_words: frozenset[str] = STOP_WORDS | {w.lower() for w in stop_words}

        self._dirty = True
        self._vectors: dict[str, DocumentVector] = {}
        self._vocabulary = Vocabulary()
        self._matrix: Optional[np.ndarray] = None

    def add(self, doc_id: str, text: str) -> bool:
        """
        Add a document to the corpus.

        Args:
            doc_id: Unique document id
            text: Cleaned document text

        Returns:
            True if added, False if the id already exists (existing text is kept)
        """
        if doc_id in self._docs:
            logger.warning(f"Document {doc_id!r} already indexed, ignoring add")
            return False

        self._docs[doc_id] = text
        self._invalidate()
        return True

    def _invalidate(self) -> None:
        self._dirty = True
        self._vectors = {}
        self._vocabulary = Vocabulary()
        self._matrix = None

    def tokenize(self, text: str) -> list[str]:
        """Tokenize text with this model's stop words."""
        return tokenize(text, self.stop_words)

    def ids(self) -> list[str]:
        """Document ids in insertion order."""
        return list(self._docs)

    def text(self, doc_id: str) -> Optional[str]:
        return self._docs.get(doc_id)

    def __len__(self) -> int:
        return len(self._docs)

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._docs

    def _ensure_vectors(self) -> None:
        """Recompute the vector table if the corpus changed since the last build."""
        if not self._dirty:
            return

        doc_tokens: dict[str, list[str]] = {}
        doc_freq: Counter[str] = Counter()
        for doc_id, text in self._docs.items():
            tokens = self.tokenize(text)
            doc_tokens[doc_id] = tokens
            doc_freq.update(set(tokens))

        vectors: dict[str, DocumentVector] = {}
        n_docs = len(self._docs)
        if n_docs:
            total_tokens = sum(len(tokens) for tokens in doc_tokens.values())
            avg_len = total_tokens / n_docs

            for doc_id, tokens in doc_tokens.items():
                normalized_len = len(tokens) / avg_len if avg_len else 0.0
                vector: DocumentVector = {}
                for term, tf in Counter(tokens).items():
                    idf = math.log((n_docs + 1) / doc_freq[term])
                    vector[term] = (idf * tf * (K1 + 1)) / (
                        K1 * (1 - B + B * normalized_len) + tf
                    )
                vectors[doc_id] = vector

        self._vectors = vectors
        self._vocabulary = Vocabulary(
            term for tokens in doc_tokens.values() for term in tokens
        )
        self._matrix = None
        self._dirty = False
        logger.debug(
            f"Weighted {n_docs} documents over {len(self._vocabulary)} terms"
        )

    @property
    def vocabulary(self) -> Vocabulary:
        """Terms of the current corpus in order of first appearance."""
        self._ensure_vectors()
        return self._vocabulary

    @property
    def is_empty_vocabulary(self) -> bool:
        """True when no document contributes a single term."""
        return len(self.vocabulary) == 0

    def vector(self, doc_id: str) -> Optional[DocumentVector]:
        """
        Get the weight vector of a document.

        Args:
            doc_id: Document id

        Returns:
            Copy of the term -> weight mapping, or None for unknown ids
        """
        self._ensure_vectors()
        vector = self._vectors.get(doc_id)
        return dict(vector) if vector is not None else None

    def weight_matrix(self) -> np.ndarray:
        """
        Dense weights as an array of shape (documents, vocabulary).

        Rows follow ``ids()``, columns follow ``vocabulary``. The array is
        cached alongside the vectors and must not be modified.
        """
        self._ensure_vectors()
        if self._matrix is None:
            matrix = np.zeros((len(self._docs), len(self._vocabulary)), dtype=np.float64)
            for row, doc_id in enumerate(self._docs):
                for term, weight in self._vectors[doc_id].items():
                    matrix[row, self._vocabulary.index_of(term)] = weight
            matrix.setflags(write=False)
            self._matrix = matrix
        return self._matrix

    def top_terms(self, doc_id: str, n: int = 10) -> list[tuple[str, float]]:
        """
        Get the highest weighted terms of a document.

        Args:
            doc_id: Document id
            n: Number of terms to return

        Returns:
            (term, weight) pairs, heaviest first, ties alphabetical.
            Empty for unknown ids.
        """
        self._ensure_vectors()
        vector = self._vectors.get(doc_id)
        if not vector:
            return []

        ranked = sorted(vector.items(), key=lambda item: (-item[1], item[0]))
        return ranked[:n]

    def similarity(self, id_a: str, id_b: str) -> float:
        """
        Cosine similarity between two documents.

        Args:
            id_a: First document id
            id_b: Second document id

        Returns:
            Similarity in [0, 1]; 0 if either id is unknown or either
            document has no terms
        """
        self._ensure_vectors()
        v1 = self._vectors.get(id_a)
        v2 = self._vectors.get(id_b)
        if not v1 or not v2:
            return 0.0

        if id_a == id_b:
            return 1.0

        dot_product = 0.0
        mag_squared_1 = 0.0
        mag_squared_2 = 0.0
        # Fixed summation order keeps similarity(a, b) == similarity(b, a) exactly
        for term in sorted(v1.keys() | v2.keys()):
            w1 = v1.get(term, 0.0)
            w2 = v2.get(term, 0.0)
            dot_product += w1 * w2
            mag_squared_1 += w1 * w1
            mag_squared_2 += w2 * w2

        magnitude = math.sqrt(mag_squared_1 * mag_squared_2)
        if magnitude == 0:
            return 0.0

        return min(1.0, max(0.0, dot_product / magnitude))

    def search(self, query: str, n: int = 10) -> list[tuple[str, float]]:
        """
        Rank documents against a free-text query.

        A document scores the sum of its weights for the query's terms.

        Args:
            query: Free-text query
            n: Maximum number of results

        Returns:
            (document id, score) pairs with positive scores, best first
        """
        if not query or not query.strip():
            return []

        query_terms = self.tokenize(query)
        if not query_terms:
            return []

        self._ensure_vectors()
        scores: list[tuple[str, float]] = []
        for doc_id, vector in self._vectors.items():
            score = sum(vector.get(term, 0.0) for term in query_terms)
            if score > 0:
                scores.append((doc_id, score))

        scores.sort(key=lambda item: -item[1])
        return scores[:n]
