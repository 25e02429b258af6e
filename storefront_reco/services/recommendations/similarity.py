"""
Content-based similarity metrics
Set/vector similarity and the weighted product similarity score
"""
import re
from typing import Hashable, Iterable, List, Sequence

import numpy as np

from storefront_reco.models.product import Product
from storefront_reco.services.utils.constants import SIMILARITY_WEIGHTS

_NON_WORD = re.compile(r"\W+")


def tokenize(text: str) -> List[str]:
    """Case-fold and split on non-word characters, dropping empty tokens"""
    return [token for token in _NON_WORD.split(text.lower()) if token]


def jaccard_similarity(set_a: Iterable[Hashable], set_b: Iterable[Hashable]) -> float:
    """
    Jaccard similarity |A ∩ B| / |A ∪ B|

    Inputs are treated as sets, so duplicates are ignored.
    Returns 0.0 when both inputs are empty.
    """
    a, b = set(set_a), set(set_b)
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)


def cosine_similarity(vector_a: Sequence[float], vector_b: Sequence[float]) -> float:
    """
    Cosine similarity between two numeric vectors

    Returns 0.0 for empty vectors, vectors of different length
    or a zero magnitude.
    """
    if len(vector_a) != len(vector_b) or len(vector_a) == 0:
        return 0.0

    a = np.asarray(vector_a, dtype=float)
    b = np.asarray(vector_b, dtype=float)
    magnitude_a = np.linalg.norm(a)
    magnitude_b = np.linalg.norm(b)
    if magnitude_a == 0 or magnitude_b == 0:
        return 0.0
    return float(np.dot(a, b) / (magnitude_a * magnitude_b))


def price_similarity(price_a: float, price_b: float) -> float:
    """
    1.0 for equal prices, falling with the relative difference, floored at 0
    """
    avg_price = (price_a + price_b) / 2
    if avg_price == 0:
        # both free
        return 1.0
    return max(0.0, 1 - abs(price_a - price_b) / avg_price)


def calculate_product_similarity(product1: Product, product2: Product) -> float:
    """
    Weighted content similarity between two products

    Features and weights:
    - tags (0.5): Jaccard over tag sets
    - price (0.3): relative price proximity
    - name (0.1): Jaccard over name tokens
    - description (0.1): Jaccard over description tokens

    Symmetric; in [0, 1] since every component is.
    """
    tag_similarity = jaccard_similarity(product1.tags, product2.tags)
    price_sim = price_similarity(product1.price, product2.price)
    name_similarity = jaccard_similarity(tokenize(product1.name), tokenize(product2.name))
    description_similarity = jaccard_similarity(
        tokenize(product1.description),
        tokenize(product2.description)
    )

    return (
        SIMILARITY_WEIGHTS["tags"] * tag_similarity
        + SIMILARITY_WEIGHTS["price"] * price_sim
        + SIMILARITY_WEIGHTS["name"] * name_similarity
        + SIMILARITY_WEIGHTS["description"] * description_similarity
    )
