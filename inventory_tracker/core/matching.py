"""Name matching between invoice lines and the product catalog.

Only case and surrounding whitespace are normalised. Plurals, abbreviations
and accents are compared as written.
"""

CONTAINMENT_WEIGHT = 0.9


def _normalize_name(value) -> str:
    return str(value or "").strip().lower()


def match_score(extracted_name, product_name) -> float:
    extracted = _normalize_name(extracted_name)
    candidate = _normalize_name(product_name)
    if not extracted or not candidate:
        return 0.0
    if extracted == candidate:
        return 1.0
    if extracted in candidate or candidate in extracted:
        shorter, longer = sorted((len(extracted), len(candidate)))
        return shorter / longer * CONTAINMENT_WEIGHT
    return 0.0


def find_best_product_match(name, products):
    """Return ``(product, score)`` for the best scoring product, or ``(None, 0.0)``."""
    best_match = None
    highest_score = 0.0
    if not _normalize_name(name):
        return best_match, highest_score

    for product in products:
        score = match_score(name, product.name)
        if score > highest_score:
            highest_score = score
            best_match = product
    return best_match, highest_score


__all__ = ["CONTAINMENT_WEIGHT", "find_best_product_match", "match_score"]
