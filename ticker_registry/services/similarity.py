"""Edit-distance similarity between normalized ticker symbols."""


# Tickers are too similar when similarity is strictly greater than this
DEFAULT_SIMILARITY_THRESHOLD = 0.8


def levenshtein_distance(a: str, b: str) -> int:
    """
    Classic edit distance with unit insertion, deletion and substitution costs.

    Args:
        a: First string
        b: Second string

    Returns:
        Minimum number of single-character edits turning a into b
    """
    # (len(b)+1) x (len(a)+1) matrix
    matrix = [[0] * (len(a) + 1) for _ in range(len(b) + 1)]

    for i in range(len(a) + 1):
        matrix[0][i] = i
    for j in range(len(b) + 1):
        matrix[j][0] = j

    for j in range(1, len(b) + 1):
        for i in range(1, len(a) + 1):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            matrix[j][i] = min(
                matrix[j][i - 1] + 1,  # deletion
                matrix[j - 1][i] + 1,  # insertion
                matrix[j - 1][i - 1] + cost  # substitution
            )

    return matrix[len(b)][len(a)]


def similarity(a: str, b: str) -> float:
    """
    Similarity in [0, 1]: 1 - distance / length of the longer string.

    Two empty strings are identical (1.0).
    """
    longer, shorter = (a, b) if len(a) >= len(b) else (b, a)

    if len(longer) == 0:
        return 1.0

    distance = levenshtein_distance(longer, shorter)
    return (len(longer) - distance) / len(longer)


def is_too_similar(a: str, b: str, threshold: float = DEFAULT_SIMILARITY_THRESHOLD) -> bool:
    """True when two tickers are confusingly similar (strictly above threshold)."""
    return similarity(a, b) > threshold
