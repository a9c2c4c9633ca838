# ============================================================================
# src/lab_charting/matching/similarity.py
# ============================================================================
"""
Edit-distance name similarity on a 0-100 scale.
"""


def levenshtein_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein edit distance between two strings."""
    if len(s1) < len(s2):
        return levenshtein_distance(s2, s1)

    if len(s2) == 0:
        return len(s1)

    previous_row = range(len(s2) + 1)
    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


def align_part_counts(name1: str, name2: str) -> tuple:
    """
    Drop the middle token of a three-part name compared against a two-part one.

    Registries often omit the father's / middle name that reports include
    (or the other way round), so "john q smith" vs "john smith" compares
    as "john smith" vs "john smith".
    """
    parts1 = name1.split()
    parts2 = name2.split()
    if len(parts1) == 3 and len(parts2) == 2:
        return f"{parts1[0]} {parts1[2]}", name2
    if len(parts2) == 3 and len(parts1) == 2:
        return name1, f"{parts2[0]} {parts2[2]}"
    return name1, name2


def similarity_score(name1: str, name2: str) -> float:
    """
    Similarity of two canonicalized names in [0, 100].

    score = (1 - distance / max_len) * 100; two empty names score 100.
    """
    str1, str2 = align_part_counts(name1, name2)
    max_len = max(len(str1), len(str2))
    if max_len == 0:
        return 100.0
    return (1 - levenshtein_distance(str1, str2) / max_len) * 100
