"""
Title normalization, fuzzy similarity and date proximity.

Thai law titles on enacted-law records and on the roll-call votes that passed
them rarely match exactly: vote titles carry draft markers ("ร่าง"), reading
numbers, amendment numbers and Buddhist-era year stamps. Titles are reduced
to a canonical form first and then compared with Jaro-Winkler.
"""

import re
from datetime import date
from typing import Final

from .schema import DATE_SLACK_DAYS, WINKLER_MAX_PREFIX, WINKLER_PREFIX_SCALE

# Applied in order; later patterns assume earlier ones already ran
TITLE_BOILERPLATE: Final[tuple[tuple[str, str], ...]] = (
    # Draft marker and act/decree type prefixes
    (r"ร่าง", ""),
    (r"พระราชบัญญัติ", ""),
    (r"พระราชกำหนด", ""),
    (r"พ\.ร\.บ\.", ""),
    (r"พ\.ร\.ก\.", ""),
    # "(ฉบับที่ N)" amendment number
    (r"\(ฉบับที่\s*.*?\)", " "),
    # Reading markers
    (r"วาระที่\s*[๑-๙0-9]+", " "),
    (r"การลงมติในวาระที่หนึ่ง.*$", " "),
    # "as reviewed by the extraordinary committee"
    (r"ซึ่งคณะกรรมาธิการวิสามัญพิจารณาเสร็จแล้ว", " "),
    # Buddhist-era year stamp
    (r"พ\.ศ\.\s*[0-9\.]+", " "),
    # Quotes, brackets and punctuation
    (r"[“”\"'\(\)\[\]\{\}<>:;,\.!?]", " "),
)

_BOILERPLATE_RES: Final = tuple((re.compile(p), repl) for p, repl in TITLE_BOILERPLATE)
_WHITESPACE_RE: Final = re.compile(r"\s+")


def normalize_title(title: str | None) -> str:
    """
    Reduce a law or vote title to a comparable canonical form.

    Args:
        title: Raw title string, or None

    Returns:
        Lower-cased title with boilerplate and punctuation removed and
        whitespace collapsed; "" for empty input

    Examples:
        >>> normalize_title("ร่างพระราชบัญญัติงบประมาณ พ.ศ. 2567")
        'งบประมาณ'
        >>> normalize_title(None)
        ''
    """
    if not title:
        return ""

    text = str(title)
    for pattern, repl in _BOILERPLATE_RES:
        text = pattern.sub(repl, text)

    return _WHITESPACE_RE.sub(" ", text).strip().lower()


def jaro(s: str, t: str) -> float:
    """Jaro similarity of two strings."""
    len_s, len_t = len(s), len(t)
    if len_s == 0 or len_t == 0:
        return 0.0
    if s == t:
        return 1.0

    match_dist = max(len_s, len_t) // 2 - 1
    s_matches = [False] * len_s
    t_matches = [False] * len_t
    matches = 0

    for i in range(len_s):
        start = max(0, i - match_dist)
        end = min(i + match_dist + 1, len_t)
        for j in range(start, end):
            if t_matches[j] or s[i] != t[j]:
                continue
            s_matches[i] = True
            t_matches[j] = True
            matches += 1
            break

    if matches == 0:
        return 0.0

    # Count half-transpositions by walking both match lists left to right
    k = 0
    transpositions = 0
    for i in range(len_s):
        if not s_matches[i]:
            continue
        while not t_matches[k]:
            k += 1
        if s[i] != t[k]:
            transpositions += 1
        k += 1

    half = transpositions / 2
    return (matches / len_s + matches / len_t + (matches - half) / matches) / 3


def jaro_winkler(
    s: str,
    t: str,
    prefix_scale: float = WINKLER_PREFIX_SCALE,
    max_prefix: int = WINKLER_MAX_PREFIX,
) -> float:
    """Jaro similarity boosted by the length of the common prefix."""
    score = jaro(s, t)
    prefix = 0
    for i in range(min(max_prefix, len(s), len(t))):
        if s[i] != t[i]:
            break
        prefix += 1
    return score + prefix * prefix_scale * (1 - score)


def title_similarity(a: str | None, b: str | None) -> float:
    """Normalize both titles and score them; 0 if either normalizes to ""."""
    norm_a = normalize_title(a)
    norm_b = normalize_title(b)
    if not norm_a or not norm_b:
        return 0.0
    return jaro_winkler(norm_a, norm_b)


def dates_close(a: date | None, b: date | None, slack_days: int = DATE_SLACK_DAYS) -> bool:
    """True when both dates are present and at most ``slack_days`` apart."""
    if a is None or b is None:
        return False
    return abs((a - b).days) <= slack_days


def similarity(a: str, b: str) -> float:
    """Score two already-normalized strings in [0, 1]."""
    return jaro_winkler(a, b)
