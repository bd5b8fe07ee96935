"""
Best-effort charset sniffing for uploaded tabular files.

Responsibilities:
- UTF-8 BOM detection (authoritative, skips the heuristics)
- decoding the buffer under every candidate encoding
- scoring each decoded text for mojibake markers and plausible CJK content
- picking the best candidate, falling back to lossy UTF-8

This is a heuristic, not a guaranteed-correct charset identifier.
"""

from __future__ import annotations

import re
from typing import Optional, Protocol, Sequence, runtime_checkable

import httpx

from .fetch import fetch_bytes
from .models import DetectionResult, SupportedEncoding

UTF8_BOM = b"\xef\xbb\xbf"

_GARBAGE_RE = re.compile(r"[\ufffd\x00-\x08\x0b-\x0c\x0e-\x1f]")
_CJK_RE = re.compile(r"[\u4e00-\u9fa5]")
_CJK_PUNCTUATION_RE = re.compile("[，。！？、；：“”‘’（）【】《》]")

GARBAGE_PENALTY = 5
CJK_BONUS = 10
CJK_PUNCTUATION_BONUS = 5


def quality_score(text: str) -> int:
    """
    Score decoded text on a 0-100 scale.

    Starts at 100, loses 5 points per replacement or stray control character,
    gains 10 if any CJK ideograph is present and 5 if any full-width CJK
    punctuation mark is present.
    """
    score = 100
    score -= len(_GARBAGE_RE.findall(text)) * GARBAGE_PENALTY
    if _CJK_RE.search(text):
        score += CJK_BONUS
    if _CJK_PUNCTUATION_RE.search(text):
        score += CJK_PUNCTUATION_BONUS
    return max(0, min(100, score))


@runtime_checkable
class ScorableDecoder(Protocol):
    """Anything that can attempt a decode and grade the result."""

    encoding: SupportedEncoding

    def decode(self, raw: bytes) -> str: ...

    def score(self, text: str) -> int: ...


class EncodingCandidate:
    """Lossy decode with a Python codec, graded by :func:`quality_score`.

    Undecodable bytes become U+FFFD, which the score penalizes.
    """

    def __init__(self, encoding: SupportedEncoding | str) -> None:
        self.encoding = SupportedEncoding(encoding)

    def decode(self, raw: bytes) -> str:
        return raw.decode(self.encoding.value, errors="replace")

    def score(self, text: str) -> int:
        return quality_score(text)

    def __repr__(self) -> str:
        return f"EncodingCandidate({self.encoding.value!r})"


# Order matters: ties go to the earliest entry.
DEFAULT_CANDIDATES: tuple[ScorableDecoder, ...] = tuple(
    EncodingCandidate(encoding) for encoding in SupportedEncoding
)


def detect_encoding(
    raw: bytes,
    candidates: Sequence[ScorableDecoder] = DEFAULT_CANDIDATES,
) -> DetectionResult:
    if raw.startswith(UTF8_BOM):
        return DetectionResult(
            encoding=SupportedEncoding.UTF_8,
            confidence=100,
            text=raw[len(UTF8_BOM):].decode("utf-8", errors="replace"),
        )

    best: Optional[tuple[int, ScorableDecoder, str]] = None
    for candidate in candidates:
        try:
            text = candidate.decode(raw)
        except (UnicodeDecodeError, LookupError):
            # only custom candidates decoding strictly, or unknown codecs
            continue
        score = max(0, min(100, candidate.score(text)))
        # strict ">" keeps the earlier candidate on ties
        if best is None or score > best[0]:
            best = (score, candidate, text)

    if best is None:
        return DetectionResult(
            encoding=SupportedEncoding.UTF_8,
            confidence=0,
            text=raw.decode("utf-8", errors="replace"),
        )

    score, candidate, text = best
    return DetectionResult(encoding=candidate.encoding, confidence=score, text=text)


def convert_to_utf8(raw: bytes) -> str:
    """Decode ``raw`` with the detected encoding and return only the text."""
    return detect_encoding(raw).text


def detect_encoding_from_url(url: str, client: Optional[httpx.Client] = None) -> DetectionResult:
    return detect_encoding(fetch_bytes(url, client=client))
