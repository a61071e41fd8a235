# ===========================
# jobscore/analysis.py — keyword scoring of job postings
# ===========================

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple

from jobscore.lexicon import (
    BASE_SCORE,
    LEGITIMATE_BONUS,
    LEGITIMATE_KEYWORDS,
    SUSPICIOUS_KEYWORDS,
    SUSPICIOUS_PENALTY,
)

# ==============================================================================
# DATA MODELS
# ==============================================================================

class Classification(str, Enum):
    LEGITIMATE = "legitimate"
    FAKE = "fake"


class KeywordCategory(str, Enum):
    SUSPICIOUS = "suspicious"
    LEGITIMATE = "legitimate"


class KeywordMatch(NamedTuple):
    term: str
    category: KeywordCategory


class KeywordHits(NamedTuple):
    """Lexicon terms found in a posting, each list in lexicon order."""
    suspicious: List[str]
    legitimate: List[str]

    def matches(self) -> List[KeywordMatch]:
        return (
            [KeywordMatch(t, KeywordCategory.SUSPICIOUS) for t in self.suspicious]
            + [KeywordMatch(t, KeywordCategory.LEGITIMATE) for t in self.legitimate]
        )

    def keywords(self) -> List[str]:
        return [m.term for m in self.matches()]


@dataclass(frozen=True)
class ClassificationResult:
    """Verdict for one posting."""
    classification: Classification
    confidence_score: int
    detected_keywords: List[str] = field(default_factory=list)
    explanation: str = ""
    score: int = BASE_SCORE

    def to_dict(self) -> Dict:
        return {
            "classification": self.classification.value,
            "confidence": self.confidence_score,
            "keywords": list(self.detected_keywords),
            "explanation": self.explanation,
        }

# ==============================================================================
# PIPELINE STEPS
# ==============================================================================

def normalize_text(raw_text: Optional[str]) -> str:
    return (raw_text or "").lower()


def _find_terms(text: str, lexicon: Iterable[str]) -> List[str]:
    return [term for term in lexicon if term.lower() in text]


def match_keywords(normalized_text: str) -> KeywordHits:
    return KeywordHits(
        suspicious=_find_terms(normalized_text, SUSPICIOUS_KEYWORDS),
        legitimate=_find_terms(normalized_text, LEGITIMATE_KEYWORDS),
    )


def _clamp(value: int, low: int = 0, high: int = 100) -> int:
    return max(low, min(high, value))


def score_hits(suspicious: List[str], legitimate: List[str]) -> Tuple[int, Classification, int]:
    """
    Returns (final_score, classification, confidence).

    Confidence measures the distance of the *clamped* score from the
    midpoint, so any raw score beyond [0, 100] reports confidence 100.
    """
    raw_score = BASE_SCORE - len(suspicious) * SUSPICIOUS_PENALTY + len(legitimate) * LEGITIMATE_BONUS
    final_score = _clamp(raw_score)
    classification = Classification.LEGITIMATE if final_score >= BASE_SCORE else Classification.FAKE
    confidence = _clamp(abs(final_score - BASE_SCORE) * 2)
    return final_score, classification, confidence


def build_explanation(classification: Classification, suspicious: List[str], legitimate: List[str]) -> str:
    if classification == Classification.LEGITIMATE:
        cited = ", ".join(legitimate[:2])
        return (
            "This job posting appears legitimate based on the presence of standard job posting "
            f"elements like {cited}. However, always verify the company independently."
        )
    cited = ", ".join(suspicious[:3])
    return (
        f"This job posting shows several red flags including: {cited}. "
        "Be cautious and verify the company independently before proceeding."
    )


def classify_job(raw_text: Optional[str]) -> ClassificationResult:
    hits = match_keywords(normalize_text(raw_text))
    final_score, classification, confidence = score_hits(hits.suspicious, hits.legitimate)
    return ClassificationResult(
        classification=classification,
        confidence_score=confidence,
        detected_keywords=hits.keywords(),
        explanation=build_explanation(classification, hits.suspicious, hits.legitimate),
        score=final_score,
    )
