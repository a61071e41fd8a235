# ===========================
# jobscore/lexicon.py — keyword vocabulary
# ===========================

from typing import List

# Order is significant: hits, keyword lists and explanations follow it.

SUSPICIOUS_KEYWORDS: List[str] = [
    "wire transfer", "upfront payment", "no interview", "immediate start",
    "work from home guaranteed", "easy money", "pay fee", "training fee",
    "send money", "bank account", "social security", "processing fee",
]

LEGITIMATE_KEYWORDS: List[str] = [
    "company website", "office location", "benefits package", "interview process",
    "job requirements", "qualifications", "responsibilities", "team", "company culture",
]

SUSPICIOUS_PENALTY = 15
LEGITIMATE_BONUS = 10
BASE_SCORE = 50
