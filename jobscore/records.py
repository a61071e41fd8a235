# ===========================
# jobscore/records.py — per-user analysis records (Redis)
# ===========================

import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

import redis
import tldextract
from redis import Redis

from jobscore.analysis import Classification, ClassificationResult
from jobscore.errors import PersistenceError
from jobscore.log import get_logger

log = get_logger(__name__)

# Bundled public-suffix snapshot only; the posting URL is never fetched.
_TLDX = tldextract.TLDExtract(cache_dir=None, suffix_list_urls=())

MONTHLY_STATS_TTL = 2678400

# ==============================================================================
# DATA MODELS
# ==============================================================================

@dataclass(frozen=True)
class JobAnalysisRecord:
    id: str
    user_id: str
    classification: Classification
    confidence_score: int
    explanation: str
    created_at: str
    detected_keywords: List[str] = field(default_factory=list)
    job_description: Optional[str] = None
    job_url: Optional[str] = None
    job_domain: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "jobDescription": self.job_description,
            "jobUrl": self.job_url,
            "jobDomain": self.job_domain,
            "classification": self.classification.value,
            "confidenceScore": self.confidence_score,
            "detectedKeywords": list(self.detected_keywords),
            "explanation": self.explanation,
            "createdAt": self.created_at,
        }

    def to_hash(self) -> Dict[str, str]:
        mapping = {
            "id": self.id,
            "user_id": self.user_id,
            "classification": self.classification.value,
            "confidence_score": str(self.confidence_score),
            "detected_keywords": json.dumps(self.detected_keywords),
            "explanation": self.explanation,
            "created_at": self.created_at,
        }
        # Redis hashes cannot hold None; absent fields read back as None.
        for name in ("job_description", "job_url", "job_domain"):
            value = getattr(self, name)
            if value is not None:
                mapping[name] = value
        return mapping

    @classmethod
    def from_hash(cls, data: Dict[str, str]) -> "JobAnalysisRecord":
        return cls(
            id=data["id"],
            user_id=data["user_id"],
            classification=Classification(data["classification"]),
            confidence_score=int(data.get("confidence_score", 0)),
            explanation=data.get("explanation", ""),
            created_at=data.get("created_at", ""),
            detected_keywords=json.loads(data.get("detected_keywords") or "[]"),
            job_description=data.get("job_description"),
            job_url=data.get("job_url"),
            job_domain=data.get("job_domain"),
        )

# ==============================================================================
# HELPERS
# ==============================================================================

def get_analysis_key(user_id: str, analysis_id: str) -> str:
    return f"analysis:{user_id}:{analysis_id}"

def get_history_key(user_id: str) -> str:
    return f"analysis_history:{user_id}"

def get_stats_key(user_id: str) -> str:
    return f"stats:{user_id}:analyses"

def get_monthly_key(user_id: str, when: datetime) -> str:
    return f"stats:{user_id}:analyses:{when.strftime('%Y-%m')}"

def registered_domain(url: Optional[str]) -> Optional[str]:
    if not url or not url.strip():
        return None
    ext = _TLDX(url.strip())
    if not ext.domain or not ext.suffix:
        return None
    return f"{ext.domain}.{ext.suffix}".lower()

def build_redis_client(url: str) -> Optional[Redis]:
    if not url:
        return None
    try:
        return Redis.from_url(url, decode_responses=True)
    except ValueError as e:
        log.error("Redis connection failed: %s", e)
        return None

# ==============================================================================
# STORE
# ==============================================================================

class RedisRecordStore:
    """
    Each record is a hash under analysis:{user}:{id}, indexed newest-first by
    the analysis_history:{user} sorted set. All keys are scoped to one user.
    """

    def __init__(self, client: Optional[Redis]):
        self.client = client

    def _require_client(self) -> Redis:
        if not self.client:
            raise PersistenceError("Record store is not configured")
        return self.client

    def insert(
        self,
        user_id: str,
        job_description: Optional[str],
        job_url: Optional[str],
        result: ClassificationResult,
    ) -> JobAnalysisRecord:
        client = self._require_client()
        now = datetime.now(timezone.utc)
        record = JobAnalysisRecord(
            id=str(uuid.uuid4()),
            user_id=user_id,
            classification=result.classification,
            confidence_score=result.confidence_score,
            explanation=result.explanation,
            created_at=now.isoformat(),
            detected_keywords=list(result.detected_keywords),
            job_description=job_description,
            job_url=job_url,
            job_domain=registered_domain(job_url),
        )

        stats_key = get_stats_key(user_id)
        monthly_key = get_monthly_key(user_id, now)
        try:
            # MULTI/EXEC: the record and its indexes land together or not at all.
            pipe = client.pipeline(transaction=True)
            pipe.hset(get_analysis_key(user_id, record.id), mapping=record.to_hash())
            pipe.zadd(get_history_key(user_id), {record.id: now.timestamp()})
            pipe.hincrby(stats_key, "total", 1)
            pipe.hincrby(stats_key, record.classification.value, 1)
            pipe.incr(monthly_key)
            pipe.expire(monthly_key, MONTHLY_STATS_TTL)
            pipe.execute()
        except redis.RedisError as e:
            log.error("Error inserting analysis for user %s: %s", user_id, e)
            raise PersistenceError("Failed to store analysis") from e
        return record

    def list_for_user(self, user_id: str, limit: int = 50, offset: int = 0) -> List[JobAnalysisRecord]:
        client = self._require_client()
        try:
            ids = client.zrevrange(get_history_key(user_id), offset, offset + limit - 1)
            if not ids:
                return []
            pipe = client.pipeline(transaction=False)
            for analysis_id in ids:
                pipe.hgetall(get_analysis_key(user_id, analysis_id))
            rows = pipe.execute()
        except redis.RedisError as e:
            log.error("Error fetching analyses for user %s: %s", user_id, e)
            raise PersistenceError("Failed to load analyses") from e
        return [JobAnalysisRecord.from_hash(row) for row in rows if row]

    def get_for_user(self, user_id: str, analysis_id: str) -> Optional[JobAnalysisRecord]:
        client = self._require_client()
        try:
            data = client.hgetall(get_analysis_key(user_id, analysis_id))
        except redis.RedisError as e:
            log.error("Error fetching analysis %s: %s", analysis_id, e)
            raise PersistenceError("Failed to load analysis") from e
        return JobAnalysisRecord.from_hash(data) if data else None

    def stats_for_user(self, user_id: str) -> Dict[str, int]:
        client = self._require_client()
        try:
            counts = client.hgetall(get_stats_key(user_id)) or {}
            monthly = client.get(get_monthly_key(user_id, datetime.now(timezone.utc)))
        except redis.RedisError as e:
            log.error("Error fetching stats for user %s: %s", user_id, e)
            raise PersistenceError("Failed to load stats") from e
        return {
            "total": int(counts.get("total", 0)),
            "legitimate": int(counts.get(Classification.LEGITIMATE.value, 0)),
            "fake": int(counts.get(Classification.FAKE.value, 0)),
            "monthlyUsage": int(monthly or 0),
        }
