# ===========================
# jobscore/handler.py — operations behind the HTTP routes
# ===========================

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from jobscore.analysis import classify_job
from jobscore.auth import AuthContext, resolve_user
from jobscore.config import MAX_HISTORY_LIMIT
from jobscore.errors import BadRequest, RecordNotFound
from jobscore.log import get_logger
from jobscore.records import JobAnalysisRecord

log = get_logger(__name__)

# ==============================================================================
# DATA MODELS
# ==============================================================================

class AnalyzeJobBody(BaseModel):
    model_config = ConfigDict(extra="forbid")

    job_input: Optional[str] = Field(default=None, alias="jobInput")
    job_url: Optional[str] = Field(default=None, alias="jobUrl")


def parse_body(raw_body: bytes) -> AnalyzeJobBody:
    try:
        return AnalyzeJobBody.model_validate_json(raw_body or b"")
    except ValidationError as e:
        log.info("Rejected request body: %s error(s)", e.error_count())
        raise BadRequest("Invalid request body") from e

# ==============================================================================
# OPERATIONS
# ==============================================================================

async def analyze_job(raw_body: bytes, auth: AuthContext, identity, store) -> JobAnalysisRecord:
    """
    Authenticate, validate, classify and persist one posting.

    Empty input is accepted and classifies as legitimate with confidence 0.
    Nothing is returned unless the record was written.
    """
    user_id = await resolve_user(auth, identity)
    body = parse_body(raw_body)

    log.info("Analyzing job for user: %s", user_id)
    log.info("Job input length: %d", len(body.job_input or ""))
    log.info("Job URL: %s", body.job_url or "none")

    result = classify_job(body.job_input)
    record = store.insert(user_id, body.job_input, body.job_url, result)

    log.info("Analysis %s completed: %s (%d)", record.id, result.classification.value, result.confidence_score)
    return record


async def list_analyses(auth: AuthContext, identity, store, limit: int = 50, offset: int = 0) -> List[JobAnalysisRecord]:
    user_id = await resolve_user(auth, identity)
    if limit < 1 or limit > MAX_HISTORY_LIMIT:
        raise BadRequest(f"limit must be between 1 and {MAX_HISTORY_LIMIT}")
    if offset < 0:
        raise BadRequest("offset must not be negative")
    return store.list_for_user(user_id, limit=limit, offset=offset)


async def get_analysis(auth: AuthContext, identity, store, analysis_id: str) -> JobAnalysisRecord:
    user_id = await resolve_user(auth, identity)
    record = store.get_for_user(user_id, analysis_id)
    if record is None:
        raise RecordNotFound("Analysis not found")
    return record


async def summarize(auth: AuthContext, identity, store) -> Dict[str, int]:
    user_id = await resolve_user(auth, identity)
    return store.stats_for_user(user_id)
