# ===========================
# jobscore/index.py — HTTP API
# ===========================

from typing import Dict, Optional

from fastapi import Depends, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from jobscore import __version__
from jobscore.auth import AuthContext, SupabaseIdentityProvider
from jobscore.config import get_settings
from jobscore.errors import JobScoreError
from jobscore.handler import analyze_job, get_analysis, list_analyses, summarize
from jobscore.log import get_logger
from jobscore.records import RedisRecordStore, build_redis_client

# ==============================================================================
# CONFIGURATION & SETUP
# ==============================================================================

log = get_logger(__name__)
settings = get_settings()

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS),
}

app = FastAPI(title="jobscore", version=__version__)

redis_client = build_redis_client(settings.kv_url)
if not redis_client:
    log.warning("KV_URL not set; analyses cannot be stored")

# ==============================================================================
# DEPENDENCIES
# ==============================================================================

def get_identity_provider() -> SupabaseIdentityProvider:
    return SupabaseIdentityProvider(
        settings.supabase_url, settings.supabase_anon_key, timeout=settings.auth_timeout
    )

def get_record_store() -> RedisRecordStore:
    return RedisRecordStore(redis_client)

def get_auth_context(authorization: Optional[str] = Header(default=None)) -> AuthContext:
    return AuthContext.from_header(authorization)

# ==============================================================================
# RESPONSES
# ==============================================================================

def _success(data, status_code: int = 200) -> JSONResponse:
    return JSONResponse({"success": True, "data": data}, status_code=status_code, headers=CORS_HEADERS)

def _failure(message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse({"success": False, "error": message}, status_code=status_code, headers=CORS_HEADERS)

@app.exception_handler(JobScoreError)
async def job_score_error_handler(request: Request, exc: JobScoreError):
    log.warning("%s %s failed: %s: %s", request.method, request.url.path, type(exc).__name__, exc.message)
    return _failure(exc.message, exc.status_code)

@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return _failure("Invalid request parameters")

@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    log.exception("Error in %s %s", request.method, request.url.path)
    return _failure("Unknown error")

# ==============================================================================
# ROUTES
# ==============================================================================

# Every preflight gets the same empty answer, whatever it asks for.
@app.options("/{path:path}")
async def preflight(path: str):
    return Response(status_code=200, headers=CORS_HEADERS)

@app.post("/analyze-job")
async def analyze_job_endpoint(
    request: Request,
    auth: AuthContext = Depends(get_auth_context),
    identity=Depends(get_identity_provider),
    store=Depends(get_record_store),
):
    raw_body = await request.body()
    record = await analyze_job(raw_body, auth, identity, store)

    return _success({
        "classification": record.classification.value,
        "confidence": record.confidence_score,
        "keywords": list(record.detected_keywords),
        "explanation": record.explanation,
        "analysisId": record.id,
    })

@app.get("/analyses")
async def api_list_analyses(
    limit: Optional[int] = None,
    offset: int = 0,
    auth: AuthContext = Depends(get_auth_context),
    identity=Depends(get_identity_provider),
    store=Depends(get_record_store),
):
    page_size = settings.history_default_limit if limit is None else limit
    records = await list_analyses(auth, identity, store, limit=page_size, offset=offset)
    return _success([r.to_dict() for r in records])

@app.get("/analyses/stats/summary")
async def api_stats_summary(
    auth: AuthContext = Depends(get_auth_context),
    identity=Depends(get_identity_provider),
    store=Depends(get_record_store),
):
    return _success(await summarize(auth, identity, store))

@app.get("/analyses/{analysis_id}")
async def api_get_analysis(
    analysis_id: str,
    auth: AuthContext = Depends(get_auth_context),
    identity=Depends(get_identity_provider),
    store=Depends(get_record_store),
):
    record = await get_analysis(auth, identity, store, analysis_id)
    return _success(record.to_dict())

@app.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}
