"""
Pytest configuration and shared fixtures.
"""

import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from jobscore.analysis import Classification, ClassificationResult
from jobscore.errors import PersistenceError, Unauthorized
from jobscore.index import app, get_identity_provider, get_record_store
from jobscore.records import JobAnalysisRecord, registered_domain

VALID_TOKEN = "valid-token"
OTHER_TOKEN = "other-token"


class FakeIdentityProvider:
    """Maps known tokens to user ids."""

    def __init__(self, users: Optional[Dict[str, str]] = None):
        self.users = users if users is not None else {VALID_TOKEN: "user-1", OTHER_TOKEN: "user-2"}
        self.calls: List[str] = []

    async def verify(self, token: str) -> str:
        self.calls.append(token)
        if token not in self.users:
            raise Unauthorized("Unauthorized")
        return self.users[token]


class InMemoryRecordStore:
    """Record store double keeping records in insertion order."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.records: List[JobAnalysisRecord] = []

    def insert(self, user_id, job_description, job_url, result: ClassificationResult) -> JobAnalysisRecord:
        if self.fail:
            raise PersistenceError("Failed to store analysis")
        record = JobAnalysisRecord(
            id=str(uuid.uuid4()),
            user_id=user_id,
            classification=result.classification,
            confidence_score=result.confidence_score,
            explanation=result.explanation,
            created_at=datetime.now(timezone.utc).isoformat(),
            detected_keywords=list(result.detected_keywords),
            job_description=job_description,
            job_url=job_url,
            job_domain=registered_domain(job_url),
        )
        self.records.append(record)
        return record

    def list_for_user(self, user_id, limit=50, offset=0):
        own = [r for r in reversed(self.records) if r.user_id == user_id]
        return own[offset:offset + limit]

    def get_for_user(self, user_id, analysis_id):
        for r in self.records:
            if r.user_id == user_id and r.id == analysis_id:
                return r
        return None

    def stats_for_user(self, user_id):
        own = [r for r in self.records if r.user_id == user_id]
        return {
            "total": len(own),
            "legitimate": sum(1 for r in own if r.classification == Classification.LEGITIMATE),
            "fake": sum(1 for r in own if r.classification == Classification.FAKE),
            "monthlyUsage": len(own),
        }


@pytest.fixture
def identity() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def client(identity, store):
    """TestClient with the identity provider and record store replaced.

    Server errors come back as responses so the catch-all envelope can be checked.
    """
    app.dependency_overrides[get_identity_provider] = lambda: identity
    app.dependency_overrides[get_record_store] = lambda: store
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {VALID_TOKEN}"}


@pytest.fixture
def scam_posting() -> str:
    """Posting text hitting two suspicious terms and nothing legitimate."""
    return "This is a great opportunity. wire transfer required. pay fee now."


@pytest.fixture
def legitimate_posting() -> str:
    return (
        "Visit our company website to learn more. We offer a full benefits package "
        "and a structured interview process."
    )
