"""HTTP boundary tests using FastAPI's TestClient and dependency overrides."""

from __future__ import annotations

import random
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from voice_coach.controllers import sessions
from voice_coach.controllers.dependencies import (
    get_analysis_pipeline,
    get_cache_dependency,
    get_current_user_id,
    get_interview_service,
    get_onboarding_service,
    get_profile_repository,
    get_session_store,
)
from voice_coach.domain.models import (
    DialectProfileRecord,
    InterviewCategory,
    ProfileRecord,
    SessionKind,
    SessionRecord,
)
from voice_coach.main import app
from voice_coach.services.interview import InterviewService
from voice_coach.services.onboarding import OnboardingService
from voice_coach.utils import create_access_token

from conftest import (
    FakeAudioStore,
    FakeCache,
    FakeInterviewStore,
    FakeProfileRepository,
    FakeSessionStore,
    FakeTranscriber,
    ScriptedTranscriber,
    TranscriptionError,
    build_pipeline,
)

USER_ID = "user-1"


@pytest.fixture
def fakes():
    return {
        "cache": FakeCache(),
        "profiles": FakeProfileRepository(native_language="tamil"),
        "store": FakeSessionStore(),
        "interviews": FakeInterviewStore(),
    }


@pytest.fixture
def client(fakes):
    app.dependency_overrides[get_current_user_id] = lambda: USER_ID
    app.dependency_overrides[get_cache_dependency] = lambda: fakes["cache"]
    app.dependency_overrides[get_profile_repository] = lambda: fakes["profiles"]
    app.dependency_overrides[get_session_store] = lambda: fakes["store"]
    app.dependency_overrides[get_analysis_pipeline] = lambda: build_pipeline(
        session_store=fakes["store"]
    )
    app.dependency_overrides[get_interview_service] = lambda: InterviewService(
        fakes["interviews"],
        build_pipeline(session_store=fakes["store"]),
        fakes["profiles"],
        rng=random.Random(5),
    )

    yield TestClient(app)

    app.dependency_overrides.clear()


def _analyze(client: TestClient, audio: bytes | None = b"m4a-bytes", **form):
    data = {"type": "drill", "promptText": "I am ready", "duration": "2"}
    data.update(form)
    files = {"audio": ("rec.m4a", audio, "audio/mp4")} if audio is not None else None
    return client.post("/api/session/analyze", data=data, files=files)


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_metrics_endpoint_exposes_request_counters(client):
    client.get("/health")

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "http_requests_total" in response.text


def test_analyze_returns_camel_case_result(client, fakes):
    response = _analyze(client)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    data = body["data"]
    assert data["wpm"] == 90.0
    assert data["accuracyScore"] == 100
    assert data["fillerCount"] == 0
    assert data["fillerWordsFound"] == []
    assert data["overallScore"] == 88
    assert 1 <= len(data["tips"]) <= 3
    assert data["sessionId"] == fakes["store"].inserted[0].id
    assert data["audioUrl"].startswith("https://recordings.example.com/user-1/")


def test_analyze_invalidates_history_cache(client, fakes):
    _analyze(client)

    assert fakes["cache"].deleted == ["sessions:user-1:all", "sessions:user-1:drill"]


def test_analyze_uses_profile_language_and_lenient_fields(client, fakes):
    response = _analyze(client, type="unknown-kind", duration="not-a-number", promptText="")

    assert response.status_code == 200
    record = fakes["store"].inserted[0]
    assert record.session_kind is SessionKind.PRACTICE
    assert record.duration_seconds == 0.0
    assert response.json()["data"]["accuracyScore"] is None


def test_analyze_requires_audio(client):
    response = _analyze(client, audio=None)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_analyze_rejects_oversized_audio(client, monkeypatch):
    monkeypatch.setattr(sessions.settings, "max_audio_bytes", 4)

    response = _analyze(client, audio=b"too-large")

    assert response.status_code == 400
    assert response.json()["error"] == {
        "code": "VALIDATION_ERROR",
        "message": "Audio file exceeds 10MB limit",
    }


def test_storage_failure_maps_to_bad_gateway(client, fakes):
    app.dependency_overrides[get_analysis_pipeline] = lambda: build_pipeline(
        audio_store=FakeAudioStore(failures=3),
        session_store=fakes["store"],
    )

    response = _analyze(client)

    assert response.status_code == 502
    assert response.json()["error"]["code"] == "STORAGE_FAILED"
    assert fakes["store"].inserted == []


def test_transcription_failure_maps_to_bad_gateway(client):
    app.dependency_overrides[get_analysis_pipeline] = lambda: build_pipeline(
        transcriber=FakeTranscriber(error=TranscriptionError("nope")),
    )

    response = _analyze(client)

    assert response.status_code == 502
    assert response.json()["error"]["code"] == "STT_FAILED"


def test_persistence_failure_maps_to_internal_error(client):
    app.dependency_overrides[get_analysis_pipeline] = lambda: build_pipeline(
        session_store=FakeSessionStore(fail=True),
    )

    response = _analyze(client)

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": {"code": "INTERNAL_ERROR", "message": "Analysis failed unexpectedly"},
    }


def test_missing_token_is_unauthorized(client):
    app.dependency_overrides.pop(get_current_user_id)

    response = client.get("/api/sessions/history")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


def test_invalid_token_is_unauthorized(client):
    app.dependency_overrides.pop(get_current_user_id)

    response = client.get(
        "/api/sessions/history", headers={"Authorization": "Bearer not-a-jwt"}
    )

    assert response.status_code == 401


def test_valid_token_resolves_subject(client, fakes):
    app.dependency_overrides.pop(get_current_user_id)
    token = create_access_token("user-42")

    response = client.get("/api/sessions/history", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert "sessions:user-42:all" in fakes["cache"].values


def _seed_history(store: FakeSessionStore) -> None:
    base = datetime(2024, 5, 1, 9, 0, 0)
    kinds = [SessionKind.PRACTICE, SessionKind.DRILL, SessionKind.PRACTICE]
    for minutes, kind in enumerate(kinds):
        record = SessionRecord(
            id=f"s{minutes}",
            user_id=USER_ID,
            session_kind=kind,
            transcript="hello",
            wpm=100.0,
            tips=["Nice."],
            duration_seconds=3.0,
            overall_score=70,
            created_at=base + timedelta(minutes=minutes),
        )
        store.records[record.id] = record


def test_history_lists_newest_first_with_table_keys(client, fakes):
    _seed_history(fakes["store"])

    response = client.get("/api/sessions/history")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total"] == 3
    assert [row["id"] for row in data["sessions"]] == ["s2", "s1", "s0"]
    first = data["sessions"][0]
    assert first["type"] == "practice"
    assert first["llm_tips"] == ["Nice."]
    assert first["duration_secs"] == 3.0


def test_history_filters_by_type(client, fakes):
    _seed_history(fakes["store"])

    response = client.get("/api/sessions/history", params={"type": "drill"})

    data = response.json()["data"]
    assert data["total"] == 1
    assert data["sessions"][0]["id"] == "s1"
    assert "sessions:user-1:drill" in fakes["cache"].values


def test_history_first_page_is_cached(client, fakes):
    _seed_history(fakes["store"])

    client.get("/api/sessions/history")
    fakes["store"].records.clear()
    cached = client.get("/api/sessions/history")

    assert fakes["cache"].ttls["sessions:user-1:all"] == 60
    assert cached.json()["data"]["total"] == 3


def test_history_later_pages_bypass_cache(client, fakes):
    _seed_history(fakes["store"])

    response = client.get("/api/sessions/history", params={"offset": 2})

    assert [row["id"] for row in response.json()["data"]["sessions"]] == ["s0"]
    assert fakes["cache"].values == {}


@pytest.mark.parametrize(
    "params", [{"limit": 0}, {"limit": 101}, {"offset": -1}, {"type": "karaoke"}]
)
def test_history_rejects_bad_query(client, params):
    response = client.get("/api/sessions/history", params=params)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def _onboarding_client(fakes, script) -> None:
    app.dependency_overrides[get_onboarding_service] = lambda: OnboardingService(
        ScriptedTranscriber(script), fakes["store"], fakes["profiles"]
    )


def test_onboarding_builds_dialect_profile(client, fakes):
    _onboarding_client(fakes, {"a.m4a": "I am ready", "b.m4a": TranscriptionError("noise")})

    response = client.post(
        "/api/onboarding/analyze",
        data={"nativeLanguage": "kannada"},
        files={
            "seed_0": ("a.m4a", b"x" * 32_000, "audio/mp4"),
            "seed_3": ("b.m4a", b"x" * 16_000, "audio/mp4"),
        },
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["message"] == "Voice profile created successfully"
    assert data["dialectProfile"] == {
        "detectedRegion": "south_india",
        "avgWpmBaseline": 90.0,
        "weakPhonemes": [],
        "fillerPatterns": {},
    }
    assert USER_ID in fakes["profiles"].completed
    assert fakes["cache"].deleted == [
        "profile:user-1",
        "dialect:user-1",
        "drills:user-1",
        "sessions:user-1:all",
        "sessions:user-1:onboarding",
    ]


def test_onboarding_requires_a_seed(client, fakes):
    _onboarding_client(fakes, {})

    response = client.post("/api/onboarding/analyze", data={"nativeLanguage": "hindi"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_onboarding_fails_when_no_seed_transcribes(client, fakes):
    _onboarding_client(fakes, {"a.m4a": TranscriptionError("noise")})

    response = client.post(
        "/api/onboarding/analyze",
        files={"seed_0": ("a.m4a", b"x" * 100, "audio/mp4")},
    )

    assert response.status_code == 502
    assert response.json()["error"]["code"] == "STT_FAILED"


def _add_profile(fakes, **fields) -> None:
    values = {"id": USER_ID, "name": "Asha", "native_language": "tamil"}
    values.update(fields)
    fakes["profiles"].profiles[USER_ID] = ProfileRecord(**values)


def _add_dialect(fakes, **fields) -> None:
    values = {
        "id": "d-1",
        "user_id": USER_ID,
        "detected_region": "hindi_belt",
        "weak_phonemes": [{"phoneme": "v-w", "example": "wery"}],
        "avg_wpm_baseline": 96.0,
    }
    values.update(fields)
    fakes["profiles"].dialect_records[USER_ID] = DialectProfileRecord(**values)


def test_profile_me_merges_dialect_profile(client, fakes):
    _add_profile(fakes)
    _add_dialect(fakes)

    response = client.get("/api/profile/me")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["id"] == USER_ID
    assert data["name"] == "Asha"
    assert data["daily_goal_mins"] == 10
    assert data["dialectProfile"]["detected_region"] == "hindi_belt"
    assert data["dialectProfile"]["weak_phonemes"] == [{"phoneme": "v-w", "example": "wery"}]
    assert fakes["cache"].ttls["profile:user-1"] == 120
    assert fakes["cache"].ttls["dialect:user-1"] == 300


def test_profile_me_is_served_from_cache(client, fakes):
    _add_profile(fakes)
    first = client.get("/api/profile/me").json()
    reads = len(fakes["profiles"].reads)

    fakes["profiles"].profiles.clear()
    second = client.get("/api/profile/me")

    assert second.status_code == 200
    assert second.json() == first
    assert len(fakes["profiles"].reads) == reads


def test_profile_me_without_dialect_profile(client, fakes):
    _add_profile(fakes)

    response = client.get("/api/profile/me")

    assert response.status_code == 200
    assert response.json()["data"]["dialectProfile"] is None


def test_profile_me_missing_profile_is_not_found(client, fakes):
    response = client.get("/api/profile/me")

    assert response.status_code == 404
    assert response.json()["error"] == {"code": "NOT_FOUND", "message": "Profile not found"}
    assert "profile:user-1" not in fakes["cache"].values


def test_profile_me_database_failure(client, fakes):
    fakes["profiles"].fail = True

    response = client.get("/api/profile/me")

    assert response.status_code == 500
    assert response.json()["error"]["message"] == "Failed to fetch profile"


def test_update_profile_invalidates_cached_profile(client, fakes):
    _add_profile(fakes)
    client.get("/api/profile/me")

    response = client.put("/api/profile/me", json={"name": "Asha R", "daily_goal_mins": 25})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "Asha R"
    assert data["daily_goal_mins"] == 25
    assert data["native_language"] == "tamil"
    assert "profile:user-1" in fakes["cache"].deleted
    assert client.get("/api/profile/me").json()["data"]["name"] == "Asha R"


@pytest.mark.parametrize(
    "body",
    [{}, {"daily_goal_mins": 0}, {"daily_goal_mins": 121}, {"name": ""}, {"name": "x" * 101}],
)
def test_update_profile_rejects_bad_bodies(client, fakes, body):
    _add_profile(fakes)

    response = client.put("/api/profile/me", json=body)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
    assert fakes["profiles"].profiles[USER_ID].name == "Asha"


def test_update_missing_profile_is_not_found(client):
    response = client.put("/api/profile/me", json={"name": "Ghost"})

    assert response.status_code == 404


def test_drills_target_weak_phonemes_and_are_cached(client, fakes):
    _add_dialect(fakes)

    response = client.get("/api/drills/generate")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["targetPhonemes"] == ["v-w"]
    assert len(data["sentences"]) == 5
    assert fakes["cache"].ttls["drills:user-1"] == 300

    fakes["profiles"].dialect_records.clear()
    assert client.get("/api/drills/generate").json()["data"] == data


def test_drills_without_dialect_profile_are_general(client):
    response = client.get("/api/drills/generate")

    assert response.status_code == 200
    assert response.json()["data"]["targetPhonemes"] == ["pace", "articles"]


def test_drills_database_failure(client, fakes):
    fakes["profiles"].fail = True

    response = client.get("/api/drills/generate")

    assert response.status_code == 500
    assert response.json()["error"] == {
        "code": "INTERNAL_ERROR",
        "message": "Failed to generate drill sentences",
    }


def _answer(client: TestClient, interview_id: str, question_id: str | None, audio=b"m4a"):
    data = {"duration": "2"}
    if question_id is not None:
        data["questionId"] = question_id
    files = {"audio": ("answer.m4a", audio, "audio/mp4")} if audio is not None else None
    return client.post(f"/api/interview/{interview_id}/answer", data=data, files=files)


def test_interview_start_returns_first_question(client, fakes):
    response = client.post("/api/interview/start", json={"category": "technical"})

    assert response.status_code == 200
    data = response.json()["data"]
    interview = fakes["interviews"].interviews[data["interviewId"]]
    assert interview.category is InterviewCategory.TECHNICAL
    assert data["firstQuestion"] == {
        "id": interview.questions[0].id,
        "text": interview.questions[0].text,
        "number": 1,
        "total": 5,
    }


def test_interview_start_rejects_unknown_category(client):
    response = client.post("/api/interview/start", json={"category": "sales"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_interview_runs_to_completion_and_reports(client, fakes):
    start = client.post("/api/interview/start", json={"category": "hr"}).json()["data"]
    interview_id = start["interviewId"]
    question = start["firstQuestion"]

    bodies = []
    while question is not None:
        response = _answer(client, interview_id, question["id"])
        assert response.status_code == 200
        bodies.append(response.json()["data"])
        question = bodies[-1]["nextQuestion"]

    assert len(bodies) == 5
    assert [body["isComplete"] for body in bodies] == [False] * 4 + [True]
    assert all(body["overallScore"] is None for body in bodies[:-1])
    assert bodies[-1]["overallScore"] == fakes["store"].inserted[0].overall_score
    assert bodies[0]["answerResult"]["sessionId"] == fakes["store"].inserted[0].id
    assert bodies[0]["nextQuestion"]["number"] == 2

    report = client.get(f"/api/interview/{interview_id}/report")

    assert report.status_code == 200
    data = report.json()["data"]
    assert data["completed"] is True
    assert data["current_question_index"] == 5
    assert data["overall_score"] == bodies[-1]["overallScore"]
    assert len(data["answers"]) == 5
    assert data["answers"][0]["questionId"] == start["firstQuestion"]["id"]
    assert data["grade"] in {"A", "B", "C", "D"}


def test_interview_answer_invalidates_practice_history(client, fakes):
    start = client.post("/api/interview/start", json={"category": "hr"}).json()["data"]

    _answer(client, start["interviewId"], start["firstQuestion"]["id"])

    assert fakes["cache"].deleted == ["sessions:user-1:all", "sessions:user-1:practice"]


@pytest.mark.parametrize(("question_id", "audio"), [(None, b"m4a"), ("hr-01", None), ("hr-01", b"")])
def test_interview_answer_requires_audio_and_question(client, question_id, audio):
    start = client.post("/api/interview/start", json={"category": "hr"}).json()["data"]

    response = _answer(client, start["interviewId"], question_id, audio)

    assert response.status_code == 400
    assert response.json()["error"] == {
        "code": "VALIDATION_ERROR",
        "message": "audio and questionId are required",
    }


def test_interview_answer_after_completion_is_rejected(client, fakes):
    start = client.post("/api/interview/start", json={"category": "situational"}).json()["data"]
    interview_id = start["interviewId"]
    for question in fakes["interviews"].interviews[interview_id].questions:
        _answer(client, interview_id, question.id)

    response = _answer(client, interview_id, start["firstQuestion"]["id"])

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Interview is already completed"


def test_interview_of_another_user_is_not_found(client, fakes):
    start = client.post("/api/interview/start", json={"category": "hr"}).json()["data"]
    app.dependency_overrides[get_current_user_id] = lambda: "user-2"

    answer = _answer(client, start["interviewId"], start["firstQuestion"]["id"])
    report = client.get(f"/api/interview/{start['interviewId']}/report")

    assert answer.status_code == 404
    assert report.status_code == 404
    assert report.json()["error"]["code"] == "NOT_FOUND"


def test_interview_transcription_failure_maps_to_bad_gateway(client, fakes):
    app.dependency_overrides[get_interview_service] = lambda: InterviewService(
        fakes["interviews"],
        build_pipeline(transcriber=FakeTranscriber(error=TranscriptionError("nope"))),
        fakes["profiles"],
    )
    start = client.post("/api/interview/start", json={"category": "hr"}).json()["data"]

    response = _answer(client, start["interviewId"], start["firstQuestion"]["id"])

    assert response.status_code == 502
    assert response.json()["error"]["code"] == "STT_FAILED"
    assert fakes["interviews"].interviews[start["interviewId"]].current_question_index == 0
