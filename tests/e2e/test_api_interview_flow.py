import pytest
from fastapi.testclient import TestClient

import api_server
from api.routes import get_service
from services.interview_service import InterviewService

BASE = "/api/interview-sessions"


@pytest.fixture
def service(clock):
    svc = InterviewService(clock=clock)
    api_server.app.dependency_overrides[get_service] = lambda: svc
    yield svc
    api_server.app.dependency_overrides.clear()


@pytest.fixture
def client(service):
    return TestClient(api_server.app)


def _start(client, **config):
    payload = {
        "job_description": "Backend engineer working on APIs",
        "resume_text": "Ana, five years of Python",
        "resume_confirmed": True,
        "candidate": {"name": "Ana"},
        "config": {"total_questions": 2, **config},
    }
    return client.post(f"{BASE}/start", json=payload)


def test_start_requires_job_description_and_resume(client):
    res = client.post(f"{BASE}/start", json={"job_description": "  "})
    assert res.status_code == 422
    assert "Please provide a job description to start the interview" in res.json()["detail"]
    assert "Please upload and confirm your resume before starting the interview" in res.json()["detail"]


def test_start_rejects_invalid_config(client):
    assert _start(client, total_questions=0).status_code == 422
    assert _start(client, surprise=True).status_code == 422


def test_full_incremental_interview(client, oracle, clock):
    res = _start(client)
    assert res.status_code == 201
    view = res.json()
    sid = view["session"]["id"]
    assert view["phase"] == "active"
    assert view["messages"][0]["content"].startswith("Hello Ana! Welcome to your technical interview")
    assert view["current_question"]["number"] == 1
    assert view["overall_timer"]["remaining_seconds"] == 30 * 60

    clock.advance(20)
    first = client.post(f"{BASE}/{sid}/answer", json={"answer": "I would add an index."})
    assert first.status_code == 200
    body = first.json()["view"]
    assert body["questions"][0]["score"] == 80
    assert body["current_index"] == 2
    assert body["overall_timer"]["remaining_seconds"] == 30 * 60 - 20

    by_question = client.get(f"{BASE}/{sid}/transcript", params={"question": 1}).json()
    assert [m["question_number"] for m in by_question] == [None, 1, 1]

    done = client.post(f"{BASE}/{sid}/answer", json={"answer": "Use a queue."}).json()["view"]
    assert done["phase"] == "completed"
    assert done["session"]["final_score"] == 80
    assert done["session"]["report"]["recommendation"] == "Consider for the next round"
    assert done["progress"]["is_completed"] is True

    history = client.get("/api/history").json()
    assert [s["id"] for s in history] == [sid]
    detail = client.get(f"/api/history/{sid}").json()
    assert [q["answer"] for q in detail["questions"]] == ["I would add an index.", "Use a queue."]
    pdf = client.get(f"/api/history/{sid}/report.pdf")
    assert pdf.status_code == 200
    assert pdf.headers["content-type"] == "application/pdf"
    assert pdf.content.startswith(b"%PDF")

    assert client.post(f"{BASE}/{sid}/answer", json={"answer": "late"}).status_code == 409


def test_runs_on_fallbacks_without_oracle(client):
    view = _start(client).json()
    sid = view["session"]["id"]
    assert view["current_question"]["text"]
    answered = client.post(f"{BASE}/{sid}/answer", json={"answer": "something"}).json()["view"]
    assert answered["questions"][0]["score"] == 50


def test_navigation_and_noops_return_409(client, oracle):
    sid = _start(client).json()["session"]["id"]
    assert client.post(f"{BASE}/{sid}/navigate", json={"index": 5}).status_code == 409
    assert client.post(f"{BASE}/{sid}/navigate", json={"index": 1}).status_code == 200
    assert client.post(f"{BASE}/{sid}/resume").status_code == 409
    assert client.post(f"{BASE}/{sid}/answer", json={"answer": "   "}).status_code == 409
    assert client.get(f"{BASE}/unknown").status_code == 404


def test_draft_survives_in_view(client, oracle):
    sid = _start(client).json()["session"]["id"]
    res = client.put(f"{BASE}/{sid}/draft", json={"text": "thinking..."})
    assert res.json()["view"]["draft_answer"] == "thinking..."


def test_pause_freezes_clock(client, oracle, clock):
    sid = _start(client).json()["session"]["id"]
    clock.advance(10)
    paused = client.post(f"{BASE}/{sid}/pause").json()["view"]
    assert paused["phase"] == "paused"
    assert paused["overall_timer"]["remaining_seconds"] == 30 * 60 - 10
    clock.advance(600)
    still = client.get(f"{BASE}/{sid}").json()
    assert still["overall_timer"]["remaining_seconds"] == 30 * 60 - 10
    assert client.post(f"{BASE}/{sid}/answer", json={"answer": "x"}).status_code == 409
    client.post(f"{BASE}/{sid}/resume")
    clock.advance(5)
    assert client.get(f"{BASE}/{sid}").json()["overall_timer"]["remaining_seconds"] == 30 * 60 - 15


def test_manual_end_uses_summary(client, oracle):
    sid = _start(client).json()["session"]["id"]
    ended = client.post(f"{BASE}/{sid}/end").json()["view"]
    assert ended["phase"] == "completed"
    assert ended["session"]["summary"] == "Capable candidate with clear explanations."
    assert ended["session"]["final_score"] == 0
    assert client.post(f"{BASE}/{sid}/end").status_code == 409


def test_bulk_generation_uses_weighted_score(client, oracle):
    view = _start(client, generation="bulk").json()
    sid = view["session"]["id"]
    assert view["config"]["total_questions"] == 10
    assert [q["difficulty"] for q in view["questions"]] == ["easy"] * 4 + ["medium"] * 4 + ["hard"] * 2
    for _ in range(10):
        client.post(f"{BASE}/{sid}/answer", json={"answer": "answer"})
    final = client.get(f"{BASE}/{sid}").json()
    assert final["phase"] == "completed"
    assert final["session"]["final_score"] == 50


def test_completed_session_is_released_from_live_registry(client, service, oracle):
    sid = _start(client, total_questions=1).json()["session"]["id"]
    assert service.sessions.ids() == [sid]
    done = client.post(f"{BASE}/{sid}/answer", json={"answer": "Use a queue."}).json()["view"]
    assert done["phase"] == "completed"
    assert sid not in service.sessions.ids()
    assert service.sessions.finished_ids() == [sid]
    assert client.get(f"{BASE}/{sid}").json()["phase"] == "completed"
    assert client.post(f"{BASE}/{sid}/answer", json={"answer": "late"}).status_code == 409
    assert client.get(f"/api/history/{sid}").status_code == 200
