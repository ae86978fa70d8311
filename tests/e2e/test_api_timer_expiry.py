import pytest
from fastapi.testclient import TestClient

import api_server
from api.routes import get_service
from services.interview_service import InterviewService

BASE = "/api/interview-sessions"


@pytest.fixture
def client(clock):
    svc = InterviewService(clock=clock)
    api_server.app.dependency_overrides[get_service] = lambda: svc
    yield TestClient(api_server.app)
    api_server.app.dependency_overrides.clear()


def _start(client, **config):
    return client.post(
        f"{BASE}/start",
        json={
            "job_description": "Data engineer",
            "resume_text": "cv",
            "resume_confirmed": True,
            "config": config,
        },
    ).json()["session"]["id"]


def test_overall_timer_expiry_counts_unanswered_question_as_zero(client, oracle, clock):
    sid = _start(client, total_questions=3, time_limit_minutes=1)
    client.post(f"{BASE}/{sid}/answer", json={"answer": "first"})
    client.post(f"{BASE}/{sid}/answer", json={"answer": "second"})
    clock.advance(61)
    view = client.get(f"{BASE}/{sid}").json()
    assert view["phase"] == "completed"
    assert view["session"]["summary"].startswith("Interview ended when the time limit was reached after 2 of 3")
    assert [q["score"] for q in view["questions"]] == [80, 80, None]
    assert view["session"]["final_score"] == 53
    assert view["progress"]["is_completed"] is True
    assert view["progress"]["average_score"] == 80
    assert view["overall_timer"]["remaining_seconds"] == 0
    assert [s["id"] for s in client.get("/api/history").json()] == [sid]


def test_submit_is_applied_before_clock_catch_up(client, oracle, clock):
    sid = _start(client, total_questions=2, question_time_seconds=10)
    clock.advance(15)
    res = client.post(f"{BASE}/{sid}/answer", json={"answer": "just in time"})
    assert res.status_code == 200
    assert res.json()["view"]["questions"][0]["answer"] == "just in time"


def test_question_timer_auto_submits_draft(client, oracle, clock):
    sid = _start(client, total_questions=2, question_time_seconds=10)
    client.put(f"{BASE}/{sid}/draft", json={"text": "half an answer"})
    clock.advance(10)
    view = client.get(f"{BASE}/{sid}").json()
    assert view["questions"][0]["answer"] == "half an answer"
    assert view["questions"][0]["score"] == 80
    assert view["current_index"] == 2


def test_question_timer_skips_without_draft(client, oracle, clock):
    sid = _start(client, total_questions=2, question_time_seconds=10)
    clock.advance(10)
    view = client.get(f"{BASE}/{sid}").json()
    assert view["questions"][0]["answer"] is None
    assert view["current_index"] == 2
    assert any(m["content"] == "Time is up for question 1." for m in view["messages"])


def test_transcript_catches_up_with_expired_question(client, oracle, clock):
    sid = _start(client, total_questions=2, question_time_seconds=10)
    clock.advance(10)
    contents = [m["content"] for m in client.get(f"{BASE}/{sid}/transcript").json()]
    assert "Time is up for question 1." in contents
    by_question = client.get(f"{BASE}/{sid}/transcript", params={"question": 2}).json()
    assert by_question[-1]["question_number"] == 2


def test_pause_and_resume_keep_question_and_overall_timers(client, oracle, clock):
    sid = _start(client, total_questions=2, question_time_seconds=60)
    clock.advance(7)
    paused = client.post(f"{BASE}/{sid}/pause").json()["view"]
    assert paused["question_timer"]["remaining_seconds"] == 53
    assert paused["overall_timer"]["remaining_seconds"] == 30 * 60 - 7

    clock.advance(300)
    resumed = client.post(f"{BASE}/{sid}/resume").json()["view"]
    assert resumed["phase"] == "active"
    assert resumed["question_timer"]["remaining_seconds"] == 53
    assert resumed["overall_timer"]["remaining_seconds"] == 30 * 60 - 7
    assert resumed["question_timer"]["active"] is True

    clock.advance(3)
    later = client.get(f"{BASE}/{sid}").json()
    assert later["question_timer"]["remaining_seconds"] == 50
    assert later["overall_timer"]["remaining_seconds"] == 30 * 60 - 10
