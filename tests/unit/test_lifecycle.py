from datetime import timedelta

import pytest
from pydantic import ValidationError

from conftest import T0
from interview import lifecycle, transcript
from interview.state import CandidateInfo, InterviewConfig


def _ready():
    state = lifecycle.initial_state()
    state = lifecycle.set_job_description(state, "Backend engineer").state
    return lifecycle.confirm_resume(state, "resume", CandidateInfo(name="Ana")).state


def _started(**config):
    return lifecycle.start(_ready(), config or None, session_id="s1", now=T0).state


def _with_question(state, text="Q1", **kw):
    begun = lifecycle.request_next_question(state)
    return lifecycle.complete_question(begun.state, begun.request, text, now=T0, **kw)


def test_start_blockers_name_missing_inputs():
    blockers = lifecycle.start_blockers(lifecycle.initial_state())
    assert lifecycle.JOB_DESCRIPTION_REQUIRED in blockers
    assert lifecycle.RESUME_REQUIRED in blockers
    assert lifecycle.start_blockers(_ready()) == []


def test_start_arms_overall_timer_and_resets():
    state = _started(time_limit_minutes=5, total_questions=3)
    assert state.phase == "active"
    assert state.session.status == "active"
    assert state.session.candidate_name == "Ana"
    assert state.overall_timer.remaining_seconds == 300
    assert state.overall_timer.active
    assert state.questions == [] and state.scores == [] and state.messages == []


def test_start_rejects_bad_config():
    with pytest.raises(ValidationError):
        lifecycle.start(_ready(), {"total_questions": 0})
    with pytest.raises(ValidationError):
        lifecycle.start(_ready(), {"unknown": True})


def test_defaults_apply_when_config_omitted():
    cfg = InterviewConfig()
    assert (cfg.interview_type, cfg.difficulty, cfg.total_questions, cfg.time_limit_minutes) == ("technical", "mid", 10, 30)


def test_pause_and_resume_only_from_matching_phase():
    state = _started()
    assert lifecycle.resume(state).applied is False
    paused = lifecycle.pause(state).state
    assert paused.phase == "paused"
    assert not paused.overall_timer.active
    assert lifecycle.pause(paused).reason == "not_active"
    resumed = lifecycle.resume(paused, now=T0 + timedelta(minutes=1)).state
    assert resumed.phase == "active"
    assert resumed.overall_timer.active
    assert resumed.overall_timer.remaining_seconds == state.overall_timer.remaining_seconds


def test_question_generation_presents_and_announces_once():
    state = _with_question(_started()).state
    assert state.current_index == 1
    assert state.questions[0].asked_at is not None
    assert [m.content for m in state.messages] == ["Q1"]
    again = lifecycle.navigate(state, 1).state
    assert len(again.messages) == 1


def test_submit_answer_records_and_requests_evaluation():
    state = _with_question(_started(question_time_seconds=30)).state
    assert state.question_timer.active
    result = lifecycle.submit_answer(state, "  my answer  ")
    assert result.applied
    assert result.request.kind == "evaluation"
    assert result.request.revision == 1
    nxt = result.state
    assert nxt.questions[0].answer == "my answer"
    assert not nxt.question_timer.active
    assert nxt.messages[-1].role == "user"


def test_submit_rejects_empty_and_inactive():
    state = _with_question(_started()).state
    assert lifecycle.submit_answer(state, "   ").reason == "empty_answer"
    paused = lifecycle.pause(state).state
    assert lifecycle.submit_answer(paused, "x").reason == "not_active"


def test_resubmitting_edits_transcript_entry():
    state = _with_question(_started()).state
    first = lifecycle.submit_answer(state, "one").state
    second = lifecycle.submit_answer(first, "two").state
    assert len(second.messages) == len(first.messages)
    assert second.messages[-1].content == "two"
    assert second.questions[0].revision == 2


def test_complete_evaluation_scores_ledger_and_transcript():
    state = _with_question(_started()).state
    submitted = lifecycle.submit_answer(state, "answer")
    done = lifecycle.complete_evaluation(submitted.state, submitted.request, 85, "good").state
    assert done.questions[0].score == 85
    assert done.questions[0].feedback == "good"
    assert done.average_score == 85
    assert done.messages[-1].score == 85
    assert done.pending == {}


def test_end_completes_and_freezes():
    state = _with_question(_started(total_questions=1)).state
    submitted = lifecycle.submit_answer(state, "answer")
    scored = lifecycle.complete_evaluation(submitted.state, submitted.request, 60).state
    ended = lifecycle.end(scored, summary="done", now=T0 + timedelta(minutes=3)).state
    assert ended.phase == "completed"
    assert ended.session.status == "completed"
    assert ended.session.final_score == 60
    assert ended.session.end_time == T0 + timedelta(minutes=3)
    assert ended.current_index is None
    assert not ended.overall_timer.active and not ended.question_timer.active
    assert [s.id for s in ended.history] == ["s1"]
    assert lifecycle.end(ended).applied is False
    assert lifecycle.tick(ended).applied is False
    assert lifecycle.submit_answer(ended, "late").applied is False


def test_end_respects_explicit_score():
    state = lifecycle.end(_started(), final_score=42).state
    assert state.session.final_score == 42


def test_overall_expiry_forces_end():
    state = _started(time_limit_minutes=1)
    for _ in range(59):
        state = lifecycle.tick(state).state
    assert state.phase == "active"
    result = lifecycle.tick(state)
    assert "overall" in result.expired
    assert result.state.phase == "completed"
    assert result.state.session.summary.startswith("Interview ended when the time limit was reached")


def test_question_expiry_auto_submits_draft():
    state = _with_question(_started(question_time_seconds=2)).state
    state = lifecycle.update_draft(state, "partial thoughts").state
    state = lifecycle.tick(state).state
    result = lifecycle.tick(state)
    assert result.expired == ("question",)
    assert result.request.kind == "evaluation"
    assert result.state.questions[0].answer == "partial thoughts"


def test_question_expiry_without_draft_skips():
    state = _with_question(_started(question_time_seconds=1)).state
    result = lifecycle.tick(state)
    assert result.request is None
    assert result.state.questions[0].answer is None
    assert result.state.messages[-1].content == lifecycle.QUESTION_TIME_UP.format(number=1)


def test_navigate_out_of_range_leaves_pointer():
    state = _with_question(_started()).state
    result = lifecycle.navigate(state, 5)
    assert result.applied is False
    assert result.reason == "index_out_of_range"
    assert result.state.current_index == 1


def test_progress_reports_counts():
    state = _with_question(_started(total_questions=4)).state
    progress = lifecycle.progress(state)
    assert progress.questions_asked == 1
    assert progress.total_questions == 4
    assert progress.is_completed is False
    assert progress.time_remaining == state.overall_timer.remaining_seconds


def test_configure_is_refused_while_running():
    assert lifecycle.configure(_started(), {"total_questions": 3}).reason == "session_in_progress"
    assert lifecycle.configure(_ready(), {"total_questions": 3}).state.config.total_questions == 3


def test_transcript_append_is_pure():
    state = _started()
    transcript.append(state, "ai", "hello")
    assert state.messages == []


def test_pause_and_resume_keep_both_timers():
    state = _with_question(_started(question_time_seconds=90)).state
    for _ in range(5):
        state = lifecycle.tick(state).state
    paused = lifecycle.pause(state).state
    assert paused.question_timer.remaining_seconds == 85
    assert paused.overall_timer.remaining_seconds == 30 * 60 - 5
    assert lifecycle.tick(paused).applied is False

    resumed = lifecycle.resume(paused, now=T0 + timedelta(minutes=10)).state
    assert resumed.question_timer.remaining_seconds == 85
    assert resumed.overall_timer.remaining_seconds == 30 * 60 - 5
    assert resumed.question_timer.active and resumed.overall_timer.active


def test_timer_driven_end_reports_completed_progress():
    state = _started(time_limit_minutes=1, total_questions=3)
    for text in ("Q1", "Q2"):
        state = _with_question(state, text).state
        submitted = lifecycle.submit_answer(state, f"answer to {text}")
        state = lifecycle.complete_evaluation(submitted.state, submitted.request, 80).state
    assert lifecycle.progress(state).is_completed is False
    while state.phase == "active":
        state = lifecycle.tick(state).state
    progress = lifecycle.progress(state)
    assert progress.is_completed is True
    assert progress.average_score == 80
    assert state.session.final_score == 53
