from conftest import T0
from interview import ledger, lifecycle


def _started(**config):
    state = lifecycle.set_job_description(lifecycle.initial_state(), "jd").state
    state = lifecycle.confirm_resume(state, "cv").state
    return lifecycle.start(state, config or None, session_id="s1", now=T0).state


def _with_question(state):
    begun = lifecycle.request_next_question(state)
    return lifecycle.complete_question(begun.state, begun.request, "Q1", now=T0).state


def test_question_from_a_previous_session_is_discarded():
    old = lifecycle.request_next_question(_started())
    fresh = lifecycle.start(old.state, session_id="s2", now=T0).state
    result = lifecycle.complete_question(fresh, old.request, "late question")
    assert result.applied is False
    assert result.reason == "stale_session"
    assert result.state.questions == []


def test_superseded_question_request_is_discarded():
    state = _started()
    first = lifecycle.request_next_question(state)
    second = lifecycle.request_next_question(first.state)
    stale = lifecycle.complete_question(second.state, first.request, "old")
    assert stale.reason == "superseded"
    fresh = lifecycle.complete_question(stale.state, second.request, "new")
    assert fresh.applied
    assert [q.text for q in fresh.state.questions] == ["new"]


def test_question_for_filled_slot_is_discarded():
    state = _started()
    begun = lifecycle.request_next_question(state)
    filled = ledger.append_question(begun.state, "someone else's").state
    result = lifecycle.complete_question(filled, begun.request, "late")
    assert result.reason == "stale_position"
    assert len(result.state.questions) == 1
    assert result.state.pending == {}


def test_evaluation_for_edited_answer_is_discarded():
    state = _with_question(_started())
    first = lifecycle.submit_answer(state, "draft one")
    second = lifecycle.submit_answer(first.state, "draft two")
    stale = lifecycle.complete_evaluation(second.state, first.request, 95)
    assert stale.applied is False
    assert stale.reason in ("superseded", "stale_revision")
    assert stale.state.questions[0].score is None
    applied = lifecycle.complete_evaluation(stale.state, second.request, 40)
    assert applied.state.questions[0].score == 40
    assert applied.state.average_score == 40


def test_evaluation_after_end_is_discarded():
    state = _with_question(_started())
    submitted = lifecycle.submit_answer(state, "answer")
    ended = lifecycle.end(submitted.state).state
    result = lifecycle.complete_evaluation(ended, submitted.request, 90)
    assert result.applied is False
    assert result.state.scores == []


def test_question_arriving_while_paused_is_kept_but_not_shown():
    state = _started()
    begun = lifecycle.request_next_question(state)
    paused = lifecycle.pause(begun.state).state
    result = lifecycle.complete_question(paused, begun.request, "Q1")
    assert result.applied
    assert len(result.state.questions) == 1
    assert result.state.current_index is None
    assert result.state.messages == []


def test_ledger_full_blocks_more_requests():
    state = _with_question(_started(total_questions=1))
    assert lifecycle.request_next_question(state).reason == "ledger_full"
