"""Unit tests for the progress reconciler's pure functions (no I/O)."""
from types import SimpleNamespace

import pytest

from securauditz.services.progress import (
    AuditSummary,
    compute_summary,
    count_completed,
    is_control_complete,
    plan_summary_update,
    progress_percentage,
    status_for_progress,
)


def control(n_questions: int):
    return SimpleNamespace(questionnaires=[{"question_text": f"Q{i}"} for i in range(n_questions)])


def response(selected: list, status: str = "Yes"):
    return SimpleNamespace(
        question_responses=[{"question_index": i, "selected_option": s} for i, s in enumerate(selected)],
        compliance_status=status,
    )


NOT_STARTED = AuditSummary(overall_score=0, overall_status="Not Started", completed_controls_in_audit=0)


# ── Completeness predicate ──

def test_complete_when_all_answered_and_verdict_set():
    assert is_control_complete(2, response(["a", "b"], "Yes"))


@pytest.mark.parametrize("status", ["Yes", "Partial", "No", "Not Applicable"])
def test_every_verdict_counts(status):
    assert is_control_complete(1, response(["a"], status))


def test_not_answered_status_never_completes():
    assert not is_control_complete(2, response(["a", "b"], "Not Answered"))


def test_missing_answer_is_incomplete():
    assert not is_control_complete(2, response(["a", None], "Yes"))


def test_empty_string_selection_is_unanswered():
    assert not is_control_complete(1, response([""], "Yes"))


def test_zero_question_control_never_completes():
    assert not is_control_complete(0, response([], "Yes"))
    assert not is_control_complete(0, response([], "Not Applicable"))


def test_absent_response_is_incomplete():
    assert not is_control_complete(1, None)


# ── Rounding & thresholds ──

@pytest.mark.parametrize("completed,total,expected", [
    (0, 0, 0),
    (0, 5, 0),
    (1, 3, 33),
    (2, 3, 67),
    (1, 2, 50),
    (1, 8, 13),
    (3, 8, 38),
    (1, 200, 1),
    (1, 201, 0),
    (5, 5, 100),
])
def test_progress_percentage(completed, total, expected):
    assert progress_percentage(completed, total) == expected


def test_progress_capped_at_hundred():
    assert progress_percentage(4, 3) == 100


@pytest.mark.parametrize("progress,status", [
    (0, "Not Started"),
    (1, "In Progress"),
    (50, "In Progress"),
    (99, "In Progress"),
    (100, "Completed"),
])
def test_status_thresholds(progress, status):
    assert status_for_progress(progress) == status


# ── Aggregation ──

def test_stale_response_is_ignored():
    controls = {"A": control(1)}
    responses = {"A": response(["a"]), "GONE": response(["a"])}
    assert count_completed(controls, responses) == 1
    summary = compute_summary(controls, responses, total_expected=2)
    assert summary == AuditSummary(50, "In Progress", 1)


def test_zero_question_control_does_not_count():
    controls = {"A": control(0), "B": control(1)}
    responses = {"A": response([], "Yes"), "B": response(["a"], "No")}
    assert compute_summary(controls, responses, 2) == AuditSummary(50, "In Progress", 1)


def test_scenario_one_of_two_complete():
    controls = {"A": control(2), "B": control(1)}
    responses = {"A": response(["x", "y"], "Yes"), "B": response([None], "Not Answered")}

    update = plan_summary_update(NOT_STARTED, controls, responses, total_expected=2)

    assert update.changed
    assert update.summary == AuditSummary(50, "In Progress", 1)


def test_scenario_both_complete():
    controls = {"A": control(2), "B": control(1)}
    before = AuditSummary(50, "In Progress", 1)
    responses = {"A": response(["x", "y"], "Yes"), "B": response(["z"], "Not Applicable")}

    update = plan_summary_update(before, controls, responses, total_expected=2)

    assert update.changed
    assert update.summary == AuditSummary(100, "Completed", 2)


def test_idempotent_second_plan_is_noop():
    controls = {"A": control(2), "B": control(1)}
    responses = {"A": response(["x", "y"], "Yes"), "B": response([None], "Not Answered")}

    first = plan_summary_update(NOT_STARTED, controls, responses, 2)
    second = plan_summary_update(first.summary, controls, responses, 2)

    assert first.changed
    assert not second.changed
    assert second.summary == first.summary


def test_monotonic_convergence_as_controls_complete():
    ids = [f"C{i}" for i in range(7)]
    controls = {cid: control(2) for cid in ids}
    responses = {cid: response([None, None], "Not Answered") for cid in ids}

    current = NOT_STARTED
    seen = []
    for cid in ids:
        responses[cid] = response(["a", "b"], "Partial")
        current = plan_summary_update(current, controls, responses, len(ids)).summary
        seen.append(current)

    completed = [s.completed_controls_in_audit for s in seen]
    scores = [s.overall_score for s in seen]
    assert completed == sorted(completed)
    assert scores == sorted(scores)
    assert seen[-1] == AuditSummary(100, "Completed", 7)


def test_uses_snapshot_total_not_catalog_size():
    # Catalog grew after the audit snapshot: total stays what the audit recorded
    controls = {"A": control(1), "B": control(1), "NEW": control(1)}
    responses = {"A": response(["a"]), "B": response([None], "Not Answered")}
    assert compute_summary(controls, responses, total_expected=2).overall_score == 50
