from datetime import datetime, timedelta, timezone

from src.helpers.leaderboard import merge_best_score, rank_entries, submit_score, summarize
from src.models.leaderboard import LeaderboardRow

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def row(user_id, score, minutes=0, name=None):
    return LeaderboardRow(
        quiz_id="quiz-1",
        user_id=user_id,
        user_name=name or user_id.title(),
        score=score,
        completed_at=T0 + timedelta(minutes=minutes),
    )


def test_new_user_is_appended():
    entries = [row("alice", 80)]
    result = submit_score(entries, "bob", "Bob", 60, now=T0 + timedelta(minutes=5))

    assert [entry.user_id for entry in result] == ["alice", "bob"]
    assert result[1].score == 60
    assert result[1].quiz_id == "quiz-1"
    assert result[1].completed_at == T0 + timedelta(minutes=5)


def test_higher_score_replaces_existing_entry():
    result = submit_score([row("alice", 60)], "alice", "Alice", 80, now=T0 + timedelta(hours=1))

    assert len(result) == 1
    assert result[0].score == 80
    assert result[0].completed_at == T0 + timedelta(hours=1)


def test_lower_or_equal_score_leaves_entry_unchanged():
    original = row("alice", 80)
    for score in (80, 40):
        result = submit_score([original], "alice", "Alice", score, now=T0 + timedelta(hours=1))
        assert result == [original]


def test_same_submission_twice_is_idempotent():
    once = submit_score([row("alice", 70)], "bob", "Bob", 90, now=T0)
    twice = submit_score(once, "bob", "Bob", 90, now=T0 + timedelta(minutes=3))
    assert twice == once


def test_sixty_then_eighty_keeps_a_single_row():
    entries = submit_score([], "u", "U", 60, quiz_id="quiz-1", now=T0)
    entries = submit_score(entries, "u", "U", 80, now=T0 + timedelta(minutes=1))

    assert len(entries) == 1
    assert entries[0].score == 80


def test_ordering_by_score_then_earliest_completion():
    entries = [row("late", 90, minutes=10), row("low", 50, minutes=0), row("early", 90, minutes=1)]
    result = rank_entries(entries)

    assert [entry.user_id for entry in result] == ["early", "late", "low"]
    for first, second in zip(result, result[1:]):
        assert first.score > second.score or (
            first.score == second.score and first.completed_at <= second.completed_at
        )


def test_input_sequence_is_not_mutated():
    entries = [row("alice", 10)]
    submit_score(entries, "alice", "Alice", 99, now=T0)
    assert entries[0].score == 10


def test_rank_entries_caps_rows():
    entries = [row(f"user{i}", i % 101, minutes=i) for i in range(150)]
    assert len(rank_entries(entries)) == 100
    assert len(rank_entries(entries, limit=None)) == 150


def test_merge_best_score_reports_changes():
    existing = row("alice", 50)
    kept, changed = merge_best_score(existing, "quiz-1", "alice", "Alice", 40, now=T0)
    assert kept is existing and not changed

    raised, changed = merge_best_score(existing, "quiz-1", "alice", "Alicia", 75, now=T0)
    assert changed and raised.score == 75 and raised.user_name == "Alicia"


def test_summary():
    summary = summarize([row("a", 100), row("b", 50), row("c", 75)])
    assert summary.participants == 3
    assert summary.average_score == 75
    assert summary.highest_score == 100


def test_summary_of_empty_board():
    summary = summarize([])
    assert (summary.participants, summary.average_score, summary.highest_score) == (0, 0, 0)
