"""Best-score-wins leaderboard ranking.

Each user holds at most one row per quiz. A new submission replaces the row
only when it beats the stored score. Rows are ordered by score, highest
first, and equal scores by who reached them first.
"""

from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence, Tuple

from pydantic import BaseModel

from src.helpers.scoring import round_half_up
from src.models.leaderboard import LeaderboardRow

LEADERBOARD_LIMIT = 100


class LeaderboardSummary(BaseModel):
    participants: int
    average_score: int
    highest_score: int


def _sort_key(entry: LeaderboardRow):
    return (-entry.score, entry.completed_at)


def merge_best_score(
    existing: Optional[LeaderboardRow],
    quiz_id: str,
    user_id: str,
    user_name: str,
    new_score: int,
    now: datetime = None,
) -> Tuple[LeaderboardRow, bool]:
    """Return the row to keep for this user and whether it changed."""
    now = now or datetime.now(timezone.utc)
    if existing is None:
        return (
            LeaderboardRow(quiz_id=quiz_id, user_id=user_id, user_name=user_name, score=new_score, completed_at=now),
            True,
        )
    if new_score > existing.score:
        return existing.model_copy(update={"score": new_score, "user_name": user_name, "completed_at": now}), True
    return existing, False


def rank_entries(entries: Iterable[LeaderboardRow], limit: Optional[int] = LEADERBOARD_LIMIT) -> List[LeaderboardRow]:
    ranked = sorted(entries, key=_sort_key)
    return ranked if limit is None else ranked[:limit]


def submit_score(
    entries: Sequence[LeaderboardRow],
    user_id: str,
    user_name: str,
    new_score: int,
    quiz_id: str = None,
    now: datetime = None,
) -> List[LeaderboardRow]:
    """Merge a submission into a quiz leaderboard and return the re-ranked rows.

    ``entries`` is left untouched.
    """
    updated = list(entries)
    index = next((i for i, entry in enumerate(updated) if entry.user_id == user_id), None)
    existing = updated[index] if index is not None else None
    if quiz_id is None:
        quiz_id = existing.quiz_id if existing else (updated[0].quiz_id if updated else "")

    row, changed = merge_best_score(existing, quiz_id, user_id, user_name, new_score, now=now)
    if index is None:
        updated.append(row)
    elif changed:
        updated[index] = row
    return rank_entries(updated, limit=None)


def summarize(entries: Sequence[LeaderboardRow]) -> LeaderboardSummary:
    if not entries:
        return LeaderboardSummary(participants=0, average_score=0, highest_score=0)
    scores = [entry.score for entry in entries]
    return LeaderboardSummary(
        participants=len(scores),
        average_score=round_half_up(sum(scores) / len(scores)),
        highest_score=max(scores),
    )
