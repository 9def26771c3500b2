"""
Statistics Service

Derives streaks, win rates, distributions and the extended history view from
the append-only game history. Nothing here is stored; every figure is
recomputed from the history entries on request.
"""

import datetime
import math
from typing import Any, Callable, Dict, List, Optional

from ..config.game_settings import COMMON_LETTERS, MAX_ATTEMPTS
from ..models.game import HistoryEntry
from ..utils.helpers import isoformat, utcnow


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def current_streak(entries_newest_first: List[HistoryEntry]) -> int:
    """Consecutive wins counting back from the most recent game."""
    streak = 0
    for entry in entries_newest_first:
        if not entry.is_won:
            break
        streak += 1
    return streak


def max_streak(entries_oldest_first: List[HistoryEntry]) -> int:
    """Longest run of consecutive wins."""
    best = 0
    running = 0
    for entry in entries_oldest_first:
        if entry.is_won:
            running += 1
            best = max(best, running)
        else:
            running = 0
    return best


def summarize(entries: List[HistoryEntry]) -> Dict[str, Any]:
    """Totals, win percentage and the attempts distribution of won games."""
    total_games = len(entries)
    wins = 0
    distribution = [0] * MAX_ATTEMPTS
    for entry in entries:
        if entry.is_won:
            wins += 1
            if 1 <= entry.attempts_used <= MAX_ATTEMPTS:
                distribution[entry.attempts_used - 1] += 1

    weighted = sum(count * (index + 1) for index, count in enumerate(distribution))

    return {
        "totalGames": total_games,
        "wins": wins,
        "losses": total_games - wins,
        "winPercentage": int(_round_half_up(wins / total_games * 100)) if total_games else 0,
        "attemptDistribution": distribution,
        "averageAttempts": _round_half_up(weighted / wins, 1) if wins else 0,
    }


def game_duration_minutes(entry: HistoryEntry) -> Optional[int]:
    if entry.game_started_at is None or entry.completed_at is None:
        return None
    seconds = (entry.completed_at - entry.game_started_at).total_seconds()
    return int(_round_half_up(max(seconds, 0) / 60))


def game_score(entry: HistoryEntry) -> int:
    if not entry.is_won:
        return 0
    return max(0, 60 - 10 * entry.attempts_used)


def word_difficulty(word: str) -> str:
    """
    easy: only common letters and no repeats
    medium: one or two uncommon letters
    hard: three or more uncommon letters, or any repeated letter
    """
    word = word.upper()
    uncommon = sum(1 for letter in word if letter not in COMMON_LETTERS)
    if uncommon >= 3 or len(set(word)) < len(word):
        return "hard"
    if uncommon >= 1:
        return "medium"
    return "easy"


def history_entry_to_response(entry: HistoryEntry) -> Dict[str, Any]:
    return {
        "targetWord": entry.target_word,
        "isWon": entry.is_won,
        "isLost": entry.is_lost,
        "attemptsUsed": entry.attempts_used,
        "totalAttempts": entry.total_attempts,
        "attempts": entry.attempts,
        "gameStartedAt": isoformat(entry.game_started_at),
        "completedAt": isoformat(entry.completed_at),
        "duration": game_duration_minutes(entry),
        "score": game_score(entry),
        "difficulty": word_difficulty(entry.target_word),
    }


class StatsService:
    """Statistics over the history of one (already resolved) identity."""

    def __init__(self, store, now: Callable = utcnow):
        self.store = store
        self.now = now

    def get_user_stats(self, user_id: str) -> Dict[str, Any]:
        entries = self.store.find_history(user_id, descending=False)
        stats = summarize(entries)
        stats["currentStreak"] = current_streak(list(reversed(entries)))
        stats["maxStreak"] = max_streak(entries)
        return stats

    def get_history(self, user_id: str, limit: int, offset: int = 0, sort_by: str = "completedAt",
                    sort_order: str = "desc", result_filter: str = "all",
                    date_from: Optional[datetime.datetime] = None,
                    date_to: Optional[datetime.datetime] = None) -> Dict[str, Any]:
        """
        One page of the identity's finished games with derived fields.

        ``date_to`` is an exclusive upper bound on the completion time.
        """
        is_won = {"won": True, "lost": False}.get(result_filter)
        descending = sort_order == "desc"
        query = dict(is_won=is_won, completed_from=date_from, completed_before=date_to)

        total = self.store.count_history(user_id, **query)

        if sort_by == "duration":
            # derived field, sorted here rather than by the store
            entries = self.store.find_history(user_id, **query)
            entries.sort(key=lambda e: game_duration_minutes(e) or 0, reverse=descending)
            page = entries[offset:offset + limit]
        else:
            page = self.store.find_history(user_id, sort_field=sort_by, descending=descending,
                                           skip=offset, limit=limit, **query)

        if is_won is None:
            wins = self.store.count_history(user_id, is_won=True, completed_from=date_from,
                                            completed_before=date_to)
        else:
            wins = total if is_won else 0

        return {
            "history": [history_entry_to_response(entry) for entry in page],
            "pagination": {
                "total": total,
                "limit": limit,
                "offset": offset,
                "hasMore": offset + len(page) < total,
            },
            "summary": {
                "totalGames": total,
                "wins": wins,
                "losses": total - wins,
                "winPercentage": int(_round_half_up(wins / total * 100)) if total else 0,
            },
        }

    def get_monthly_stats(self, user_id: str, year: Optional[int] = None,
                          month: Optional[int] = None) -> Dict[str, Any]:
        """Statistics restricted to one calendar month (UTC), current month by default."""
        today = self.now()
        year = year or today.year
        month = month or today.month

        start = datetime.datetime(year, month, 1)
        if month == 12:
            end = datetime.datetime(year + 1, 1, 1)
        else:
            end = datetime.datetime(year, month + 1, 1)

        entries = self.store.find_history(user_id, completed_from=start, completed_before=end,
                                          descending=False)

        daily_activity: Dict[str, int] = {}
        for entry in entries:
            day = str(entry.completed_at.day)
            daily_activity[day] = daily_activity.get(day, 0) + 1

        best_day = None
        if daily_activity:
            best_day = int(max(daily_activity, key=lambda d: (daily_activity[d], -int(d))))

        stats = summarize(entries)
        stats.update({
            "year": year,
            "month": month,
            "maxStreak": max_streak(entries),
            "dailyActivity": daily_activity,
            "bestDay": best_day,
        })
        return stats


# Global service instance
_stats_service = None


def get_stats_service() -> Optional[StatsService]:
    """Get the global stats service instance."""
    return _stats_service


def initialize_stats_service(store) -> StatsService:
    """Initialize the global stats service instance."""
    global _stats_service
    _stats_service = StatsService(store)
    return _stats_service
