from app.models.vitalz import ScoreRecord, SleepRecord, StatisticsSample, User

__all__ = [
    "User",
    "SleepRecord",
    "ScoreRecord",
    "StatisticsSample",
]
