"""
Dashboard view model: everything a front end needs to draw the score card,
the sleep pie chart and the heart-rate line chart, with the placeholder text
to show when a card has nothing to draw.
"""
from pydantic import BaseModel

from app.core import metrics
from app.core.state import DashboardSnapshot, LoadedEmpty

DASHBOARD_TITLE = "User Health Dashboard"
NO_DATA_NOTICE = "No data available for this user."


class UserOption(BaseModel):
    value: str
    label: str


class ScoreCard(BaseModel):
    score: int | float | None = None
    progress: float | None = None
    score_type: str | None = None
    date: str | None = None
    placeholder: str | None = None


class SleepSlice(BaseModel):
    name: str
    value: int
    color: str
    percentage: str
    title: str


class SleepCard(BaseModel):
    slices: list[SleepSlice] = []
    total_sleep_hours: int | None = None
    sleep_onset: str | None = None
    wake_up_time: str | None = None
    placeholder: str | None = None


class HeartRatePoint(BaseModel):
    time: str
    hr: float | None = None
    hrv: float | None = None
    oxygen_saturation: float | None = None


class StatisticsCard(BaseModel):
    points: list[HeartRatePoint] = []
    placeholder: str | None = None


class DashboardView(BaseModel):
    title: str = DASHBOARD_TITLE
    loading: bool
    error: str | None = None
    info: str | None = None
    users: list[UserOption]
    selected_user: str | None = None
    failures: dict[str, str] = {}
    score: ScoreCard
    sleep: SleepCard
    statistics: StatisticsCard


def user_options(snapshot: DashboardSnapshot) -> list[UserOption]:
    return [UserOption(value=u.login_email, label=u.label) for u in snapshot.users]


def _score_card(snapshot: DashboardSnapshot) -> ScoreCard:
    records = snapshot.data.score
    if snapshot.selected_user is None:
        return ScoreCard(placeholder="Please select a user to view their Vitalz Score.")
    if not records:
        return ScoreCard(placeholder="No score data available for this user.")
    return ScoreCard(**metrics.score_display(metrics.first_score(records)))


def _sleep_card(snapshot: DashboardSnapshot) -> SleepCard:
    records = snapshot.data.sleep
    if snapshot.selected_user is None:
        return SleepCard(placeholder="Please select a user to view their sleep data.")
    if not records:
        return SleepCard(placeholder="No sleep data available for this user.")

    first = metrics.first_sleep(records)
    return SleepCard(
        slices=[SleepSlice(**s) for s in metrics.sleep_breakdown(first)],
        total_sleep_hours=metrics.total_sleep_hours(first.total_time_asleep),
        sleep_onset=metrics.format_time_of_day(first.sleep_onset),
        wake_up_time=metrics.format_time_of_day(first.wake_up_time),
    )


def _statistics_card(snapshot: DashboardSnapshot) -> StatisticsCard:
    samples = snapshot.data.statistics
    if snapshot.selected_user is None:
        return StatisticsCard(placeholder="Please select a user to view their heart rate statistics.")
    if not samples:
        return StatisticsCard(placeholder="No statistics data available for this user.")
    return StatisticsCard(points=[HeartRatePoint(**p) for p in metrics.heart_rate_series(samples)])


def build_dashboard_view(snapshot: DashboardSnapshot) -> DashboardView:
    selected = snapshot.selected_user
    return DashboardView(
        loading=snapshot.loading,
        error=snapshot.error,
        info=NO_DATA_NOTICE if isinstance(snapshot.state, LoadedEmpty) else None,
        users=user_options(snapshot),
        selected_user=selected.login_email if selected else None,
        failures=dict(snapshot.data.failures),
        score=_score_card(snapshot),
        sleep=_sleep_card(snapshot),
        statistics=_statistics_card(snapshot),
    )
