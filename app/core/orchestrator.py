import asyncio
from datetime import date as DateType

from app.core.config import settings
from app.core.logger import get_logger
from app.core.state import (
    DashboardData,
    DashboardSnapshot,
    DashboardStore,
    SelectionCleared,
    SelectionFailed,
    SelectionLoaded,
    SelectionRejected,
    SelectionRequested,
    UserListLoaded,
    UserListRequested,
)
from app.core.vitalz_client import (
    SCORE_ENDPOINT,
    SLEEP_ENDPOINT,
    STATISTICS_ENDPOINT,
    VitalzClient,
)
from app.models.vitalz import User

logger = get_logger(__name__)


def resolve_statistics_date(requested: DateType | None = None) -> DateType:
    """Explicit date first, then VITALZ_STATISTICS_DATE, then today."""
    if requested is not None:
        return requested
    if settings.VITALZ_STATISTICS_DATE is not None:
        return settings.VITALZ_STATISTICS_DATE
    return DateType.today()


class DashboardOrchestrator:
    """
    Drives the dashboard store from the Vitalz API.

    A selection fans out the sleep, score and statistics fetches at once and
    applies their combined outcome to the store in a single event.
    """

    def __init__(self, client: VitalzClient, store: DashboardStore | None = None):
        self.client = client
        self.store = store or DashboardStore()

    @property
    def snapshot(self) -> DashboardSnapshot:
        return self.store.snapshot

    async def load_users(self) -> DashboardSnapshot:
        sequence = self.store.dispatch(UserListRequested()).user_list_sequence
        result = await self.client.list_users()
        if result.ok:
            logger.info("Loaded %d user(s)", len(result.items))
        snapshot = self.store.dispatch(UserListLoaded(sequence=sequence, result=result))
        if snapshot.user_list_sequence != sequence:
            logger.debug("Discarded stale user list #%d", sequence)
        return snapshot

    async def select(self, login_email: str, on_date: DateType | None = None) -> DashboardSnapshot:
        user = self.snapshot.find_user(login_email)
        if user is None:
            logger.warning("Selection of unknown user %s", login_email)
            return self.store.dispatch(SelectionRejected(message=f"Unknown user: {login_email}"))
        if not user.login_email:
            return self.store.dispatch(SelectionRejected(message="Selected user has no login email"))

        stats_date = resolve_statistics_date(on_date)
        self.store.dispatch(SelectionRequested(user=user))
        sequence = self.snapshot.sequence
        logger.info("Selected user %s (selection #%d, statistics date %s)", user.login_email, sequence, stats_date)

        try:
            data = await self._fetch_all(user, stats_date)
        except Exception as e:
            logger.exception("Fetching dashboard data for %s failed", user.login_email)
            snapshot = self.store.dispatch(
                SelectionFailed(sequence=sequence, message=f"Failed to fetch user data: {e}")
            )
        else:
            snapshot = self.store.dispatch(SelectionLoaded(sequence=sequence, data=data))

        if snapshot.sequence != sequence:
            logger.debug("Discarded stale result for selection #%d", sequence)
        return snapshot

    def clear(self) -> DashboardSnapshot:
        return self.store.dispatch(SelectionCleared())

    async def _fetch_all(self, user: User, stats_date: DateType) -> DashboardData:
        sleep, score, stats = await asyncio.gather(
            self.client.fetch_sleep(user.login_email, user.device_user_id),
            self.client.fetch_score(user.login_email, user.device_user_id),
            self.client.fetch_statistics(user.login_email, user.device_user_id, stats_date),
        )

        failures = {
            endpoint: result.error
            for endpoint, result in (
                (SLEEP_ENDPOINT, sleep),
                (SCORE_ENDPOINT, score),
                (STATISTICS_ENDPOINT, stats),
            )
            if not result.ok
        }
        logger.debug(
            "Fetched %d sleep, %d score, %d statistics record(s) for %s",
            len(sleep.items),
            len(score.items),
            len(stats.items),
            user.login_email,
        )
        return DashboardData(
            sleep=sleep.items,
            score=score.items,
            statistics=stats.items,
            failures=failures,
        )
