"""
Dashboard selection state.

The selection is a tagged union of five states. Transitions happen only in
``reduce``, a pure function of (snapshot, event). DashboardStore holds the
current snapshot and applies events to it.

Every selection, clear and user-list load bumps ``sequence``; user-list loads
also bump ``user_list_sequence``. Completion events carry the number they were
started under, and ``reduce`` ignores completions whose number is no longer
current. A selection made while the user list reloads survives the reload.
"""
from dataclasses import dataclass, field, replace
from typing import Mapping, Union

from app.core.vitalz_client import FetchResult
from app.models.vitalz import ScoreRecord, SleepRecord, StatisticsSample, User

NO_USERS_NOTICE = "No users found or API error occurred."


@dataclass(frozen=True)
class DashboardData:
    sleep: tuple[SleepRecord, ...] = ()
    score: tuple[ScoreRecord, ...] = ()
    statistics: tuple[StatisticsSample, ...] = ()
    # endpoint -> reason, for fetches that failed rather than came back empty
    failures: Mapping[str, str] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not (self.sleep or self.score or self.statistics)


EMPTY_DATA = DashboardData()


# ----- States -----

@dataclass(frozen=True)
class NoSelection:
    pass


@dataclass(frozen=True)
class Loading:
    # None while the user list itself is loading
    user: User | None = None


@dataclass(frozen=True)
class Loaded:
    user: User
    data: DashboardData


@dataclass(frozen=True)
class LoadedEmpty:
    user: User
    data: DashboardData = EMPTY_DATA


@dataclass(frozen=True)
class LoadError:
    message: str
    user: User | None = None


SelectionState = Union[NoSelection, Loading, Loaded, LoadedEmpty, LoadError]


# ----- Events -----

@dataclass(frozen=True)
class UserListRequested:
    pass


@dataclass(frozen=True)
class UserListLoaded:
    sequence: int
    result: FetchResult[User]


@dataclass(frozen=True)
class SelectionRequested:
    user: User


@dataclass(frozen=True)
class SelectionRejected:
    message: str


@dataclass(frozen=True)
class SelectionLoaded:
    sequence: int
    data: DashboardData


@dataclass(frozen=True)
class SelectionFailed:
    sequence: int
    message: str


@dataclass(frozen=True)
class SelectionCleared:
    pass


Event = Union[
    UserListRequested,
    UserListLoaded,
    SelectionRequested,
    SelectionRejected,
    SelectionLoaded,
    SelectionFailed,
    SelectionCleared,
]


@dataclass(frozen=True)
class DashboardSnapshot:
    users: tuple[User, ...] = ()
    state: SelectionState = NoSelection()
    sequence: int = 0
    user_list_sequence: int = 0
    # shown as a banner when the user list could not be populated
    notice: str | None = None
    user_list_error: str | None = None

    @property
    def selected_user(self) -> User | None:
        return getattr(self.state, "user", None)

    @property
    def data(self) -> DashboardData:
        return getattr(self.state, "data", EMPTY_DATA)

    @property
    def loading(self) -> bool:
        return isinstance(self.state, Loading)

    @property
    def error(self) -> str | None:
        if isinstance(self.state, LoadError):
            return self.state.message
        return self.notice

    def find_user(self, login_email: str) -> User | None:
        for user in self.users:
            if user.login_email == login_email:
                return user
        return None


def reduce(snapshot: DashboardSnapshot, event: Event) -> DashboardSnapshot:
    if isinstance(event, UserListRequested):
        return replace(
            snapshot,
            state=Loading(),
            sequence=snapshot.sequence + 1,
            user_list_sequence=snapshot.user_list_sequence + 1,
            notice=None,
            user_list_error=None,
        )

    if isinstance(event, UserListLoaded):
        if event.sequence != snapshot.user_list_sequence:
            return snapshot
        users = event.result.items
        state = snapshot.state
        if state == Loading():
            state = NoSelection()
        return replace(
            snapshot,
            users=users,
            state=state,
            notice=None if users else NO_USERS_NOTICE,
            user_list_error=event.result.error,
        )

    if isinstance(event, SelectionRequested):
        return replace(
            snapshot,
            state=Loading(user=event.user),
            sequence=snapshot.sequence + 1,
            notice=None,
        )

    if isinstance(event, SelectionRejected):
        return replace(
            snapshot,
            state=LoadError(message=event.message),
            sequence=snapshot.sequence + 1,
        )

    if isinstance(event, SelectionLoaded):
        if event.sequence != snapshot.sequence or not isinstance(snapshot.state, Loading):
            return snapshot
        user = snapshot.state.user
        if event.data.is_empty:
            return replace(snapshot, state=LoadedEmpty(user=user, data=event.data))
        return replace(snapshot, state=Loaded(user=user, data=event.data))

    if isinstance(event, SelectionFailed):
        if event.sequence != snapshot.sequence or not isinstance(snapshot.state, Loading):
            return snapshot
        return replace(snapshot, state=LoadError(message=event.message, user=snapshot.state.user))

    if isinstance(event, SelectionCleared):
        return replace(snapshot, state=NoSelection(), sequence=snapshot.sequence + 1)

    raise TypeError(f"Unknown dashboard event: {event!r}")


class DashboardStore:
    def __init__(self, snapshot: DashboardSnapshot | None = None):
        self._snapshot = snapshot or DashboardSnapshot()

    @property
    def snapshot(self) -> DashboardSnapshot:
        return self._snapshot

    def dispatch(self, event: Event) -> DashboardSnapshot:
        self._snapshot = reduce(self._snapshot, event)
        return self._snapshot
