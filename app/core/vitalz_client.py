"""
Async client for the Vitalz REST API.

Every endpoint answers GET requests with a JSON envelope ``{"data": [...]}``.
Calls never raise for transport, HTTP or payload problems: they return a
FetchResult that is either a success carrying the records or a failure
carrying the reason, so callers can tell "no data" apart from "fetch failed".
"""
from dataclasses import dataclass, field
from datetime import date as DateType
from typing import Any, Generic, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from app.core.config import settings
from app.core.logger import get_logger
from app.models.vitalz import ScoreRecord, SleepRecord, StatisticsSample, User

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)

USER_LIST_ENDPOINT = "/getUserList"
SLEEP_ENDPOINT = "/getUserSleepData"
SCORE_ENDPOINT = "/getUserScore"
STATISTICS_ENDPOINT = "/getUserStatics"


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    items: tuple[T, ...] = ()
    error: str | None = None

    @classmethod
    def success(cls, items) -> "FetchResult[T]":
        return cls(items=tuple(items))

    @classmethod
    def failure(cls, reason: str) -> "FetchResult[T]":
        return cls(error=reason)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def is_empty(self) -> bool:
        return not self.items


class VitalzClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.VITALZ_API_BASE
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else settings.VITALZ_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "VitalzClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _get(
        self,
        endpoint: str,
        model: type[T],
        params: dict[str, str] | None = None,
    ) -> FetchResult[T]:
        try:
            resp = await self._http.get(endpoint, params=params)
            resp.raise_for_status()
            payload: Any = resp.json()
        except httpx.HTTPStatusError as e:
            reason = f"HTTP {e.response.status_code} from {endpoint}"
            logger.warning("Error fetching %s: %s", endpoint, reason)
            return FetchResult.failure(reason)
        except httpx.RequestError as e:
            reason = f"{type(e).__name__}: {e}"
            logger.warning("Error fetching %s: %s", endpoint, reason)
            return FetchResult.failure(reason)
        except ValueError as e:
            reason = f"Invalid JSON from {endpoint}: {e}"
            logger.warning("Error fetching %s: %s", endpoint, reason)
            return FetchResult.failure(reason)

        if not isinstance(payload, dict):
            reason = f"Unexpected payload from {endpoint}: expected an object envelope"
            logger.warning("Error fetching %s: %s", endpoint, reason)
            return FetchResult.failure(reason)

        # A missing or null "data" field means "no records", not an error
        rows = payload.get("data") or []
        if not isinstance(rows, list):
            reason = f"Unexpected payload from {endpoint}: 'data' is not a list"
            logger.warning("Error fetching %s: %s", endpoint, reason)
            return FetchResult.failure(reason)

        # Bad rows are dropped one by one; only a batch with no usable row fails
        items = []
        rejected = 0
        for index, row in enumerate(rows):
            try:
                items.append(model.model_validate(row))
            except ValidationError as e:
                rejected += 1
                logger.warning(
                    "Skipping %s row %d from %s: %d validation error(s)",
                    model.__name__,
                    index,
                    endpoint,
                    e.error_count(),
                )

        if rejected and not items:
            reason = f"Invalid {model.__name__} record from {endpoint}: all {rejected} row(s) rejected"
            logger.warning("Error fetching %s: %s", endpoint, reason)
            return FetchResult.failure(reason)

        logger.debug("Fetched %d %s record(s) from %s", len(items), model.__name__, endpoint)
        return FetchResult.success(items)

    async def list_users(self) -> FetchResult[User]:
        return await self._get(USER_LIST_ENDPOINT, User)

    async def fetch_sleep(self, email: str, device_user_id: str) -> FetchResult[SleepRecord]:
        if not email:
            return FetchResult.failure("LoginEmail is required")
        return await self._get(
            SLEEP_ENDPOINT,
            SleepRecord,
            params={"LoginEmail": email, "DeviceUserID": device_user_id},
        )

    async def fetch_score(self, email: str, device_user_id: str) -> FetchResult[ScoreRecord]:
        if not email:
            return FetchResult.failure("LoginEmail is required")
        return await self._get(
            SCORE_ENDPOINT,
            ScoreRecord,
            params={"LoginEmail": email, "DeviceUserID": device_user_id},
        )

    async def fetch_statistics(
        self,
        email: str,
        device_user_id: str,
        date: DateType,
    ) -> FetchResult[StatisticsSample]:
        if not email:
            return FetchResult.failure("LoginEmail is required")
        return await self._get(
            STATISTICS_ENDPOINT,
            StatisticsSample,
            params={
                "LoginEmail": email,
                "DeviceUserID": device_user_id,
                "Date": date.isoformat(),
            },
        )
