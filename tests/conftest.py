"""Shared fixtures: an in-memory stand-in for the Vitalz REST API."""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, AsyncIterator, Callable

import httpx
import pytest
import pytest_asyncio

from app.core.orchestrator import DashboardOrchestrator
from app.core.vitalz_client import VitalzClient

API_BASE = "http://vitalz.test/api"

USERS = [
    {
        "ID": "1",
        "LoginEmail": "a@x.com",
        "UserName": "Alice",
        "DeviceCompany": "Fitbit",
        "DeviceUserID": "d1",
    },
    {
        "ID": 2,
        "LoginEmail": "b@x.com",
        "UserName": "Bob",
        "DeviceCompany": "Garmin",
        "DeviceUserID": "d2",
    },
]

SLEEP = [
    {
        "LoginEmail": "a@x.com",
        "DeviceUserID": "d1",
        "Date": "2023-12-17",
        "SleepOnset": "2023-12-16T22:30:00",
        "WakeUpTime": "2023-12-17T06:15:00",
        "Awake": "50",
        "Deep": "100",
        "Light": "300",
        "TotalTimeAsleep": "27000",
    }
]

SCORE = [
    {
        "LoginEmail": "a@x.com",
        "DeviceUserID": "d1",
        "Date": "2023-12-17",
        "VitalzScore": 82,
        "ScoreType": "Recovery",
    }
]

STATISTICS = [
    {
        "LoginEmail": "a@x.com",
        "DeviceUserID": "d1",
        "Date": "2023-12-17",
        "Time": "08:00",
        "HR": 62,
        "HRV": 48.5,
        "OxygenSaturation": 97,
    },
    {
        "LoginEmail": "a@x.com",
        "DeviceUserID": "d1",
        "Date": "2023-12-17",
        "Time": "09:00",
        "HR": 71,
        "HRV": 41.0,
        "OxygenSaturation": 98,
    },
]

Route = Any  # payload dict | status code | Exception | (async) callable(request) -> httpx.Response


class FakeVitalzApi:
    """
    MockTransport handler. Routes map a URL path to what the endpoint
    answers; ``delays`` slows down per-user requests by LoginEmail.
    """

    def __init__(self) -> None:
        self.routes: dict[str, Route] = {
            "/api/getUserList": {"data": USERS},
            "/api/getUserSleepData": {"data": SLEEP},
            "/api/getUserScore": {"data": SCORE},
            "/api/getUserStatics": {"data": STATISTICS},
        }
        self.delays: dict[str, float] = {}
        self.requests: list[httpx.Request] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def set_route(self, path: str, route: Route) -> None:
        self.routes[f"/api{path}"] = route

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == f"/api{path}"]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            email = request.url.params.get("LoginEmail")
            # yield so concurrent requests can overlap
            await asyncio.sleep(self.delays.get(email, 0.01) if email else 0)

            route = self.routes.get(request.url.path)
            if route is None:
                return httpx.Response(404, json={"error": "not found"})
            if isinstance(route, Exception):
                raise route
            if isinstance(route, int):
                return httpx.Response(route, json={"error": "server error"})
            if callable(route):
                response = route(request)
                if inspect.isawaitable(response):
                    response = await response
                return response
            return httpx.Response(200, json=route)
        finally:
            self.in_flight -= 1


@pytest.fixture
def fake_api() -> FakeVitalzApi:
    return FakeVitalzApi()


@pytest_asyncio.fixture
async def vitalz_client(fake_api: FakeVitalzApi) -> AsyncIterator[VitalzClient]:
    client = VitalzClient(base_url=API_BASE, transport=httpx.MockTransport(fake_api))
    try:
        yield client
    finally:
        await client.aclose()


@pytest_asyncio.fixture
async def orchestrator(vitalz_client: VitalzClient) -> DashboardOrchestrator:
    orch = DashboardOrchestrator(vitalz_client)
    await orch.load_users()
    return orch


@pytest.fixture
def text_response() -> Callable[[str], Callable[[httpx.Request], httpx.Response]]:
    def _factory(body: str) -> Callable[[httpx.Request], httpx.Response]:
        return lambda request: httpx.Response(200, text=body)

    return _factory
