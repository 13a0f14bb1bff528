"""Shared fixtures for podshelf tests."""

import locale
import logging
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from podshelf.catalog.client import PodcastAPIClient
from podshelf.ui.theme import reset_theme

LIST_URL = "https://podcast-api.test/shows"
DETAIL_URL = "https://podcast-api.test/id/{id}"


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch):
    """Keep config out of the user's home and reset process-wide settings."""
    monkeypatch.setenv("PODSHELF_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.delenv("PODSHELF_THEME", raising=False)
    monkeypatch.delenv("COLORFGBG", raising=False)
    reset_theme()
    yield
    reset_theme()
    locale.setlocale(locale.LC_ALL, "C")

    logger = logging.getLogger("podshelf")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def shows_payload() -> list[dict]:
    """Show list as the API returns it."""
    return [
        {
            "id": "10716",
            "title": "Something Was Wrong",
            "image": "https://img.test/swr.jpg",
            "seasons": 14,
            "genres": [1, 2],
            "updated": "2022-11-03T07:00:00.000Z",
        },
        {
            "id": "5675",
            "title": "This Is Actually Happening",
            "image": "https://img.test/tiah.jpg",
            "seasons": 12,
            "genres": [1, 2],
            "updated": "2022-10-24T07:00:00.000Z",
        },
        {
            "id": "5279",
            "title": "American History Tellers",
            "image": "https://img.test/aht.jpg",
            "seasons": 52,
            "genres": [3],
            "updated": "2022-11-01T07:00:00.000Z",
        },
    ]


@pytest.fixture
def detail_payload() -> dict:
    """Show detail as the API returns it."""
    return {
        "id": "10716",
        "title": "Something Was Wrong",
        "image": "https://img.test/swr.jpg",
        "description": "An Iris Award winning docuseries.",
        "seasons": [
            {
                "season": 1,
                "title": "Season 1",
                "image": "https://img.test/s1.jpg",
                "episodes": [
                    {
                        "title": "S1E1: The Diagnosis",
                        "description": "It starts.",
                        "episode": 1,
                        "file": "https://audio.test/s1e1.mp3",
                    },
                    {
                        "title": "S1E2: The Question",
                        "description": "It continues.",
                        "episode": 2,
                        "file": "https://audio.test/s1e2.mp3",
                    },
                ],
            },
            {
                "season": 2,
                "title": "Season 2",
                "image": "https://img.test/s2.jpg",
                "episodes": [
                    {
                        "title": "S2E1: A New Story",
                        "description": "Again.",
                        "episode": 1,
                        "file": "https://audio.test/s2e1.mp3",
                    },
                ],
            },
        ],
    }


def make_transport(routes: dict) -> httpx.MockTransport:
    """Build a MockTransport answering by URL; unknown URLs get a 404.

    Route values are either ``(status, body)`` tuples, where a str body is
    sent as text and anything else as JSON, or callables taking the request.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        route = routes.get(str(request.url))
        if route is None:
            return httpx.Response(404, text="Not found")
        if callable(route):
            return route(request)
        status, body = route
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    return httpx.MockTransport(handler)


@pytest.fixture
def api_routes(shows_payload, detail_payload) -> dict:
    """Routes for a healthy API."""
    return {
        LIST_URL: (200, shows_payload),
        DETAIL_URL.format(id="10716"): (200, detail_payload),
    }


@pytest.fixture
def make_client() -> Callable[..., PodcastAPIClient]:
    """Factory for clients backed by a mock transport."""

    def factory(routes: dict, **kwargs) -> PodcastAPIClient:
        return PodcastAPIClient(
            list_url=LIST_URL,
            detail_url=DETAIL_URL,
            transport=make_transport(routes),
            **kwargs,
        )

    return factory
