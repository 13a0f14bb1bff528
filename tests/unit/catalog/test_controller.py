"""Tests for the catalog controller."""

import asyncio
import logging
from unittest.mock import MagicMock

import httpx
import pytest
import pytest_asyncio

from podshelf.catalog.controller import CatalogController
from podshelf.catalog.models import EpisodeKey, ShowDetail, SortOrder, SortType
from podshelf.catalog.playback import AudioPlayer
from podshelf.catalog.state import is_season_visible
from podshelf.utils.errors import ValidationError

LIST_URL = "https://podcast-api.test/shows"


@pytest.fixture
def popen(monkeypatch) -> MagicMock:
    mock = MagicMock()
    mock.return_value.poll.return_value = None
    monkeypatch.setattr("podshelf.catalog.playback.subprocess.Popen", mock)
    return mock


@pytest.fixture
def controller(make_client, api_routes, popen) -> CatalogController:
    return CatalogController(make_client(api_routes), player=AudioPlayer(command=["mpv"]))


@pytest_asyncio.fixture
async def opened(controller) -> CatalogController:
    """Controller with shows loaded and show 10716 open."""
    await controller.mount()
    assert await controller.open_overlay("10716")
    return controller


class FakeDetailClient:
    """Client whose detail responses can be held back."""

    def __init__(self) -> None:
        self.gates: dict[str, asyncio.Event] = {}
        self.closed = False

    async def fetch_shows(self):
        return []

    async def fetch_show_detail(self, show_id: str) -> ShowDetail:
        gate = self.gates.get(show_id)
        if gate is not None:
            await gate.wait()
        return ShowDetail(id=show_id, title=f"Show {show_id}")

    async def aclose(self) -> None:
        self.closed = True


class TestMount:
    """Tests for the initial show list load."""

    @pytest.mark.asyncio
    async def test_success(self, controller) -> None:
        assert controller.state.loading is True

        await controller.mount()

        assert controller.state.loading is False
        assert len(controller.state.shows) == 3

    @pytest.mark.asyncio
    async def test_failure_is_logged_not_raised(self, make_client, caplog) -> None:
        """Test that a failed load leaves an empty, settled catalog."""
        controller = CatalogController(make_client({LIST_URL: (500, "")}))

        with caplog.at_level(logging.ERROR, logger="podshelf"):
            await controller.mount()

        assert controller.state.loading is False
        assert controller.state.shows == []
        assert "Error fetching shows" in caplog.text

    @pytest.mark.asyncio
    async def test_undecodable_body_is_logged_not_raised(self, make_client, caplog) -> None:
        def corrupt(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"junk")

        controller = CatalogController(make_client({LIST_URL: corrupt}))

        with caplog.at_level(logging.ERROR, logger="podshelf"):
            await controller.mount()

        assert controller.state.loading is False
        assert controller.state.shows == []
        assert "Error fetching shows" in caplog.text

    @pytest.mark.asyncio
    async def test_visible_shows_follow_controls(self, controller) -> None:
        """Test sorting and filtering through the controller."""
        await controller.mount()

        assert [s.title for s in controller.visible_shows()] == [
            "American History Tellers",
            "Something Was Wrong",
            "This Is Actually Happening",
        ]

        controller.set_sort(sort_type=SortType.DATE, sort_order=SortOrder.DESC)
        assert [s.id for s in controller.visible_shows()] == ["10716", "5279", "5675"]

        controller.set_filter("WRONG")
        assert [s.id for s in controller.visible_shows()] == ["10716"]

        controller.set_filter("")
        controller.select_genre(3)
        assert [s.id for s in controller.visible_shows()] == ["5279"]

    @pytest.mark.asyncio
    async def test_set_sort_accepts_strings(self, controller) -> None:
        controller.set_sort(sort_type="date", sort_order="desc")
        assert controller.state.sort_type == SortType.DATE
        assert controller.state.sort_order == SortOrder.DESC


class TestOverlay:
    """Tests for opening and closing the detail overlay."""

    @pytest.mark.asyncio
    async def test_open(self, controller) -> None:
        assert await controller.open_overlay("10716") is True

        detail = controller.state.selected_detail
        assert detail.id == "10716"
        assert [s.count for s in detail.seasons] == [2, 1]

    @pytest.mark.asyncio
    async def test_normalised_id_opens(self) -> None:
        """Test that the overlay opens when the API echoes a different id form."""

        class NormalisingClient(FakeDetailClient):
            async def fetch_show_detail(self, show_id: str) -> ShowDetail:
                return ShowDetail(id=show_id.lstrip("0"), title="Show")

        controller = CatalogController(NormalisingClient())

        assert await controller.open_overlay("0010716") is True
        assert controller.state.selected_detail.id == "10716"
        assert controller.state.pending_detail_id is None

    @pytest.mark.asyncio
    async def test_failure_keeps_overlay_closed(self, make_client, caplog) -> None:
        controller = CatalogController(make_client({}))

        with caplog.at_level(logging.ERROR, logger="podshelf"):
            assert await controller.open_overlay("404") is False

        assert controller.state.selected_detail is None
        assert "Error fetching podcast details" in caplog.text

    @pytest.mark.asyncio
    async def test_close(self, opened) -> None:
        opened.close_overlay()
        assert opened.state.selected_detail is None

    @pytest.mark.asyncio
    async def test_superseded_request_is_dropped(self) -> None:
        """Test that only the latest open request wins."""
        client = FakeDetailClient()
        client.gates["slow"] = asyncio.Event()
        controller = CatalogController(client)

        first = asyncio.create_task(controller.open_overlay("slow"))
        await asyncio.sleep(0)

        assert await controller.open_overlay("fast") is True
        assert await first is False
        assert controller.state.selected_detail.id == "fast"

    @pytest.mark.asyncio
    async def test_aclose_cancels_pending_request(self) -> None:
        client = FakeDetailClient()
        client.gates["slow"] = asyncio.Event()
        controller = CatalogController(client)

        pending = asyncio.create_task(controller.open_overlay("slow"))
        await asyncio.sleep(0)
        await controller.aclose()

        with pytest.raises(asyncio.CancelledError):
            await pending
        assert client.closed


class TestSeasons:
    """Tests for season expand/collapse."""

    @pytest.mark.asyncio
    async def test_toggle(self, opened) -> None:
        assert opened.toggle_season_visibility("Season 1") is True
        assert is_season_visible(opened.state, "10716", "Season 1")
        assert not is_season_visible(opened.state, "10716", "Season 2")

        assert opened.toggle_season_visibility("Season 1") is False

    @pytest.mark.asyncio
    async def test_unknown_season(self, opened) -> None:
        with pytest.raises(ValidationError, match="No season named") as exc_info:
            opened.toggle_season_visibility("Season 9")
        assert "Season 1, Season 2" in exc_info.value.suggestion

    @pytest.mark.asyncio
    async def test_requires_open_show(self, controller) -> None:
        with pytest.raises(ValidationError, match="No show is open"):
            controller.toggle_season_visibility("Season 1")


class TestFavorites:
    """Tests for favorites through the controller."""

    @pytest.mark.asyncio
    async def test_toggle_favorite(self, opened) -> None:
        episode = opened.find_episode("Season 1", 2)
        assert episode.title == "S1E2: The Question"

        assert opened.toggle_favorite("Season 1", episode) is True
        assert [f.title for f in opened.state.favorites] == ["S1E2: The Question"]

        assert opened.toggle_favorite("Season 1", episode) is False
        assert opened.state.favorites == []

    @pytest.mark.asyncio
    async def test_favorites_survive_closing_overlay(self, opened) -> None:
        opened.toggle_favorite("Season 2", opened.find_episode("Season 2", 1))
        opened.close_overlay()
        assert len(opened.state.favorites) == 1

    @pytest.mark.asyncio
    async def test_remove_and_sort(self, opened) -> None:
        for season, number in [("Season 1", 2), ("Season 2", 1), ("Season 1", 1)]:
            opened.toggle_favorite(season, opened.find_episode(season, number))

        opened.sort_favorites_by_title_az()
        assert [f.title for f in opened.state.favorites] == [
            "S1E1: The Diagnosis",
            "S1E2: The Question",
            "S2E1: A New Story",
        ]

        opened.sort_favorites_by_title_za()
        assert opened.state.favorites[0].title == "S2E1: A New Story"

        removed = opened.remove_favorite(1)
        assert removed.title == "S2E1: A New Story"
        assert len(opened.state.favorites) == 2

    @pytest.mark.asyncio
    async def test_remove_out_of_range(self, opened) -> None:
        with pytest.raises(ValidationError, match="No favorite #1"):
            opened.remove_favorite(1)

    @pytest.mark.asyncio
    async def test_episode_out_of_range(self, opened) -> None:
        with pytest.raises(ValidationError, match="has 1 episode"):
            opened.find_episode("Season 2", 5)


class TestPlayback:
    """Tests for playback state tracking."""

    @pytest.mark.asyncio
    async def test_play_and_pause(self, opened, popen) -> None:
        episode = opened.find_episode("Season 1", 1)

        key = opened.play("Season 1", episode)

        assert key == EpisodeKey(
            show_id="10716", season_title="Season 1", episode_title="S1E1: The Diagnosis"
        )
        assert popen.call_args[0][0] == ["mpv", "https://audio.test/s1e1.mp3"]
        assert opened.state.is_audio_playing

        assert opened.pause(key) is True
        assert not opened.state.is_audio_playing

    @pytest.mark.asyncio
    async def test_finished_player_clears_flag(self, opened, popen) -> None:
        opened.play("Season 1", opened.find_episode("Season 1", 1))
        popen.return_value.poll.return_value = 0

        opened.refresh_playback()

        assert not opened.state.is_audio_playing

    @pytest.mark.asyncio
    async def test_stop_all(self, opened) -> None:
        opened.play("Season 1", opened.find_episode("Season 1", 1))
        opened.play("Season 1", opened.find_episode("Season 1", 2))
        assert len(opened.state.playing) == 2

        opened.stop_all()
        assert opened.state.playing == []

    @pytest.mark.asyncio
    async def test_aclose_stops_playback(self, opened) -> None:
        opened.play("Season 1", opened.find_episode("Season 1", 1))
        await opened.aclose()
        assert not opened.state.is_audio_playing
