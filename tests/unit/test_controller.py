"""Unit tests for the reader controller and chunk stream."""

import asyncio

import pytest
from starlette.websockets import WebSocketDisconnect

from rsvp_reader.application.config import Settings
from rsvp_reader.application.controller import ReaderController
from rsvp_reader.application.websocket_handler import DisplayStreamHandler
from rsvp_reader.domain.entities import PacingConfig, PlaybackMode
from rsvp_reader.domain.errors import DocumentParseError
from rsvp_reader.domain.services import ReaderService
from rsvp_reader.infrastructure import PlainTextDocumentParser, SingleSlotMailbox


class FailingParser:
    def parse(self, data: bytes) -> dict[int, str]:
        raise DocumentParseError("Failed to load PDF: broken xref")


class UnorderedParser:
    """Returns pages keyed out of order, as a dict built from a scan might."""

    def parse(self, data: bytes) -> dict[int, str]:
        return {3: "third", 1: "first", 2: "second"}


class FlakyParser:
    """Crashes on the first upload, then reads plain text."""

    def __init__(self):
        self.calls = 0

    def parse(self, data: bytes) -> dict[int, str]:
        self.calls += 1
        if self.calls == 1:
            raise RuntimeError("parser crashed")
        return {1: data.decode()}


class FakeWebSocket:
    client = ("testclient", 50000)

    def __init__(self, disconnect_after: int = 0, client_leaves: bool = False):
        self.sent: list[dict] = []
        self.closed = False
        self._disconnect_after = disconnect_after
        self._client_leaves = client_leaves

    async def send_json(self, data: dict) -> None:
        self.sent.append(data)
        if self._disconnect_after and len(self.sent) >= self._disconnect_after:
            raise WebSocketDisconnect()

    async def receive_text(self) -> str:
        if self._client_leaves:
            raise WebSocketDisconnect()
        await asyncio.Event().wait()
        return ""

    async def close(self) -> None:
        self.closed = True


def make_controller(parser=None) -> ReaderController:
    reader = ReaderService(pacing=PacingConfig(words_per_minute=60, chunk_size=1))
    return ReaderController(
        reader=reader,
        mailbox=SingleSlotMailbox(),
        parser=parser or PlainTextDocumentParser(),
    )


@pytest.fixture
def controller():
    return make_controller()


class TestUploads:
    """Tests for upload polling and ingestion."""

    def test_no_upload_is_a_no_op(self, controller):
        assert controller.poll_uploads() is None
        assert controller.reader.mode == PlaybackMode.PAUSED

    def test_upload_is_ingested_on_next_frame(self, controller):
        controller.receive_upload(b"Upload a document\fto begin")

        assert controller.frame(0.0) is None
        assert controller.reader.page_count == 2
        assert controller.reader.mode == PlaybackMode.PLAYING
        assert not controller.mailbox.has_pending()
        assert controller.frame(1.0).text == "Upload"

    def test_only_latest_upload_is_ingested(self, controller):
        controller.receive_upload(b"first upload")
        controller.receive_upload(b"second upload")

        document = controller.poll_uploads()

        assert document.pages[0].tokens == ("second", "upload")
        assert controller.poll_uploads() is None

    def test_pages_are_ordered_by_number(self):
        controller = make_controller(UnorderedParser())
        controller.receive_upload(b"ignored")

        document = controller.poll_uploads()

        assert [page.tokens[0] for page in document.pages] == ["first", "second", "third"]

    def test_empty_document_is_reported_and_rejected(self, controller):
        controller.receive_upload(b"keep reading this")
        controller.frame(0.0)
        controller.frame(1.0)

        controller.receive_upload(b"  \f\n\f ")
        controller.frame(0.0)

        assert controller.reader.document.pages[0].tokens == ("keep", "reading", "this")
        assert controller.reader.cursor.word_index == 1
        assert "No textual content" in controller.last_warning
        assert controller.snapshot().last_warning == controller.last_warning

    def test_parse_failure_is_reported_and_rejected(self):
        controller = make_controller(FailingParser())
        previous = controller.reader.document
        controller.receive_upload(b"%PDF-broken")

        assert controller.poll_uploads() is None
        assert controller.reader.document is previous
        assert controller.reader.mode == PlaybackMode.PAUSED
        assert "broken xref" in controller.last_warning

    def test_successful_upload_clears_warning(self, controller):
        controller.receive_upload(b"   ")
        controller.poll_uploads()
        assert controller.last_warning is not None

        controller.receive_upload(b"real words")
        controller.poll_uploads()
        assert controller.last_warning is None


class TestControlSurface:
    """Tests for control delegation."""

    def test_controls_delegate_to_reader(self, controller):
        controller.receive_upload(b"one two\fthree four")
        controller.poll_uploads()

        assert controller.toggle_play_pause() == PlaybackMode.PAUSED
        controller.seek_to_page(1)
        controller.set_pacing(120, 2)

        snapshot = controller.snapshot()
        assert snapshot.mode == PlaybackMode.PAUSED
        assert snapshot.page_index == 1
        assert snapshot.words_per_minute == 120
        assert snapshot.chunk_size == 2

    def test_health_status(self, controller):
        status = controller.get_health_status()
        assert status["status"] == "healthy"
        assert status["pages"] == 1
        assert status["upload_pending"] is False
        assert status["collaborators"]["mailbox"] == "SingleSlotMailbox"

    def test_from_settings(self):
        settings = Settings(
            _env_file=None,
            default_words_per_minute=450,
            default_chunk_size=3,
            placeholder_text="Drop a book",
            idle_text="Waiting",
        )
        controller = ReaderController.from_settings(
            settings, mailbox=SingleSlotMailbox(), parser=PlainTextDocumentParser()
        )

        assert controller.reader.pacing == PacingConfig(words_per_minute=450, chunk_size=3)
        assert controller.reader.document.pages[0].tokens == ("Drop", "a", "book")
        assert controller.reader.current_text == "Waiting"
        assert controller.frame_rate == settings.frame_rate


class TestFrameLoop:
    """Tests for the asyncio frame loop and subscribers."""

    def test_subscribers_receive_chunks(self, controller):
        queue = controller.subscribe()
        controller.receive_upload(b"alpha beta")
        controller.frame(0.0)
        controller.frame(1.0)
        controller.unsubscribe(queue)
        controller.frame(1.0)

        assert queue.qsize() == 1
        assert queue.get_nowait().text == "alpha"

    @pytest.mark.asyncio
    async def test_frame_loop_processes_uploads_until_stopped(self, controller):
        controller.receive_upload(b"loop driven text")
        stop_event = asyncio.Event()

        task = asyncio.create_task(controller.run_frame_loop(stop_event))
        await asyncio.sleep(0.05)
        stop_event.set()
        await asyncio.wait_for(task, timeout=1.0)

        assert controller.reader.document.pages[0].tokens == ("loop", "driven", "text")
        assert controller.reader.mode == PlaybackMode.PLAYING

    @pytest.mark.asyncio
    async def test_frame_loop_survives_failing_frame(self, caplog):
        controller = make_controller(FlakyParser())
        controller.receive_upload(b"lost upload")
        stop_event = asyncio.Event()

        task = asyncio.create_task(controller.run_frame_loop(stop_event))
        await asyncio.sleep(0.05)
        controller.receive_upload(b"second upload")
        await asyncio.sleep(0.05)
        stop_event.set()
        await asyncio.wait_for(task, timeout=1.0)

        assert controller.reader.document.pages[0].tokens == ("second", "upload")
        assert "parser crashed" in caplog.text

    @pytest.mark.asyncio
    async def test_stream_sends_state_then_chunks(self, controller):
        controller.receive_upload(b"streamed words")
        controller.frame(0.0)
        websocket = FakeWebSocket(disconnect_after=2)

        task = asyncio.create_task(DisplayStreamHandler(controller).handle_websocket(websocket))
        await asyncio.sleep(0.01)
        controller.frame(1.0)
        await asyncio.wait_for(task, timeout=1.0)

        assert websocket.sent[0]["type"] == "reader.state"
        assert websocket.sent[0]["mode"] == "playing"
        assert websocket.sent[1] == {
            "type": "reader.chunk",
            "text": "streamed",
            "page_index": 0,
            "start": 0,
            "end": 1,
        }
        assert controller._subscribers == []

    @pytest.mark.asyncio
    async def test_stream_ends_when_client_leaves_while_paused(self, controller):
        assert controller.reader.mode == PlaybackMode.PAUSED
        websocket = FakeWebSocket(client_leaves=True)

        await asyncio.wait_for(
            DisplayStreamHandler(controller).handle_websocket(websocket), timeout=1.0
        )

        assert controller._subscribers == []
        assert websocket.closed
