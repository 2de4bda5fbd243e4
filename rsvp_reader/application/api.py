"""FastAPI application entry point."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, File, HTTPException, UploadFile, WebSocket, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..domain.errors import InvalidParameterError, OutOfRangeError
from ..infrastructure import SingleSlotMailbox, SniffingDocumentParser
from .config import Settings, settings
from .controller import ReaderController
from .websocket_handler import DisplayStreamHandler

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logging.getLogger("PyPDF2").setLevel(logging.ERROR)
logger = logging.getLogger(__name__)


class SeekRequest(BaseModel):
    page_index: int = Field(description="Zero-based page index")


class PacingRequest(BaseModel):
    words_per_minute: float = Field(description="Reading speed")
    chunk_size: int = Field(description="Words revealed at a time")


def create_app(
    controller: Optional[ReaderController] = None,
    app_settings: Settings = settings,
    frame_loop: bool = True,
) -> FastAPI:
    """Build the FastAPI app around a reader controller.

    Args:
        controller: Controller to expose. One is built from the settings
            with an in-process mailbox and a PDF/text parser if omitted.
        app_settings: Settings for metadata and control bounds.
        frame_loop: Whether to run the frame loop for the app's lifetime.
    """
    if controller is None:
        controller = ReaderController.from_settings(
            app_settings,
            mailbox=SingleSlotMailbox(),
            parser=SniffingDocumentParser(),
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if not frame_loop:
            yield
            return
        stop_event = asyncio.Event()
        task = asyncio.create_task(controller.run_frame_loop(stop_event))
        try:
            yield
        finally:
            stop_event.set()
            await task

    app = FastAPI(
        title=app_settings.app_name,
        version=app_settings.app_version,
        debug=app_settings.debug,
        lifespan=lifespan,
    )
    app.state.controller = controller

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return controller.get_health_status()

    @app.get("/reader")
    async def get_reader_state():
        """Current mode, position, pacing and display text."""
        return controller.snapshot().model_dump(mode="json")

    @app.post("/reader/toggle")
    async def toggle_play_pause():
        mode = controller.toggle_play_pause()
        return {"mode": mode.value}

    @app.post("/reader/seek")
    async def seek_to_page(request: SeekRequest):
        """Move to the start of a page.

        Args:
            request: The zero-based page index to seek to.

        Returns:
            The reader state after the seek.
        """
        try:
            controller.seek_to_page(request.page_index)
        except OutOfRangeError as e:
            logger.warning(f"Rejected seek: {e}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        return controller.snapshot().model_dump(mode="json")

    @app.put("/reader/pacing")
    async def set_pacing(request: PacingRequest):
        """Change reading speed and chunk size within the configured bounds."""
        if not (
            app_settings.min_words_per_minute
            <= request.words_per_minute
            <= app_settings.max_words_per_minute
        ):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=(
                    f"words_per_minute must be between {app_settings.min_words_per_minute:.0f} "
                    f"and {app_settings.max_words_per_minute:.0f}"
                ),
            )
        if request.chunk_size > app_settings.max_chunk_size:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"chunk_size must be at most {app_settings.max_chunk_size}",
            )
        try:
            controller.set_pacing(request.words_per_minute, request.chunk_size)
        except InvalidParameterError as e:
            logger.warning(f"Rejected pacing: {e}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        return controller.snapshot().model_dump(mode="json")

    @app.post("/upload", status_code=status.HTTP_202_ACCEPTED)
    async def upload_document(file: UploadFile = File(...)):
        """Queue a document for ingestion on the next frame."""
        content = await file.read()
        if not content:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Empty upload")
        controller.receive_upload(content)
        logger.info(f"Queued upload {file.filename} ({len(content)} bytes)")
        return {"queued": True, "filename": file.filename, "size": len(content)}

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """Stream the reader state, then every revealed chunk."""
        await websocket.accept()
        await DisplayStreamHandler(controller).handle_websocket(websocket)

    return app


app = create_app()
