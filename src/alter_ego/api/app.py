"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import BackgroundTasks, FastAPI, HTTPException, Request, Response, status

from alter_ego.api.admin import router as admin_router
from alter_ego.api.models import (
    FavoriteToggleRequest,
    StartBatchRequest,
    UploadImageRequest,
)
from alter_ego.app_logging import configure_logging
from alter_ego.containers import AppContainer
from alter_ego.domain.images import DoneImage, ErrorImage, GeneratedImage
from alter_ego.domain.sessions import FavoriteEntry, HistorySession, SessionSnapshot
from alter_ego.services.export import build_archive, download_filename, share_caption
from alter_ego.services.generation import BatchStart, RegenerateResult


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        try:
            await app.state.container.close_resources()
        except Exception:
            logger.exception("Failed to close resources")

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/session")
    async def get_session(request: Request) -> dict[str, object]:
        """Return the current session snapshot."""
        state_container: AppContainer = request.app.state.container
        return _format_snapshot(state_container.orchestrator.snapshot())

    @app.post("/session/image")
    async def upload_image(
        body: UploadImageRequest, request: Request
    ) -> dict[str, object]:
        """Start a new session from an uploaded photo."""
        state_container: AppContainer = request.app.state.container
        orchestrator = state_container.orchestrator
        if not orchestrator.upload_image(body.image_data_url):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A batch is currently generating.",
            )
        return _format_snapshot(orchestrator.snapshot())

    @app.post("/session/batch", status_code=status.HTTP_202_ACCEPTED)
    async def start_batch(
        body: StartBatchRequest,
        request: Request,
        background_tasks: BackgroundTasks,
    ) -> dict[str, object]:
        """Debit credits and start generating the selected styles."""
        state_container: AppContainer = request.app.state.container
        orchestrator = state_container.orchestrator
        outcome = orchestrator.start_batch(body.styles)
        if outcome.result is BatchStart.INSUFFICIENT_CREDITS:
            raise HTTPException(
                status_code=status.HTTP_402_PAYMENT_REQUIRED,
                detail={
                    "cost": outcome.cost,
                    "credits": state_container.ledger.balance,
                },
            )
        if outcome.batch is None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Upload an image and select at least one style.",
            )
        background_tasks.add_task(orchestrator.run_batch, outcome.batch)
        logger.info("Batch scheduled: id=%s", outcome.batch.id)
        return {
            "status": outcome.result.value,
            "batch_id": outcome.batch.id,
            "cost": outcome.cost,
        }

    @app.post("/session/cancel")
    async def cancel_batch(request: Request) -> dict[str, object]:
        """Cancel the running batch and refund its credits."""
        state_container: AppContainer = request.app.state.container
        orchestrator = state_container.orchestrator
        if not orchestrator.cancel_batch():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail="Nothing is generating."
            )
        return _format_snapshot(orchestrator.snapshot())

    @app.post("/session/reset")
    async def reset_session(request: Request) -> dict[str, object]:
        """Clear the working session."""
        state_container: AppContainer = request.app.state.container
        orchestrator = state_container.orchestrator
        if not orchestrator.reset_session():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="The session cannot be reset right now.",
            )
        return _format_snapshot(orchestrator.snapshot())

    @app.post("/session/images/{caption}/regenerate")
    async def regenerate(caption: str, request: Request) -> dict[str, object]:
        """Re-run a single style for one credit."""
        state_container: AppContainer = request.app.state.container
        orchestrator = state_container.orchestrator
        result = await orchestrator.regenerate(caption)
        if result is RegenerateResult.INSUFFICIENT_CREDITS:
            raise HTTPException(
                status_code=status.HTTP_402_PAYMENT_REQUIRED,
                detail={"cost": 1, "credits": state_container.ledger.balance},
            )
        if result is RegenerateResult.REJECTED:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="This style cannot be regenerated right now.",
            )
        payload = _format_snapshot(orchestrator.snapshot())
        payload["result"] = result.value
        return payload

    @app.get("/session/export")
    async def export_session(request: Request) -> Response:
        """Download finished images as a zip archive."""
        state_container: AppContainer = request.app.state.container
        session = state_container.orchestrator.session
        if session is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return Response(
            content=build_archive(session.images),
            media_type="application/zip",
            headers={
                "Content-Disposition": 'attachment; filename="alterego-images.zip"'
            },
        )

    @app.get("/styles")
    async def list_styles(request: Request) -> dict[str, object]:
        """Return the style grid and its selection."""
        state_container: AppContainer = request.app.state.container
        return _format_styles(state_container)

    @app.post("/styles/shuffle")
    async def shuffle_styles(request: Request) -> dict[str, object]:
        """Replace the grid with a random set of styles."""
        state_container: AppContainer = request.app.state.container
        state_container.orchestrator.picker.shuffle()
        return _format_styles(state_container)

    @app.post("/styles/{caption}/toggle")
    async def toggle_style(caption: str, request: Request) -> dict[str, object]:
        """Select or deselect a style in the grid."""
        state_container: AppContainer = request.app.state.container
        state_container.orchestrator.picker.toggle(caption)
        return _format_styles(state_container)

    @app.get("/credits")
    async def get_credits(request: Request) -> dict[str, object]:
        """Return the credit balance."""
        state_container: AppContainer = request.app.state.container
        return {
            "credits": state_container.ledger.balance,
            "is_unlimited": state_container.ledger.is_unlimited,
        }

    @app.get("/history")
    async def list_history(request: Request) -> dict[str, object]:
        """Return archived sessions, newest first."""
        state_container: AppContainer = request.app.state.container
        return {
            "sessions": [
                _format_history(index, entry)
                for index, entry in enumerate(state_container.history.list())
            ]
        }

    @app.delete("/history")
    async def clear_history(request: Request) -> dict[str, str]:
        """Remove all archived sessions."""
        state_container: AppContainer = request.app.state.container
        state_container.history.clear()
        return {"status": "ok"}

    @app.post("/history/{index}/restore")
    async def restore_history(index: int, request: Request) -> dict[str, object]:
        """Show an archived session again."""
        state_container: AppContainer = request.app.state.container
        entry = state_container.history.get(index)
        if entry is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        state_container.orchestrator.restore_session(entry)
        return _format_snapshot(state_container.orchestrator.snapshot())

    @app.get("/favorites")
    async def list_favorites(request: Request) -> dict[str, object]:
        """Return favorited images."""
        state_container: AppContainer = request.app.state.container
        return {
            "favorites": [
                _format_favorite(entry) for entry in state_container.favorites.list()
            ]
        }

    @app.post("/favorites/toggle")
    async def toggle_favorite(
        body: FavoriteToggleRequest, request: Request
    ) -> dict[str, bool]:
        """Add or remove a favorite."""
        state_container: AppContainer = request.app.state.container
        favorited = state_container.favorites.toggle(
            body.image, body.caption, body.source_image
        )
        return {"favorited": favorited}

    @app.get("/notifications")
    async def drain_notifications(request: Request) -> dict[str, object]:
        """Return and clear pending user notifications."""
        state_container: AppContainer = request.app.state.container
        return {
            "notifications": [
                {"message": notice.message, "level": notice.level.value}
                for notice in state_container.notifier.drain()
            ]
        }

    return app


def _format_image(original_caption: str, image: GeneratedImage) -> dict[str, object]:
    payload: dict[str, object] = {
        "status": image.status.value,
        "caption": image.caption,
    }
    if isinstance(image, DoneImage):
        payload["url"] = image.url
        payload["filename"] = download_filename(image.caption)
        payload["share_caption"] = share_caption(original_caption, image)
    elif isinstance(image, ErrorImage):
        payload["error"] = image.error
    return payload


def _format_snapshot(snapshot: SessionSnapshot) -> dict[str, object]:
    return {
        "state": snapshot.state.value,
        "source_image": snapshot.source_image,
        "selected_styles": list(snapshot.selected_captions),
        "images": {
            caption: _format_image(caption, image)
            for caption, image in snapshot.images.items()
        },
        "generating_index": snapshot.generating_index,
        "restored": snapshot.restored,
        "credits": snapshot.credits,
        "is_unlimited": snapshot.is_unlimited,
    }


def _format_styles(container: AppContainer) -> dict[str, object]:
    picker = container.orchestrator.picker
    return {
        "styles": [
            {
                "caption": style.caption,
                "description": style.description,
                "selected": style.caption in picker.selected,
            }
            for style in picker.current_styles
        ],
        "selected": picker.selected_captions(),
    }


def _format_history(index: int, entry: HistorySession) -> dict[str, object]:
    return {
        "index": index,
        "source_image": entry.source_image,
        "timestamp": entry.timestamp.isoformat(),
        "images": {
            caption: _format_image(caption, image)
            for caption, image in entry.images.items()
        },
    }


def _format_favorite(entry: FavoriteEntry) -> dict[str, str]:
    return {
        "image": entry.image,
        "caption": entry.caption,
        "source_image": entry.source_image,
    }
