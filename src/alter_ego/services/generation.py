"""Generation session orchestrator.

Turns a style selection into a sequence of transform requests processed one
at a time, in selection order. Credits for a batch are debited before the
first request and refunded in full if the batch is cancelled. A batch that
runs to completion is archived into history exactly once, from
``_archive_if_complete``, as soon as none of its items is pending.
Single-style regeneration is costed separately and is never refunded.
"""

import itertools
import logging
import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum

from alter_ego.app_logging import batch_log_context
from alter_ego.domain.images import (
    DoneImage,
    ErrorImage,
    GeneratedImage,
    PendingImage,
    is_terminal,
)
from alter_ego.domain.sessions import (
    AppState,
    HistorySession,
    Session,
    SessionSnapshot,
)
from alter_ego.domain.styles import SURPRISE_STYLES, WILDCARD_CAPTION, find_style
from alter_ego.services.credits import CreditLedger
from alter_ego.services.favorites import FavoritesStore
from alter_ego.services.history import HistoryStore
from alter_ego.services.notifications import Notifier
from alter_ego.services.styles import StylePicker
from alter_ego.services.transform import TransformService

REGENERATE_COST = 1
UNKNOWN_ERROR = "An unknown error occurred."

_logger = logging.getLogger(__name__)

Listener = Callable[[SessionSnapshot], None]


class BatchStart(StrEnum):
    STARTED = "started"
    INSUFFICIENT_CREDITS = "insufficient_credits"
    REJECTED = "rejected"


class RegenerateResult(StrEnum):
    DONE = "done"
    FAILED = "failed"
    DISCARDED = "discarded"
    INSUFFICIENT_CREDITS = "insufficient_credits"
    REJECTED = "rejected"


@dataclass
class CancellationToken:
    """Cooperative cancellation flag checked between batch items."""

    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass(frozen=True)
class BatchItem:
    """One selected style and the concrete caption it generates under."""

    original_caption: str
    target_caption: str


@dataclass(frozen=True)
class GenerationBatch:
    """A started batch handed to ``run_batch``."""

    id: int
    items: tuple[BatchItem, ...]
    cost: int
    token: CancellationToken = field(default_factory=CancellationToken)


@dataclass(frozen=True)
class StartOutcome:
    """Result of a start request."""

    result: BatchStart
    cost: int = 0
    batch: GenerationBatch | None = None

    @property
    def started(self) -> bool:
        return self.result is BatchStart.STARTED


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class GenerationOrchestrator:
    """State machine for a photo's style generation session."""

    transform_service: TransformService
    ledger: CreditLedger
    history: HistoryStore
    favorites: FavoritesStore
    notifier: Notifier
    picker: StylePicker = field(default_factory=StylePicker)
    rng: random.Random = field(default_factory=random.Random)
    clock: Callable[[], datetime] = _utcnow
    _state: AppState = field(init=False, default=AppState.IDLE)
    _session: Session | None = field(init=False, default=None)
    _generating_index: int | None = field(init=False, default=None)
    _batch: GenerationBatch | None = field(init=False, default=None)
    _unarchived: Session | None = field(init=False, default=None)
    _listeners: list[Listener] = field(init=False, default_factory=list)
    _batch_ids: itertools.count = field(
        init=False, default_factory=lambda: itertools.count(1)
    )

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def generating_index(self) -> int | None:
        return self._generating_index

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a snapshot listener and return a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def snapshot(self) -> SessionSnapshot:
        session = self._session
        return SessionSnapshot(
            state=self._state,
            source_image=session.source_image if session else None,
            selected_captions=tuple(session.selected_captions) if session else (),
            images=dict(session.images) if session else {},
            generating_index=self._generating_index,
            restored=session.restored if session else False,
            credits=self.ledger.balance,
            is_unlimited=self.ledger.is_unlimited,
        )

    def upload_image(self, image: str) -> bool:
        """Start a fresh session for a newly uploaded or captured photo."""
        if self._state is AppState.GENERATING:
            _logger.info("Upload ignored while a batch is generating")
            return False
        self._session = Session(source_image=image)
        self.picker.reset()
        self._state = AppState.IMAGE_UPLOADED
        self._notify()
        return True

    def start_batch(self, captions: Sequence[str] | None = None) -> StartOutcome:
        """Debit credits, mark every selected style pending and enter GENERATING.

        ``captions`` defaults to the picker's selection. The returned batch
        must be passed to ``run_batch`` to process the items.
        """
        session = self._session
        if (
            self._state is not AppState.IMAGE_UPLOADED
            or session is None
            or not session.source_image
        ):
            return StartOutcome(BatchStart.REJECTED)
        requested = self.picker.selected_captions() if captions is None else captions
        selection = list(dict.fromkeys(requested))
        if not selection:
            return StartOutcome(BatchStart.REJECTED)

        cost = len(selection)
        if not self.ledger.can_afford(cost):
            _logger.info(
                "Batch refused: cost=%s balance=%s", cost, self.ledger.balance
            )
            self.notifier.error(
                f"You need {cost} credits, but you only have {self.ledger.balance}."
            )
            return StartOutcome(BatchStart.INSUFFICIENT_CREDITS, cost=cost)

        self.ledger.debit(cost)
        items = tuple(
            BatchItem(original_caption=caption, target_caption=self._resolve(caption))
            for caption in selection
        )
        batch = GenerationBatch(id=next(self._batch_ids), items=items, cost=cost)
        session.selected_captions = selection
        session.images = {
            item.original_caption: PendingImage(caption=item.target_caption)
            for item in items
        }
        self._batch = batch
        self._generating_index = None
        self._state = AppState.GENERATING
        _logger.info(
            "Batch started: id=%s styles=%s cost=%s", batch.id, len(items), cost
        )
        self._notify()
        return StartOutcome(BatchStart.STARTED, cost=cost, batch=batch)

    async def run_batch(self, batch: GenerationBatch) -> None:
        """Process batch items sequentially until done or cancelled."""
        session = self._session
        if batch is not self._batch or session is None:
            _logger.info("Ignoring stale batch: id=%s", batch.id)
            return

        with batch_log_context(batch.id):
            for index, item in enumerate(batch.items):
                if batch.token.cancelled:
                    break
                self._generating_index = index
                self._notify()
                image = await self._render(session.source_image, item.target_caption)
                if batch.token.cancelled or batch is not self._batch:
                    _logger.info(
                        "Discarding result of cancelled batch: style=%s",
                        item.original_caption,
                    )
                    break
                session.images[item.original_caption] = image
                if isinstance(image, ErrorImage):
                    self.notifier.error(f"Failed to generate: {item.target_caption}")
                self._notify()

            if batch.token.cancelled or batch is not self._batch:
                return
            self._complete_batch(session)

    async def generate(self, captions: Sequence[str] | None = None) -> StartOutcome:
        """Start a batch and run it to completion or cancellation."""
        outcome = self.start_batch(captions)
        if outcome.batch is not None:
            await self.run_batch(outcome.batch)
        return outcome

    def cancel_batch(self) -> bool:
        """Abandon the running batch and refund its full cost."""
        batch = self._batch
        if self._state is not AppState.GENERATING or batch is None:
            return False
        batch.token.cancel()
        self._batch = None
        self._generating_index = None
        if self._session is not None:
            self._session.images = {}
        self._state = AppState.IMAGE_UPLOADED
        self.ledger.credit(batch.cost)
        _logger.info("Batch cancelled: id=%s refund=%s", batch.id, batch.cost)
        if self.ledger.is_unlimited:
            self.notifier.success("Generation cancelled.")
        else:
            self.notifier.success(
                f"Generation cancelled. {batch.cost} credits refunded."
            )
        self._notify()
        return True

    def reset_session(self) -> bool:
        """Drop the working session and return to IDLE."""
        if self._state not in {AppState.RESULTS_SHOWN, AppState.IMAGE_UPLOADED}:
            return False
        self._session = None
        self._generating_index = None
        self.picker.reset()
        self._state = AppState.IDLE
        self._notify()
        return True

    def restore_session(self, history_session: HistorySession) -> None:
        """Show an archived session without archiving it again."""
        if self._state is AppState.GENERATING:
            self.cancel_batch()
        captions = list(history_session.images)
        self._session = Session(
            source_image=history_session.source_image,
            selected_captions=captions,
            images=dict(history_session.images),
            restored=True,
        )
        self.picker.current_styles = [find_style(caption) for caption in captions]
        self.picker.selected = set(captions)
        self._generating_index = None
        self._state = AppState.RESULTS_SHOWN
        self._notify()

    async def regenerate(self, original_caption: str) -> RegenerateResult:
        """Re-run one style of the active session for a single credit."""
        session = self._session
        if session is None:
            return RegenerateResult.REJECTED
        current = session.images.get(original_caption)
        if current is None or not is_terminal(current):
            return RegenerateResult.REJECTED
        if not self.ledger.can_afford(REGENERATE_COST):
            self.notifier.error("You need 1 credit to regenerate this style.")
            return RegenerateResult.INSUFFICIENT_CREDITS

        self.ledger.debit(REGENERATE_COST)
        target = self._resolve(original_caption)
        pending = PendingImage(caption=target)
        session.images[original_caption] = pending
        self._notify()

        image = await self._render(session.source_image, target)
        superseded = (
            self._session is not session
            or session.images.get(original_caption) is not pending
        )
        if superseded:
            _logger.info("Discarding superseded regenerate: style=%s", original_caption)
            return RegenerateResult.DISCARDED
        session.images[original_caption] = image
        self._archive_if_complete(session)
        self._notify()
        if isinstance(image, ErrorImage):
            self.notifier.error(f"Failed to regenerate: {target}")
            return RegenerateResult.FAILED
        return RegenerateResult.DONE

    def _complete_batch(self, session: Session) -> None:
        self._batch = None
        self._generating_index = None
        self._state = AppState.RESULTS_SHOWN
        if not session.restored:
            self._unarchived = session
            self._archive_if_complete(session)
        self._notify()

    def _archive_if_complete(self, session: Session) -> None:
        """Archive a finished batch once none of its items are pending.

        A regenerate started mid-batch can leave an item pending after the
        loop ends; archiving then waits for that regenerate to resolve.
        """
        if (
            self._unarchived is not session
            or self._session is not session
            or self._state is not AppState.RESULTS_SHOWN
        ):
            return
        if not all(is_terminal(image) for image in session.images.values()):
            _logger.info("Archive deferred until pending items resolve")
            return
        self._unarchived = None
        self.history.append(
            HistorySession(
                source_image=session.source_image,
                images=dict(session.images),
                timestamp=self.clock(),
            )
        )

    def _resolve(self, caption: str) -> str:
        if caption == WILDCARD_CAPTION:
            return self.rng.choice(SURPRISE_STYLES)
        return caption

    async def _render(self, source_image: str, caption: str) -> GeneratedImage:
        try:
            url = await self.transform_service.render(source_image, caption)
        except Exception as exc:
            _logger.exception("Failed to generate image for %s", caption)
            return ErrorImage(caption=caption, error=str(exc) or UNKNOWN_ERROR)
        if not url:
            return ErrorImage(
                caption=caption,
                error="The backend service did not return a valid image.",
            )
        return DoneImage(caption=caption, url=url)

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                _logger.exception("Session listener failed")
