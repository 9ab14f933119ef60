"""Pagination and merge engine over a lock-guarded shared item list.

// [LAW:single-enforcer] Only SharedItemList.merge() writes the list, and only
// under the write lock. Readers always take a snapshot copy.

A fetch sequence is one Refresh: an optional identity lookup, a first page
of INITIAL_PAGE_SIZE, then pages of PAGE_SIZE until the provider reports no
more. Each sequence gets a generation number; results carrying an older
generation are discarded on arrival, so overlapping Refreshes never
interleave their writes.

Background tasks receive the provider, the shared list and the two channel
callables. They never see the engine itself.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from concurrent.futures import Executor, Future
from contextlib import contextmanager
from typing import Callable, Iterable

from ghtui.core.commands import (
    Command,
    Error,
    FetchItemDetail,
    ItemDetailLoaded,
    ItemDetailLoadError,
    LoadMoreResult,
    Notify,
    Refresh,
)
from ghtui.core.component import Component
from ghtui.core.events import (
    ProviderError,
    ProviderReturnedResult,
    SystemEvent,
    UserIdentified,
)
from ghtui.core.notifications import Notification
from ghtui.core.things import PullRequest, item_key

logger = logging.getLogger(__name__)

INITIAL_PAGE_SIZE = 10
PAGE_SIZE = 20


# ─── Reader/writer lock ───────────────────────────────────────────────────────


class ReadWriteLock:
    """Many concurrent readers or one writer. Waiting writers block new readers."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False
        self._writers_waiting = 0

    @contextmanager
    def read(self):
        with self._cond:
            while self._writing or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self):
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writing or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()


# ─── Shared list ──────────────────────────────────────────────────────────────


def dedup_sorted(items: list[PullRequest]) -> list[PullRequest]:
    """Collapse adjacent equal keys. Input must already be sorted by item_key.

    Within a run of duplicates the last entry's data wins and the first
    entry's uuid is kept, so a selected row stays selected across merges.
    """
    result: list[PullRequest] = []
    for item in items:
        if result and item_key(result[-1]) == item_key(item):
            first = result[-1]
            result[-1] = item if item.uuid == first.uuid else dataclasses.replace(item, uuid=first.uuid)
        else:
            result.append(item)
    return result


class SharedItemList:
    """The one shared mutable resource between fetch tasks and the render path."""

    def __init__(self, items: Iterable[PullRequest] = ()):
        self._lock = ReadWriteLock()
        self._items: list[PullRequest] = dedup_sorted(sorted(items, key=item_key))
        self._generation = 0

    @property
    def generation(self) -> int:
        with self._lock.read():
            return self._generation

    def begin_generation(self) -> int:
        """Start a new fetch sequence; results of older ones become stale."""
        with self._lock.write():
            self._generation += 1
            return self._generation

    def merge(self, page: Iterable[PullRequest], generation: int | None = None, *, replace: bool = False) -> bool:
        """Append a page, re-sort by (repository, number), drop duplicates.

        replace clears the list first (first page of a sequence). Returns
        False, leaving the list untouched, when generation is stale.
        """
        incoming = list(page)
        with self._lock.write():
            if generation is not None and generation != self._generation:
                return False
            merged = [] if replace else list(self._items)
            merged.extend(incoming)
            # Dedup only after sorting; stable sort keeps older entries first.
            merged.sort(key=item_key)
            self._items = dedup_sorted(merged)
            return True

    def update_item(self, item: PullRequest, generation: int | None = None) -> PullRequest | None:
        """Replace the entry with item's key, keeping its uuid.

        Returns the stored item, or None when the key is absent or the
        generation is stale.
        """
        with self._lock.write():
            if generation is not None and generation != self._generation:
                return None
            key = item_key(item)
            for idx, existing in enumerate(self._items):
                if item_key(existing) == key:
                    stored = dataclasses.replace(item, uuid=existing.uuid)
                    self._items[idx] = stored
                    return stored
            return None

    def snapshot(self) -> tuple[PullRequest, ...]:
        with self._lock.read():
            return tuple(self._items)

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._items)


# ─── Background tasks ─────────────────────────────────────────────────────────

SendCommand = Callable[[Command], None]
EmitEvent = Callable[[SystemEvent], None]


@dataclasses.dataclass(frozen=True)
class PageRequest:
    generation: int
    identity: str | None
    cursor: str | None
    page_size: int
    first: bool


def _failure_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def fetch_page_task(provider, shared: SharedItemList, send: SendCommand, emit: EmitEvent, request: PageRequest) -> None:
    """Resolve identity if needed, fetch one page, merge it, report back."""
    identity = request.identity
    try:
        if identity is None:
            identity = provider.resolve_current_user()
            logger.info("resolved current user %s", identity)
            emit(UserIdentified(identity))
            send(Notify(Notification.info(f"Got user {identity}")))
        page = provider.fetch_items_page(identity, request.page_size, request.cursor)
    except Exception as exc:
        message = _failure_message(exc)
        if request.generation != shared.generation:
            logger.debug("dropping failure of stale generation %d: %s", request.generation, message)
            return
        logger.warning("page fetch failed (generation %d): %s", request.generation, message)
        send(Error(message))
        emit(ProviderError(message, request.generation))
        return

    items = tuple(page.items)
    if not shared.merge(items, request.generation, replace=request.first):
        logger.debug("discarding stale page of generation %d", request.generation)
        return
    logger.debug(
        "merged %d items (generation %d, has_more=%s)", len(items), request.generation, page.has_more,
    )
    if request.first:
        send(Notify(Notification.info(f"Got pull requests: {len(items)}")))
    send(LoadMoreResult(items, page.has_more, page.next_cursor, request.generation))
    emit(ProviderReturnedResult())


def fetch_detail_task(
    provider, shared: SharedItemList, send: SendCommand, emit: EmitEvent,
    repository: str, number: int, generation: int,
) -> None:
    owner, _, repo = repository.partition("/")
    try:
        detail = provider.fetch_item_detail(owner, repo, number)
    except Exception as exc:
        message = _failure_message(exc)
        logger.warning("detail fetch for %s#%d failed: %s", repository, number, message)
        send(ItemDetailLoadError(message))
        send(Error(message))
        return

    stored = shared.update_item(detail, generation)
    if stored is None:
        logger.debug("detail for %s#%d has no current row", repository, number)
        stored = detail
    send(ItemDetailLoaded(stored, generation))
    emit(ProviderReturnedResult())


def _log_task_failure(future: Future) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.error("background task crashed", exc_info=exc)


# ─── Engine component ─────────────────────────────────────────────────────────


class PaginationEngine(Component):
    """Drives fetch sequences. Runs on the loop thread; tasks run in the pool."""

    event_interest = (UserIdentified, ProviderError)

    def __init__(
        self,
        provider,
        shared: SharedItemList,
        executor: Executor,
        *,
        initial_page_size: int = INITIAL_PAGE_SIZE,
        page_size: int = PAGE_SIZE,
    ):
        super().__init__()
        self.provider = provider
        self.shared = shared
        self._executor = executor
        self.initial_page_size = initial_page_size
        self.page_size = page_size

        self.identity: str | None = None
        self.generation = shared.generation
        self.cursor: str | None = None
        self.has_more = False
        self.is_loading_more = False
        self._awaiting_identity = False
        self._closed = False

    def register_config(self, config) -> None:
        super().register_config(config)
        if config is not None:
            self.initial_page_size = config.initial_page_size
            self.page_size = config.page_size

    def apply_command(self, command: Command) -> None:
        if isinstance(command, Refresh):
            self.refresh()
        elif isinstance(command, LoadMoreResult):
            self._on_page(command)
        elif isinstance(command, FetchItemDetail):
            self._submit(
                fetch_detail_task, self.provider, self.shared, self.send, self.emit,
                command.repository, command.number, self.generation,
            )

    def apply_event(self, event: SystemEvent) -> None:
        if isinstance(event, UserIdentified):
            self.identity = event.name
            if self._awaiting_identity:
                self._awaiting_identity = False
                self._request_page(first=False)
        elif isinstance(event, ProviderError):
            if event.generation is not None and event.generation != self.generation:
                logger.debug("ignoring failure of stale generation %d", event.generation)
                return
            # Paging stops; an explicit Refresh starts over.
            self.is_loading_more = False
            self.has_more = False
            self._awaiting_identity = False

    def refresh(self) -> None:
        self.generation = self.shared.begin_generation()
        self.cursor = None
        self.has_more = False
        self.is_loading_more = False
        self._awaiting_identity = False
        logger.info("refresh: starting generation %d", self.generation)
        self.send(Notify(Notification.info("Fetching pull requests...")))
        self._request_page(first=True)

    def _on_page(self, result: LoadMoreResult) -> None:
        if result.generation != self.generation:
            logger.debug("ignoring page of stale generation %d", result.generation)
            return
        self.is_loading_more = False
        self.cursor = result.cursor
        self.has_more = result.has_more
        if not self.has_more:
            logger.info("generation %d complete", self.generation)
            return
        if self.cursor is None:
            logger.warning("provider reported more pages without a cursor; stopping")
            self.has_more = False
            return
        if self.identity is None:
            # UserIdentified is still queued behind this command.
            self._awaiting_identity = True
            return
        self._request_page(first=False)

    def _request_page(self, *, first: bool) -> None:
        if self.is_loading_more:
            return
        request = PageRequest(
            generation=self.generation,
            identity=self.identity,
            cursor=None if first else self.cursor,
            page_size=self.initial_page_size if first else self.page_size,
            first=first,
        )
        if self._submit(fetch_page_task, self.provider, self.shared, self.send, self.emit, request):
            self.is_loading_more = True

    def _submit(self, fn, *args) -> bool:
        if self._closed:
            return False
        try:
            future = self._executor.submit(fn, *args)
        except RuntimeError:
            logger.warning("worker pool is shut down; dropping %s", fn.__name__)
            return False
        future.add_done_callback(_log_task_failure)
        return True

    def teardown(self) -> None:
        self._closed = True
