"""Deterministic in-memory provider for offline use and tests.

Pages overlap by a configurable number of items, so every page after the
first repeats the tail of the previous one the way a shifting remote list
does. The merge engine must collapse those repeats.
"""

from __future__ import annotations

import dataclasses
import logging
import random
import threading
import time
from datetime import datetime, timedelta, timezone

from ghtui.core.errors import ProviderFailure
from ghtui.core.things import (
    PullRequest,
    PullRequestComment,
    PullRequestReview,
    PullRequestReviewState,
    PullRequestState,
)
from ghtui.providers.provider import Page

logger = logging.getLogger(__name__)

PULL_REQUEST_COMMANDS = ("pr", "pullrequest", "pull-request", "pull_request")

_REPOSITORIES = (
    "octo-org/api-gateway",
    "octo-org/billing",
    "octo-org/web-frontend",
    "octo-cat/dotfiles",
    "octo-cat/ghtui",
)
_AUTHORS = ("mona", "hubot", "octocat", "defunkt", "pjhyett")
_VERBS = ("Fix", "Add", "Refactor", "Remove", "Document", "Speed up")
_SUBJECTS = (
    "pagination cursor handling",
    "retry on 502",
    "dark theme colors",
    "flaky login test",
    "CSV export",
    "rate limit headers",
    "dependency pins",
)
_BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def generate_pull_requests(count: int, seed: int = 7) -> list[PullRequest]:
    """Build count summary rows. Same seed, same rows."""
    rng = random.Random(seed)
    items = []
    for i in range(count):
        created = _BASE_TIME + timedelta(hours=i * 7)
        state = rng.choices(
            (PullRequestState.OPEN, PullRequestState.MERGED, PullRequestState.CLOSED),
            weights=(6, 3, 1),
        )[0]
        repository = _REPOSITORIES[i % len(_REPOSITORIES)]
        number = 100 + i
        items.append(PullRequest(
            number=number,
            repository=repository,
            title=f"{rng.choice(_VERBS)} {rng.choice(_SUBJECTS)}",
            author=rng.choice(_AUTHORS),
            created_at=created,
            updated_at=created + timedelta(hours=rng.randint(0, 96)),
            url=f"https://github.com/{repository}/pull/{number}",
            changed_files=rng.randint(1, 30),
            additions=rng.randint(0, 800),
            deletions=rng.randint(0, 400),
            state=state,
            is_draft=state is PullRequestState.OPEN and rng.random() < 0.2,
        ))
    return items


class DemoProvider:
    """Serves generated pull requests page by page. Thread-safe."""

    commands = PULL_REQUEST_COMMANDS

    def __init__(
        self,
        total: int = 57,
        *,
        seed: int = 7,
        identity: str = "demo-user",
        latency: float = 0.0,
        overlap: int = 2,
        credential_env: str | None = None,
        fail_after_pages: int | None = None,
    ):
        self.identity = identity
        self.latency = latency
        self.overlap = max(0, overlap)
        self.credential_env = credential_env
        self.fail_after_pages = fail_after_pages
        self._items = generate_pull_requests(total, seed)
        self._lock = threading.Lock()
        self.page_requests: list[tuple[int, str | None]] = []
        self.user_requests = 0

    def _pause(self) -> None:
        if self.latency > 0:
            time.sleep(self.latency)

    def resolve_current_user(self) -> str:
        self._pause()
        with self._lock:
            self.user_requests += 1
        return self.identity

    def fetch_items_page(self, identity: str, page_size: int, cursor: str | None) -> Page:
        self._pause()
        with self._lock:
            self.page_requests.append((page_size, cursor))
            served = len(self.page_requests)
        if self.fail_after_pages is not None and served > self.fail_after_pages:
            raise ProviderFailure("demo provider: simulated API failure")

        try:
            offset = int(cursor) if cursor else 0
        except ValueError:
            raise ProviderFailure(f"demo provider: bad cursor {cursor!r}") from None
        start = max(0, offset - self.overlap) if offset else 0
        end = offset + page_size
        items = self._items[start:end]
        has_more = end < len(self._items)
        logger.debug("demo page %d..%d of %d for %s", start, end, len(self._items), identity)
        return Page(items=tuple(items), has_more=has_more, next_cursor=str(end) if has_more else None)

    def fetch_item_detail(self, owner: str, repo: str, number: int) -> PullRequest:
        self._pause()
        repository = f"{owner}/{repo}"
        for item in self._items:
            if item.repository == repository and item.number == number:
                return self._with_detail(item)
        raise ProviderFailure(f"demo provider: {repository}#{number} not found")

    def _with_detail(self, item: PullRequest) -> PullRequest:
        rng = random.Random(f"{item.repository}#{item.number}")
        reviewers = rng.sample(_AUTHORS, k=rng.randint(0, 3))
        reviews = tuple(
            PullRequestReview(author=name, state=rng.choice(list(PullRequestReviewState)))
            for name in reviewers
        )
        comments = tuple(
            PullRequestComment(
                author=rng.choice(_AUTHORS),
                body=rng.choice(("LGTM", "Can we add a test?", "nit: naming", "Rebased.")),
                created_at=item.created_at + timedelta(hours=n + 1),
            )
            for n in range(rng.randint(0, 3))
        )
        return dataclasses.replace(
            item,
            base_branch="main",
            body=f"{item.title}.\n\nThis change touches {item.changed_files} files.",
            reviews=reviews,
            comments=comments,
        )
