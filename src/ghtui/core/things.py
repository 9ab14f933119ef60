"""Pull request domain type and its sortable columns.

// [LAW:one-source-of-truth] Identity is (repository, number). Equality,
// hashing and ordering all derive from item_key(); uuid only correlates rows.
"""

from __future__ import annotations

import uuid as uuid_module
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable


class PullRequestState(Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    MERGED = "MERGED"


class PullRequestReviewState(Enum):
    APPROVED = "APPROVED"
    CHANGES_REQUESTED = "CHANGES_REQUESTED"
    COMMENTED = "COMMENTED"
    DISMISSED = "DISMISSED"
    PENDING = "PENDING"


@dataclass(frozen=True)
class PullRequestReview:
    author: str
    state: PullRequestReviewState


@dataclass(frozen=True)
class PullRequestComment:
    author: str
    body: str
    created_at: datetime


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True, eq=False)
class PullRequest:
    """A pull request row. Summary fetches leave the detail fields empty."""

    number: int
    repository: str
    title: str = ""
    author: str = ""
    created_at: datetime = _EPOCH
    updated_at: datetime = _EPOCH
    url: str = ""
    changed_files: int = 0
    additions: int = 0
    deletions: int = 0
    state: PullRequestState = PullRequestState.OPEN
    is_draft: bool = False
    reviews: tuple[PullRequestReview, ...] = ()
    base_branch: str = ""
    body: str = ""
    comments: tuple[PullRequestComment, ...] = ()
    uuid: uuid_module.UUID = field(default_factory=uuid_module.uuid4)

    @property
    def key(self) -> tuple[str, int]:
        return item_key(self)

    @property
    def owner(self) -> str:
        return self.repository.partition("/")[0]

    @property
    def repo_name(self) -> str:
        owner, sep, name = self.repository.partition("/")
        return name if sep else owner

    @property
    def changes(self) -> int:
        return self.additions + self.deletions

    @property
    def state_label(self) -> str:
        if self.state is PullRequestState.OPEN and self.is_draft:
            return "DRAFT"
        return self.state.value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PullRequest):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __lt__(self, other: PullRequest) -> bool:
        return self.key < other.key

    def __le__(self, other: PullRequest) -> bool:
        return self.key <= other.key

    def __gt__(self, other: PullRequest) -> bool:
        return self.key > other.key

    def __ge__(self, other: PullRequest) -> bool:
        return self.key >= other.key


def item_key(item: PullRequest) -> tuple[str, int]:
    return (item.repository, item.number)


# ─── Columns ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Column:
    header: str
    sort_key: Callable[[PullRequest], object]


_STATE_ORDER = {state: i for i, state in enumerate(PullRequestState)}

# [LAW:one-source-of-truth] Header order and sort order are the same table.
COLUMNS: tuple[Column, ...] = (
    Column("#", lambda pr: pr.number),
    Column("Repository", lambda pr: pr.repository),
    Column("Title", lambda pr: pr.title.lower()),
    Column("Author", lambda pr: pr.author.lower()),
    Column("Created", lambda pr: pr.created_at),
    Column("Updated", lambda pr: pr.updated_at),
    Column("Changes", lambda pr: pr.changes),
    Column("State", lambda pr: _STATE_ORDER[pr.state]),
)

# Rendered but not sortable.
EXTRA_HEADERS = ("Reviews",)

DEFAULT_SORT_COLUMN = 1


def column_index(name: str) -> int | None:
    """Resolve a column by header name (case-insensitive) or numeric index."""
    text = str(name).strip()
    if text.isdigit():
        idx = int(text)
        return idx if 0 <= idx < len(COLUMNS) else None
    lowered = text.lower()
    for idx, column in enumerate(COLUMNS):
        if column.header.lower() == lowered:
            return idx
    return None


def sort_items(items, column: int) -> list[PullRequest]:
    """Stable sort by one column; ties keep their incoming order."""
    spec = COLUMNS[column % len(COLUMNS)]
    return sorted(items, key=spec.sort_key)


def matches_filter(item: PullRequest, query: str) -> bool:
    """Case-insensitive substring match over title, repository and author."""
    needle = query.strip().lower()
    if not needle:
        return True
    haystack = f"{item.title}\n{item.repository}\n{item.author}".lower()
    return needle in haystack
