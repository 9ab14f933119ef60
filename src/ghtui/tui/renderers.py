"""Rendering logic - pure functions building rich renderables.

Components call these from render(area). Nothing here reads component
state or the environment; everything arrives as arguments.
"""

from __future__ import annotations

from datetime import datetime

from rich.align import Align
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ghtui.core.mode import Mode
from ghtui.core.notifications import Notification, NotificationLevel
from ghtui.core.things import (
    COLUMNS,
    EXTRA_HEADERS,
    PullRequest,
    PullRequestReviewState,
    PullRequestState,
)
from ghtui.tui.colors import PALETTE

_STATE_STYLE = {
    PullRequestState.OPEN: PALETTE.success,
    PullRequestState.CLOSED: PALETTE.error,
    PullRequestState.MERGED: PALETTE.merged,
}

_REVIEW_GLYPH = {
    PullRequestReviewState.APPROVED: ("✓", PALETTE.success),
    PullRequestReviewState.CHANGES_REQUESTED: ("✗", PALETTE.error),
    PullRequestReviewState.COMMENTED: ("…", PALETTE.info),
    PullRequestReviewState.DISMISSED: ("-", PALETTE.subtle),
    PullRequestReviewState.PENDING: ("?", PALETTE.warning),
}

# [LAW:dataflow-not-control-flow] Level styling is a lookup, not a branch.
_LEVEL_STYLE = {
    NotificationLevel.INFO: (PALETTE.info, "Info"),
    NotificationLevel.WARNING: (PALETTE.warning, "Warning"),
    NotificationLevel.ERROR: (PALETTE.error, "Error"),
}


def _fmt_date(value: datetime) -> str:
    return value.strftime("%Y-%m-%d %H:%M")


def _state_text(pr: PullRequest) -> Text:
    style = PALETTE.subtle if pr.state_label == "DRAFT" else _STATE_STYLE[pr.state]
    return Text(pr.state_label, style=style)


def _reviews_text(pr: PullRequest) -> Text:
    text = Text()
    for review in pr.reviews:
        glyph, style = _REVIEW_GLYPH[review.state]
        text.append(glyph, style=style)
    return text


def _changes_text(pr: PullRequest) -> Text:
    text = Text()
    text.append(f"+{pr.additions}", style=PALETTE.success)
    text.append(" ")
    text.append(f"-{pr.deletions}", style=PALETTE.error)
    return text


def pull_request_row(pr: PullRequest) -> list:
    return [
        str(pr.number),
        pr.repository,
        pr.title,
        pr.author,
        _fmt_date(pr.created_at),
        _fmt_date(pr.updated_at),
        _changes_text(pr),
        _state_text(pr),
        _reviews_text(pr),
    ]


def render_pull_request_table(
    rows: list[PullRequest],
    *,
    selected: int | None,
    sort_column: int,
    offset: int = 0,
    title: str = "Pull Requests",
) -> Table:
    """Table of rows[offset:], selected row and sort column highlighted."""
    table = Table(
        title=title,
        expand=True,
        header_style=f"bold {PALETTE.accent}",
        border_style=PALETTE.subtle,
        show_lines=False,
    )
    for idx, column in enumerate(COLUMNS):
        header = f"{column.header} ▼" if idx == sort_column else column.header
        style = f"bold {PALETTE.highlight}" if idx == sort_column else None
        table.add_column(header, header_style=style, no_wrap=True, overflow="ellipsis")
    for header in EXTRA_HEADERS:
        table.add_column(header, no_wrap=True)

    for idx, pr in enumerate(rows[offset:], start=offset):
        style = f"on {PALETTE.selected_bg}" if idx == selected else None
        table.add_row(*pull_request_row(pr), style=style)
    return table


def render_token_error(env_var: str) -> Align:
    text = Text(justify="center", style=PALETTE.error)
    text.append(f"Error: {env_var} is not set!\n")
    text.append(
        f"Create a Personal Access Token in the GitHub UI and set the {env_var} "
        "environment variable to its value before running ghtui\n"
    )
    text.append("Press 'q' or 'ctrl-c' to quit")
    return Align.center(text, vertical="middle")


def render_placeholder(message: str) -> Align:
    return Align.center(Text(message, style=PALETTE.subtle), vertical="middle")


def render_header(*, identity: str | None, count: int, loading: bool, mode: Mode, search: str) -> Text:
    text = Text()
    text.append(" ghtui ", style=f"bold {PALETTE.accent}")
    text.append(f"user: {identity or '?'}", style=PALETTE.text)
    text.append("  │  ", style=PALETTE.subtle)
    text.append(f"{count} pull requests", style=PALETTE.text)
    if loading:
        text.append("  │  ", style=PALETTE.subtle)
        text.append("loading…", style=PALETTE.warning)
    if search:
        text.append("  │  ", style=PALETTE.subtle)
        text.append(f"filter: {search}", style=PALETTE.highlight)
    text.append("  │  ", style=PALETTE.subtle)
    text.append(mode.value.upper(), style=f"bold {PALETTE.info}")
    return text


def render_palette(mode: Mode, buffer: str, cursor: int) -> Text:
    prompt = "/" if mode is Mode.SEARCH_ENTRY else ":"
    text = Text()
    text.append(prompt, style=f"bold {PALETTE.accent}")
    before, at, after = buffer[:cursor], buffer[cursor:cursor + 1], buffer[cursor + 1:]
    text.append(before)
    text.append(at or " ", style="reverse")
    text.append(after)
    return text


def render_notifications(entries: tuple[Notification, ...]) -> Group:
    lines = []
    for entry in entries:
        style, label = _LEVEL_STYLE[entry.level]
        line = Text()
        line.append(f"{label}: ", style=f"bold {style}")
        line.append(entry.text, style=style)
        lines.append(line)
    return Group(*lines)


def render_keystrokes(keys: list[str]) -> Text:
    return Text(" ".join(keys), style=f"bold {PALETTE.highlight}", justify="right")


def render_keys_help(groups: list[tuple[str, list[tuple[str, str]]]]) -> Panel:
    """Grouped key help. Each group is (title, [(keys, description)])."""
    text = Text()
    for title, keys in groups:
        text.append(title, style="bold underline")
        text.append("\n")
        for key_display, description in keys:
            text.append("  ")
            text.append("{:>10}".format(key_display), style=f"bold {PALETTE.info}")
            text.append("  ")
            text.append(description, style="dim")
            text.append("\n")
    return Panel(text, title="Keys", border_style=PALETTE.accent, expand=False)


def render_pull_request_info(pr: PullRequest, *, loading: bool) -> Panel:
    """Detail overlay for one pull request."""
    body = Text()
    body.append(f"{pr.repository}#{pr.number}\n", style=f"bold {PALETTE.accent}")
    body.append(f"{pr.title}\n\n", style="bold")
    body.append("Author:   ", style=PALETTE.subtle)
    body.append(f"{pr.author}\n")
    body.append("State:    ", style=PALETTE.subtle)
    body.append_text(_state_text(pr))
    body.append("\n")
    if pr.base_branch:
        body.append("Base:     ", style=PALETTE.subtle)
        body.append(f"{pr.base_branch}\n")
    body.append("Created:  ", style=PALETTE.subtle)
    body.append(f"{_fmt_date(pr.created_at)}\n")
    body.append("Updated:  ", style=PALETTE.subtle)
    body.append(f"{_fmt_date(pr.updated_at)}\n")
    body.append("Changes:  ", style=PALETTE.subtle)
    body.append_text(_changes_text(pr))
    body.append(f" in {pr.changed_files} files\n")
    body.append("URL:      ", style=PALETTE.subtle)
    body.append(f"{pr.url}\n")

    if pr.reviews:
        body.append("\nReviews\n", style="bold underline")
        for review in pr.reviews:
            glyph, style = _REVIEW_GLYPH[review.state]
            body.append(f"  {glyph} ", style=style)
            body.append(f"{review.author} ({review.state.value.lower().replace('_', ' ')})\n")
    if pr.body:
        body.append("\n")
        body.append(pr.body)
        body.append("\n")
    if pr.comments:
        body.append("\nComments\n", style="bold underline")
        for comment in pr.comments:
            body.append(f"  {comment.author}", style=f"bold {PALETTE.info}")
            body.append(f" {_fmt_date(comment.created_at)}\n", style=PALETTE.subtle)
            body.append(f"    {comment.body}\n")
    if loading:
        body.append("\nLoading details…", style=PALETTE.warning)

    return Panel(body, title="Pull Request", subtitle="esc to close", border_style=PALETTE.accent)
