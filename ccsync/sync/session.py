# CCSync Interactive Session
# Per-item approval prompts with session-wide approve-all / skip-all modes

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from ccsync.errors import Cancelled, InvalidInput
from ccsync.sync.compare import Classification, DiffResult
from ccsync.sync.fileio import FileIO
from ccsync.sync.resolver import (
    REASON_USER_SKIPPED,
    Decision,
    SessionMode,
    natural_decision,
)

PROMPT_LINE = "Proceed? [y/n/a/s/d/q]"
HELP_TEXT = "y = yes, n = no, a = yes to all, s = skip all, d = show diff, q = quit"

_LABELS = {
    Classification.NEW: "New",
    Classification.DELETED: "Deleted",
    Classification.CONFLICT: "Conflict",
    Classification.MERGEABLE: "Changed",
    Classification.IDENTICAL: "Identical",
}


class Choice(str, Enum):
    """A parsed keypress."""

    APPROVE = "y"
    SKIP = "n"
    APPROVE_ALL = "a"
    SKIP_ALL = "s"
    DIFF = "d"
    QUIT = "q"


class PromptProvider(Protocol):
    """Source of single keypresses and sink for prompt text."""

    def read_key(self) -> str: ...

    def display(self, text: str) -> None: ...


@dataclass
class SessionState:
    """Mutable state of one interactive run."""

    mode: SessionMode = SessionMode.NORMAL
    prompts: int = 0


def parse_key(key: str) -> Choice:
    """
    Map a keypress to a Choice.

    Args:
        key: Raw key, case-insensitive. Whitespace and empty keys are invalid.

    Returns:
        The parsed Choice.

    Raises:
        InvalidInput: For any other key.
    """
    try:
        return Choice(key.lower())
    except ValueError:
        raise InvalidInput(key) from None


def describe(diff: DiffResult) -> str:
    """One-line description of a pending item."""
    label = _LABELS[diff.classification]
    text = f"{label}: {diff.name}"
    if diff.is_directory:
        text += f" ({len(diff.added)} added, {len(diff.modified)} modified, {len(diff.removed)} removed)"
    return text


def _show_diff(diff: DiffResult, prompt: PromptProvider, io: FileIO) -> None:
    from ccsync.output.diff import render

    prompt.display(render(diff, "summary", io=io))
    if not diff.is_directory:
        prompt.display(render(diff, "content", io=io))
        return
    for path in diff.modified:
        prompt.display(render(diff, "content", io=io, entry=path))


def prompt_item(state: SessionState, diff: DiffResult, prompt: PromptProvider, io: FileIO) -> Decision:
    """
    Ask the user what to do with one item.

    Approve-all and skip-all short-circuit without showing a prompt. ``d``
    shows the diff and asks again; an unknown key is reported and asked
    again. Neither consumes the item.

    Args:
        state: Session state, updated in place on ``a`` and ``s``.
        diff: The pending item.
        prompt: Key source and text sink.
        io: Filesystem boundary for rendering content diffs.

    Returns:
        The natural decision on approval, SKIP "user skipped" otherwise.

    Raises:
        Cancelled: On ``q``, end of input, or KeyboardInterrupt.
    """
    if state.mode == SessionMode.APPROVE_ALL:
        return natural_decision(diff)
    if state.mode == SessionMode.SKIP_ALL:
        return Decision.skip(REASON_USER_SKIPPED)

    prompt.display(describe(diff))
    while True:
        prompt.display(PROMPT_LINE)
        state.prompts += 1
        try:
            key = prompt.read_key()
        except KeyboardInterrupt:
            raise Cancelled(interrupted=True) from None
        except EOFError:
            raise Cancelled() from None

        try:
            choice = parse_key(key)
        except InvalidInput as e:
            prompt.display(f"{e.message}. {HELP_TEXT}")
            continue

        if choice == Choice.DIFF:
            _show_diff(diff, prompt, io)
            continue
        if choice == Choice.QUIT:
            raise Cancelled()
        if choice == Choice.APPROVE_ALL:
            state.mode = SessionMode.APPROVE_ALL
        elif choice == Choice.SKIP_ALL:
            state.mode = SessionMode.SKIP_ALL

        if choice in (Choice.APPROVE, Choice.APPROVE_ALL):
            return natural_decision(diff)
        return Decision.skip(REASON_USER_SKIPPED)


class InteractiveSession:
    """
    Owns the session state for one run.

    Args:
        prompt: Key source and text sink.
        io: Filesystem boundary for rendering content diffs.
        yes_all: Start in approve-all mode (``--yes-all``).
    """

    def __init__(self, prompt: PromptProvider, io: FileIO, *, yes_all: bool = False):
        self.prompt = prompt
        self.io = io
        self.state = SessionState(mode=SessionMode.APPROVE_ALL if yes_all else SessionMode.NORMAL)

    @property
    def mode(self) -> SessionMode:
        return self.state.mode

    def decide(self, diff: DiffResult) -> Decision:
        """Resolve one item that needs input."""
        return prompt_item(self.state, diff, self.prompt, self.io)
