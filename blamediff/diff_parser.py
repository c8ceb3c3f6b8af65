#!/usr/bin/env python3

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple, Union

from blamediff.models import HunkPair, HunkSide, Op

_WS = r"[ \t]*"
_FILE = r"([^ \t]+)"
_ADDSUB = r"([+\-])"
_NUMLINE = r"([0-9]+)"

# Besides '+', '-' and ' ' a hunk body may contain '\' lines, as in
# "\ No newline at end of file".
DIFF_LINE_RE = re.compile(r"^[+\-\\ ]")
NO_DIFF_LINE_RE = re.compile(r"^[^+\- ]")
SRC_HEADER_RE = re.compile(rf"^---{_WS}{_FILE}")
DST_HEADER_RE = re.compile(rf"^\+\+\+{_WS}{_FILE}")
# The count is omitted when it is 1, e.g. for a new file with a single line.
HUNK_HEADER_RE = re.compile(
    rf"^@@ {_ADDSUB}{_NUMLINE}(?:,{_NUMLINE})? {_ADDSUB}{_NUMLINE}(?:,{_NUMLINE})? @@"
)


class DiffParseError(ValueError):
    """Raised when a line does not fit the diff grammar in the current state."""

    def __init__(self, message: str, line: str, state: str):
        super().__init__(message)
        self.line = line
        self.state = state


@dataclass(frozen=True)
class Start:
    """Expecting a source file header or a line outside of any diff."""


@dataclass(frozen=True)
class PendingSource:
    """The source file header was parsed."""
    src: str


@dataclass(frozen=True)
class PendingDestination:
    """Both file headers were parsed."""
    src: str
    dst: str


@dataclass(frozen=True)
class InHunk:
    """At least one hunk header of the current file was parsed."""
    src: str
    dst: str


State = Union[Start, PendingSource, PendingDestination, InHunk]


def _parse_number(value: str, what: str, line: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        # Reachable for numerals beyond the interpreter's digit limit.
        raise ValueError(f'failed to parse {what} in line: "{line}": {e}') from e


def parse_hunk_header(line: str, src: str, dst: str) -> Optional[HunkPair]:
    """
    Parse a hunk header line into a HunkPair for the given files.

    Args:
        line: Line to parse
        src: Source file of the current file section
        dst: Destination file of the current file section

    Returns:
        The parsed pair, or None if the line is not a hunk header

    Raises:
        ValueError: If a line number or count cannot be converted
    """
    match = HUNK_HEADER_RE.match(line)
    if match is None:
        return None

    op_src, start_src, count_src, op_dst, start_dst, count_dst = match.groups()
    src_side = HunkSide(
        file=src,
        op=Op(op_src),
        line=_parse_number(start_src, "start line number", line),
        count=_parse_number(count_src or "1", "line count", line),
    )
    dst_side = HunkSide(
        file=dst,
        op=Op(op_dst),
        line=_parse_number(start_dst, "start line number", line),
        count=_parse_number(count_dst or "1", "line count", line),
    )
    return HunkPair(src_side, dst_side)


Handler = Callable[[State, str], Optional[State]]


class HunkList(Sequence):
    """Read-only, live view of the hunks collected by a DiffParser."""

    def __init__(self, items: List[HunkPair]):
        self._items = items

    def __getitem__(self, index):
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other) -> bool:
        if isinstance(other, (HunkList, list, tuple)):
            return list(self) == list(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"HunkList({self._items!r})"


class DiffParser:
    """
    Parser for unified diff output.

    Lines are fed one at a time; every hunk header produces one HunkPair.
    A parser is not reset after an error and should be discarded then.
    """

    def __init__(self):
        self._state: State = Start()
        self._diffs: List[HunkPair] = []
        self._view = HunkList(self._diffs)

    @classmethod
    def parse_diff(cls, diff_str: str) -> List[HunkPair]:
        """
        Parses the diff string and returns all hunks in it.

        Args:
            diff_str: Unified diff, e.g. as emitted by git diff

        Returns:
            List of HunkPair objects in input order

        Raises:
            DiffParseError: If the diff is malformed
        """
        parser = cls()
        # Only "\n" ends a line; form feeds and the like are line content.
        parser.parse(diff_str.split("\n"))
        return list(parser.diffs)

    @property
    def diffs(self) -> HunkList:
        return self._view

    @property
    def state(self) -> State:
        return self._state

    def parse(self, lines: Iterable[str]) -> None:
        """
        Parse a sequence of lines, e.g. an open file or sys.stdin.

        Raises:
            DiffParseError: On the first line that does not fit the grammar
        """
        for line in lines:
            self.parse_line(line)

    def parse_line(self, line: str) -> None:
        line = line.rstrip("\r\n")
        # Empty lines carry no information in any state.
        if not line:
            return

        for handler in self._handlers(self._state):
            state = handler(self._state, line)
            if state is not None:
                self._state = state
                return

        raise DiffParseError(
            f'encountered unexpected line: "{line}" (state: {self._state!r})',
            line,
            repr(self._state),
        )

    def _handlers(self, state: State) -> Tuple[Handler, ...]:
        if isinstance(state, Start):
            return (self._parse_src, self._match_no_diff)
        if isinstance(state, PendingSource):
            return (self._parse_dst,)
        if isinstance(state, PendingDestination):
            return (self._parse_head,)
        return (self._match_diff, self._parse_head, self._restart)

    def _parse_src(self, state: State, line: str) -> Optional[State]:
        match = SRC_HEADER_RE.match(line)
        if match is None:
            return None
        return PendingSource(match.group(1))

    def _parse_dst(self, state: PendingSource, line: str) -> Optional[State]:
        match = DST_HEADER_RE.match(line)
        if match is None:
            return None
        return PendingDestination(state.src, match.group(1))

    def _parse_head(self, state: Union[PendingDestination, InHunk], line: str) -> Optional[State]:
        try:
            pair = parse_hunk_header(line, state.src, state.dst)
        except ValueError as e:
            raise DiffParseError(str(e), line, repr(state)) from e
        if pair is None:
            return None
        self._diffs.append(pair)
        return InHunk(state.src, state.dst)

    def _match_no_diff(self, state: State, line: str) -> Optional[State]:
        return state if NO_DIFF_LINE_RE.match(line) else None

    def _match_diff(self, state: State, line: str) -> Optional[State]:
        return state if DIFF_LINE_RE.match(line) else None

    def _restart(self, state: State, line: str) -> Optional[State]:
        # The line separating two files (e.g. "diff --git ...") is consumed.
        return Start() if NO_DIFF_LINE_RE.match(line) else None
