#!/usr/bin/env python3

import sys
from typing import BinaryIO, Iterable, List, Optional

import git

from blamediff.models import BlameOptions, HunkPair, HunkSide

DEV_NULL = "/dev/null"


class GitError(RuntimeError):
    """Raised when a git process cannot be started or fails."""


def await_process(program: str, status: int, stderr: str) -> None:
    """
    Map a failed process to a GitError.

    Args:
        program: Name of the program, used in the error message
        status: Exit status of the process
        stderr: Captured error output of the process
    """
    if status != 0:
        error = f"process `{program}` failed"
        # Include the first line of the error output to give the user something.
        stderr = (stderr or "").strip()
        if stderr:
            error = f"{error}: {stderr.splitlines()[0].strip()}"
        raise GitError(error)


def _encode(text: str) -> bytes:
    # Paths may carry undecodable bytes from the diff as surrogates.
    return text.encode("utf-8", errors="surrogateescape")


class GitClient:
    """Handles all interactions with git."""

    def __init__(self, options: Optional[BlameOptions] = None, working_dir: Optional[str] = None):
        """
        Initialize the git client.

        Args:
            options: Annotation options; defaults are used when omitted
            working_dir: Directory git runs in; the current directory when omitted
        """
        self.options = options or BlameOptions()
        self.git_cmd = git.Git(working_dir)

    def blame_side(self, pair: HunkPair) -> HunkSide:
        return pair.src if self.options.side == "src" else pair.dst

    def blame_command(self, pair: HunkPair) -> List[str]:
        """
        Build the git blame invocation for one hunk.

        Args:
            pair: The hunk to annotate

        Returns:
            Argument vector, starting with the git executable
        """
        side = self.blame_side(pair)
        cmd = [
            self.options.git,
            "--no-pager",
            "blame",
            "-s",
            f"-L{side.line},+{side.count}",
            *self.options.extra_args,
            "--",
            side.file,
        ]
        if self.options.revision:
            cmd.append(self.options.revision)
        return cmd

    def run(self, cmd: List[str]) -> bytes:
        """Run a git command and return its raw standard output."""
        try:
            status, stdout, stderr = self.git_cmd.execute(
                cmd,
                with_extended_output=True,
                with_exceptions=False,
                stdout_as_string=False,
                strip_newline_in_stdout=False,
            )
        except git.exc.CommandError as e:
            raise GitError(f"failed to run `{cmd[0]}`: {e}") from e
        await_process(cmd[0], status, stderr)
        return stdout or b""

    def blame(self, diffs: Iterable[HunkPair], out: BinaryIO) -> None:
        """
        Annotate every hunk, writing file headers and git blame output.

        Output is written as bytes so that annotated lines reach the
        caller exactly as git emitted them, whatever their encoding.

        Args:
            diffs: Hunks as produced by DiffParser
            out: Binary stream receiving the annotated output

        Raises:
            GitError: If git fails for any of the hunks
        """
        for pair in diffs:
            out.write(b"--- " + _encode(pair.src.file) + b"\n")
            out.write(b"+++ " + _encode(pair.dst.file) + b"\n")

            side = self.blame_side(pair)
            # Added or removed files and pure insertions/deletions leave
            # nothing to annotate on this side.
            if side.file == DEV_NULL or side.count == 0:
                if self.options.verbose:
                    print(f"Skipping {side.file} at line {side.line}: no lines to annotate", file=sys.stderr)
                continue

            cmd = self.blame_command(pair)
            if self.options.verbose:
                print(f"Running {' '.join(cmd)}", file=sys.stderr)
            out.write(self.run(cmd))
        out.flush()
