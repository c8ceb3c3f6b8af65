#!/usr/bin/env python3

import io
import os
import sys
from typing import BinaryIO, Iterable, List

from blamediff.diff_parser import DiffParser
from blamediff.git_client import GitClient
from blamediff.models import BlameOptions
from config import load_config


def run(stdin: Iterable[str], stdout: BinaryIO, argv: List[str]) -> int:
    """
    Parse a diff from stdin and annotate each of its hunks.

    Args:
        stdin: Lines of the unified diff
        stdout: Binary stream receiving the annotated hunks
        argv: Arguments forwarded to git blame

    Returns:
        Process exit status
    """
    options = BlameOptions(**load_config(argv))

    parser = DiffParser()
    parser.parse(stdin)
    diffs = parser.diffs
    if options.verbose:
        print(f"Parsed {len(diffs)} hunks", file=sys.stderr)

    GitClient(options).blame(diffs, stdout)
    return 0


def open_stdin() -> io.TextIOWrapper:
    """Wrap stdin so that only "\\n" ends a line and any bytes decode."""
    return io.TextIOWrapper(sys.stdin.buffer, encoding="utf-8", errors="surrogateescape", newline="\n")


def main():
    """Main function to annotate the hunks of a diff read from stdin."""
    try:
        status = run(open_stdin(), sys.stdout.buffer, sys.argv[1:])
    except BrokenPipeError:
        # The reader went away, e.g. a pager was closed early. Point stdout
        # at devnull so the final flush at exit does not fail again.
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        sys.exit(0)
    except Exception as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)
    sys.exit(status)


if __name__ == "__main__":
    main()
