#!/usr/bin/env python3

from dataclasses import dataclass
from enum import Enum
from typing import List, Literal, NamedTuple

from pydantic import BaseModel, Field


class Op(Enum):
    """Direction of a diff side, as written in a hunk header."""
    ADD = "+"
    SUB = "-"


@dataclass(frozen=True)
class HunkSide:
    """Data class for one side (source or destination) of a hunk."""
    file: str
    op: Op
    line: int  # 1-based; 0 when the file does not exist on this side
    count: int


class HunkPair(NamedTuple):
    src: HunkSide
    dst: HunkSide


class BlameOptions(BaseModel):
    git: str = Field("git", description="The git executable to invoke")
    revision: str = Field("HEAD", description="Revision to annotate; empty means the working tree")
    side: Literal["src", "dst"] = Field("src", description="Which side of each hunk drives the line range")
    extra_args: List[str] = Field(default_factory=list, description="Additional arguments passed to git blame")
    verbose: bool = Field(False, description="Print progress information to stderr")
