# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Tuple


# An action returns an optional status string ("skipped(exists)", ...).
# None means the node ran normally.
Action = Callable[[], Optional[str]]


@dataclass
class BuildNode:
    """
    A node in the build graph.

    Nodes are owned by a BuildGraph and referred to by their integer handle
    (`id`), never by object identity. `needs` holds the handles of the nodes
    this one depends on, in declaration order.
    """
    id: int
    name: str
    action: Optional[Action] = None
    needs: List[int] = field(default_factory=list)


@dataclass(frozen=True)
class SparseCheckoutOptions:
    """What to fetch, and optionally where from and where to."""
    url: str
    directories: Tuple[str, ...]
    git_path: str | None = None
    branch: str | None = None   # pull falls back to "main", clone omits -b
    local_path: str | None = None

    def __post_init__(self) -> None:
        # accept any sequence, store a tuple so the options stay immutable
        object.__setattr__(self, "directories", tuple(self.directories))


@dataclass(frozen=True)
class ResolvedCheckout:
    """State derived once, when the step is created."""
    git_path: str
    name: str      # stem of the url, e.g. "repo" for ".../repo.git"
    path: Path     # always absolute
