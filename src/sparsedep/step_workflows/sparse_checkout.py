# step_workflows/sparse_checkout.py
from __future__ import annotations

import enum
import re
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Callable, List, Mapping, Optional, Sequence

from ..dag import is_reachable
from ..errors import ConfigurationError, MissingDependencyEdge
from ..model import ResolvedCheckout, SparseCheckoutOptions
from ..pathsearch import search_for_executable
from ..process import run_process
from ..ui.console import get_console

if TYPE_CHECKING:
    from ..build import Build


DEFAULT_BRANCH = "main"
SKIPPED_STATUS = "skipped(exists)"

# runner(argv, cwd=..., env=..., step=..., phase=...) -> exit status
Runner = Callable[..., int]


class Phase(enum.Enum):
    UNSTARTED = "Unstarted"
    CHECK_EXISTENCE = "Check Existence"
    CLONE = "Git Sparse Clone"
    SET_FILTER = "Git Set Sparse Checkout"
    PULL = "Git Pull"
    CHECKOUT = "Git Checkout"
    DONE = "Done"


# ---------------------------------------------------------------------
# Creation helpers
# ---------------------------------------------------------------------

def repo_name(url: str) -> str:
    """
    Local directory name for `url`: the stem of its last path component.

        https://example.com/repo.git -> repo
        git@host:org/tools.git       -> tools
        C:\\repos\\icu.git            -> icu
    """
    tail = re.split(r"[/\\]", url.rstrip("/\\"))[-1]
    return PurePosixPath(tail).stem


def _validate(options: SparseCheckoutOptions) -> None:
    if not options.url:
        raise ConfigurationError(kind="invalid_options", message="url is required")
    if not options.directories:
        raise ConfigurationError(
            kind="invalid_options",
            message="at least one sparse directory is required",
            details={"url": options.url},
        )


def resolve_checkout(
    options: SparseCheckoutOptions,
    build_root: Path,
    env: Mapping[str, str],
) -> ResolvedCheckout:
    """Resolve the git executable and the destination path, once."""
    _validate(options)

    name = repo_name(options.url)
    if options.local_path:
        path = Path(options.local_path)
        if not path.is_absolute():
            path = build_root / path
    else:
        if not name:
            raise ConfigurationError(
                kind="no_destination",
                message="cannot derive a directory name from the url",
                details={"url": options.url, "hint": "pass local_path explicitly"},
            )
        path = build_root / "dep" / name

    git_path = options.git_path or search_for_executable(env)
    return ResolvedCheckout(git_path=git_path, name=name, path=path.absolute())


# ---------------------------------------------------------------------
# The step
# ---------------------------------------------------------------------

class SparseCheckoutStep:
    """
    Build step that fetches a few directories of a remote git repository.

    If the destination already exists it is taken as materialized and no git
    command runs. Its contents are not checked against the url, branch or
    directories; delete the directory to force a fresh fetch.
    """

    def __init__(
        self,
        build: "Build",
        options: SparseCheckoutOptions,
        *,
        runner: Optional[Runner] = None,
    ):
        self.build = build
        self.options = options
        self.resolved = resolve_checkout(options, build.build_root, build.env)
        self.runner: Runner = runner or run_process
        self.phase = Phase.UNSTARTED
        self.node = build.graph.add_node(self.step_name, action=self.make)
        get_console().print_debug(f"{self.step_name}: git={self.git_path} path={self.path}")

    @classmethod
    def create(
        cls,
        build: "Build",
        options: SparseCheckoutOptions,
        *,
        runner: Optional[Runner] = None,
    ) -> "SparseCheckoutStep":
        return cls(build, options, runner=runner)

    @property
    def step_name(self) -> str:
        return f"sparse-checkout {self.resolved.name or self.options.url}"

    @property
    def git_path(self) -> str:
        return self.resolved.git_path

    @property
    def path(self) -> Path:
        return self.resolved.path

    # ---- argv ----

    def clone_argv(self) -> List[str]:
        args = [
            self.git_path, "clone", "-n", "--depth=1", "--filter=tree:0",
            self.options.url, str(self.path),
        ]
        if self.options.branch:
            args.extend(["-b", self.options.branch])
        return args

    def set_filter_argv(self) -> List[str]:
        return [self.git_path, "sparse-checkout", "set", "--no-cone", *self.options.directories]

    def pull_argv(self) -> List[str]:
        return [self.git_path, "pull", "origin", self.options.branch or DEFAULT_BRANCH]

    def checkout_argv(self) -> List[str]:
        return [self.git_path, "checkout"]

    # ---- execution ----

    def _run(self, phase: Phase, argv: Sequence[str], cwd: Path) -> None:
        self.phase = phase
        get_console().print_phase(self.step_name, phase.value)
        self.runner(argv, cwd=cwd, env=self.build.env, step=self.step_name, phase=phase.value)

    def make(self) -> str:
        """
        Fetch the sparse checkout unless the destination already exists.

        Returns "ok" after a fetch, SKIPPED_STATUS when nothing had to run.
        """
        self.phase = Phase.CHECK_EXISTENCE
        if self.path.exists():
            get_console().print_skipped(self.step_name, f"exists: {self.path}")
            self.phase = Phase.DONE
            return SKIPPED_STATUS

        # git creates dep/<name>, but the clone needs an existing cwd
        self.build.build_root.mkdir(parents=True, exist_ok=True)
        self._run(Phase.CLONE, self.clone_argv(), self.build.build_root)
        self._run(Phase.SET_FILTER, self.set_filter_argv(), self.path)
        self._run(Phase.PULL, self.pull_argv(), self.path)
        self._run(Phase.CHECKOUT, self.checkout_argv(), self.path)

        self.phase = Phase.DONE
        return "ok"

    def get_path(self, requester: int) -> Path:
        """
        Return the checkout path to a node that declared a dependency on us.

        Raises MissingDependencyEdge when `requester` has no path to this
        step, or CircularDependencyDetected if the graph loops. Both mean
        the build description is wrong.
        """
        graph = self.build.graph
        if not is_reachable(graph, requester, self.node):
            raise MissingDependencyEdge(graph.node(requester).name, self.step_name)
        return self.path


# ---------------------------------------------------------------------
# Module-level API
# ---------------------------------------------------------------------

def create(build: "Build", options: SparseCheckoutOptions, **kwargs) -> SparseCheckoutStep:
    return SparseCheckoutStep.create(build, options, **kwargs)


def run(step: SparseCheckoutStep) -> str:
    return step.make()


def get_output_path(step: SparseCheckoutStep, requester: int) -> Path:
    return step.get_path(requester)
