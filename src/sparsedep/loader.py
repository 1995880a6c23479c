# loader.py
from __future__ import annotations

import runpy
from pathlib import Path

from .build import Build


DEFAULT_BUILD_FILE = "sparsedep_build.py"


def load_build(path: str | Path, build: Build) -> Build:
    """
    Load a build description from a python file path.

    The file must define:
      - build(b: Build) -> None

    which registers its steps into `build`. Returns the same Build.
    """
    build_path = Path(path).expanduser().resolve()
    if not build_path.exists():
        raise FileNotFoundError(f"Build file not found: {build_path}")
    if build_path.suffix != ".py":
        raise ValueError(f"Build file must be a .py file, got: {build_path.name}")

    module_name = f"sparsedep_build_{build_path.stem}"
    globals_dict = runpy.run_path(str(build_path), run_name=module_name)

    fn = globals_dict.get("build")
    if not callable(fn):
        raise TypeError("Build file must define build(b) -> None.")

    fn(build)
    return build
