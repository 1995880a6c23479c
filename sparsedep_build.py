# sparsedep_build.py
# Example build: fetch ICU's common sources and hand the path to a compile step.
from __future__ import annotations

from sparsedep import Build


def build(b: Build) -> None:
    icu = b.sparse_checkout(
        "https://github.com/unicode-org/icu.git",
        ["icu4c/source/common"],
        branch="maint/maint-74",
    )

    def compile_icu():
        common = icu.get_path(compile_step) / "icu4c" / "source" / "common"
        sources = sorted(p.name for p in common.glob("*.cpp"))
        print(f"[compile] {len(sources)} sources under {common}")

    compile_step = b.add_step("compile icuuc", compile_icu, needs=[icu.node])
