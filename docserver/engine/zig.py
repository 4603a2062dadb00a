"""
Zig project helpers
"""

from pathlib import Path


def find_root_file(project_path: Path) -> Path | None:
    """
    Find the root source file of a Zig library.

    Checked in order:

    1. `src/root.zig`
    2. `src/<project directory name>.zig`
    3. The first `.zig` file in `src/` by name

    Returns:
        Path to the root file, or None if `src/` holds no `.zig` file
    """
    src = Path(project_path) / "src"

    root_zig = src / "root.zig"
    if root_zig.is_file():
        return root_zig

    named = src / f"{Path(project_path).name}.zig"
    if named.is_file():
        return named

    if src.is_dir():
        candidates = sorted(p for p in src.iterdir() if p.suffix == ".zig" and p.is_file())
        if candidates:
            return candidates[0]

    return None
