from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Paths:
    repo_root: Path
    data_dir: Path
    schema_dir: Path
    userdata_dir: Path


def find_repo_root(package_dir: Path, cwd: Path | None = None) -> Path:
    # src/pairmatch -> parents: [src, repo_root]; an installed package has no checkout above it
    candidate = package_dir.parents[1]
    if (candidate / "pyproject.toml").is_file():
        return candidate
    return cwd or Path.cwd()


def get_paths() -> Paths:
    package_dir = Path(__file__).resolve().parent
    repo_root = find_repo_root(package_dir)
    data_dir = package_dir / "data"
    return Paths(
        repo_root=repo_root,
        data_dir=data_dir,
        schema_dir=data_dir / "schemas",
        userdata_dir=repo_root / "userdata",
    )
