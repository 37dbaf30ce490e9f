"""Workspace bootstrap helpers for learninghub commands.

The workspace is a small per-user tree::

    ~/.learninghub-data/        ($LEARNINGHUB_DATA_HOME overrides)
        config/learninghub.toml
        logs/quiz.log
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping

WORKSPACE_ENV = "LEARNINGHUB_DATA_HOME"
DEFAULT_WORKSPACE = Path.home() / ".learninghub-data"

SUBDIRECTORIES = ("config", "logs")


class WorkspaceError(RuntimeError):
    """Raised when the workspace tree cannot be resolved or created."""


@dataclass(frozen=True)
class WorkspaceLayout:
    """Workspace root, its subdirectories and what this call created."""

    home: Path
    directories: Mapping[str, Path]
    created: Mapping[str, bool] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def path_for(self, key: str) -> Path:
        if key not in self.directories:
            raise WorkspaceError(f"Unknown workspace directory '{key}'.")
        return self.directories[key]

    def items(self) -> tuple[tuple[str, Path], ...]:
        return tuple(self.directories.items())


def ensure_workspace(
    *,
    env: Mapping[str, str] | None = None,
    path: Path | None = None,
    create: bool = True,
) -> WorkspaceLayout:
    """Resolve (and by default create) the workspace.

    ``path`` wins over ``$LEARNINGHUB_DATA_HOME``, which wins over
    ``~/.learninghub-data``. Only the default location may fall back to the
    system temp directory when it cannot be created.
    """

    base, explicit = _resolve_base(os.environ if env is None else env, path)
    if not create:
        return _layout(base, create=False)

    failure: PermissionError | None = None
    for candidate in _candidates(base, explicit):
        try:
            return _layout(candidate, create=True)
        except PermissionError as exc:
            failure = exc
    raise WorkspaceError(f"Unable to prepare workspace at {base}") from failure


def describe_layout(
    *, env: Mapping[str, str] | None = None, path: Path | None = None
) -> Mapping[str, Path]:
    """Map ``home`` and each subdirectory to its path, creating nothing."""

    layout = ensure_workspace(env=env, path=path, create=False)
    return MappingProxyType({"home": layout.home, **layout.directories})


def _resolve_base(
    env: Mapping[str, str], override: Path | None
) -> tuple[Path, bool]:
    from_env = (env.get(WORKSPACE_ENV) or "").strip()
    if override is not None:
        target, explicit = Path(override), True
    elif from_env:
        target, explicit = Path(from_env), True
    else:
        target, explicit = DEFAULT_WORKSPACE, False
    target = target.expanduser()
    try:
        return target.resolve(), explicit
    except FileNotFoundError:  # pragma: no cover - platform dependent
        return target.absolute(), explicit


def _candidates(base: Path, explicit: bool) -> Iterator[Path]:
    yield base
    fallback = _fallback_base()
    if not explicit and fallback != base:
        yield fallback


def _fallback_base() -> Path:
    return Path(tempfile.gettempdir()) / "learninghub-data"


def _layout(base: Path, *, create: bool) -> WorkspaceLayout:
    if base.exists() and not base.is_dir():
        raise WorkspaceError(
            f"Configured workspace exists and is not a directory: {base}"
        )
    directories = {name: base / name for name in SUBDIRECTORIES}
    if not create:
        for name, directory in directories.items():
            if directory.exists() and not directory.is_dir():
                raise WorkspaceError(
                    f"Expected workspace directory for '{name}' but found "
                    f"a file: {directory}"
                )
        created = {name: False for name in ("home", *SUBDIRECTORIES)}
    else:
        created = {"home": _ensure_dir(base)}
        created.update(
            (name, _ensure_dir(directory))
            for name, directory in directories.items()
        )
    return WorkspaceLayout(
        home=base,
        directories=MappingProxyType(directories),
        created=MappingProxyType(created),
    )


def _ensure_dir(path: Path) -> bool:
    """Create ``path`` (mode 0700); return whether it was new."""

    if path.exists():
        if not path.is_dir():
            raise WorkspaceError(
                f"Expected directory but found a non-directory entry: {path}"
            )
        return False
    path.mkdir(parents=True, exist_ok=True)
    try:
        path.chmod(0o700)
    except (PermissionError, NotImplementedError):
        pass
    return True
