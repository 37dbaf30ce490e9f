"""Configuration for the quiz command."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from learning_hub.core import workspace as workspace_mod
from learning_hub.core.config import (
    TomlConfigError,
    load_toml,
    merge_defaults,
)
from learning_hub.core.workspace import WorkspaceError

CONFIG_FILENAME = "learninghub.toml"

DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    "quiz": {
        "num": 0,
        "shuffle": False,
    },
    "logging": {
        "level": "INFO",
        "verbose": False,
    },
}

CONFIG_TEMPLATE = """\
# LearningHub configuration

[quiz]
# Limit each attempt to this many questions (0 = every question in the pack)
num = 0
# Shuffle question order before starting
shuffle = false

[logging]
# Level written to <workspace>/logs/quiz.log
level = "INFO"
# Mirror log records to stderr
verbose = false
"""

_EXPECTED_TYPES = {
    ("quiz", "num"): int,
    ("quiz", "shuffle"): bool,
    ("logging", "level"): str,
    ("logging", "verbose"): bool,
}


def find_config_path(
    arg: Optional[str],
    *,
    workspace_path: Optional[Path] = None,
) -> Optional[Path]:
    """Locate ``learninghub.toml``.

    An explicit path must exist. Otherwise the workspace ``config/``
    directory is checked before the current directory; ``None`` means the
    defaults apply.
    """

    if arg:
        path = Path(arg).expanduser().resolve()
        if not path.exists():
            raise TomlConfigError(f"Config file not found: {path}")
        return path

    try:
        layout = workspace_mod.ensure_workspace(
            path=workspace_path, create=False
        )
    except WorkspaceError:
        layout = None
    if layout is not None:
        candidate = layout.path_for("config") / CONFIG_FILENAME
        if candidate.exists():
            return candidate.resolve()

    cwd_cfg = Path.cwd() / CONFIG_FILENAME
    if cwd_cfg.exists():
        return cwd_cfg.resolve()
    return None


def load_quiz_config(path: Optional[Path]) -> Dict[str, Dict[str, Any]]:
    """Merge the TOML at ``path`` over :data:`DEFAULT_CONFIG`."""

    if path is None:
        return merge_defaults(DEFAULT_CONFIG, {})
    config = merge_defaults(DEFAULT_CONFIG, load_toml(path))
    for (section, key), expected in _EXPECTED_TYPES.items():
        value = config[section][key]
        # bool is an int subclass; keep ``num = true`` out.
        if not isinstance(value, expected) or (
            expected is int and isinstance(value, bool)
        ):
            raise TomlConfigError(
                "Expected {0} for '{1}.{2}', found {3}.".format(
                    expected.__name__, section, key, type(value).__name__
                )
            )
    if config["quiz"]["num"] < 0:
        raise TomlConfigError("'quiz.num' must be >= 0.")
    return config
