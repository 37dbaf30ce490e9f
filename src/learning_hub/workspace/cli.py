"""CLI entry point for workspace bootstrap."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Mapping, Sequence

from learning_hub.core import workspace as workspace_mod
from learning_hub.core.config import TomlConfigError, write_toml_template
from learning_hub.quiz.config import CONFIG_FILENAME, CONFIG_TEMPLATE


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="learninghub init",
        description=(
            "Create the LearningHub workspace and write a default "
            f"{CONFIG_FILENAME}."
        ),
    )
    parser.add_argument(
        "--path",
        type=Path,
        help=(
            "Override the workspace root (defaults to LEARNINGHUB_DATA_HOME "
            "or ~/.learninghub-data)."
        ),
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing configuration file.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress informational output on success.",
    )
    return parser


def _status(created: Mapping[str, bool], key: str) -> str:
    return "created" if created.get(key, False) else "exists"


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(list(argv) if argv is not None else None)

    try:
        layout = workspace_mod.ensure_workspace(path=args.path)
    except workspace_mod.WorkspaceError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 2

    config_path = layout.path_for("config") / CONFIG_FILENAME
    try:
        write_toml_template(
            config_path, template=CONFIG_TEMPLATE, overwrite=args.force
        )
        config_status = "written"
    except TomlConfigError:
        config_status = "kept existing"

    if args.quiet:
        return 0

    home_status = _status(layout.created, "home")
    lines = [f"Workspace ready at {layout.home} ({home_status})"]
    width = max((len(name) for name in layout.directories), default=0)
    for name, directory in layout.items():
        status = _status(layout.created, name)
        lines.append(f"  {name.ljust(width)}  {directory} ({status})")
    lines.append(f"Config: {config_path} ({config_status})")
    sys.stdout.write("\n".join(lines) + "\n")
    return 0


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
