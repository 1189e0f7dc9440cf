"""Placing generated scripts on disk.

For every extension and command of a workspace, each target's script is
written to `<runPath>/<name><suffix>`. Bash scripts are made executable
and linked as `<runPath>/bash/<name>` so the directory can go on PATH.
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence, Union

from .bash.target import BashTarget
from .builder import ScriptBuilder
from .config import Command, Workspace
from .diagnostics import ExecutableNotFoundError, ScriptExistsError
from .powershell.target import PowerShellTarget
from .resolver import RESOLVERS
from .target import Target

logger = logging.getLogger(__name__)

TARGETS: Sequence[Target] = (BashTarget(), PowerShellTarget())
LINK_DIR = "bash"
SCRIPT_SUFFIXES = tuple(t.suffix for t in TARGETS)


@dataclass
class Report:
    scripts: List[Path] = field(default_factory=list)
    links: List[Path] = field(default_factory=list)


def _exists(path: Path) -> ScriptExistsError:
    return ScriptExistsError.make(
        "ALX-IO-0001",
        f"{path} already exists",
        "pass --force to overwrite, or run `aliasc clean` first",
        origin=str(path),
    )


def write_script(path: Path, text: str, *, force: bool = False) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with open(path, "w" if force else "x", encoding="utf-8", newline="\n") as fh:
            fh.write(text)
    except FileExistsError as e:
        raise _exists(path) from e
    if path.suffix == ".sh":
        path.chmod(0o755)
    logger.info("wrote %s", path)


def link_script(script: Path, link: Path, *, force: bool = False) -> None:
    link.parent.mkdir(parents=True, exist_ok=True)
    if link.is_symlink() or link.exists():
        if not force:
            raise _exists(link)
        link.unlink()
    os.symlink(os.path.relpath(script, link.parent), link)
    logger.debug("linked %s -> %s", link, script)


def _search_path(exclude: Sequence[Path]) -> str:
    skip = {p.resolve() for p in exclude}
    dirs = [d for d in os.environ.get("PATH", "").split(os.pathsep) if d and Path(d).resolve() not in skip]
    return os.pathsep.join(dirs)


def find_executable(name: str, cmd: Command, *, exclude: Sequence[Path] = ()) -> str:
    """Explicit `bin` wins; otherwise look `name` up on PATH, skipping our own output dirs."""
    if cmd.bin:
        return cmd.bin
    found = shutil.which(name, path=_search_path(exclude))
    if found is None:
        raise ExecutableNotFoundError.make(
            "ALX-IO-0002",
            f"executable '{name}' not found on PATH",
            f"install '{name}' or set `bin` for extension '{name}'",
            origin=f"extend.{name}",
        )
    return found


def generate(
    ws: Workspace,
    root: Union[str, Path] = ".",
    *,
    force: bool = False,
    targets: Sequence[Target] = TARGETS,
) -> Report:
    out_dir = Path(root) / ws.run_path
    link_dir = out_dir / LINK_DIR
    report = Report()

    for name, cmd in ws.extend.items():
        cmd.preload(name, inject_help=False)
        path = find_executable(name, cmd, exclude=[out_dir, link_dir])
        for t in targets:
            bin_path = RESOLVERS.env.apply(path, t.env)
            builder = ScriptBuilder(t)
            text = builder.render(builder.build_extension(cmd, ws.executable, bin_path))
            _place(report, out_dir, link_dir, name, t, text, force)

    for name, cmd in ws.command.items():
        cmd.preload(name)
        for t in targets:
            builder = ScriptBuilder(t)
            text = builder.render(builder.build_command(cmd))
            _place(report, out_dir, link_dir, name, t, text, force)

    logger.info("generated %d script(s), %d link(s) in %s", len(report.scripts), len(report.links), out_dir)
    return report


def _place(report: Report, out_dir: Path, link_dir: Path, name: str, t: Target, text: str, force: bool) -> None:
    path = out_dir / f"{name}{t.suffix}"
    write_script(path, text, force=force)
    report.scripts.append(path)
    if t.suffix == ".sh":
        link = link_dir / name
        link_script(path, link, force=force)
        report.links.append(link)


def clean(ws: Workspace, root: Union[str, Path] = ".") -> int:
    """Remove generated scripts and links. Returns how many entries went away."""
    out_dir = Path(root) / ws.run_path
    removed = 0
    link_dir = out_dir / LINK_DIR
    if link_dir.is_dir():
        for entry in sorted(link_dir.iterdir()):
            if entry.is_symlink() or entry.is_file():
                entry.unlink()
                removed += 1
                logger.debug("removed %s", entry)
    if out_dir.is_dir():
        for entry in sorted(out_dir.iterdir()):
            if entry.is_file() and entry.suffix in SCRIPT_SUFFIXES:
                entry.unlink()
                removed += 1
                logger.info("removed %s", entry)
    return removed
