"""Reusable workspace templates.

Templates are plain configuration files kept under `<home>/templates`,
where `<home>` is `$ALIASC_HOME` or `~/.aliasc`. `aliasc init --template
NAME` generates from `NAME.yaml` there; `--save` copies the configuration
that was used into the same directory under its own file name.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import List, Optional

from .diagnostics import TemplateError

logger = logging.getLogger(__name__)

HOME_ENV = "ALIASC_HOME"
TEMPLATE_DIR = "templates"
TEMPLATE_SUFFIX = ".yaml"


def home() -> Path:
    raw = os.environ.get(HOME_ENV)
    if raw:
        return Path(raw).expanduser()
    return Path.home() / ".aliasc"


def template_dir(base: Optional[Path] = None) -> Path:
    return (base if base is not None else home()) / TEMPLATE_DIR


def list_templates(base: Optional[Path] = None) -> List[str]:
    d = template_dir(base)
    if not d.is_dir():
        return []
    return sorted(p.stem for p in d.glob("*" + TEMPLATE_SUFFIX) if p.is_file())


def template_path(name: str, base: Optional[Path] = None) -> Path:
    """Path of template `name`; ALX-IO-0004 when there is none."""
    p = template_dir(base) / (name + TEMPLATE_SUFFIX)
    if not p.is_file():
        known = list_templates(base)
        raise TemplateError.make(
            "ALX-IO-0004",
            f"no template named '{name}' in {p.parent}",
            f"available: {', '.join(known)}" if known else "save one with `aliasc init --save`",
            origin=name,
        )
    return p


def save_template(config: Path, base: Optional[Path] = None) -> Path:
    """Copy `config` into the template directory, replacing a template of the same name."""
    dest = template_dir(base) / Path(config).name
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        if dest.exists() and dest.resolve() == Path(config).resolve():
            return dest
        shutil.copyfile(config, dest)
    except OSError as e:
        raise TemplateError.make(
            "ALX-IO-0005",
            f"cannot save template {dest}: {e.strerror or e}",
            f"check that {HOME_ENV} points to a writable directory",
            origin=str(dest),
        ) from e
    logger.info("saved template %s", dest)
    return dest
