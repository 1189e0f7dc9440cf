"""Running `script` entries of a workspace.

Scripts are not generated into files; the host tool substitutes the
placeholders itself and hands the body to the platform shell:

    {{ .var }}        workspace variable (env placeholders in variables are expanded first)
    {{ $env.VAR }}    environment variable, empty when unset
    {{ $N }}          N-th extra argument of `aliasc run`, quoted for the shell
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import tempfile
from typing import Dict, List, Optional, Sequence

from .config import Command, Workspace
from .diagnostics import ConfigError, ScriptFailedError, ScriptNotFoundError
from .resolver import RESOLVERS, ResolverSet

logger = logging.getLogger(__name__)

BUILTINS = ("init", "clean", "run")


def host_platform() -> str:
    return "powershell" if os.name == "nt" else "bash"


def check_script_names(ws: Workspace) -> None:
    for name in ws.script:
        if name in BUILTINS:
            raise ConfigError.make(
                "ALX-CFG-0104",
                f"script '{name}' shadows the built-in '{name}' subcommand",
                "rename the script",
                origin=f"script.{name}",
            )


def _env(var: str) -> str:
    return os.environ.get(var, "")


def expand_variables(ws: Workspace, resolvers: ResolverSet = RESOLVERS) -> Dict[str, str]:
    return {k: resolvers.env.apply(v, _env) for k, v in ws.variable.items()}


def _quote(arg: str, platform: str) -> str:
    if platform == "bash":
        return shlex.quote(arg)
    return subprocess.list2cmdline([arg])


def script_body(ws: Workspace, name: str, platform: str) -> str:
    entry = ws.script.get(name)
    if entry is None:
        known = ", ".join(sorted(ws.script)) or "none"
        raise ScriptNotFoundError.make(
            "ALX-RUN-0001",
            f"no script named '{name}'",
            f"known scripts: {known}",
        )
    if isinstance(entry, Command):
        for case in entry.match:
            if case.applies_to(platform):
                return case.run
        raise ScriptNotFoundError.make(
            "ALX-RUN-0001",
            f"script '{name}' has no match case for {platform}",
            "add a case without `platform`, or one for this platform",
            origin=f"script.{name}",
        )
    return entry


def resolve_script(
    ws: Workspace,
    name: str,
    args: Sequence[str] = (),
    *,
    platform: Optional[str] = None,
    resolvers: ResolverSet = RESOLVERS,
) -> str:
    platform = platform or host_platform()
    text = script_body(ws, name, platform)
    variables = expand_variables(ws, resolvers)

    def _index(m: str) -> Optional[str]:
        n = int(m)
        if n < 1:
            return None
        return _quote(args[n - 1], platform) if n <= len(args) else ""

    # one pass, so argument values are never read as placeholders
    return resolvers.substitute(text, index=_index, named=variables.get, env=_env)


def shell_command(body: str, platform: str, script_file: Optional[str] = None) -> List[str]:
    if script_file is not None:
        if platform == "bash":
            return ["bash", script_file]
        return ["powershell", "-NoProfile", "-ExecutionPolicy", "Bypass", "-File", script_file]
    if platform == "bash":
        return ["bash", "-c", body]
    return ["cmd", "/C", body]


def run_script(
    ws: Workspace,
    name: str,
    args: Sequence[str] = (),
    *,
    dry: bool = False,
    platform: Optional[str] = None,
) -> str:
    """Resolve and run script `name`; returns the resolved body."""
    platform = platform or host_platform()
    body = resolve_script(ws, name, args, platform=platform)
    if dry:
        return body

    script_file = None
    try:
        if "\n" in body.strip():
            suffix = ".sh" if platform == "bash" else ".ps1"
            with tempfile.NamedTemporaryFile("w", suffix=suffix, delete=False, encoding="utf-8") as fh:
                fh.write(body)
                script_file = fh.name
        argv = shell_command(body.strip(), platform, script_file)
        logger.debug("running %s", argv)
        rc = subprocess.run(argv).returncode
    finally:
        if script_file is not None:
            os.unlink(script_file)
    if rc != 0:
        raise ScriptFailedError.make(
            "ALX-RUN-0002",
            f"script '{name}' exited with status {rc}",
            origin=f"script.{name}",
        )
    return body
