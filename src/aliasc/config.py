"""Workspace configuration (aliax.yaml).

The document is parsed with PyYAML, validated against `schema.SCHEMA`
and only then turned into the dataclasses below. After `Command.preload`
a command tree is read-only for the rest of generation.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from jsonschema import Draft7Validator
from jsonschema.exceptions import best_match
import yaml

from .diagnostics import ConfigError
from .schema import SCHEMA
from .target import ident_part, scoped

logger = logging.getLogger(__name__)

CONFIG_NAME = "aliax.yaml"
WORK_FILE = "aliax.work"

FLAG_STRING = "string"
FLAG_BOOL = "bool"
PLATFORMS = ("bash", "powershell")
DEFAULT_PATTERNS = ("", "_")

_META = re.compile(r"([\\.+*?()|\[\]{}^$])")


def quote_meta(s: str) -> str:
    """Escape regex meta-characters so `s` matches literally."""
    return _META.sub(r"\\\1", s)


@dataclass
class Flag:
    name: str
    aliases: List[str] = field(default_factory=list)
    type: str = FLAG_BOOL
    usage: str = ""
    implicit: bool = False

    def tokens(self) -> List[str]:
        """Literal argument tokens that select this flag."""
        return list(self.aliases) if self.aliases else [self.name]


@dataclass
class MatchCase:
    pattern: Union[None, str, List[str]] = None
    platform: Optional[str] = None
    run: str = ""

    @property
    def is_default(self) -> bool:
        return self.pattern is None or (isinstance(self.pattern, str) and self.pattern in DEFAULT_PATTERNS)

    def names(self) -> List[str]:
        if self.is_default:
            return []
        if isinstance(self.pattern, str):
            return [self.pattern]
        return list(self.pattern)

    def applies_to(self, platform: str) -> bool:
        return not self.platform or self.platform == platform


@dataclass
class Command:
    name: str = ""
    short: str = ""
    long: str = ""
    example: str = ""
    disable_help: bool = False
    flags: List[Flag] = field(default_factory=list)
    match: List[MatchCase] = field(default_factory=list)
    children: Dict[str, "Command"] = field(default_factory=dict)
    bin: str = ""
    display_name: str = ""

    def preload(self, name: str, *, inject_help: bool = True) -> None:
        """Record display names down the tree, check flag uniqueness and add `help` at the root."""
        if inject_help and not self.disable_help:
            existing = [f for f in self.flags if f.name == "help"]
            if existing and not existing[0].implicit:
                raise ConfigError.make(
                    "ALX-CFG-0101",
                    f"command '{name}' declares a 'help' flag but help is enabled",
                    "rename the flag, or set `disableHelp: true` to provide your own",
                    origin=name,
                )
            if not existing:
                self.flags.append(Flag(
                    name="help",
                    aliases=["-h", "--help"],
                    type=FLAG_BOOL,
                    usage=f"help for {name}",
                    implicit=True,
                ))
        self._set_names(name, name)
        self._check_idents(ident_part(name), {})

    def _set_names(self, name: str, display: str) -> None:
        self.name = name
        self.display_name = display
        self._check_flags()
        for child_name, child in self.children.items():
            child._set_names(child_name, f"{display} {child_name}")

    def _check_flags(self) -> None:
        where = self.display_name or self.name
        names: set = set()
        tokens: Dict[str, str] = {}
        for f in self.flags:
            if f.name in names:
                raise ConfigError.make(
                    "ALX-CFG-0102",
                    f"flag '{f.name}' is declared twice",
                    "every flag name must be unique within one command",
                    origin=where,
                )
            names.add(f.name)
            for tok in f.tokens():
                key = quote_meta(tok)
                if key in tokens:
                    raise ConfigError.make(
                        "ALX-CFG-0102",
                        f"flag token '{tok}' is used by both '{tokens[key]}' and '{f.name}'",
                        "every flag alias must be unique within one command",
                        origin=where,
                    )
                tokens[key] = f.name

    def _check_idents(self, ident: str, claimed: Dict[str, str]) -> None:
        """Every flag variable in the generated script is `<path>_<flag>` with
        non-word characters folded to `_`; no two of them may coincide, and
        sibling subcommands may not fold to the same path.
        """
        where = self.display_name or self.name
        for f in self.flags:
            var = scoped(ident, f.name)
            if var in claimed:
                raise ConfigError.make(
                    "ALX-CFG-0102",
                    f"flag '{f.name}' maps to variable '{var}', already taken by {claimed[var]}",
                    "rename one of the flags; '-' and '_' are the same in variable names",
                    origin=where,
                )
            claimed[var] = f"flag '{f.name}' of '{where}'"
        paths: Dict[str, str] = {}
        for child_name in self.children:
            key = ident_part(child_name)
            if key in paths:
                raise ConfigError.make(
                    "ALX-CFG-0105",
                    f"subcommands '{paths[key]}' and '{child_name}' map to the same identifier '{key}'",
                    "rename one of the subcommands; '-', '.' and '_' are the same in identifiers",
                    origin=where,
                )
            paths[key] = child_name
        for child_name, child in self.children.items():
            child._check_idents(scoped(ident, child_name), claimed)

    def help_text(self) -> str:
        if self.disable_help:
            return ""
        display = self.display_name or self.name
        out: List[str] = []
        desc = self.long or self.short
        if desc:
            out += [desc.rstrip("\n"), ""]

        usage = display
        if self.children:
            usage += " [command]"
        if self.flags:
            usage += " [flags]"
        out += ["Usage:", f"  {usage}", ""]

        if self.example:
            out += ["Examples:", self.example.rstrip("\n"), ""]

        if self.children:
            out.append("Available Commands:")
            out += _columns([(n, c.short) for n, c in self.children.items()])
            out.append("")

        if self.flags:
            out.append("Flags:")
            out += _columns([(", ".join(_flag_label(f)), f.usage) for f in self.flags])
            out.append("")
        return "\n".join(out).rstrip("\n")


def _flag_label(f: Flag) -> List[str]:
    label = f.tokens()
    if f.type == FLAG_STRING:
        label[-1] += " string"
    return label


def _columns(rows: List[tuple]) -> List[str]:
    width = max(len(left) for left, _ in rows)
    return [f"  {left.ljust(width)}   {right}".rstrip() for left, right in rows]


@dataclass
class Workspace:
    variable: Dict[str, str] = field(default_factory=dict)
    extend: Dict[str, Command] = field(default_factory=dict)
    command: Dict[str, Command] = field(default_factory=dict)
    script: Dict[str, Union[str, Command]] = field(default_factory=dict)
    run_path: str = "run-scripts"
    executable: str = "executable"


# ------------------------------------------------------------------- loading

def config_name(cwd: Optional[Path] = None) -> Path:
    """`aliax.work` may name an alternate config file; default is `aliax.yaml`."""
    base = Path(cwd) if cwd is not None else Path.cwd()
    work = base / WORK_FILE
    if work.is_file():
        target = work.read_text(encoding="utf-8").strip()
        if target:
            return base / target
    return base / CONFIG_NAME


def load_workspace(path: Union[str, Path]) -> Workspace:
    p = Path(path)
    logger.info("parsing %s", p)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError.make(
            "ALX-IO-0003",
            f"cannot read configuration {p}: {e.strerror or e}",
            f"create {CONFIG_NAME}, or pass --config",
        ) from e
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError.make("ALX-CFG-0001", f"invalid YAML in {p}: {e}", origin=str(p)) from e
    return parse_workspace(doc)


def validate_document(doc: Any) -> None:
    err = best_match(Draft7Validator(SCHEMA).iter_errors(doc))
    if err is not None:
        where = ".".join(str(x) for x in err.absolute_path) or "<root>"
        raise ConfigError.make(
            "ALX-CFG-0001",
            f"invalid configuration: {err.message}",
            "check the keys and value types against the documented format",
            origin=where,
        )


def parse_workspace(doc: Any) -> Workspace:
    validate_document(doc)
    doc = doc or {}
    script: Dict[str, Union[str, Command]] = {}
    for name, v in (doc.get("script") or {}).items():
        script[name] = v if isinstance(v, str) else parse_command(name, v)
    return Workspace(
        variable=dict(doc.get("variable") or {}),
        extend=_commands(doc.get("extend")),
        command=_commands(doc.get("command")),
        script=script,
        run_path=doc.get("runPath") or "run-scripts",
        executable=doc.get("executable") or "executable",
    )


def _commands(raw: Optional[Dict[str, Any]]) -> Dict[str, Command]:
    return {name: parse_command(name, body) for name, body in (raw or {}).items()}


def parse_command(name: str, raw: Optional[Dict[str, Any]]) -> Command:
    raw = raw or {}
    return Command(
        name=name,
        short=raw.get("short", ""),
        long=raw.get("long", ""),
        example=raw.get("example", ""),
        disable_help=bool(raw.get("disableHelp", False)),
        flags=[parse_flag(f) for f in raw.get("flags") or []],
        match=[parse_case(c) for c in raw.get("match") or []],
        children=_commands(raw.get("command")),
        bin=raw.get("bin", ""),
    )


def parse_flag(raw: Dict[str, Any]) -> Flag:
    alias = raw.get("alias") or []
    if isinstance(alias, str):
        alias = [alias]
    aliases: List[str] = []
    for a in alias:
        if a not in aliases:
            aliases.append(a)
    return Flag(
        name=raw["name"],
        aliases=aliases,
        type=raw.get("type") or FLAG_BOOL,
        usage=raw.get("usage", ""),
    )


def parse_case(raw: Dict[str, Any]) -> MatchCase:
    return MatchCase(
        pattern=raw.get("pattern"),
        platform=raw.get("platform") or None,
        run=raw.get("run") or "",
    )
