"""Script builder.

Lowers one command tree into one script for one target. The same
`ScriptBuilder` drives every target; everything shell specific is asked
of the `Target` it was built with.

Per command node, in emission order:

    children       each child guarded by `args[0] == <child>`, with the
                   argument array saved before the first child and
                   restored before every later one
    declarations   one scoped variable per flag, then `non_matched_args`
    flag loop      one switch case per flag over the live arguments
    dispatch       weighted if/elif/else over the match cases

The root then receives the mode trailer: forwarding to the wrapped
executable (extension) or the help text followed by `exit` (command).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from .config import Command
from .diagnostics import ConfigError
from .resolver import RESOLVERS, ResolverSet
from .target import FlagCase, Target, ident_part, scoped

logger = logging.getLogger(__name__)


class ScriptBuilder:
    def __init__(self, target: Target, resolvers: ResolverSet = RESOLVERS):
        self.target = target
        self.resolvers = resolvers

    # ----------------------------------------------------------------- modes
    def build_extension(self, cmd: Command, executable: str, bin_path: str) -> Any:
        """Wrap `bin_path`: handle declared flags/matches, forward the rest."""
        t = self.target
        f = t.new_file()
        f.append(*t.declare_executable(executable, bin_path))
        f.append(*self.lower(cmd, ident_part(cmd.name), 0))
        f.append(t.forward(executable, bool(cmd.flags)))
        return f

    def build_command(self, cmd: Command) -> Any:
        t = self.target
        f = t.new_file()
        f.append(*self.lower(cmd, ident_part(cmd.name), 0))
        if not cmd.disable_help:
            f.append(*t.help(cmd.help_text()), t.exit())
        return f

    def render(self, node: Any) -> str:
        return self.target.format(node)

    # -------------------------------------------------------------- lowering
    def lower(self, cmd: Command, ident: str, level: int) -> List[Any]:
        t = self.target
        logger.debug("%s: lowering %s (ident=%s, level=%d)", t.name, cmd.name, ident, level)
        out: List[Any] = []

        children = list(cmd.children.items())
        for i, (child_name, child) in enumerate(children):
            if len(children) > 1:
                out.append(t.save_args(ident) if i == 0 else t.restore_args(ident))
            out.extend(self.lower(child, scoped(ident, child_name), level + 1))

        types: Dict[str, str] = {}
        for flag in cmd.flags:
            types[flag.name] = flag.type
            out.append(t.declare_flag(scoped(ident, flag.name), flag.type))
        out.append(t.init_non_matched())

        if cmd.flags:
            out.append(t.flag_loop([
                FlagCase(tuple(flag.tokens()), scoped(ident, flag.name), flag.type)
                for flag in cmd.flags
            ]))
            out.extend(self._dispatch(cmd, ident, types))
        else:
            out.extend(self._defaults(cmd, ident))

        if level > 0:
            out = [t.guard(cmd.name, out)]
        logger.debug("%s: lowered %s into %d statement(s)", t.name, cmd.name, len(out))
        return out

    def _body(self, run: str, ident: str, types: Dict[str, str]) -> List[Any]:
        text = self.resolvers.resolve(run, self.target, ident=ident, flags=types)
        return self.target.call_lines(text) + [self.target.exit()]

    def _defaults(self, cmd: Command, ident: str) -> List[Any]:
        out: List[Any] = []
        for case in cmd.match:
            if not case.applies_to(self.target.name):
                continue
            if not case.is_default:
                logger.debug("%s: skipping %r on %s, no flags declared", self.target.name, case.pattern, cmd.name)
                continue
            out.extend(self._body(case.run, ident, {}))
        return out

    def _dispatch(self, cmd: Command, ident: str, types: Dict[str, str]) -> List[Any]:
        t = self.target
        weighted: List[Tuple[int, Any, List[Any]]] = []
        otherwise: Optional[List[Any]] = None
        for case in cmd.match:
            names = case.names()
            for n in names:
                if n not in types:
                    raise ConfigError.make(
                        "ALX-CFG-0103",
                        f"match pattern names undeclared flag '{n}'",
                        f"declare '{n}' under flags, or fix the pattern",
                        origin=cmd.display_name or cmd.name,
                    )
            if not case.applies_to(t.name):
                continue
            body = self._body(case.run, ident, types)
            if case.is_default:
                otherwise = body
                continue
            cond = t.all_of([t.flag_test(scoped(ident, n), types[n]) for n in names])
            weighted.append((len(names), cond, body))

        # stable: equal weights keep declaration order
        weighted.sort(key=lambda w: w[0], reverse=True)
        if not weighted:
            return otherwise or []
        return [t.if_chain([(cond, body) for _, cond, body in weighted], otherwise)]
