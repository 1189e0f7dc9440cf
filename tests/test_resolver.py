from __future__ import annotations
import dataclasses

import pytest

from aliasc.bash.target import BashTarget
from aliasc.powershell.target import PowerShellTarget
from aliasc.resolver import RESOLVERS, Resolver

BASH = BashTarget()
PS = PowerShellTarget()

CASES = [
    ("positional_1", BASH, "echo {{ $1 }}", 'echo "${args[0]}"'),
    ("positional_tight", BASH, "echo {{$2}}", 'echo "${args[1]}"'),
    ("positional_ps", PS, "echo {{ $1 }}", 'echo "$($args[0])"'),
    ("positional_zero_verbatim", BASH, "echo {{ $0 }}", "echo {{ $0 }}"),
    ("named", BASH, "echo {{ .name }}", "echo ${greet_name}"),
    ("named_ps", PS, "echo {{.name}}", "echo ${greet_name}"),
    ("named_unknown_verbatim", BASH, "echo {{ .other }}", "echo {{ .other }}"),
    ("env", BASH, "cd {{ $env.HOME }}", "cd ${HOME}"),
    ("env_ps", PS, "cd {{ $env.HOME }}", "cd $env:HOME"),
    ("env_any_namespace", BASH, "{{ $os.PATH }}", "${PATH}"),
    ("unknown_form_verbatim", BASH, "echo {{ foo }} {{ $x }}", "echo {{ foo }} {{ $x }}"),
    ("mixed", BASH, "cp {{ $1 }} {{ .name }}/{{ $env.USER }}", 'cp "${args[0]}" ${greet_name}/${USER}'),
]


@pytest.mark.parametrize("case_id,target,raw,expected", CASES, ids=[c[0] for c in CASES])
def test_resolve(case_id, target, raw, expected):
    assert RESOLVERS.resolve(raw, target, ident="greet", flags=["name"]) == expected


def test_named_needs_scope():
    assert RESOLVERS.resolve("echo {{ .name }}", BASH) == "echo {{ .name }}"


def test_named_uses_scoped_identifier():
    out = RESOLVERS.resolve("{{ .dry-run }} {{ .dry_run }}", BASH, ident="tool_build", flags=["dry_run"])
    assert out == "{{ .dry-run }} ${tool_build_dry_run}"


def test_named_with_dash_folds_to_identifier():
    out = RESOLVERS.resolve("echo {{ .dry-run }}", PS, ident="tool_build", flags=["dry-run"])
    assert out == "echo ${tool_build_dry_run}"


def test_substitute_does_not_rescan_values():
    out = RESOLVERS.substitute(
        "{{ $1 }} {{ .a }}",
        index=lambda n: "{{ .a }}",
        named=lambda name: "{{ $env.HOME }}",
        env=lambda var: "never",
    )
    assert out == "{{ .a }} {{ $env.HOME }}"


def test_resolver_keeps_match_when_repl_declines():
    r = Resolver.compile(r"<(\w+)>")
    assert r.apply("<a> <b>", lambda m: "A" if m == "a" else None) == "A <b>"


def test_resolvers_are_shared_values():
    with pytest.raises(dataclasses.FrozenInstanceError):
        RESOLVERS.index = RESOLVERS.env
