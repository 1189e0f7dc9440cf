from __future__ import annotations
import pytest
import yaml

from aliasc.bash.target import BashTarget, heredoc_delimiter
from aliasc.builder import ScriptBuilder
from aliasc.config import parse_command
from aliasc.diagnostics import ConfigError
from aliasc.powershell.target import PowerShellTarget

BASH = BashTarget()
PS = PowerShellTarget()


def command(name: str, doc: str, *, help: bool = True):
    c = parse_command(name, yaml.safe_load(doc))
    c.preload(name, inject_help=help)
    return c


def render(target, cmd) -> str:
    b = ScriptBuilder(target)
    return b.render(b.build_command(cmd))


GREET = """
flags:
  - name: name
    alias: -n
    type: string
match:
  - pattern: name
    run: echo hello {{ .name }}
"""

GREET_HELP = """\
cat <<'EOF'
Usage:
  greet [flags]

Flags:
  -n string
  -h, --help   help for greet
EOF
exit
"""


def test_greet_bash_golden():
    assert render(BASH, command("greet", GREET)) == """\
#!/bin/bash
# Code generated by aliasc. DO NOT EDIT.
set -e
args=("$@")
greet_name=""
greet_help=false
non_matched_args=()
for ((i=0; i<${#args[@]}; i++)); do
  case "${args[i]}" in
    -n)
      greet_name="${args[i+1]}"
      ((++i))
      ;;
    -h|--help)
      greet_help=true
      ;;
    *)
      non_matched_args+=("${args[i]}")
      ;;
  esac
done
if [[ -n "$greet_name" ]]; then
  echo hello ${greet_name}
  exit
fi
""" + GREET_HELP


def test_greet_powershell_golden():
    assert render(PS, command("greet", GREET)) == """\
# Code generated by aliasc. DO NOT EDIT.
$greet_name = $null
$greet_help = $false
$non_matched_args = @()
for ($i = 0; $i -lt $args.Length; $i++) {
  switch -regex ($args[$i]) {
    '^(?:-n)$' {
      $greet_name = $args[$i + 1]
      $i++
    }
    '^(?:-h|--help)$' {
      $greet_help = $true
    }
    default {
      $non_matched_args += $args[$i]
    }
  }
}
if ($null -ne $greet_name) {
  echo hello ${greet_name}
  exit
}
Write-Host "Usage:
  greet [flags]

Flags:
  -n string
  -h, --help   help for greet"
exit
"""


def test_extension_without_flags_forwards_everything():
    grep = command("grep", "bin: /usr/bin/grep", help=False)
    b = ScriptBuilder(BASH)
    assert b.render(b.build_extension(grep, "executable", "/usr/bin/grep")) == """\
#!/bin/bash
# Code generated by aliasc. DO NOT EDIT.
set -e
args=("$@")
executable="/usr/bin/grep"
non_matched_args=()
"$executable" "${args[@]}"
"""
    p = ScriptBuilder(PS)
    assert p.render(p.build_extension(grep, "executable", "/usr/bin/grep")) == """\
# Code generated by aliasc. DO NOT EDIT.
$executable = "/usr/bin/grep"
$non_matched_args = @()
& $executable $args
"""


def test_extension_with_flags_forwards_unmatched():
    ext = command("git", """
flags:
  - name: amend
    alias: --amend-all
match:
  - pattern: amend
    run: git add -A && git commit --amend
""", help=False)
    b = ScriptBuilder(BASH)
    text = b.render(b.build_extension(ext, "exe", "git"))
    assert 'exe="git"' in text
    assert text.endswith('"$exe" "${non_matched_args[@]}"\n')
    p = ScriptBuilder(PS)
    assert p.render(p.build_extension(ext, "exe", "git")).endswith("& $exe $non_matched_args\n")


TWO_BOOLS = """
disableHelp: true
flags:
  - name: a
    alias: -a
  - name: b
    alias: -b
match:
  - pattern: a
    run: echo a
  - pattern: [a, b]
    run: echo both
"""


def test_weight_orders_branches():
    text = render(BASH, command("greet", TWO_BOOLS))
    assert (
        "if [[ $greet_a == true && $greet_b == true ]]; then\n"
        "  echo both\n"
        "  exit\n"
        "elif [[ $greet_a == true ]]; then\n"
        "  echo a\n"
        "  exit\n"
        "fi\n"
    ) in text
    ps = render(PS, command("greet", TWO_BOOLS))
    assert "if ($greet_a -ne $false -and $greet_b -ne $false) {" in ps
    assert ps.index("echo both") < ps.index("echo a")


def test_equal_weights_keep_declaration_order():
    # ties are broken by declaration order only; pin it down
    cmd = command("t", """
disableHelp: true
flags: [{name: x}, {name: y}, {name: z}]
match:
  - {pattern: y, run: echo y}
  - {pattern: [x, y], run: echo xy}
  - {pattern: x, run: echo x}
  - {pattern: [y, z], run: echo yz}
""")
    text = render(BASH, cmd)
    order = [text.index(f"echo {s}\n") for s in ("xy", "yz", "y", "x")]
    assert order == sorted(order)


def test_default_case_becomes_else():
    cmd = command("t", """
disableHelp: true
flags: [{name: v, alias: -v}]
match:
  - {pattern: "", run: echo default}
  - {pattern: v, run: echo verbose}
""")
    text = render(BASH, cmd)
    assert "elif" not in text
    assert "  echo verbose\n  exit\nelse\n  echo default\n  exit\nfi\n" in text


def test_default_only_with_flags_is_unconditional():
    cmd = command("t", """
flags: [{name: v}]
match:
  - {run: echo always}
""")
    text = render(BASH, cmd)
    assert "done\necho always\nexit\n" in text


def test_no_flags_path_keeps_defaults_only():
    cmd = command("t", """
disableHelp: true
match:
  - {pattern: v, run: echo unreachable}
  - {pattern: _, run: "echo one\\necho two"}
""")
    text = render(BASH, cmd)
    assert "for ((" not in text
    assert "unreachable" not in text
    assert text.endswith("non_matched_args=()\necho one\necho two\nexit\n")


def test_platform_filter():
    cmd = command("t", """
disableHelp: true
flags: [{name: v}]
match:
  - {pattern: v, platform: powershell, run: Write-Output ps}
  - {pattern: v, platform: bash, run: echo sh}
  - {platform: powershell, run: Write-Output default}
""")
    bash = render(BASH, cmd)
    assert "Write-Output" not in bash and "echo sh" in bash
    ps = render(PS, cmd)
    assert "echo sh" not in ps
    assert "} else {\n  Write-Output default\n  exit\n}" in ps


def test_undeclared_pattern_flag():
    cmd = command("t", """
flags: [{name: v}]
match:
  - {pattern: [v, missing], run: echo x}
""")
    with pytest.raises(ConfigError) as ei:
        render(BASH, cmd)
    assert ei.value.diag.code == "ALX-CFG-0103"
    assert "missing" in ei.value.diag.message


TOOL = """
command:
  build:
    flags: [{name: verbose, alias: --verbose}]
    match:
      - {pattern: verbose, run: echo verbose build}
      - {run: echo build}
  test:
    flags: [{name: verbose, alias: --verbose}]
    match:
      - {pattern: verbose, run: echo verbose test}
"""


def test_children_are_guarded_and_args_restored():
    text = render(BASH, command("tool", TOOL))
    assert text.index('temp_args_tool=("${args[@]}")') < text.index('if [[ ${args[0]} == "build" ]]; then')
    assert 'if [[ ${args[0]} == "build" ]]; then\n  args=("${args[@]:1}")\n  tool_build_verbose=false\n' in text
    restore = text.index('args=("${temp_args_tool[@]}")')
    assert text.index('== "build"') < restore < text.index('== "test"')
    ps = render(PS, command("tool", TOOL))
    assert 'if ($args[0] -eq "build") {\n  $args = $args[1..$args.Length]\n' in ps
    assert "$temp_args_tool = $args" in ps
    assert "$args = $temp_args_tool" in ps


def test_sibling_flags_do_not_collide():
    text = render(BASH, command("tool", TOOL))
    assert "tool_build_verbose=false" in text
    assert "tool_test_verbose=false" in text
    assert "[[ $tool_build_verbose == true ]]" in text
    assert "[[ $tool_test_verbose == true ]]" in text


def test_single_child_needs_no_saved_args():
    text = render(BASH, command("tool", "command: {build: {match: [{run: echo b}]}}"))
    assert "temp_args" not in text
    assert '== "build" ]]; then\n  args=("${args[@]:1}")\n  non_matched_args=()\n  echo b\n  exit\nfi\n' in text


def test_nested_children_use_path_identifiers():
    cmd = command("tool", """
command:
  db:
    command:
      migrate-up:
        flags: [{name: dry-run, alias: --dry-run}]
        match: [{pattern: dry-run, run: "echo {{ .dry-run }}"}]
""")
    text = render(BASH, cmd)
    assert "tool_db_migrate_up_dry_run=false" in text
    assert '\n  if [[ ${args[0]} == "migrate-up" ]]; then\n' in text
    assert "echo ${tool_db_migrate_up_dry_run}\n" in text
    assert "{{" not in text


def test_help_only_at_root():
    text = render(BASH, command("tool", TOOL))
    assert text.count("cat <<'EOF'") == 1
    assert text.endswith("EOF\nexit\n")
    assert "  build\n" in text and "  test\n" in text


def test_help_delimiter_avoids_help_lines():
    assert heredoc_delimiter("Usage:\n  t") == "EOF"
    assert heredoc_delimiter("EOF\nEOF_\n EOF") == "EOF__"
    text = render(BASH, command("t", "long: \"before\\nEOF\\nafter\"\n"))
    assert "cat <<'EOF_'\nbefore\nEOF\nafter\n" in text
    assert text.endswith("\nEOF_\nexit\n")


def test_disabled_help_has_no_trailer():
    text = render(BASH, command("t", "disableHelp: true"))
    assert "cat <<" not in text
    assert text.endswith("non_matched_args=()\n")


def test_alias_metacharacters_are_escaped():
    cmd = command("t", "disableHelp: true\nflags: [{name: q, alias: ['-?', --a.b]}]")
    assert "    -\\?|--a\\.b)\n" in render(BASH, cmd)
    assert "'^(?:-\\?|--a\\.b)$' {" in render(PS, cmd)


def test_positional_and_env_placeholders():
    cmd = command("t", """
disableHelp: true
match: [{run: "cp {{ $1 }} {{ $env.HOME }}"}]
""")
    assert 'cp "${args[0]}" ${HOME}\n' in render(BASH, cmd)
    assert 'cp "$($args[0])" $env:HOME\n' in render(PS, cmd)


def test_unknown_placeholder_passes_through():
    cmd = command("t", "disableHelp: true\nmatch: [{run: 'echo {{ .nope }} {{ weird }}'}]")
    assert "echo {{ .nope }} {{ weird }}\n" in render(BASH, cmd)


@pytest.mark.parametrize("target", [BASH, PS], ids=["bash", "powershell"])
def test_generation_is_idempotent(target):
    first = render(target, command("tool", TOOL))
    second = render(target, command("tool", TOOL))
    assert first == second
