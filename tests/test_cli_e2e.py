from __future__ import annotations
from pathlib import Path
import os
import subprocess
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]

CONFIG = """
command:
  greet:
    short: Say hello
    flags: [{name: name, alias: -n, type: string}]
    match: [{pattern: name, run: "echo hello {{ .name }}"}]
script:
  hi: "echo hi {{ $1 }}"
"""


def run_aliasc(args, cwd: Path, extra_env=None):
    cmd = [sys.executable, "-m", "aliasc"] + args
    env = {**os.environ, "PYTHONPATH": str(REPO_ROOT / "src"), **(extra_env or {})}
    return subprocess.run(cmd, cwd=cwd, env=env, capture_output=True, text=True)


def test_init_and_clean(tmp_path: Path):
    (tmp_path / "aliax.yaml").write_text(CONFIG, encoding="utf-8")
    p = run_aliasc(["init"], tmp_path)
    assert p.returncode == 0, p.stderr
    assert p.stdout.strip() == "OK. scripts=2 links=1"
    assert (tmp_path / "run-scripts" / "greet.sh").exists()
    assert (tmp_path / "run-scripts" / "greet.ps1").exists()

    again = run_aliasc(["init"], tmp_path)
    assert again.returncode == 2
    assert "ERROR: ALX-IO-0001" in again.stderr
    assert run_aliasc(["init", "--force"], tmp_path).returncode == 0

    c = run_aliasc(["clean"], tmp_path)
    assert c.returncode == 0
    assert c.stdout.strip() == "OK. removed=3"


def test_config_flag_and_work_file(tmp_path: Path):
    (tmp_path / "custom.yaml").write_text(CONFIG, encoding="utf-8")
    (tmp_path / "aliax.work").write_text("custom.yaml\n", encoding="utf-8")
    assert run_aliasc(["init"], tmp_path).returncode == 0
    other = tmp_path / "elsewhere"
    other.mkdir()
    p = run_aliasc(["--config", str(tmp_path / "custom.yaml"), "init", "--force"], other)
    assert p.returncode == 0, p.stderr
    assert not (other / "run-scripts").exists()


def test_invalid_config(tmp_path: Path):
    (tmp_path / "aliax.yaml").write_text("command:\n  greet:\n    flags: [{type: int}]\n", encoding="utf-8")
    p = run_aliasc(["init"], tmp_path)
    assert p.returncode == 2
    assert "ERROR: ALX-CFG-0001" in p.stderr
    assert "hint:" in p.stderr


def test_missing_config(tmp_path: Path):
    p = run_aliasc(["init"], tmp_path)
    assert p.returncode == 2
    assert "ALX-IO-0003" in p.stderr


def test_run_dry(tmp_path: Path):
    (tmp_path / "aliax.yaml").write_text(CONFIG, encoding="utf-8")
    p = run_aliasc(["run", "--dry", "hi", "there"], tmp_path)
    assert p.returncode == 0, p.stderr
    assert p.stdout.strip().startswith("echo hi")
    assert "there" in p.stdout


def test_run_unknown_script(tmp_path: Path):
    (tmp_path / "aliax.yaml").write_text(CONFIG, encoding="utf-8")
    p = run_aliasc(["run", "nope"], tmp_path)
    assert p.returncode == 2
    assert "ALX-RUN-0001" in p.stderr


def test_init_save_then_template(tmp_path: Path):
    home = tmp_path / "home"
    src = tmp_path / "src"
    src.mkdir()
    (src / "aliax.yaml").write_text(CONFIG, encoding="utf-8")
    env_home = {"ALIASC_HOME": str(home)}
    saved = run_aliasc(["init", "--save"], src, env_home)
    assert saved.returncode == 0, saved.stderr
    assert (home / "templates" / "aliax.yaml").exists()

    dst = tmp_path / "dst"
    dst.mkdir()
    p = run_aliasc(["init", "--template", "aliax"], dst, env_home)
    assert p.returncode == 0, p.stderr
    assert p.stdout.strip() == "OK. scripts=2 links=1"
    assert (dst / "run-scripts" / "greet.ps1").exists()
