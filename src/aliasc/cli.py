from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import config_name, load_workspace
from .diagnostics import AliascError
from .runner import check_script_names, run_script
from .templates import save_template, template_path
from .workspace import clean, generate

LOG_FORMAT = "%(levelname)s - %(name)s - %(message)s"


def _parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="aliasc", description="Generate bash and PowerShell command wrappers from aliax.yaml.")
    p.add_argument("--verbose", action="store_true", help="Debug logging")
    p.add_argument("--config", default=None, help="Configuration file (default: aliax.work target or aliax.yaml)")
    sub = p.add_subparsers(dest="cmd", required=True)

    init = sub.add_parser("init", help="Generate scripts for every extension and command")
    init.add_argument("--force", action="store_true", help="Overwrite existing scripts and links")
    init.add_argument("-t", "--template", default=None, metavar="NAME", help="Generate from a saved template instead of the local configuration")
    init.add_argument("-s", "--save", action="store_true", help="Save the configuration used as a template")

    sub.add_parser("clean", help="Remove generated scripts and links")

    run = sub.add_parser("run", help="Run a workspace script")
    run.add_argument("name", help="Script name")
    run.add_argument("--dry", action="store_true", help="Print the resolved script instead of running it")
    run.add_argument("args", nargs=argparse.REMAINDER, help="Arguments for {{ $N }} placeholders")
    return p


def main(argv: list[str] | None = None) -> int:
    args = _parser().parse_args(argv)
    logging.basicConfig(format=LOG_FORMAT, level=logging.DEBUG if args.verbose else logging.INFO)

    template = getattr(args, "template", None)
    try:
        path = Path(args.config) if args.config else config_name()
        # a template is generated into the current directory, not next to itself
        root = Path.cwd() if template else path.resolve().parent
        if template:
            path = template_path(template)
        ws = load_workspace(path)
        check_script_names(ws)
        if args.cmd == "init":
            if args.save:
                save_template(path)
            report = generate(ws, root, force=args.force)
            print(f"OK. scripts={len(report.scripts)} links={len(report.links)}")
        elif args.cmd == "clean":
            n = clean(ws, root)
            print(f"OK. removed={n}")
        else:
            body = run_script(ws, args.name, args.args, dry=args.dry)
            if args.dry:
                print(body)
        return 0
    except AliascError as e:
        print(f"ERROR: {e.diag.render()}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
