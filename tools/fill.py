"""Regenerate fee fixtures by running the vector tests with --output."""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path
from typing import Optional

import click

ROOT = Path(__file__).resolve().parent.parent


@click.command()
@click.option(
    "--output",
    type=click.Path(file_okay=False, path_type=Path),
    default=ROOT / "fixtures",
    show_default=True,
    help="Directory for the generated JSON fixtures",
)
@click.option("-k", "keyword", default=None, help="Only fill scenarios matching this pytest -k expression")
def main(output: Path, keyword: Optional[str]) -> None:
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(ROOT / "src"), env.get("PYTHONPATH")]))

    cmd = [sys.executable, "-m", "pytest", str(ROOT / "tests" / "test_fee_vectors.py"), "-q", "--output", str(output)]
    if keyword:
        cmd += ["-k", keyword]
    click.echo("Running: " + " ".join(cmd))
    sys.exit(subprocess.call(cmd, env=env, cwd=str(ROOT)))


if __name__ == "__main__":
    main()
