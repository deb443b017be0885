"""Main orchestration script for generating MDX API reference documentation."""

import argparse
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path

from jsdoc_mdx.load_config import load_config


def run_command(cmd_list: Sequence[str | Path], cwd: Path | str | None = None) -> None:
    """Run a command and exit if it fails."""
    cmd_str = " ".join(str(x) for x in cmd_list)
    print(f"Running: {cmd_str}")
    try:
        subprocess.run(cmd_list, check=True, cwd=cwd)
    except subprocess.CalledProcessError as e:
        print(f"Error executing command: {cmd_str}")
        sys.exit(e.returncode)


def main() -> None:
    """Generate documentation for one configured package or for all of them."""
    parser = argparse.ArgumentParser(
        description="Generate MDX API reference pages for configured packages."
    )
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument(
        "--package",
        "-p",
        help="Package key to generate",
    )
    target.add_argument(
        "--all",
        action="store_true",
        help="Generate every package in the configuration file",
    )
    parser.add_argument(
        "--config",
        default="api-docs.yml",
        help="Path to configuration file",
    )
    parser.add_argument(
        "--docs-root",
        default=".",
        help="Docs site root holding output pages and the navigation manifest",
    )
    parser.add_argument(
        "--strategy",
        help="Output strategy override (components or pages)",
    )
    parser.add_argument(
        "--no-nav",
        action="store_true",
        help="Do not update the navigation manifest",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Extract and render without writing files",
    )
    args = parser.parse_args()

    packages = [args.package] if args.package else list(load_config(args.config)["packages"])
    if not packages:
        print(f"No packages configured in {args.config}")
        sys.exit(1)

    # Using the current python interpreter
    python_exe = sys.executable

    for i, package in enumerate(packages, start=1):
        print(f"--- Step {i}: Generating {package} ---")
        cmd = [
            python_exe,
            "-m",
            "jsdoc_mdx.generate_api_docs",
            "--package",
            package,
            "--config",
            args.config,
            "--docs-root",
            args.docs_root,
        ]
        if args.strategy:
            cmd.extend(["--strategy", args.strategy])
        if args.no_nav:
            cmd.append("--no-nav")
        if args.dry_run:
            cmd.append("--dry-run")
        run_command(cmd)

    print(f"\nSUCCESS: Documentation generated for {', '.join(packages)}")


if __name__ == "__main__":
    main()
