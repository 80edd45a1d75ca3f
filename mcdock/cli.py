"""Command-line interface for mcdock."""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

from mcdock.data.io import load_config
from mcdock.pipeline.run import Config, run_docking


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""

    parser = argparse.ArgumentParser(prog="mcdock")
    parser.add_argument("--verbose", action="store_true", help="Log progress to stderr")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Dock a ligand into a receptor")
    run_parser.add_argument("--config", required=True, help="Path to YAML config")
    run_parser.add_argument("--receptor", required=True, help="Path to receptor PDBQT file")
    run_parser.add_argument("--ligand", required=True, help="Path to ligand PDBQT file")
    run_parser.add_argument("--out", required=True, help="Output directory")
    run_parser.add_argument("--seed", type=int, default=None, help="Override the config seed")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint."""

    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "run":
        raw_cfg = load_config(args.config)
        if args.seed is not None:
            raw_cfg["seed"] = args.seed
        cfg = Config(**raw_cfg)
        result = run_docking(cfg, args.receptor, args.ligand, args.out)
        if result.best is not None:
            print(f"best energy: {result.best.e:.4f} ({len(result.results)} poses)")
        return 0

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
