"""Command line entry point that turns GitHub activity into an STL skyline."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from .github import GithubContributions, GithubError
from .stl import create_3d_model

VERSION = "0.0.1"


def _year(text: str) -> int:
    try:
        value = int(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid year: {text!r}") from exc
    if value < 0:
        raise argparse.ArgumentTypeError(f"invalid year: {text!r}")
    return value


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skylineg", description="A CLI app to generate github skyline"
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("-u", "--user", required=True)
    parser.add_argument("-y", "--year", required=True, type=_year)
    parser.add_argument("-r", "--repo", default=None)
    parser.add_argument("-o", "--owner", default=None)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Fetch contributions and write ``<user>_<year>.stl``; return the exit status."""
    args = _parser().parse_args(argv)
    try:
        handle = GithubContributions.from_env()
        if args.repo is None:
            contributions = handle.get_contributions(args.user, args.year)
        else:
            if args.owner is None:
                print("Missing Owner field", file=sys.stderr)
                return 1
            contributions = handle.get_contributions_by_repo(
                args.user, args.owner, args.repo, args.year
            )
    except GithubError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    create_3d_model(args.user, args.year, contributions)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())