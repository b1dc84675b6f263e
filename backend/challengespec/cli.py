"""Command line entry point: ``challengespec FILE``."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .validator import ValidationEngine


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="challengespec",
        description="Validate a challenge scoring definition file.",
    )
    parser.add_argument("file", type=Path, help="Challenge file (.xml, .yaml, .yml or .json)")
    parser.add_argument("--schema", type=Path, default=None, help="Local XSD for XML files")
    parser.add_argument("--strict", action="store_true", help="Fail on warnings too")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument(
        "--max-percentage-missions",
        type=int,
        default=1,
        help="Number of missions allowed to use percentage scoring",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Log progress")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    engine = ValidationEngine(
        max_percentage_missions=args.max_percentage_missions,
        schema_path=args.schema,
    )
    result = engine.validate_file(args.file, strict=args.strict)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        for diagnostic in result.collector.diagnostics:
            print(diagnostic)
        if result.valid:
            print("Challenge file ok")
        elif result.total_errors:
            print(f"Total of {result.total_errors} errors found in challenge")
        else:
            print(f"Total of {result.total_warnings} warnings found in challenge (strict)")

    return 0 if result.valid else 1


if __name__ == "__main__":
    sys.exit(main())
