#!/usr/bin/env python3
"""
CO2DE Meter - CLI entry point.
Estimates energy and carbon for source files using static analysis.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from co2de_meter import rules
from co2de_meter.calculator import make_source_unit
from co2de_meter.classifier import LanguageClassifier
from co2de_meter.config import get_settings
from co2de_meter.errors import Co2deError
from co2de_meter.integrations import build_providers, get_max_cyclomatic_complexity
from co2de_meter.pipeline import AnalysisPipeline, read_source
from co2de_meter.projections import DEFAULT_EXECUTIONS_PER_DAY
from co2de_meter.report import ReportGenerator
from co2de_meter.review import ReviewSynthesizer

logger = logging.getLogger("co2de_meter")


def _collect_files(path: Path) -> List[Path]:
    """A single file, or every file under a directory with a known extension."""
    if path.is_file():
        return [path]
    classifier = LanguageClassifier()
    return sorted(p for p in path.rglob("*") if p.is_file() and classifier.is_known(p.name))


def _radon_extra(paths: List[Path]) -> dict:
    """Max cyclomatic complexity across Python sources, when any."""
    values = []
    for p in paths:
        if p.suffix == ".py":
            cc = get_max_cyclomatic_complexity(p.read_text(encoding="utf-8", errors="replace"))
            if cc is not None:
                values.append(cc)
    if not values:
        return {}
    return {"Cyclomatic Complexity (radon, max)": max(values)}


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="CO2DE Meter - energy and carbon estimation for source code"
    )
    parser.add_argument(
        "path",
        nargs="?",
        default="-",
        help="File or directory to analyze (default: stdin)",
    )
    parser.add_argument(
        "--filename",
        default="stdin.js",
        help="File name used to classify stdin input (default: stdin.js)",
    )
    parser.add_argument(
        "-o", "--output-format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="output_json",
        help="Shortcut for -o json",
    )
    parser.add_argument(
        "--region",
        default=settings.default_region,
        help=f"Grid region: {', '.join(rules.REGIONS)} (default: {settings.default_region})",
    )
    parser.add_argument(
        "--hardware",
        default=settings.default_hardware,
        help=f"Hardware class: {', '.join(rules.HARDWARE_PROFILES)} (default: {settings.default_hardware})",
    )
    parser.add_argument(
        "--hour",
        type=int,
        default=None,
        help="Local hour (0-23) for the grid intensity adjustment (default: now)",
    )
    parser.add_argument(
        "--review",
        action="store_true",
        help="Ask the configured external reviewer (OPENROUTER_API_KEY) for the review",
    )
    parser.add_argument(
        "--no-fallback",
        action="store_true",
        help="Fail instead of using the deterministic review when the reviewer is unavailable",
    )
    parser.add_argument(
        "--executions-per-day",
        type=int,
        default=DEFAULT_EXECUTIONS_PER_DAY,
        help=f"Executions per day for carbon projections (default: {DEFAULT_EXECUTIONS_PER_DAY})",
    )
    parser.add_argument(
        "--jobs",
        type=int,
        default=4,
        help="Parallel workers for directory analysis (default: 4)",
    )
    parser.add_argument(
        "--radon",
        action="store_true",
        help="Include cyclomatic complexity of Python files via Radon",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Debug logging",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.output_json:
        args.output_format = "json"

    providers = build_providers(get_settings()) if args.review else []
    if args.review and not providers:
        logger.warning("Reviewer not configured (OPENROUTER_API_KEY unset)")
    synthesizer = ReviewSynthesizer(providers, allow_fallback=not args.no_fallback)
    pipeline = AnalysisPipeline(synthesizer=synthesizer, max_workers=max(1, args.jobs))
    env = {"region": args.region, "hardware": args.hardware, "local_hour": args.hour}

    extra = {}
    try:
        if args.path == "-":
            unit = make_source_unit(args.filename, sys.stdin.read())
            result = pipeline.run(unit, **env)
        else:
            path = Path(args.path)
            if not path.exists():
                print(f"Error: path not found: {path}", file=sys.stderr)
                return 1
            files = _collect_files(path)
            if not files:
                print(f"Error: no source files found under {path}", file=sys.stderr)
                return 1
            units = [read_source(f) for f in files]
            if len(units) == 1:
                result = pipeline.run(units[0], **env)
            else:
                result = pipeline.run_many(units, **env)
            if args.radon:
                extra = _radon_extra(files)
    except (Co2deError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if result is None:
        return 1

    if args.output_format == "json":
        data = ReportGenerator.to_dict(result, executions_per_day=args.executions_per_day)
        if extra:
            data["extra"] = extra
        print(json.dumps(data, indent=2))
    else:
        print(ReportGenerator.text(result, executions_per_day=args.executions_per_day, extra=extra))

    return 0


if __name__ == "__main__":
    sys.exit(main())
