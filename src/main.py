# src/main.py — v1
"""CLI entry point — grade, match, summary, cache commands.

Usage:
    examgrader grade <paths...> --rubric rubric.json [--roster roster.csv] [-o results.csv]
    examgrader match <name> --roster roster.csv
    examgrader summary <results.csv>
    examgrader cache {info,clear}
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from examgrader.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="examgrader",
        description=f"examgrader v{__version__} — Handwritten exam grading assistant",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- grade ---
    p_grade = subparsers.add_parser(
        "grade", help="Grade submission images",
    )
    p_grade.add_argument(
        "paths", type=Path, nargs="+",
        help="Page files, or directories (sub-directories are multi-page submissions)",
    )
    p_grade.add_argument(
        "-r", "--rubric", type=Path, required=True,
        help="Rubric JSON (description, max_score or maxScore, strictness, language, reference_file)",
    )
    p_grade.add_argument(
        "--roster", type=Path, default=None,
        help="Roster CSV with id,name columns for student matching",
    )
    p_grade.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Write results CSV to this path",
    )
    p_grade.set_defaults(func=_cmd_grade)

    # --- match ---
    p_match = subparsers.add_parser(
        "match", help="Match a transcribed name against a roster",
    )
    p_match.add_argument("name", help="Name as read from the exam sheet")
    p_match.add_argument(
        "--roster", type=Path, required=True,
        help="Roster CSV with id,name columns",
    )
    p_match.set_defaults(func=_cmd_match)

    # --- summary ---
    p_summary = subparsers.add_parser(
        "summary", help="Summarize a results CSV",
    )
    p_summary.add_argument("results", type=Path, help="Results CSV from 'grade -o'")
    p_summary.set_defaults(func=_cmd_summary)

    # --- cache ---
    p_cache = subparsers.add_parser(
        "cache", help="Inspect or clear the grading result cache",
    )
    p_cache.add_argument("action", choices=["info", "clear"])
    p_cache.set_defaults(func=_cmd_cache)

    return parser


def load_rubric(path: Path):
    """Read a rubric JSON file into a RubricConfig.

    ``reference_file`` is resolved relative to the rubric file.
    """
    from examgrader.batch.scanner import detect_media_type
    from examgrader.core.models import ReferenceDocument, RubricConfig

    data = json.loads(path.read_text(encoding="utf-8"))
    reference_file = data.pop("reference_file", None)
    if reference_file:
        ref_path = Path(reference_file)
        if not ref_path.is_absolute():
            ref_path = path.parent / ref_path
        media_type = detect_media_type(ref_path) or "application/octet-stream"
        data["reference"] = ReferenceDocument(
            data=ref_path.read_bytes(),
            media_type=media_type,
            display_name=ref_path.name,
        )
    return RubricConfig(**data)


async def _cmd_grade(args: argparse.Namespace) -> int:
    """Grade submissions and print a per-submission report."""
    from examgrader.batch.grader import BatchGrader
    from examgrader.batch.roster import load_roster_csv
    from examgrader.batch.scanner import load_submissions
    from examgrader.cache.cache_factory import create_result_store
    from examgrader.config.settings import Settings
    from examgrader.grading.credentials import CredentialPool
    from examgrader.grading.gemini_backend import GeminiGradingBackend
    from examgrader.grading.grading_cache import GradingCache
    from examgrader.logging.logger import setup_logging_from_settings
    from examgrader.reporting.exporter import export_results_csv

    settings = Settings()
    setup_logging_from_settings(settings, verbose=args.verbose)

    if not args.rubric.exists():
        logger.error("Rubric not found: %s", args.rubric)
        return 1
    rubric = load_rubric(args.rubric)
    roster = load_roster_csv(args.roster) if args.roster else []

    submissions = load_submissions(args.paths)
    if not submissions:
        logger.error("No submissions found")
        return 1

    store = create_result_store(settings)
    try:
        cache = GradingCache(
            store=store,
            credentials=CredentialPool.from_settings(settings),
            max_entries=settings.cache_max_entries,
        )
        backend = GeminiGradingBackend(
            model=settings.gemini_model, temperature=settings.gemini_temperature,
        )
        grader = BatchGrader(
            cache, backend, roster=roster, match_options=_match_options(settings),
        )
        batch_result = await grader.grade_pending(submissions, rubric)
    finally:
        store.close()

    for sub in submissions:
        if sub.result is not None:
            matched = f" -> {sub.matched_student_id}" if sub.matched_student_id else ""
            print(
                f"  {sub.file_name:30s} {sub.result.score:g}/{sub.result.max_score:g}  "
                f"{sub.result.student_name}{matched}"
            )
        else:
            print(f"  {sub.file_name:30s} ERROR: {sub.error}")

    print(f"\nBatch complete:")
    print(f"  Completed:    {batch_result.completed}")
    print(f"  Failed:       {batch_result.failed}")
    print(f"  Cache hits:   {batch_result.cache_hits}")
    print(f"  Duration:     {batch_result.duration_seconds:.1f}s")

    if args.output:
        export_results_csv(submissions, args.output, rubric.max_score)
        print(f"  Results:      {args.output}")

    return 0 if batch_result.failed == 0 else 1


async def _cmd_match(args: argparse.Namespace) -> int:
    """Print the roster id matching a name."""
    from examgrader.batch.roster import load_roster_csv
    from examgrader.config.settings import Settings
    from examgrader.matching.name_matcher import find_best_match

    settings = Settings()
    roster = load_roster_csv(args.roster)
    matched = find_best_match(args.name, roster, **_match_options(settings))
    if matched is None:
        print(f"No confident match for {args.name!r}", file=sys.stderr)
        return 1
    print(matched)
    return 0


async def _cmd_summary(args: argparse.Namespace) -> int:
    """Display statistics for a results CSV."""
    from examgrader.reporting.exporter import export_summary_text, load_results_csv
    from examgrader.reporting.summary import summarize

    if not args.results.is_file():
        logger.error("Results file not found: %s", args.results)
        return 1
    rows = load_results_csv(args.results)
    print(export_summary_text(summarize(rows), rows))
    return 0


async def _cmd_cache(args: argparse.Namespace) -> int:
    """Show or clear the grading result cache."""
    from examgrader.cache.cache_factory import create_result_store
    from examgrader.config.settings import Settings
    from examgrader.grading.credentials import CredentialPool
    from examgrader.grading.grading_cache import GradingCache

    settings = Settings()
    store = create_result_store(settings)
    try:
        cache = GradingCache(
            store=store,
            credentials=CredentialPool.from_settings(settings),
            max_entries=settings.cache_max_entries,
        )

        if args.action == "clear":
            print(f"Removed {cache.clear()} cached results")
            return 0

        print(f"\nGrading cache:")
        print(f"  Backend:  {store.backend_name}")
        print(f"  Root:     {settings.cache_root}")
        print(f"  Entries:  {len(cache)}")
        limit = settings.cache_max_entries or "unbounded"
        print(f"  Limit:    {limit}")
        return 0
    finally:
        store.close()


def _match_options(settings) -> dict[str, float | int]:
    return {
        "match_threshold": settings.match_threshold,
        "min_token_length": settings.match_min_token_length,
        "max_edit_distance": settings.match_max_edit_distance,
    }


def _setup_logging(verbose: bool) -> None:
    """Console logging until settings are loaded."""
    from examgrader.logging.logger import setup_logging

    setup_logging(level="DEBUG" if verbose else "INFO", log_format="text")


if __name__ == "__main__":
    sys.exit(main())
