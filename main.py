"""CLI entry point for the internship recommendation engine."""

import argparse
import asyncio
import json
import logging
import sys

from internmatch.core.config import Settings
from internmatch.core.db import get_test_history, init_db, record_test_result, upsert_profile
from internmatch.core.errors import RecommendationError
from internmatch.llm import available_providers, get_provider
from internmatch.pipeline.orchestrator import (
    export_results_json,
    get_internship_detail,
    get_recommendations,
)
from internmatch.profile.quiz import QuizSubmission, grade_quiz
from internmatch.profile.schema import CandidateProfile
from internmatch.sources.catalog import JsonCatalog
from internmatch.sources.profiles import SQLiteProfileStore


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Internship recommendation engine - rank internships for a candidate",
    )
    parser.add_argument(
        "--config",
        default="config/settings.yaml",
        help="Path to settings YAML file (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- recommend ---
    recommend_parser = subparsers.add_parser("recommend", help="Rank internships for a candidate")
    recommend_parser.add_argument("--candidate-id", required=True, help="Candidate to rank for")
    recommend_parser.add_argument(
        "--no-ai",
        action="store_true",
        help="Skip the AI re-rank pass even if a provider is configured",
    )
    recommend_parser.add_argument(
        "--export",
        choices=["json"],
        help="Export results to format (json)",
    )
    recommend_parser.add_argument(
        "--provider",
        choices=available_providers(),
        help="AI provider for the re-rank pass (default: ai.provider from settings)",
    )

    # --- detail ---
    detail_parser = subparsers.add_parser(
        "detail",
        help="Show the score breakdown of one internship for a candidate",
    )
    detail_parser.add_argument("--candidate-id", required=True)
    detail_parser.add_argument("--internship-id", required=True)

    # --- import-profile ---
    import_parser = subparsers.add_parser(
        "import-profile",
        help="Store a candidate profile from a YAML file",
    )
    import_parser.add_argument("--profile", required=True, help="Path to profile YAML")

    # --- submit-quiz ---
    quiz_parser = subparsers.add_parser(
        "submit-quiz",
        help="Grade a skill quiz submission and record the score",
    )
    quiz_parser.add_argument("--candidate-id", required=True)
    quiz_parser.add_argument(
        "--submission",
        required=True,
        help='Path to JSON with "questions", "answers" and optional "autoSubmitted"/"reason"',
    )

    # --- quiz-history ---
    history_parser = subparsers.add_parser(
        "quiz-history",
        help="List recorded skill quiz attempts for a candidate",
    )
    history_parser.add_argument("--candidate-id", required=True)

    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def cmd_recommend(args: argparse.Namespace, settings: Settings) -> None:
    """Handle recommend subcommand."""
    conn = init_db(settings.database.path)
    try:
        provider = None
        if settings.ai.enabled and not args.no_ai:
            provider = get_provider(args.provider or settings.ai.provider)

        result = asyncio.run(get_recommendations(
            args.candidate_id,
            SQLiteProfileStore(conn),
            JsonCatalog(settings.catalog.path),
            settings,
            provider=provider,
        ))
    finally:
        conn.close()

    if args.export == "json":
        print(export_results_json(result))
        return

    print(f"{len(result.recommendations)} recommendations ({result.source}):")
    for i, rec in enumerate(result.recommendations, start=1):
        p = rec.posting
        print(f"  {i}. [{rec.match_score}] {p.title} at {p.company} ({p.id})")
        for reason in rec.reasons:
            print(f"       - {reason}")
        print(f"       {rec.ai_insight}")


def cmd_detail(args: argparse.Namespace, settings: Settings) -> None:
    """Handle detail subcommand."""
    conn = init_db(settings.database.path)
    try:
        detail = get_internship_detail(
            args.candidate_id,
            args.internship_id,
            SQLiteProfileStore(conn),
            JsonCatalog(settings.catalog.path),
            settings,
        )
    finally:
        conn.close()

    b = detail.score_breakdown
    print(f"{detail.posting.title} at {detail.posting.company}: match {detail.match_score}")
    print(f"  Skills {b.skills}/50, Sectors {b.sectors}/15, Education {b.education}/15, "
          f"Location {b.location}/10, Test {b.test}/10, Recency {b.recency}/5 "
          f"(total {b.total})")
    for reason in detail.reasons:
        print(f"  - {reason}")
    print(f"  {detail.ai_insight}")


def cmd_import_profile(args: argparse.Namespace, settings: Settings) -> None:
    """Handle import-profile subcommand."""
    profile = CandidateProfile.from_yaml(args.profile)
    conn = init_db(settings.database.path)
    try:
        upsert_profile(conn, profile)
    finally:
        conn.close()
    print(f"Profile stored for {profile.candidate_id}")
    print(f"  Skills: {profile.skills}")
    print(f"  Sectors: {profile.interested_sectors}")


def cmd_submit_quiz(args: argparse.Namespace, settings: Settings) -> None:
    """Handle submit-quiz subcommand."""
    with open(args.submission, encoding="utf-8") as f:
        submission = QuizSubmission.model_validate(json.load(f))

    result = grade_quiz(submission.questions, submission.answers)

    conn = init_db(settings.database.path)
    try:
        stored = record_test_result(
            conn,
            args.candidate_id,
            result,
            auto_submitted=submission.auto_submitted,
            reason=submission.reason,
        )
    finally:
        conn.close()

    if not stored:
        print(f"Error: profile not found: {args.candidate_id}", file=sys.stderr)
        sys.exit(1)
    print(f"Score: {result.score}% ({result.correct_answers}/{result.questions_count} correct)")



def cmd_quiz_history(args: argparse.Namespace, settings: Settings) -> None:
    """Handle quiz-history subcommand."""
    conn = init_db(settings.database.path)
    try:
        history = get_test_history(conn, args.candidate_id)
    finally:
        conn.close()

    if not history:
        print(f"No quiz attempts recorded for {args.candidate_id}")
        return

    print(f"{len(history)} quiz attempt(s) for {args.candidate_id}:")
    for h in history:
        flag = f" [auto-submitted: {h['reason'] or 'no reason'}]" if h["auto_submitted"] else ""
        print(
            f"  {h['taken_at']}  {h['score']}% "
            f"({h['correct_answers']}/{h['questions_count']} correct){flag}"
        )


_COMMANDS = {
    "recommend": cmd_recommend,
    "detail": cmd_detail,
    "import-profile": cmd_import_profile,
    "submit-quiz": cmd_submit_quiz,
    "quiz-history": cmd_quiz_history,
}


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = Settings.from_yaml(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        _COMMANDS[args.command](args, settings)
    except (RecommendationError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
