"""CareerScout — CLI entrypoint."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import time
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv


def setup_logging(log_level: str = "INFO") -> None:
    """Configure logging to both console and log file."""
    log_dir = Path("logs")
    log_dir.mkdir(exist_ok=True)

    run_date = datetime.now().strftime("%Y-%m-%d")
    log_file = log_dir / f"run_{run_date}.log"

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file, encoding="utf-8"),
        ],
    )


def main() -> None:
    """Main CLI entrypoint for CareerScout."""
    parser = argparse.ArgumentParser(
        description="CareerScout — match a job-seeker's criteria against live careers pages",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --criteria criteria.md            # Run from a criteria file
  python main.py --submission-id 1b2c...           # Run a stored submission
  python main.py --criteria criteria.md --dry-run  # No LLM calls, no email
  python main.py --criteria criteria.md --output results.json --no-email
        """,
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--submission-id",
        help="Id of a stored submission to process",
    )
    source.add_argument(
        "--criteria",
        default="criteria.md",
        help="Path to criteria file. Default: criteria.md",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Run pipeline without completion-service calls or email sending",
    )
    parser.add_argument(
        "--no-email",
        action="store_true",
        help="Run pipeline but skip email sending",
    )
    parser.add_argument(
        "--headful",
        action="store_true",
        help="Show the browser window instead of running headless",
    )
    parser.add_argument(
        "--policy",
        default=None,
        help="Path to screening policy YAML. Default: $POLICY_PATH or policy.yaml",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Write the run summary JSON to this path",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level override (DEBUG, INFO, WARNING, ERROR)",
    )

    args = parser.parse_args()

    # Load environment variables
    load_dotenv()

    # Setup logging
    log_level = args.log_level or os.getenv("LOG_LEVEL", "INFO")
    setup_logging(log_level)

    logger = logging.getLogger("careerscout")
    logger.info("=" * 60)
    logger.info("CareerScout — Starting")
    logger.info("=" * 60)

    if args.dry_run:
        logger.info("DRY RUN — completion service and email will be skipped")

    from careerscout.config import Settings
    from careerscout.errors import ValidationError
    from careerscout.graph import build_pipeline, initial_state
    from careerscout.storage.database import SubmissionRepository

    settings = Settings.from_env()
    if args.headful:
        settings.headless = False
    if args.policy:
        settings.policy_path = args.policy

    pipeline = build_pipeline(settings)
    state = initial_state(
        submission_id=args.submission_id,
        criteria_path=None if args.submission_id else args.criteria,
        dry_run=args.dry_run,
        no_email=args.no_email,
    )

    start_time = time.time()

    try:
        result = pipeline.invoke(state)
        duration = time.time() - start_time
        summary = result.get("summary")

        # Log run to database
        submission_id = result["submission"].id or None
        repo = SubmissionRepository(settings.db_path)
        try:
            repo.log_run(
                run_date=state["run_date"],
                summary=summary,
                submission_id=submission_id,
                notes=result.get("errors"),
                email_sent=result.get("email_sent", False),
                duration_secs=duration,
            )
            run_count = len(repo.get_runs(submission_id)) if submission_id else 0
        finally:
            repo.close()

        if args.output and summary is not None:
            Path(args.output).write_text(json.dumps(summary.to_payload(), indent=2), encoding="utf-8")
            logger.info("Run summary written to %s", args.output)

        logger.info("=" * 60)
        logger.info("Pipeline complete in %.1f seconds", duration)
        if run_count:
            logger.info("Run #%d for submission %s", run_count, submission_id)
        if summary is not None:
            logger.info(
                "Results: companies=%d, with matches=%d, no matches=%d, errors=%d, jobs=%d, email=%s",
                summary.total_companies,
                summary.successful_matches,
                summary.no_matches,
                summary.errors,
                summary.total_jobs,
                "sent" if result.get("email_sent") else "skipped",
            )
        if result.get("errors"):
            logger.warning("Fallbacks and errors: %s", result["errors"])
        logger.info("=" * 60)

    except ValidationError as e:
        logger.error("Request rejected: %s", e)
        sys.exit(2)
    except Exception as e:
        duration = time.time() - start_time
        logger.error("Pipeline failed after %.1f seconds: %s", duration, e, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
