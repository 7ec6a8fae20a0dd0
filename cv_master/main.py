"""CLI entry point - serve the web app or review a resume from the terminal."""

import argparse
import asyncio
import logging
import mimetypes
import sys
from pathlib import Path

from cv_master.config import AppConfig, load_config, validate_config
from cv_master.errors import EncodingError
from cv_master.export.plain_text import EXPORT_FILENAME, render_plain_text
from cv_master.gateway.client import OpenAIGateway
from cv_master.gateway.schemas import AnalysisResult
from cv_master.profile.models import SeniorityLevel
from cv_master.utils.logging_config import setup_logging
from cv_master.workflow.controller import WorkflowController

logger = logging.getLogger("cv_master")

DEFAULT_CONFIG = "config.yaml"


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="CV Master ATS - resume review and ATS optimization",
    )
    parser.add_argument(
        "--config", default=None,
        help=f"Path to config file (default: {DEFAULT_CONFIG} if present)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the web application")
    serve.add_argument("--host", default=None, help="Bind address (default: from config)")
    serve.add_argument("--port", type=int, default=None, help="Port (default: from config)")

    review = sub.add_parser("review", help="Analyze and optimize a local PDF")
    review.add_argument("file", help="Path to the resume PDF")
    review.add_argument("--title", required=True, help="Target job title")
    review.add_argument("--industry", required=True, help="Target industry")
    review.add_argument(
        "--level", default=SeniorityLevel.MID.value,
        choices=[level.value for level in SeniorityLevel],
        help="Seniority level (default: Mid)",
    )
    review.add_argument("--keywords", default="", help="Keyword hints (default: inferred)")
    review.add_argument(
        "--output", default=EXPORT_FILENAME,
        help=f"Where to write the optimized resume (default: {EXPORT_FILENAME})",
    )
    review.add_argument(
        "--analyze-only", action="store_true",
        help="Stop after the analysis",
    )
    return parser.parse_args(argv)


def load_app_config(path: str | None) -> AppConfig:
    """Load the given config, the default file if present, or env-only defaults."""
    if path is not None:
        return load_config(path)
    if Path(DEFAULT_CONFIG).exists():
        return load_config(DEFAULT_CONFIG)
    return load_config(None)


def print_analysis(analysis: AnalysisResult):
    """Print the analysis in a readable form."""
    print(f"\n=== ATS score: {analysis.overall_score}/100 ===")
    print(analysis.summary)
    print()
    for title, section in analysis.sections():
        print(f"{title}: {section.score}/100 [{section.status}]")
        for item in section.feedback:
            print(f"  - {item}")
    print(f"\nKeyword density: {analysis.ats_keywords.density_score}%")
    print(f"  Found: {', '.join(analysis.ats_keywords.found) or '-'}")
    print(f"  Missing: {', '.join(analysis.ats_keywords.missing) or '-'}")
    print(f"Formatting: {'clean' if analysis.formatting.is_clean else 'has issues'}")
    for issue in analysis.formatting.issues:
        print(f"  - {issue}")
    if analysis.recommendations:
        print("\nRecommendations:")
        for i, rec in enumerate(analysis.recommendations, 1):
            print(f"  {i}. {rec}")
    print()


async def review(config: AppConfig, args: argparse.Namespace) -> int:
    """Run the whole workflow against a local file. Returns an exit code."""
    path = Path(args.file)
    if not path.exists():
        print(f"Error: file not found: {args.file}", file=sys.stderr)
        return 1

    controller = WorkflowController(
        OpenAIGateway(config.gateway),
        max_upload_bytes=config.intake.max_upload_bytes,
        session_id="cli",
    )

    content_type = mimetypes.guess_type(path.name)[0] or ""
    try:
        data = path.read_bytes()
    except OSError as e:
        controller.fail_upload(EncodingError(str(e)))
        print(f"Error: {controller.state.error}", file=sys.stderr)
        return 1

    if controller.submit_file(path.name, content_type, data) is None:
        print(f"Error: {controller.state.error}", file=sys.stderr)
        return 1

    analysis = await controller.run_profile(args.title, args.industry, args.level, args.keywords)
    if analysis is None:
        print(f"Error: {controller.state.error or 'profile rejected (title and industry are required)'}",
              file=sys.stderr)
        return 1
    print_analysis(analysis)

    if args.analyze_only:
        return 0

    optimized = await controller.run_optimization()
    if optimized is None:
        print(f"Error: {controller.state.error}", file=sys.stderr)
        return 1

    Path(args.output).write_text(render_plain_text(optimized), encoding="utf-8")
    logger.info("Optimized resume written to %s", args.output)
    return 0


def serve(config: AppConfig, args: argparse.Namespace):
    import uvicorn

    from cv_master.web.app import create_app

    uvicorn.run(
        create_app(config),
        host=args.host or config.web.host,
        port=args.port or config.web.port,
    )


def main(argv=None):
    args = parse_args(argv)

    try:
        config = load_app_config(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(config.log_dir)

    if args.command == "serve":
        serve(config, args)
        return

    for w in validate_config(config):
        logger.warning("Config: %s", w)

    sys.exit(asyncio.run(review(config, args)))


if __name__ == "__main__":
    main()
