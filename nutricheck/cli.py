#!/usr/bin/env python3
"""Command-line interface for the AI nutrition checker."""

import argparse
import base64
import logging
import mimetypes
import sys
from pathlib import Path
from typing import Optional

from nutricheck.data_layer.models import AnalysisMode, DEFAULT_PROFILE, InlineImage, UserProfile
from nutricheck.data_layer.user_profile import UserProfileLoader
from nutricheck.gateway.nutrition_gateway import NutritionGateway
from nutricheck.output.formatters import (
    format_analysis_json_string,
    format_analysis_markdown,
    format_quick_scan,
)
from nutricheck.providers.gemini_rest_provider import GeminiRestProvider
from nutricheck.providers.gemini_sdk_provider import GeminiSDKProvider
from nutricheck.session.analysis_session import AnalysisSession, SessionContext

DEFAULT_PROFILE_PATH = "config/user_profile.yaml"

EXIT_INPUT_ERROR = 1
EXIT_ANALYSIS_ERROR = 2
EXIT_PROVIDER_INIT_ERROR = 3

logger = logging.getLogger("nutricheck")


def load_profile(path: Optional[str]) -> UserProfile:
    """Load the profile from *path*, or the default file, or fall back to defaults.

    Raises:
        FileNotFoundError: If an explicitly given path does not exist
    """
    if path is None:
        if not Path(DEFAULT_PROFILE_PATH).exists():
            return DEFAULT_PROFILE
        path = DEFAULT_PROFILE_PATH
    profile_path = Path(path)
    if not profile_path.exists():
        raise FileNotFoundError(f"User profile file not found: {profile_path}")
    return UserProfileLoader(str(profile_path)).load()


def load_image(path: str) -> InlineImage:
    """Read a photo and encode it for inline transport."""
    image_path = Path(path)
    if not image_path.exists():
        raise FileNotFoundError(f"Image file not found: {image_path}")
    mime_type, _ = mimetypes.guess_type(image_path.name)
    if not mime_type or not mime_type.startswith("image/"):
        mime_type = "image/jpeg"
    data = base64.b64encode(image_path.read_bytes()).decode("ascii")
    return InlineImage(data=data, mime_type=mime_type)


def create_provider(name: str):
    if name == "rest":
        return GeminiRestProvider.from_env()
    return GeminiSDKProvider.from_env()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Analyse a food with AI and print a personalised nutrition report"
    )
    parser.add_argument(
        "query",
        nargs="?",
        default="",
        help="Food to analyse, e.g. \"2 boiled eggs\" or \"rice vs quinoa\""
    )
    parser.add_argument(
        "--profile",
        type=str,
        help=f"Path to user profile YAML file (default: {DEFAULT_PROFILE_PATH} if present)"
    )
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in AnalysisMode],
        default=None,
        help="Analysis mode (default: single_food, or image_analysis with --image only)"
    )
    parser.add_argument(
        "--image",
        type=str,
        help="Path to a food photo to analyse"
    )
    parser.add_argument(
        "--report",
        action="store_true",
        help="Also generate the downloadable report"
    )
    parser.add_argument(
        "--report-file",
        type=str,
        help="Write the report's print-ready HTML to this path (implies --report)"
    )
    parser.add_argument(
        "--deep",
        action="store_true",
        help="Run the preventive health (deep) analysis"
    )
    parser.add_argument(
        "--audio-out",
        type=str,
        help="Write a spoken WAV summary to this path"
    )
    parser.add_argument(
        "--quick-scan",
        action="store_true",
        help="Only print a quick calorie and macro estimate"
    )
    parser.add_argument(
        "--provider",
        choices=["sdk", "rest"],
        default="sdk",
        help="Gemini backend: google-genai SDK (default) or REST"
    )
    parser.add_argument(
        "--output",
        choices=["markdown", "json"],
        default="markdown",
        help="Output format: markdown (default) or json"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not args.query.strip() and not args.image:
        print("Error: Provide a food query or --image", file=sys.stderr)
        return EXIT_INPUT_ERROR

    try:
        profile = load_profile(args.profile)
        image = load_image(args.image) if args.image else None
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        print(f"Hint: Copy config/user_profile.yaml.example to {DEFAULT_PROFILE_PATH} and customize it",
              file=sys.stderr)
        return EXIT_INPUT_ERROR
    except (ValueError, KeyError) as e:
        print(f"Error: Invalid user profile: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    try:
        provider = create_provider(args.provider)
    except ValueError as e:
        print("Failed to initialize AI provider:", file=sys.stderr)
        print(str(e), file=sys.stderr)
        return EXIT_PROVIDER_INIT_ERROR

    session = AnalysisSession(NutritionGateway(provider))

    if args.quick_scan:
        print(format_quick_scan(args.query, session.quick_scan(args.query)))
        return 0

    context = SessionContext(profile=profile)
    mode = AnalysisMode(args.mode) if args.mode else None

    print("Analysing food...", file=sys.stderr)
    session.run_analysis(context, args.query, mode=mode, image=image)
    if context.error is not None:
        print(f"Error: {context.error.message}", file=sys.stderr)
        return EXIT_ANALYSIS_ERROR

    result = context.current_result
    if result is not None and result.is_successful:
        if args.deep:
            print("Running preventive health analysis...", file=sys.stderr)
            session.run_deep_analysis(context)
            _print_notification(context)

        if args.report or args.report_file:
            print("Generating report...", file=sys.stderr)
            session.generate_report(context)
            _print_notification(context)
            report = context.current_result.downloadable_report
            if args.report_file and report is not None:
                Path(args.report_file).write_text(report.print_ready_html)
                print(f"Report saved to {args.report_file}", file=sys.stderr)

        if args.audio_out:
            print("Synthesizing audio summary...", file=sys.stderr)
            session.play_summary(context)
            _print_notification(context)
            if context.audio_summary:
                Path(args.audio_out).write_bytes(base64.b64decode(context.audio_summary))
                print(f"Audio summary saved to {args.audio_out}", file=sys.stderr)

    if args.output == "json":
        print(format_analysis_json_string(context.current_result))
    else:
        print(format_analysis_markdown(context.current_result))
    return 0


def _print_notification(context: SessionContext) -> None:
    if context.notification:
        print(f"⚠️  {context.notification}", file=sys.stderr)


if __name__ == "__main__":
    sys.exit(main())
