"""
SafeMeds - Command Line Analysis

Runs one medication safety analysis and prints the verdict as JSON.

Usage:
    safemeds-analyze (--text NAME | --image PATH) [profile options]

Examples:
    # Drug name with an inline profile
    safemeds-analyze --text aspirin --age 45 --sex Male --condition "High BP"

    # Packaging photo with a profile file
    safemeds-analyze --image box.jpg --profile profile.json

    # Offline run without API keys
    SAFEMEDS_MODEL_TYPE=dummy safemeds-analyze --text ibuprofen --age 30

Exit codes: 0 verdict produced, 1 invalid input, 2 no verdict (UNKNOWN).
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, List

from safemeds.analysis.bootstrap import create_analysis_service
from safemeds.analysis.config.settings import AppConfig
from safemeds.analysis.application.services.drug_analysis_service import DrugAnalysisService
from safemeds.analysis.cross_cutting.logging import configure_logging
from safemeds.analysis.domain.entities.health_profile import HealthProfile
from safemeds.analysis.domain.exceptions import InvalidProfileError


EXIT_OK = 0
EXIT_INVALID_INPUT = 1
EXIT_NO_VERDICT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='safemeds-analyze',
        description='Medication safety check against a health profile',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    # Input selection
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument(
        '--text', '-t', type=str,
        help='Drug name to analyze'
    )
    group.add_argument(
        '--image', '-i', type=Path,
        help='Path to a photo of the drug packaging'
    )

    # Profile options
    parser.add_argument(
        '--profile', '-p', type=Path,
        help='Health profile JSON file (age, gender, conditions, allergies, currentMeds)'
    )
    parser.add_argument(
        '--age', type=int,
        help='Age in years (required without --profile)'
    )
    parser.add_argument(
        '--sex', type=str, default='Other',
        help='Male, Female or Other (default: Other)'
    )
    parser.add_argument(
        '--condition', action='append', default=[],
        help='Diagnosed condition (repeatable)'
    )
    parser.add_argument(
        '--allergy', action='append', default=[],
        help='Known allergy (repeatable)'
    )
    parser.add_argument(
        '--medication', action='append', default=[],
        help='Current medication (repeatable)'
    )

    # Output options
    parser.add_argument(
        '--log-level', type=str, default=None,
        help='Logging level (default: WARNING)'
    )

    return parser


def load_profile(args: argparse.Namespace) -> HealthProfile:
    """
    Build the profile from --profile or the individual flags.

    Raises:
        InvalidProfileError: If the profile is missing or invalid
    """
    if args.profile:
        try:
            with open(args.profile, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise InvalidProfileError('file', f"cannot read {args.profile}: {e}")
        if not isinstance(data, dict):
            raise InvalidProfileError('file', 'must contain a JSON object')
        return HealthProfile.from_dict(data)

    if args.age is None:
        raise InvalidProfileError('age', 'pass --age or --profile')

    return HealthProfile(
        age=args.age,
        sex=args.sex,
        conditions=args.condition,
        allergies=args.allergy,
        current_medications=args.medication,
    )


def main(argv: Optional[List[str]] = None, service: Optional[DrugAnalysisService] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)

    config = AppConfig.from_env()
    # stdout carries the verdict JSON, so logs go to stderr
    configure_logging(config.logging, level=args.log_level or 'WARNING', stream=sys.stderr)

    try:
        profile = load_profile(args)
    except InvalidProfileError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    service = service or create_analysis_service(config)

    if args.text is not None:
        analysis = service.analyze_text(args.text, profile)
    else:
        analysis = service.analyze_image_file(str(args.image), profile)

    print(json.dumps(analysis.to_dict(), indent=2, ensure_ascii=False))

    return EXIT_NO_VERDICT if analysis.is_failure else EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
