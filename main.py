"""
Main Entry Point for the Rocket Launch Feasibility Calculator.

This module runs a feasibility analysis from the command line:
1. Accepts coordinates and rocket type
2. Looks up country data (unless --offline)
3. Scores all six categories
4. Prints the report as text or JSON

RESULTS ARE INDICATIVE.
THEY ARE NOT A REGULATORY DETERMINATION.
"""

import argparse
import json
import logging
import sys

from data_models import CATEGORY_TITLES, Coordinates, FeasibilityLevel
from feasibility_engine import build_report
from backend.services.analysis_service import (
    parse_model_sub_type, parse_rocket_type, run_analysis,
)

LEVEL_MARKERS = {
    FeasibilityLevel.HIGH: "[HIGH]  ",
    FeasibilityLevel.MEDIUM: "[MEDIUM]",
    FeasibilityLevel.LOW: "[LOW]   ",
}


def format_report(report, location: str, rocket_label: str) -> str:
    """Render a report as a titled plain-text summary."""
    lines = [
        "=" * 70,
        f"LAUNCH LOCATION: {location}",
        f"ROCKET TYPE: {rocket_label}",
        "=" * 70,
    ]
    for key, result in report.categories().items():
        lines.append("")
        lines.append(f"{LEVEL_MARKERS[result.level]} {CATEGORY_TITLES[key]}: {result.description}")
        for detail in result.details:
            lines.append(f"    • {detail}")
    lines.append("")
    lines.append("=" * 70)
    lines.append("IMPORTANT: Results are indicative only.")
    lines.append("Confirm permits with your local aviation and space authorities.")
    lines.append("=" * 70)
    return "\n".join(lines)


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Rocket Launch Feasibility Calculator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Results are indicative and do NOT replace regulatory advice.

Example usage:
  python main.py --lat 28.39 --lng -80.61 --rocket industrial --location "Cape Canaveral"
  python main.py --lat 51.5 --lng -0.12 --rocket model --sub-type hobby --json
        """
    )

    parser.add_argument('--lat', type=float, required=True, help='Latitude in decimal degrees (-90 to 90)')
    parser.add_argument('--lng', type=float, required=True, help='Longitude in decimal degrees (-180 to 180)')
    parser.add_argument(
        '--rocket',
        type=str,
        required=True,
        choices=['model', 'industrial'],
        help='Rocket type'
    )
    parser.add_argument(
        '--sub-type',
        type=str,
        default=None,
        choices=['hobby', 'project'],
        help='Model rocket category (model rockets only)'
    )
    parser.add_argument(
        '--location',
        type=str,
        default=None,
        help='Display name for the location (default: the coordinates)'
    )
    parser.add_argument(
        '--offline',
        action='store_true',
        help='Skip the country lookup and score without country data'
    )
    parser.add_argument('--json', action='store_true', help='Print the report as JSON')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    try:
        coordinates = Coordinates(lat=args.lat, lng=args.lng)
        rocket_type = parse_rocket_type(args.rocket)
        sub_type = parse_model_sub_type(args.sub_type)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    location = args.location or f"{coordinates.lat:.4f}, {coordinates.lng:.4f}"

    if args.offline:
        report = build_report(coordinates, None, rocket_type, sub_type)
    else:
        report = run_analysis(location, coordinates, rocket_type, sub_type)

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        rocket_label = rocket_type.value if sub_type is None else f"{rocket_type.value} ({sub_type.value})"
        print(format_report(report, location, rocket_label))

    return 0


if __name__ == '__main__':
    sys.exit(main())
