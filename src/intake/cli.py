#!/usr/bin/env python3
"""
CLI for registering car insurance claims.

Usage:
    python -m src.intake.cli --name "Jane Doe" --email jane@example.com ...
    python -m src.intake.cli ... --image photos/bumper.jpg --pretty
"""

import argparse
import asyncio
import json
import logging
import mimetypes
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from ..storage.claim_store import ClaimStore, SQLiteClaimStore
from ..utils.config import get_settings
from .damage_assessor import create_damage_assessor
from .form_controller import ClaimFormController
from .schema import IncidentType, IntakeStep, SubmissionOutcome, VehicleType
from .submission import SubmissionOrchestrator


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else getattr(logging, get_settings().log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Register a new car insurance claim',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Register a claim without a photo
  python -m src.intake.cli --name "Jane Doe" --email jane@example.com --phone 555-0100 \\
      --policy-number POL123 --incident-date 2024-01-05 --incident-type collision \\
      --description "rear-ended at light" --vehicle-brand Toyota --vehicle-type 4-wheeler

  # Attach a damage photo (requires DAMAGE_DETECTION_API_URL)
  python -m src.intake.cli ... --image photos/bumper.jpg
        """
    )

    # Customer
    parser.add_argument('--name', type=str, default='', help='Customer full name')
    parser.add_argument('--email', type=str, default='', help='Customer email')
    parser.add_argument('--phone', type=str, default='', help='Customer phone number')
    parser.add_argument('--policy-number', type=str, default='', help='Policy number')

    # Incident
    parser.add_argument('--incident-date', type=str, default='', help='Date of incident (YYYY-MM-DD)')
    parser.add_argument(
        '--incident-type',
        type=str,
        choices=[t.value for t in IncidentType],
        help='Type of incident'
    )
    parser.add_argument('--description', type=str, default='', help='What happened')
    parser.add_argument('--vehicle-brand', type=str, default='', help='Vehicle brand')
    parser.add_argument(
        '--vehicle-type',
        type=str,
        choices=[t.value for t in VehicleType],
        help='Vehicle type'
    )

    # Evidence
    parser.add_argument('--image', type=str, help='Path to a damage photo')

    # Output options
    parser.add_argument('--db', type=str, help='SQLite database path (default: CLAIMS_DB_PATH)')
    parser.add_argument('--output', '-o', type=str, help='Output file path (default: print to stdout)')
    parser.add_argument('--pretty', action='store_true', help='Pretty print JSON output')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose logging')

    return parser.parse_args(argv)


def build_controller(store: ClaimStore) -> ClaimFormController:
    """Wire a form controller to the configured assessor and the given store."""
    settings = get_settings()
    orchestrator = SubmissionOrchestrator(
        store=store,
        assessor=create_damage_assessor(settings),
        ensure_unique_ids=settings.ensure_unique_ids,
    )
    return ClaimFormController(orchestrator)


async def register_claim(controller: ClaimFormController, args: argparse.Namespace) -> SubmissionOutcome:
    """Fill the form step by step from the arguments, then submit it."""
    logger = logging.getLogger(__name__)

    values = {
        IntakeStep.CUSTOMER: {
            "customer_name": args.name,
            "email": args.email,
            "phone": args.phone,
            "policy_number": args.policy_number,
        },
        IntakeStep.INCIDENT: {
            "incident_date": args.incident_date,
            "incident_type": args.incident_type,
            "description": args.description,
            "vehicle_brand": args.vehicle_brand,
            "vehicle_type": args.vehicle_type,
        },
    }

    while controller.step != IntakeStep.REVIEW:
        for name, value in values.get(controller.step, {}).items():
            controller.set_field(name, value)

        if controller.step == IntakeStep.EVIDENCE and args.image:
            image_path = Path(args.image)
            content_type = mimetypes.guess_type(image_path.name)[0] or "application/octet-stream"
            controller.attach_image(image_path.name, image_path.read_bytes(), content_type)

        logger.debug(f"Step {controller.step.value} complete: {controller.is_step_complete(controller.step)}")
        await controller.advance()

    logger.info("Review:\n" + controller.get_summary())
    return await controller.advance()


def main(argv: Optional[list] = None):
    """Main CLI entry point."""
    load_dotenv()
    args = parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        store = SQLiteClaimStore(Path(args.db) if args.db else None)
        controller = build_controller(store)
        outcome = asyncio.run(register_claim(controller, args))
    except Exception as e:
        logger.error(f"Error registering claim: {e}", exc_info=True)
        sys.exit(1)

    if not outcome.success:
        print(f"Error: {outcome.error}", file=sys.stderr)
        for name, message in controller.errors.items():
            print(f"  {name}: {message}", file=sys.stderr)
        sys.exit(1)

    indent = 2 if args.pretty else None
    json_output = json.dumps(outcome.record.to_storage(), indent=indent, ensure_ascii=False)

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(json_output)
        logger.info(f"Output written to: {output_path}")
    else:
        print(json_output)

    print(f"Claim registered: {outcome.redirect_to}", file=sys.stderr)


if __name__ == '__main__':
    main()
