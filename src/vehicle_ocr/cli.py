#!/usr/bin/env python3
"""
Vehicle OCR CLI - Command Line Interface
========================================

Main CLI entry point for field extraction.

Usage:
    vehicle-ocr extract mileage "Odometer: 123,456 mi"
    vehicle-ocr extract vin --file ocr_output.txt --json
    cat ocr_output.txt | vehicle-ocr extract vin
    vehicle-ocr validate 1HGBH41JXMN109186
    vehicle-ocr evaluate samples.csv --field mileage --output results.csv
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import EngineConfig, get_config, _setup_logging
from .core import validate_vin
from .exceptions import VehicleOCRError
from .extraction import FieldExtractor, FieldKind

logger = logging.getLogger(__name__)

_LABELS = {
    FieldKind.MILEAGE: "Mileage",
    FieldKind.VIN: "VIN",
}


def _read_text(args) -> str:
    """Text from positional args, --file, or stdin (in that order)."""
    if args.text:
        return ' '.join(args.text)
    if args.file:
        path = Path(args.file)
        if not path.exists():
            raise FileNotFoundError(f"Text file not found: {path}")
        return path.read_text(encoding='utf-8', errors='replace')
    return sys.stdin.read()


def cmd_extract(args, config: EngineConfig) -> int:
    """Extract a field from OCR text."""
    extractor = FieldExtractor.from_config(config)
    text = _read_text(args)

    # Multi-line input is one frame's OCR lines
    result = extractor.extract_lines(text.splitlines(), args.field)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0

    if result.value is None:
        print(f"No {result.field.value} found")
    else:
        print(f"{_LABELS[result.field]}: {result.value}")
    print(f"Confidence: {result.confidence.value}")
    if result.needs_review:
        print("Low confidence - please verify")
    if args.verbose:
        print(f"Normalized: {result.normalized_text}")
        print(f"Candidates: {', '.join(result.candidates) or '-'}")

    return 0


def cmd_validate(args, config: EngineConfig) -> int:
    """Validate a VIN's structure and check digit."""
    result = validate_vin(args.vin, config.vin)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(f"VIN: {result.vin}")
        print(f"Length OK: {result.length_ok}")
        print(f"Characters OK: {result.chars_ok}")
        if result.invalid_chars:
            print(f"Invalid characters: {''.join(result.invalid_chars)}")
        print(f"Well formed: {result.well_formed}")
        print(f"Checksum OK: {result.checksum_ok} (expected {result.expected_check_digit or '-'})")

    return 0 if result.length_ok and result.chars_ok else 1


def cmd_evaluate(args, config: EngineConfig) -> int:
    """Evaluate extraction accuracy on labelled samples."""
    from .evaluation import ExtractionEvaluator, load_samples

    samples = load_samples(args.samples)
    evaluator = ExtractionEvaluator(args.field, FieldExtractor.from_config(config))
    metrics = evaluator.evaluate(samples)

    if args.output:
        evaluator.export_csv(args.output)

    if args.json:
        print(json.dumps(metrics.to_dict(), indent=2))
        return 0

    print(f"Field: {metrics.kind}")
    print(f"Samples: {metrics.total_samples}")
    print(f"Exact match: {metrics.exact_match_count} ({metrics.exact_match_rate:.2%})")
    print(f"No value: {metrics.no_value_count} ({metrics.no_value_rate:.2%})")
    print(f"Mean edit distance: {metrics.mean_edit_distance:.3f}")
    for tier, count in metrics.tier_counts.items():
        accuracy = metrics.tier_accuracy.get(tier)
        accuracy_text = f"{accuracy:.2%}" if accuracy is not None else "n/a"
        print(f"  {tier:<6} {count:>5}  accuracy {accuracy_text}")
    if args.output:
        print(f"Results saved to: {args.output}")

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='vehicle-ocr',
        description='Extract mileage readings and VINs from OCR text',
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--config', '-c', help='YAML or JSON config file')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging and extra output')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    field_choices = [k.value for k in FieldKind]

    # Extract command
    extract_parser = subparsers.add_parser('extract', help='Extract a field from OCR text')
    extract_parser.add_argument('field', choices=field_choices, help='Field to extract')
    extract_parser.add_argument('text', nargs='*', help='OCR text (reads stdin if omitted)')
    extract_parser.add_argument('--file', '-f', help='Read OCR text from file')
    extract_parser.add_argument('--json', action='store_true', help='Output JSON')

    # Validate command
    validate_parser = subparsers.add_parser('validate', help='Validate a VIN')
    validate_parser.add_argument('vin', help='VIN to validate')
    validate_parser.add_argument('--json', action='store_true', help='Output JSON')

    # Evaluate command
    evaluate_parser = subparsers.add_parser('evaluate', help='Evaluate on labelled samples')
    evaluate_parser.add_argument('samples', help="CSV with 'text' and 'expected' columns")
    evaluate_parser.add_argument('--field', required=True, choices=field_choices, help='Field to evaluate')
    evaluate_parser.add_argument('--output', '-o', help='Write per-sample results to CSV')
    evaluate_parser.add_argument('--json', action='store_true', help='Output JSON')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    commands = {
        'extract': cmd_extract,
        'validate': cmd_validate,
        'evaluate': cmd_evaluate,
    }

    try:
        if args.config:
            config = EngineConfig.load(args.config)
            _setup_logging(config.logging)
        else:
            config = get_config()
        if args.verbose:
            logging.getLogger('vehicle_ocr').setLevel(logging.DEBUG)

        return commands[args.command](args, config)
    except (VehicleOCRError, FileNotFoundError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
