#!/usr/bin/env python3
"""
DocForge CLI

Command-line interface for the spreadsheet, PDF and image tools.

Usage:
    python -m docforge <tool> <files...> [options]
    python -m docforge duplicate-remover orders.xlsx --criterion col1 --mode highlight
    python -m docforge clean-excel contacts.xlsx
    python -m docforge jpg-to-pdf scan1.jpg scan2.png
    python -m docforge compress-pdf report.pdf --level High
    python -m docforge pdf-img-to-excel invoice.pdf --lang German

Options:
    -o, --output DIR     Output directory (default: ./docforge_output)
    --daily-limit N      Count the run against an in-memory daily limit
    --tools              Show all tools and exit
"""

import argparse
import sys

from .core import DocForge
from .converters.image_converter import ImageConverter
from .converters.pdf_converter import PDFConverter
from .dedupe import Action, Criterion, InvalidPolicy
from .usage import DailyUsageCounter, QuotaExceeded


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docforge",
        description=(
            "DocForge - Spreadsheet, PDF and Image Conversion Toolkit\n\n"
            "Cleans, deduplicates and converts spreadsheets, PDFs and images."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  docforge duplicate-remover data.xlsx                      # drop repeated rows\n"
            "  docforge duplicate-remover data.xlsx --mode highlight     # mark them yellow\n"
            "  docforge excel-to-pdf data.xlsx -o ./out\n"
            "  docforge pdf-to-jpg slides.pdf\n"
        ),
    )

    parser.add_argument("tool", nargs="?", help="Tool id (see --tools)")
    parser.add_argument("files", nargs="*", help="Input files")
    parser.add_argument(
        "-o", "--output",
        default=None,
        help="Output directory (default: ./docforge_output)",
    )
    parser.add_argument(
        "--criterion",
        choices=[c.value for c in Criterion],
        default=Criterion.FULL_ROW.value,
        help="Duplicate key: full row or first column (default: row)",
    )
    parser.add_argument(
        "--mode",
        choices=[a.value for a in Action],
        default=Action.REMOVE.value,
        help="Remove duplicate rows or highlight them (default: remove)",
    )
    parser.add_argument(
        "--level",
        choices=list(PDFConverter.COMPRESSION_LEVELS),
        default="Standard",
        help="PDF compression level (default: Standard)",
    )
    parser.add_argument(
        "--lang",
        choices=list(ImageConverter.OCR_LANGUAGES),
        default="English",
        metavar="LANGUAGE",
        help="Document language for OCR (default: English)",
    )
    parser.add_argument(
        "--daily-limit",
        type=int,
        default=None,
        metavar="N",
        help="Count this run against a daily limit of N runs and report usage",
    )
    parser.add_argument(
        "--tools",
        action="store_true",
        help="Show all tools and their accepted formats and exit",
    )
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.tools:
        _show_tools()
        return 0

    if not args.tool or not args.files:
        parser.print_help()
        print("\nError: Specify a tool and at least one input file.")
        return 1

    usage = None
    if args.daily_limit is not None:
        if args.daily_limit <= 0:
            print("Error: --daily-limit must be a positive number.", file=sys.stderr)
            return 1
        usage = DailyUsageCounter(
            limit=args.daily_limit,
            warning_at=min(DailyUsageCounter.DEFAULT_WARNING_AT, args.daily_limit),
        )

    engine = DocForge(output_dir=args.output, usage=usage)

    print("=" * 60)
    print("  DOCFORGE - Spreadsheet, PDF and Image Conversion")
    print("=" * 60)
    print()

    try:
        result = engine.run(
            args.tool,
            args.files,
            criterion=args.criterion,
            mode=args.mode,
            level=args.level,
            language=args.lang,
        )
    except (InvalidPolicy, QuotaExceeded, ValueError, FileNotFoundError, RuntimeError) as e:
        print(f"[ERROR] {args.tool}: {e}", file=sys.stderr)
        return 1

    print()
    print("-" * 60)
    print(f"  Done: {result.message}")
    if result.details:
        print(f"  {result.details}")
    print(f"  Output: {result.output_path}")
    if usage is not None:
        snapshot = usage.snapshot()
        print(f"  Usage: {snapshot['used']}/{snapshot['limit']} runs today ({snapshot['date']})")
    print("-" * 60)
    return 0


def _show_tools():
    """Display all tools and the formats they accept."""
    tools = DocForge.supported_tools()
    print("\nAvailable Tools:")
    print("-" * 40)
    for tool_id, (title, extensions) in tools.items():
        print(f"\n  {tool_id}  ({title})")
        print(f"    {' '.join(extensions)}")
    print()


if __name__ == "__main__":
    sys.exit(main())
