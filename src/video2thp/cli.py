"""Command-line entry point for video-to-THP conversion."""

import argparse
import logging
import sys
from pathlib import Path

from thpconverter.core.errors import ValidationError
from thpconverter.core.pipeline import convert
from thpconverter.core.settings import DEFAULT_OUTPUT, ConversionSettings
from thpconverter.utils import validators

USAGE_TEXT = (
    "Error: Invalid arguments\n"
    "Example Args: video2thp <Path to Video> <optional: Path to Output>\n"
    f"Default Output Name: {DEFAULT_OUTPUT}\n"
)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="video2thp",
        description="Convert a source video into a THP movie via THPConv.",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        type=Path,
        metavar="PATH",
        help=f"Source video, then an optional output path (default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument("--encoder", type=Path, help="Path to THPConv (default: THPConv/THPConv.exe)")
    parser.add_argument("--work-dir", type=Path, help="Directory for intermediate files (default: cwd)")
    parser.add_argument("--frame-rate", help="Output frame rate (default: 29.97)")
    parser.add_argument(
        "--keep-intermediates",
        action="store_true",
        default=None,
        help="Leave the extracted WAV and JPEG frames in place after the run",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if not args.paths:
        print(USAGE_TEXT)
        parser.print_help()
        return 0
    if len(args.paths) > 2:
        return 0

    source = args.paths[0]
    output = args.paths[1] if len(args.paths) == 2 else DEFAULT_OUTPUT
    try:
        validators.validate_output_path(output)
        settings = ConversionSettings.from_env(
            encoder_path=args.encoder,
            work_dir=args.work_dir,
            frame_rate=validators.parse_optional_float(args.frame_rate, "Frame rate"),
            keep_intermediates=args.keep_intermediates,
        )
    except (ValidationError, ValueError) as exc:
        parser.error(str(exc))

    print("Converting Video...\n" "Note: This process may take some time.\n")
    result = convert(source, output, settings=settings)
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
