"""Main CLI entry point."""

import argparse
import logging
import signal
import sys
from pathlib import Path
from typing import Optional

from borderscan.binarization.invert import invert
from borderscan.export.image_writer import encoder_for, resolve_output_path, save_image
from borderscan.ingest.loader import load_image
from borderscan.orchestration.pipeline import BorderScanPipeline
from borderscan.shared.cancellation import CancellationToken, OperationCancelled
from borderscan.shared.config import Settings, reload_settings
from borderscan.shared.log import configure_logging
from borderscan.shared.models import TracingMode
from borderscan.vectorization.renderer import render_step_frame

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CANCELLED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="borderscan",
        description="Binarize an image with Otsu's method and draw the traced contours",
    )
    parser.add_argument("input", type=str,
                        help="Input image (png, jpg, jpeg, gif, tif, tiff, bmp)")
    parser.add_argument("-o", "--output", type=str, default=None,
                        help="Output file, format inferred from extension (default: out.png)")
    parser.add_argument("--log", type=str, default=None, choices=["auto", "json", "text"],
                        help="Log output mode (default: auto)")
    parser.add_argument("--log-level", type=str, default=None,
                        help="Log level (default: INFO)")
    parser.add_argument("--config", type=str, default=None,
                        help="Path to a YAML config file")
    parser.add_argument("--timeout", type=float, default=None,
                        help="Cancel processing after this many seconds")
    parser.add_argument("--mode", type=str, default=None,
                        choices=[m.value for m in TracingMode],
                        help="Contour matching mode (default: simple)")
    parser.add_argument("--step-rows", type=int, default=None,
                        help="Also write a frame revealing contours for the first N rows")
    parser.add_argument("--step-output", type=str, default=None,
                        help="Path for the step frame (default: <output stem>_step<ext>)")
    parser.add_argument("--invert", action="store_true",
                        help="Also write the color-inverted input as <output stem>_inverted<ext>")
    return parser


def _sibling(path: Path, suffix: str) -> Path:
    return path.with_name(f"{path.stem}_{suffix}{path.suffix}")


def run(args: argparse.Namespace, settings: Settings, token: CancellationToken) -> int:
    """Run the scan described by parsed arguments."""
    output = settings.output

    out_path, fmt = resolve_output_path(args.output or output.default_path, output.default_format)
    mode = TracingMode(args.mode or settings.processing.tracing_mode)
    # Fail on an unknown format before doing any work
    encoder_for(fmt, output)

    print(f"Input: {args.input}")
    print(f"Output: {out_path} (format: {fmt})")
    print(f"Log mode: {args.log or settings.logging.mode}")

    source = load_image(args.input)
    result = BorderScanPipeline(settings, mode=mode).run(source, token)

    # Everything that can be cancelled runs before the first file is written
    frame = None
    if args.step_rows is not None:
        frame = render_step_frame(result.mask, result.overlay, args.step_rows)
    inverted = invert(source, token) if args.invert else None

    written = save_image(result.overlay, out_path, output)
    if frame is not None:
        step_path = Path(args.step_output) if args.step_output else _sibling(written, "step")
        save_image(frame, step_path, output)
    if inverted is not None:
        save_image(inverted, _sibling(written, "inverted"), output)

    print(f"Threshold: {result.threshold}, contours: {result.summary.contour_count}")
    return EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    settings = reload_settings(args.config)
    configure_logging(
        args.log or settings.logging.mode,
        args.log_level or settings.logging.level,
    )

    timeout = args.timeout if args.timeout is not None else settings.processing.timeout_seconds
    token = CancellationToken.with_timeout(timeout) if timeout is not None else CancellationToken()

    previous = signal.signal(signal.SIGINT, lambda signum, frame: token.cancel())
    try:
        return run(args, settings, token)
    except OperationCancelled as e:
        logger.error(f"Processing cancelled: {e.reason}")
        return EXIT_CANCELLED
    except (OSError, ValueError) as e:
        logger.error(f"Error: {e}")
        return EXIT_ERROR
    finally:
        signal.signal(signal.SIGINT, previous)


if __name__ == "__main__":
    sys.exit(main())
