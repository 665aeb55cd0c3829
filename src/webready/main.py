"""Main module for the WebReady CLI."""

import sys
import argparse

from . import __version__
from .core import WebReadyError, get_logger
from .process_images import add_batch_arguments, add_single_arguments, run_batch, run_single


def build_parser() -> argparse.ArgumentParser:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="webready",
        description="WebReady - responsive WebP/AVIF derivatives with ready-to-use markup",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # One image at the default breakpoints (480, 768, 1200) as WebP
  webready process hero.jpg

  # WebP + AVIF at custom widths with a custom sizes attribute
  webready process hero.jpg --widths 640,1280 --formats webp,avif \\
                   --sizes "(max-width: 640px) 100vw, 50vw"

  # Several images in parallel threads
  webready batch a.jpg b.png c.jpg --processor multithread

  # Show version
  webready version
        """,
    )

    subparsers: argparse._SubParsersAction = parser.add_subparsers(
        dest="command", help="Available commands"
    )

    add_single_arguments(
        subparsers.add_parser(
            "process", help="Generate derivatives and markup for one image"
        )
    )
    add_batch_arguments(
        subparsers.add_parser(
            "batch", help="Generate derivatives and markup for several images"
        )
    )
    subparsers.add_parser("version", help="Show version information")

    return parser


def main() -> None:
    """
    Entry point for the WebReady command-line interface.

    Dispatches to the single-image or batch command; any WebReady error
    is reported on the log and turns into exit status 1.
    """
    parser = build_parser()
    args: argparse.Namespace = parser.parse_args()

    commands = {"process": run_single, "batch": run_batch}

    if args.command in commands:
        logger = get_logger("webready.cli")
        try:
            commands[args.command](args)
        except KeyboardInterrupt:
            logger.warning("Interrupted by user")
            sys.exit(130)
        except WebReadyError as e:
            logger.error(f"{type(e).__name__}: {e}")
            sys.exit(1)

    elif args.command == "version":
        print("WebReady CLI")
        print(f"Version {__version__}")
        print("Responsive WebP/AVIF derivatives with ready-to-use markup")
        sys.exit(0)

    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
