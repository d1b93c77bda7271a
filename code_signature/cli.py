#!/usr/bin/env python3
"""
Code Signature Command Line Interface

Usage:
    code-signature [OPTIONS] <FILE|->

Environment:
    MNEMONIC    signing key mnemonic; a new one is generated and printed if unset
"""

import argparse
import logging
import sys

from . import config
from .logging_config import configure_logging, set_run_id
from .pipeline import PipelineOptions, SignaturePipeline
from .signing import SigningError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="code-signature",
        description="Verify or embed a sha256 checksum and EIP-191 signature in a text file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  code-signature src/module.ts              Verify, print new markers on failure
  code-signature -w src/module.ts           Verify, re-sign the file in place on failure
  code-signature -v src/module.ts           Verify only
  cat module.py | code-signature -w -p '#' -

Environment:
  MNEMONIC    signing key mnemonic
        """
    )
    parser.add_argument("file", metavar="FILE|-", help="File to check, or - for stdin")
    parser.add_argument("-v", "--verify", action="store_true", help="Only verify, never sign or write")
    parser.add_argument("-w", "--write", action="store_true", help="Write the signed file (to FILE or --out)")
    parser.add_argument("-s", "--silent", action="store_true", help="Suppress informational output")
    parser.add_argument("-p", "--prefix", default=config.PREFIX, help="Marker line prefix (default: %(default)s)")
    parser.add_argument("-o", "--out", help="Write the signed file here instead of FILE")
    parser.add_argument("--log-level", choices=config.LOG_LEVELS, help="Logging level")
    return parser


def run(argv=None) -> int:
    """Parse arguments, run the pipeline, return the exit code."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # usage errors exit 1 like any other failure; --help exits 0
        return 0 if e.code in (0, None) else 1

    configure_logging(
        level=config.effective_log_level(args.log_level),
        json_format=config.log_json(),
        log_file=config.LOG_FILE or None,
    )
    set_run_id()

    options = PipelineOptions(
        file_path=args.file,
        verify_only=args.verify,
        write=args.write,
        silent=args.silent,
        prefix=args.prefix,
        out=args.out,
        mnemonic=config.get_mnemonic(),
    )

    try:
        result = SignaturePipeline(options).run()
    except (OSError, UnicodeDecodeError) as e:
        logger.error("I/O failure on %s: %s", args.file, e)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except SigningError as e:
        logger.error("Signing failed for %s: %s", args.file, e)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    return result.exit_code


def main():
    sys.exit(run())


if __name__ == "__main__":
    main()
