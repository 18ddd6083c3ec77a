"""CLI entry point: generates and verifies combined tokens."""

import sys
import logging as log
from argparse import ArgumentParser, Namespace

from combined_totp.combined import (
    DEFAULT_ALLOWANCE,
    SECONDS,
    generate_combined_token,
    verify_combined_token,
)
from combined_totp.crypto import load_seeds
from combined_totp.otp import DEFAULT_WINDOW, seconds_remaining
from combined_totp.utils import current_unix_time

EXIT_INVALID = 2


def process_generate(args: Namespace) -> int:
    """Print the combined token of the seeds file at the given time."""
    seeds = load_seeds(args.seeds_file, args.key_file)
    timestamp = current_unix_time() if args.time is None else args.time

    token = generate_combined_token(seeds, timestamp, args.window)
    remaining = seconds_remaining(timestamp, args.window)
    log.info(f"Token generated for timestamp {timestamp}")

    print(token)
    print(f"Valid for {remaining}s in the current {args.window}s window.")

    return 0


def process_verify(args: Namespace) -> int:
    """Verify a combined token against the seeds file."""
    seeds = load_seeds(args.seeds_file, args.key_file)
    timestamp = current_unix_time() if args.time is None else args.time

    ok = verify_combined_token(
        seeds,
        timestamp,
        args.token,
        args.window,
        args.allowance,
        args.unit,
    )
    log.info(f"Token verification at {timestamp}: {ok}")

    if ok:
        print("VALID")
        return 0

    print("INVALID")
    return EXIT_INVALID


def add_common_args(parser: ArgumentParser) -> None:
    """Add the arguments shared by every subcommand."""
    parser.add_argument(
        "seeds_file",
        metavar="SEEDS FILE",
        help="File holding the six seeds, one per line."
    )
    parser.add_argument(
        "-k", "--key",
        dest="key_file",
        metavar="FERNET KEY FILE",
        help="Fernet key file, when the seeds file is encrypted."
    )
    parser.add_argument(
        "-t", "--time",
        type=int,
        metavar="TIMESTAMP",
        help="UNIX timestamp in seconds (default: now)."
    )
    parser.add_argument(
        "-w", "--window",
        type=int,
        default=DEFAULT_WINDOW,
        help=f"Time step in seconds (default: {DEFAULT_WINDOW})."
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug messages on stderr."
    )


def validate_arg(parser: ArgumentParser, argv: list[str] | None) -> Namespace:
    """Define the subcommands and parse the arguments.

    Args:
        parser: ArgumentParser instance to configure.
        argv: Arguments to parse, sys.argv[1:] when None.

    Returns:
        Parsed arguments as a Namespace object.
    """
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser(
        "generate",
        help="Print the combined token for the seeds."
    )
    add_common_args(generate)
    generate.set_defaults(func=process_generate)

    verify = subparsers.add_parser(
        "verify",
        help="Check a combined token against the seeds."
    )
    add_common_args(verify)
    verify.add_argument("token", metavar="TOKEN", help="Token to verify.")
    verify.add_argument(
        "-a", "--allowance",
        type=int,
        default=DEFAULT_ALLOWANCE,
        help=(
            "Adjacent windows accepted for clock drift"
            f" (default: {DEFAULT_ALLOWANCE})."
        )
    )
    verify.add_argument(
        "-u", "--unit",
        default=SECONDS,
        help=f"Unit of the window (default: {SECONDS})."
    )
    verify.set_defaults(func=process_verify)

    args = parser.parse_args(argv)

    return args


def main(argv: list[str] | None = None) -> int:
    """Entry point for the combined TOTP CLI."""
    description = "Six-seed combined time-based one-time password tool"
    parser = ArgumentParser(prog="combined-totp", description=description)
    args = validate_arg(parser, argv)

    log.basicConfig(
        stream=sys.stderr,
        level=log.DEBUG if args.verbose else log.WARNING,
        format="{asctime} - {levelname} - {message}",
        style="{",
        datefmt="%Y-%m-%d %H:%M",
    )

    try:
        return args.func(args)
    except (OSError, ValueError) as e:
        print(f"{type(e).__name__}: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
