# main.py
"""
CLI entrypoint for find-guardduty-user.

- find: list GuardDuty findings and print the user behind each one.
- version: print the installed version ("development" when not installed).
- completion: print a bash completion script.

Credential model:
- AWS Vault (or similar) injects credentials via environment variables; nothing else
  is consulted.
"""

import argparse
import logging
import sys
from importlib.metadata import PackageNotFoundError, version as dist_version
from typing import List, Optional

import boto3
import shtab
from botocore.credentials import EnvProvider
from botocore.exceptions import BotoCoreError

from config import (
    ARCHIVED_FLAG,
    AWS_GUARDDUTY_PARTITION_FLAG,
    AWS_GUARDDUTY_REGION_FLAG,
    DEFAULT_AWS_PARTITION,
    DEFAULT_AWS_REGION,
    DEFAULT_OUTPUT,
    OUTPUT_FLAG,
    VALID_OUTPUTS,
    VERBOSE_FLAG,
    Config,
    check_config,
    load_config,
)
from errors import CredentialsError, FatalError, SessionError
from finder import run_find
from utils import setup_logger

DIST_NAME = "find-guardduty-user"


def get_version() -> str:
    try:
        return dist_version(DIST_NAME)
    except PackageNotFoundError:
        return "development"


def create_session(config: Config) -> boto3.Session:
    """
    Build a boto3 Session for the configured region from environment credentials.
    """
    try:
        creds = EnvProvider().load()
    except BotoCoreError as e:
        raise CredentialsError(f"error reading aws credentials from environment: {e}") from e
    if creds is None:
        raise CredentialsError(
            "no aws credentials in environment (AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY)"
        )
    try:
        return boto3.Session(
            aws_access_key_id=creds.access_key,
            aws_secret_access_key=creds.secret_key,
            aws_session_token=creds.token,
            region_name=config.region,
        )
    except BotoCoreError as e:
        raise SessionError(f"error creating aws session: {e}") from e


def run(config: Config, logger: logging.Logger) -> int:
    """
    Validate config, connect and walk findings. Raises FatalError on setup problems.
    """
    check_config(config)
    session = create_session(config)
    try:
        guardduty = session.client("guardduty")
        cloudtrail = session.client("cloudtrail")
    except BotoCoreError as e:
        raise SessionError(f"error creating aws clients: {e}") from e
    logger.debug("Using partition %s, region %s", config.partition, config.region)
    return run_find(config, guardduty, cloudtrail, logger)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="find-guardduty-user",
        description="Find Users that triggered GuardDuty findings",
    )
    sub = p.add_subparsers(dest="command", required=True)

    find = sub.add_parser(
        "find",
        help="Find Users that triggered GuardDuty findings",
        description="Easily identify IAM users that have triggered GuardDuty findings.",
    )
    # Defaults are None so environment variables can fill in unset flags
    find.add_argument(
        "-p", f"--{AWS_GUARDDUTY_PARTITION_FLAG}",
        dest="partition",
        default=None,
        help=f"AWS partition used for inspecting guardduty (default: {DEFAULT_AWS_PARTITION})",
    )
    find.add_argument(
        "-r", f"--{AWS_GUARDDUTY_REGION_FLAG}",
        dest="region",
        default=None,
        help=f"AWS region used for inspecting guardduty (default: {DEFAULT_AWS_REGION})",
    )
    find.add_argument(
        "-a", f"--{ARCHIVED_FLAG}",
        dest="archived",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Show archived findings instead of current findings",
    )
    find.add_argument(
        "-o", f"--{OUTPUT_FLAG}",
        dest="output",
        default=None,
        help=f"Whether to print output as {' or '.join(repr(o) for o in VALID_OUTPUTS)} "
             f"(default: {DEFAULT_OUTPUT})",
    )
    find.add_argument(
        "-v", f"--{VERBOSE_FLAG}",
        dest="verbose",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Log messages at the debug level",
    )

    sub.add_parser("version", help="Print the version")
    sub.add_parser(
        "completion",
        help="Generates bash completion scripts",
        description="To install completion scripts run:\n"
                    "find-guardduty-user completion > /usr/local/etc/bash_completion.d/find-guardduty-user",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "version":
        print(get_version())
        return 0
    if args.command == "completion":
        print(shtab.complete(parser, shell="bash"))
        return 0

    config = load_config(args)
    logger = setup_logger(config.verbose)
    try:
        printed = run(config, logger)
    except FatalError as e:
        logger.error("%s", e)
        return 1
    logger.debug("Printed %d findings", printed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
