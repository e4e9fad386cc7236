"""
Central configuration and tunable constants.

- Flag values can be overridden by environment variables: the flag name upper-cased
  with hyphens turned into underscores (e.g. AWS_GUARDDUTY_REGION).
- Validation uses botocore's bundled endpoint data; no network calls are made.
"""

import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import boto3
from botocore.exceptions import BotoCoreError

from errors import InvalidOutputError, InvalidPartitionError, InvalidRegionError, SessionError

# Flag names
AWS_GUARDDUTY_PARTITION_FLAG = "aws-guardduty-partition"
AWS_GUARDDUTY_REGION_FLAG = "aws-guardduty-region"
ARCHIVED_FLAG = "archived"
OUTPUT_FLAG = "output"
VERBOSE_FLAG = "debug-logging"

DEFAULT_AWS_PARTITION = "aws"
DEFAULT_AWS_REGION = "us-west-2"
DEFAULT_OUTPUT = "json"

OUTPUT_JSON = "json"
OUTPUT_TEXT = "text"
VALID_OUTPUTS = (OUTPUT_JSON, OUTPUT_TEXT)

GUARDDUTY_SERVICE = "guardduty"

# Sample findings generated by GuardDuty carry these instead of real credentials
GENERATED_ACCESS_KEY_ID = "GeneratedFindingAccessKeyId"
GENERATED_PRINCIPAL_ID = "GeneratedFindingPrincipalId"

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Config:
    partition: str = DEFAULT_AWS_PARTITION
    region: str = DEFAULT_AWS_REGION
    archived: bool = False
    output: str = DEFAULT_OUTPUT
    verbose: bool = False


def env_name(flag: str) -> str:
    return flag.replace("-", "_").upper()


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in _TRUE_VALUES


def _resolve(flag: str, cli_value: Any, environ: Mapping[str, str], default: Any) -> Any:
    """
    Pick a value for one flag: explicit CLI value, then environment, then default.
    """
    if cli_value is not None:
        return cli_value
    raw = environ.get(env_name(flag))
    if raw is None:
        return default
    if isinstance(default, bool):
        return _parse_bool(raw)
    return raw


def load_config(args, environ: Optional[Mapping[str, str]] = None) -> Config:
    """
    Build a Config from parsed argparse args. Args left unset must be None so the
    environment can fill them in.
    """
    if environ is None:
        environ = os.environ
    return Config(
        partition=_resolve(AWS_GUARDDUTY_PARTITION_FLAG, getattr(args, "partition", None),
                           environ, DEFAULT_AWS_PARTITION),
        region=_resolve(AWS_GUARDDUTY_REGION_FLAG, getattr(args, "region", None),
                        environ, DEFAULT_AWS_REGION),
        archived=_resolve(ARCHIVED_FLAG, getattr(args, "archived", None), environ, False),
        output=_resolve(OUTPUT_FLAG, getattr(args, "output", None), environ, DEFAULT_OUTPUT),
        verbose=_resolve(VERBOSE_FLAG, getattr(args, "verbose", None), environ, False),
    )


def check_region(config: Config) -> None:
    if not config.partition:
        raise InvalidPartitionError(config.partition)
    if not config.region:
        raise InvalidRegionError(config.region, config.partition)
    try:
        session = boto3.session.Session()
        partitions = session.get_available_partitions()
        regions = session.get_available_regions(GUARDDUTY_SERVICE, partition_name=config.partition)
    except BotoCoreError as e:
        raise SessionError(f"unable to load aws endpoint data: {e}") from e
    if config.partition not in partitions:
        raise InvalidPartitionError(config.partition)
    if config.region not in regions:
        raise InvalidRegionError(config.region, config.partition)


def check_output(config: Config) -> None:
    if config.output not in VALID_OUTPUTS:
        raise InvalidOutputError(config.output)


def check_config(config: Config) -> None:
    """
    Raise a FatalError subclass if partition, region or output is unusable.
    """
    check_region(config)
    check_output(config)
