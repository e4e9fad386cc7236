# utils.py
"""
Utility helpers: output formatting and logger setup.

- Results go to stdout as one JSON object per line or as a fixed text block.
- Log records go to stderr through Rich so they never mix with results.
"""

import json
import logging
import sys
from typing import Dict, Optional, TextIO

from rich.console import Console
from rich.logging import RichHandler

from config import OUTPUT_JSON
from models import FindingDetail

LOGGER_NAME = "find_guardduty_user"

TEXT_TEMPLATE = """
Finding ID:         {id}
Finding Created At: {created_at}
Access Key ID:      {access_key_id}
Principal ID:       {principal_id}
Assumed Role ARN:   {assumed_role_arn}
Username:           {username}
IPv4:               {ip_address}
Service Name:       {service_name}
API:                {api}
City, Country:      {city}, {country}"""

# (json key, attribute) in output order; optional keys are dropped when empty
_JSON_FIELDS = [
    ("id", "id", False),
    ("createdAt", "created_at", False),
    ("accessKeyID", "access_key_id", True),
    ("principalID", "principal_id", True),
    ("assumeRoleARN", "assumed_role_arn", False),
    ("username", "username", False),
    ("ipAddress", "ip_address", True),
    ("serviceName", "service_name", True),
    ("api", "api", True),
    ("city", "city", True),
    ("country", "country", True),
]


def finding_to_dict(detail: FindingDetail) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for key, attr, optional in _JSON_FIELDS:
        value = getattr(detail, attr)
        if optional and not value:
            continue
        out[key] = value if value is not None else ""
    return out


def finding_to_json(detail: FindingDetail) -> str:
    return json.dumps(finding_to_dict(detail), separators=(",", ":"))


def finding_to_text(detail: FindingDetail) -> str:
    """
    Render the fixed text block; missing values show as empty strings.
    """
    values = {attr: getattr(detail, attr) or "" for _, attr, _ in _JSON_FIELDS}
    return TEXT_TEMPLATE.format(**values)


def print_finding(detail: FindingDetail, output: str, out: Optional[TextIO] = None) -> None:
    out = out or sys.stdout
    if output == OUTPUT_JSON:
        out.write(finding_to_json(detail) + "\n")
    else:
        out.write(finding_to_text(detail) + "\n")


def setup_logger(verbose: bool = False, stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Configure and return the application logger. Call once at startup.

    - DEBUG when verbose, INFO otherwise.
    - Does not propagate to the root logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    console = Console(file=stream) if stream is not None else Console(stderr=True)
    handler = RichHandler(
        console=console,
        show_time=verbose,
        show_path=verbose,
        markup=False,
        rich_tracebacks=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False
    return logger
