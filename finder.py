# finder.py
"""
The detector -> finding page -> finding loop.

Findings are processed one at a time in the order GuardDuty returns them.
RecoverableErrors are logged and the unit of work is skipped; FatalErrors propagate.
"""

import logging
from typing import Any, Dict, Optional, TextIO

from cloudtrail import resolve_identity
from config import Config
from errors import RecoverableError
from guardduty import get_findings_live, iter_finding_id_pages, list_detectors_live
from models import finding_detail_from_dict
from utils import print_finding


def process_finding(finding: Dict[str, Any], cloudtrail, config: Config,
                    logger: logging.Logger, out: Optional[TextIO] = None) -> bool:
    """
    Resolve and print one raw finding. Returns True if something was printed.
    """
    detail = finding_detail_from_dict(finding)
    if detail is None:
        logger.debug("Skipping non user finding ID: %s", finding.get("Id", ""))
        return False

    ref = detail.credential_reference()
    if ref is None:
        logger.debug("Skipping finding ID %s: no usable access key or principal id", detail.id)
        return False

    try:
        identity = resolve_identity(cloudtrail, ref, logger)
    except RecoverableError as e:
        logger.error("Unable to resolve identity for finding %s from %s: %s",
                     detail.id, ref.attribute_key, e)
        return False

    print_finding(detail.with_identity(identity), config.output, out)
    return True


def run_find(config: Config, guardduty, cloudtrail, logger: logging.Logger,
             out: Optional[TextIO] = None) -> int:
    """
    Walk every detector and print each finding whose identity resolves.
    Returns the number of findings printed.
    """
    printed = 0
    for detector_id in list_detectors_live(guardduty):
        logger.debug("Walking findings for detector %s (archived=%s)", detector_id, config.archived)
        for finding_ids in iter_finding_id_pages(guardduty, detector_id, config.archived, logger):
            try:
                findings = get_findings_live(guardduty, detector_id, finding_ids)
            except RecoverableError as e:
                logger.error("%s", e)
                continue
            for finding in findings:
                if not finding:
                    continue
                if process_finding(finding, cloudtrail, config, logger, out):
                    printed += 1
    return printed
