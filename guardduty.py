# guardduty.py
"""
GuardDuty access: detector enumeration, finding pagination and finding retrieval.

- list_detectors_live raises DetectorListError (fatal).
- iter_finding_id_pages logs list errors and stops walking that detector.
- get_findings_live raises FindingPageError (recoverable) so the caller can skip the page.
"""

import logging
from typing import Any, Dict, Iterator, List

from botocore.exceptions import BotoCoreError, ClientError

from errors import DetectorListError, FindingPageError


def finding_criteria(archived: bool) -> Dict[str, Any]:
    return {
        "Criterion": {
            "service.archived": {"Eq": ["true" if archived else "false"]},
        }
    }


def list_detectors_live(client) -> List[str]:
    """
    Return all detector ids in the client's region.
    """
    detector_ids: List[str] = []
    paginator = client.get_paginator("list_detectors")
    try:
        for page in paginator.paginate():
            detector_ids.extend(page.get("DetectorIds", []))
    except (ClientError, BotoCoreError) as e:
        raise DetectorListError(f"unable to list GuardDuty detectors: {e}") from e
    return detector_ids


def iter_finding_id_pages(client, detector_id: str, archived: bool,
                          logger: logging.Logger) -> Iterator[List[str]]:
    """
    Yield pages of finding ids for one detector.

    The walk ends on an empty id list, an empty/absent NextToken, or a ListFindings
    error (treated as an empty result, never retried).
    """
    paginator = client.get_paginator("list_findings")
    pages = iter(paginator.paginate(DetectorId=detector_id,
                                    FindingCriteria=finding_criteria(archived)))
    while True:
        try:
            resp = next(pages)
        except StopIteration:
            return
        except (ClientError, BotoCoreError) as e:
            logger.error("Unable to list GuardDuty findings for detector %s: %s", detector_id, e)
            return

        finding_ids = resp.get("FindingIds", []) or []
        if not finding_ids:
            return
        yield finding_ids


def get_findings_live(client, detector_id: str, finding_ids: List[str]) -> List[Dict[str, Any]]:
    try:
        resp = client.get_findings(DetectorId=detector_id, FindingIds=finding_ids)
    except (ClientError, BotoCoreError) as e:
        raise FindingPageError(
            f"unable to retrieve {len(finding_ids)} GuardDuty findings for detector {detector_id}: {e}"
        ) from e
    return resp.get("Findings", []) or []
