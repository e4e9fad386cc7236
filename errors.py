# errors.py
"""
Error classification for the finder.

- FatalError aborts the whole run (bad configuration, no credentials, no session,
  detectors cannot be listed).
- RecoverableError skips the current unit of work (a page of findings or a single
  finding) and processing continues.
"""


class FindUserError(Exception):
    """Base class for every error raised by find-guardduty-user."""


class FatalError(FindUserError):
    pass


class RecoverableError(FindUserError):
    pass


# --- Fatal ----------------------------------------------------------------

class InvalidPartitionError(FatalError):
    def __init__(self, partition: str):
        self.partition = partition
        super().__init__(f"invalid partition {partition!r}")


class InvalidRegionError(FatalError):
    def __init__(self, region: str, partition: str = ""):
        self.region = region
        self.partition = partition
        msg = f"invalid region {region!r}"
        if partition:
            msg += f" for guardduty in partition {partition!r}"
        super().__init__(msg)


class InvalidOutputError(FatalError):
    def __init__(self, output: str):
        self.output = output
        super().__init__(f"invalid output {output!r}")


class CredentialsError(FatalError):
    pass


class SessionError(FatalError):
    pass


class DetectorListError(FatalError):
    pass


# --- Recoverable ----------------------------------------------------------

class FindingPageError(RecoverableError):
    pass


class LookupEventError(RecoverableError):
    pass


class IdentityParseError(RecoverableError):
    pass
