"""Failure types raised at the edges of the weft core.

None of these is fatal: every caller has a degraded mode for them.
"""


class WeftError(Exception):
    pass


class AcquisitionFailure(WeftError):
    """Loading a graph snapshot failed; callers fall back to an empty snapshot."""


class RemoteSummaryFailure(WeftError):
    """An insight backend failed; callers fall back to offline synthesis."""


class ImportParseFailure(WeftError):
    """An import document was malformed; the current snapshot stays untouched."""


class PersistenceFailure(WeftError):
    """Reading or writing persisted search history failed."""
