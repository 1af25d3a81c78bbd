"""Error types raised by the mining core."""

from __future__ import annotations


class MiningError(Exception):
    """Base class for all errors raised by bitapriori."""


class MiningCancelled(MiningError):
    """The caller requested the mining run to stop.

    Raised from the innermost loop that noticed the request and propagated
    unchanged to the top-level call. Any partial state is discarded.
    """


class InvalidConfiguration(MiningError, ValueError):
    """A mining parameter or the input shape is not acceptable."""


class InternalInconsistency(MiningError, RuntimeError):
    """A lookup guaranteed by the algorithm's invariants failed."""
