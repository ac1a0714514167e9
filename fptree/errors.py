"""
Error taxonomy for fingerprint indexing.

Nothing in the index retries on these; they propagate to the caller.
"""


class TreeIndexError(Exception):
    """Base class for all fptree errors"""


class InvalidInput(TreeIndexError, ValueError):
    """Empty candidate set, unbuilt index or bad parameters"""


class LookupFailure(TreeIndexError, LookupError):
    """
    A tree references an identifier missing from the fingerprint store.

    This is an integrity violation between the tree and its backing store,
    never a retryable condition.
    """


class ComparatorFailure(TreeIndexError, ValueError):
    """Fingerprint engine failure (unreadable image, malformed fingerprint)"""
