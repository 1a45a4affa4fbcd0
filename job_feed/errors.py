"""Exception types shared across the feed pipeline."""


class JobFeedError(Exception):
    """Base class for job feed errors."""


class ProfileNotFoundError(JobFeedError, LookupError):
    """The user's profile could not be loaded; a feed cannot be built."""

    def __init__(self, user_id: str):
        super().__init__(f"No profile found for user {user_id}")
        self.user_id = user_id


class StoreError(JobFeedError):
    """A relational store operation failed."""


class EmbeddingError(JobFeedError):
    """The embedding provider failed or returned an unusable vector."""


class VectorIndexError(JobFeedError):
    """The vector index rejected a write or query."""
