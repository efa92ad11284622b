"""Exceptions shared across bounded contexts."""


class UpstreamFailure(Exception):
    """Every path to a dependency failed. Served as HTTP 502."""

    def failure_details(self) -> list[dict]:
        return []
