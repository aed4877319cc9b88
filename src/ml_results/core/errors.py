"""Exception types for ml-results.

The parsing and formatting core is total over string input and raises none of
these. They belong to the edges: building a query result from an HTTP status
and the CLI.
"""


class ResultsError(Exception):
    """Base class for ml-results errors."""


class QueryFailedError(ResultsError):
    """The query endpoint answered with a non-2xx status."""

    def __init__(self, message: str, status: int):
        super().__init__(message)
        self.status = status
