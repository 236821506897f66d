"""
Error taxonomy shared by the catalog pipeline, the record store and the API.

`SourceUnavailable` never leaves the component that raised it; the others are
mapped to HTTP responses in `bookshelf.main`.
"""


class SourceUnavailable(Exception):
    """A single external catalog, cover or storage call failed"""

    def __init__(self, source: str, detail: str):
        super().__init__(f"{source}: {detail}")
        self.source = source
        self.detail = detail


class BadRequest(ValueError):
    """Required input is missing or malformed"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(LookupError):
    """No library record exists for the given id"""

    def __init__(self, record_id: str):
        super().__init__(f"Book not found: {record_id}")
        self.record_id = record_id
        self.message = f"Book not found: {record_id}"


class StoreUnavailable(RuntimeError):
    """The backing table is unreachable or misconfigured"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
