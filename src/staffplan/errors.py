"""
Error taxonomy for staffplan.

Store I/O failures are not wrapped; they propagate to the caller unchanged.
"""


class StaffplanError(Exception):
    """Base exception for staffplan"""
    pass


class NotFoundError(StaffplanError, LookupError):
    """Raised when a referenced activity or user does not exist"""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class InvalidInputError(StaffplanError, ValueError):
    """Raised when a date range or count argument is missing or malformed"""
    pass
