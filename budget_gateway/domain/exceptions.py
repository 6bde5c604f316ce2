"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class MissingPlanError(DomainException):
    """Client has no active budget plan"""

    pass


class RecordsAPIError(DomainException):
    """Clinic records API returned an error or is unavailable"""

    pass


class InvalidRecordDataError(DomainException):
    """Budget or session data from the records API is malformed"""

    pass
