"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidPeriodKeyError(DomainException):
    """Period key and its record carry no usable date"""

    pass


class InvalidReferenceDateError(DomainException):
    """Reference date ("today") could not be interpreted as a calendar date"""

    pass
