class DriverScoringError(Exception):
    """Base class for all driver-scoring domain exceptions.

    Every custom exception in this module inherits from here so that a
    single ``except DriverScoringError`` clause can catch any domain
    error.  None of them leave the ledger partially mutated: the unit of
    work is rolled back before the exception reaches the caller.
    """

    def __init__(self, detail: str = "An error occurred"):
        self.detail = detail
        super().__init__(detail)


class InvalidScoringDataError(DriverScoringError):
    """Raised when a required field is missing or malformed.

    Detected before any mutation is attempted.
    """

    def __init__(self, detail: str = "Invalid scoring data"):
        super().__init__(detail)


class NotFoundError(DriverScoringError):
    """Raised when a rule, driver, or application record does not exist."""

    def __init__(self, detail: str = "Resource not found"):
        super().__init__(detail)


class RuleNotFoundError(NotFoundError):
    """Raised when a rule is absent, inactive, or of the wrong origin.

    Default rules are reported as missing by the custom-rule operations
    so they can never be edited or deleted through that path.
    """

    def __init__(self, detail: str = "Rule not found"):
        super().__init__(detail)


class DriverNotFoundError(NotFoundError):
    """Raised when the driver registry does not know a driver id."""

    def __init__(self, detail: str = "Driver not found"):
        super().__init__(detail)


class DuplicateRuleKeyError(DriverScoringError):
    """Raised when a rule key is already taken."""

    def __init__(self, detail: str = "Rule key already exists"):
        super().__init__(detail)


class ScoreConflictError(DriverScoringError):
    """Raised when a concurrent update collided with this one.

    The whole operation is safe to retry.
    """

    def __init__(
        self, detail: str = "Concurrent update conflict, please retry the request"
    ):
        super().__init__(detail)


class StoreUnavailableError(DriverScoringError):
    """Raised when the database is unreachable or aborted the transaction."""

    def __init__(self, detail: str = "Score store unavailable"):
        super().__init__(detail)
