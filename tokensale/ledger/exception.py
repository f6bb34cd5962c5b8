class LedgerFail(Exception):
    """Raised by blueprint methods to reject an operation.

    The runner discards every pending change when this is raised and reports
    a soft failure to the caller.
    """
    pass


class InvalidCommand(LedgerFail):
    """Raised when a command fails validation at the boundary."""
    pass


class NotInitialized(LedgerFail):
    pass


class AlreadyInitialized(LedgerFail):
    pass


class Unauthorized(LedgerFail):
    """Raised when the required witness is missing."""
    pass


class InvalidAddress(LedgerFail):
    pass


class InvalidTier(LedgerFail):
    pass


class InvalidAllocationClass(LedgerFail):
    pass


class DuplicateTransaction(LedgerFail):
    pass


class SaleClosed(LedgerFail):
    pass


class NotEligible(LedgerFail):
    """Raised when a contribution is rejected without a refund."""
    pass


class PrivateSaleLocked(LedgerFail):
    pass


class AllocationExceedsPool(LedgerFail):
    pass


class SaleNotEnded(LedgerFail):
    pass


class UnsoldTokensAlreadyClaimed(LedgerFail):
    pass
