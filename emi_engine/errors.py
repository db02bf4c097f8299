class LoanEngineError(Exception):
    """Base class for every error raised by the engine."""


class InvalidInputError(LoanEngineError, ValueError):
    pass


class ConfigurationError(LoanEngineError):
    pass


class NegativeAmortizationFault(LoanEngineError):
    """
    Raised when a repriced installment would not cover the interest accruing
    on the outstanding balance, i.e. the balance would grow instead of shrink.
    """

    def __init__(self, month: int, installment: float, interest: float):
        self.month = month
        self.installment = installment
        self.interest = interest
        super().__init__(
            f"Installment {installment:,.2f} at month {month} does not cover "
            f"interest of {interest:,.2f}"
        )
