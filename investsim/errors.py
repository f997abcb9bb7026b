"""Exceptions raised by the simulation core."""


class InvestSimError(RuntimeError):
    """Base class for all investsim errors."""


class NoTradableInstrumentsError(InvestSimError):
    """Raised when asset loading ends with nothing to trade.

    The run cannot start; callers must report this to the player.
    """


class SessionSupersededError(InvestSimError):
    """A newer session load started before this one finished."""


class InsufficientFundsError(InvestSimError):
    """Not enough pocket cash (or units) for the requested operation."""


class UnknownInstrumentError(InvestSimError):
    """Instrument id is not part of the current session."""
