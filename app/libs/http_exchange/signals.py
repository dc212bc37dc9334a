from dataclasses import dataclass
from enum import StrEnum

import httpx

from .exceptions import (
    TransactionAbort,
    TransactionAborted,
    TransactionError,
    TransactionFailure,
    TransactionTimeout,
)

# Failures the exchange converts into a terminal signal instead of raising.
EXCHANGE_ERRORS: tuple[type[BaseException], ...] = (httpx.HTTPError, OSError, TimeoutError)


class Cause(StrEnum):
    END = "End"
    TIMEOUT = "Timeout"
    ABORTED = "Aborted"
    ABORT = "Abort"
    ERROR = "Error"


class Phase(StrEnum):
    REQUEST = "request"
    RESPONSE = "response"


_DEFAULT_ERRORS: dict[Cause, type[TransactionFailure]] = {
    Cause.TIMEOUT: TransactionTimeout,
    Cause.ABORTED: TransactionAborted,
    Cause.ABORT: TransactionAbort,
    Cause.ERROR: TransactionError,
}


@dataclass(frozen=True)
class TerminalSignal:
    """The one event that ends a transaction, tagged with its cause."""

    cause: Cause
    phase: Phase = Phase.RESPONSE
    error: BaseException | None = None

    @property
    def abnormal(self) -> bool:
        return self.cause is not Cause.END

    @classmethod
    def end(cls) -> "TerminalSignal":
        return cls(Cause.END)

    @classmethod
    def from_exception(cls, error: BaseException, phase: Phase) -> "TerminalSignal":
        if isinstance(error, (TimeoutError, httpx.TimeoutException)):
            cause = Cause.TIMEOUT
        elif isinstance(error, httpx.RemoteProtocolError):
            # peer hung up: before any response it is the request that was
            # abandoned, afterwards the response was cut short
            cause = Cause.ABORT if phase is Phase.REQUEST else Cause.ABORTED
        elif isinstance(error, httpx.ReadError) and phase is Phase.RESPONSE:
            cause = Cause.ABORTED
        else:
            cause = Cause.ERROR
        return cls(cause, phase, error)

    def default_error(self) -> TransactionFailure | None:
        error_cls = _DEFAULT_ERRORS.get(self.cause)
        if error_cls is None:
            return None
        if error_cls is TransactionTimeout:
            failure: TransactionFailure = TransactionTimeout(phase=self.phase.value)
        else:
            failure = error_cls()
        failure.__cause__ = self.error
        return failure
