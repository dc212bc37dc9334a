class HttpExchangeError(Exception):
    detail: str = "HTTP exchange failed."

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.detail)
        self.detail = detail or self.detail


# =============================================================================
# Setup errors, raised before any transport work starts
# =============================================================================
class SetupError(HttpExchangeError):
    detail = "Request could not be set up."


class UnsupportedSchemeError(SetupError):
    detail = "Unsupported transport."

    def __init__(self, scheme: str):
        super().__init__(f"Unsupported transport {scheme}:")
        self.scheme = scheme


class InvalidTargetError(SetupError):
    detail = "Invalid request target."


# =============================================================================
# Runtime errors, recorded on transaction.info["error"] and never raised
# =============================================================================
class TransactionFailure(HttpExchangeError):
    detail = "Error"


class TransactionTimeout(TransactionFailure):
    detail = "Timeout"

    def __init__(self, detail: str | None = None, phase: str | None = None):
        super().__init__(detail)
        self.phase = phase


class TransactionAborted(TransactionFailure):
    detail = "Aborted"


class TransactionAbort(TransactionFailure):
    detail = "Abort"


class TransactionError(TransactionFailure):
    detail = "Error"


class TooManyRedirects(TransactionFailure):
    detail = "Too many redirects."
