"""Error taxonomy for a mint run and classification of foreign exceptions."""

from __future__ import annotations

from enum import Enum


class MintError(Exception):
    """Base class for every failure that terminates a mint run."""


class CredentialError(MintError):
    """The keypair file is missing, unreadable or malformed."""


class NetworkError(MintError):
    """The RPC endpoint could not be reached or returned a transport error."""


class InsufficientFundsError(MintError):
    """The payer cannot cover fees or rent for the create transaction."""


class MintTimeoutError(MintError):
    """The local deadline passed before confirmation.

    The transaction is not cancelled and may still land on-chain.
    """

    def __init__(self, timeout: float, signature: str | None = None) -> None:
        self.timeout = timeout
        self.signature = signature
        super().__init__(f"Transaction timeout after {timeout:g} seconds")


class ProgramNotFoundError(MintError):
    """The target program is not deployed or does not resolve as configured."""


class SubmissionError(MintError):
    """The node rejected the transaction; carries program logs when available."""

    def __init__(self, message: str, logs: list[str] | None = None) -> None:
        super().__init__(message)
        self.logs = list(logs or [])


class ErrorKind(str, Enum):
    TIMEOUT = "timeout"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    CREDENTIAL = "credential"
    NETWORK = "network"
    PROGRAM_NOT_FOUND = "program_not_found"
    UNKNOWN = "unknown"


_TYPED = (
    (MintTimeoutError, ErrorKind.TIMEOUT),
    (InsufficientFundsError, ErrorKind.INSUFFICIENT_FUNDS),
    (CredentialError, ErrorKind.CREDENTIAL),
    (NetworkError, ErrorKind.NETWORK),
    (ProgramNotFoundError, ErrorKind.PROGRAM_NOT_FOUND),
)

# Checked in order against the lowercased message, for untyped errors only.
_SUBSTRINGS = (
    (("timeout", "timed out"), ErrorKind.TIMEOUT),
    (
        ("insufficient funds", "insufficientfunds", "insufficient lamports",
         "no record of a prior credit"),
        ErrorKind.INSUFFICIENT_FUNDS,
    ),
    (("keypair",), ErrorKind.CREDENTIAL),
    (("network", "connect"), ErrorKind.NETWORK),
    (("program that does not exist", "programaccountnotfound"), ErrorKind.PROGRAM_NOT_FOUND),
)


def classify_message(text: str) -> ErrorKind:
    """Classify an unstructured error message by substring."""
    lowered = text.lower()
    for needles, kind in _SUBSTRINGS:
        if any(n in lowered for n in needles):
            return kind
    return ErrorKind.UNKNOWN


def classify_error(exc: BaseException) -> ErrorKind:
    """Map an exception to an ErrorKind, preferring its type over its message."""
    for exc_type, kind in _TYPED:
        if isinstance(exc, exc_type):
            return kind
    if isinstance(exc, TimeoutError):
        return ErrorKind.TIMEOUT
    text = str(exc)
    if isinstance(exc, SubmissionError) and exc.logs:
        text = "\n".join([text, *exc.logs])
    return classify_message(text)
