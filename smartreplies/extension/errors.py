"""Failures surfaced by the extension runtime."""


class ExtensionError(Exception):
    """Base extension exception."""


class GenerationError(ExtensionError):
    """A reply could not be obtained from the backend."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class TransportError(GenerationError):
    """The backend could not be reached."""


class PaymentSessionError(ExtensionError):
    """The backend did not return a checkout session."""
