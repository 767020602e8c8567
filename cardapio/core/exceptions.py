"""
Error taxonomy shared by the storage, service and controller layers.

Storage and services raise these; controllers catch them and turn them into
result envelopes. Only DomainError messages are ever shown to end users.
"""


class CardapioError(Exception):
    """Base class for every error raised by the package."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class StorageError(CardapioError):
    """The key-value backend failed to read, write or remove data."""


class DomainError(CardapioError):
    """A business rule was violated; the message is safe to display."""


class NotFoundError(DomainError):
    pass


class EmailAlreadyRegisteredError(DomainError):
    pass


class TaxIdAlreadyRegisteredError(DomainError):
    pass


class SessionNotFoundError(DomainError):
    pass
