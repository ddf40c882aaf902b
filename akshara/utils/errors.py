"""Custom exceptions for the Akshara learning engine."""


class AksharaError(Exception):
    """Base exception for Akshara errors."""

    pass


class ContentError(AksharaError):
    """Raised when the grapheme dataset is malformed."""

    pass


class UnknownModuleError(AksharaError):
    """Raised when a module ID is not part of the curriculum."""

    def __init__(self, module_id: str):
        super().__init__(f"Unknown module: {module_id}")
        self.module_id = module_id


class SessionStateError(AksharaError):
    """Raised when a learning session is driven out of order."""

    pass
