"""
Error taxonomy for the contract auditor.

Every failure that reaches a caller carries a machine-usable ``category``
and a human-readable message.
"""

from typing import Dict, Optional


class AuditError(Exception):
    """Base class for request-level audit failures"""

    category = "internal_error"

    def __init__(self, message: str, category: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if category:
            self.category = category

    def to_dict(self) -> Dict[str, str]:
        """Error descriptor returned to callers"""
        return {"category": self.category, "message": self.message}


class NoInputError(AuditError):
    """No non-empty source was submitted"""

    category = "no_input"


class UnsupportedInputError(AuditError):
    """An input slot was filled with something this service will not process"""

    category = "unsupported_input"


class SourceReadError(AuditError):
    """A submitted file could not be read"""

    category = "read_failure"

    def __init__(self, filename: str, reason: str):
        super().__init__(f"read failure on file {filename}: {reason}")
        self.filename = filename


class ConfigurationError(AuditError):
    """Required configuration (e.g. a backend credential) is missing"""

    category = "configuration"


class BackendError(AuditError):
    """The generation backend failed or timed out"""

    category = "backend_unavailable"

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.stage = stage


class RepositoryFetchError(AuditError):
    """A remote repository could not be cloned or read"""

    category = "repository_fetch_failure"


class LibraryLoadError(AuditError):
    """
    A library import could not be loaded from disk.

    Absorbed by the dependency resolver and recorded inline; never
    surfaces to the caller.
    """

    category = "read_failure"

    def __init__(self, ref: str, reason: str):
        super().__init__(reason)
        self.ref = ref
