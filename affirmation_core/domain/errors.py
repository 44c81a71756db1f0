"""
Typed domain errors for the affirmation core.

Use cases return these inside a ``Failure`` instead of raising, so callers
can distinguish the failure modes (bad input vs. stale id vs. broken storage)
and map each to an appropriate user-facing message. Storage-level errors are
raised by the store and repositories and converted at the use-case boundary.
"""


class DomainError(Exception):
    """Base class for all domain-specific errors."""

    @property
    def message(self) -> str:
        return str(self)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class ValidationError(DomainError):
    """Input rejected by a business rule. The caller must change the input."""


class EmptyTextError(ValidationError):
    """Affirmation text is empty or whitespace-only."""

    def __init__(self) -> None:
        super().__init__("Affirmation text cannot be empty")


class TooLongError(ValidationError):
    """Affirmation text exceeds the maximum length."""

    def __init__(self, length: int, max_length: int) -> None:
        self.length = length
        self.max_length = max_length
        super().__init__(
            f"Affirmation text is too long ({length}/{max_length} characters, "
            f"maximum is {max_length})"
        )


class InvalidInputError(ValidationError):
    """Malformed request (empty id, empty id list, unknown settings field)."""


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


class NotFoundError(DomainError):
    """No affirmation exists for the given id (usually a stale cached view)."""

    def __init__(self, affirmation_id: str) -> None:
        self.affirmation_id = affirmation_id
        super().__init__(f"Affirmation {affirmation_id} not found")


# ---------------------------------------------------------------------------
# Storage / encryption
# ---------------------------------------------------------------------------


class StorageError(DomainError):
    """Disk or database failure. Not retried automatically."""


class StorageClosedError(StorageError):
    """Operation attempted on a store that is not open."""

    def __init__(self, operation: str = "access") -> None:
        self.operation = operation
        super().__init__(f"Cannot {operation}: the store is closed")


class DecryptionError(StorageError):
    """Stored payload could not be decrypted or decoded (wrong key, corruption)."""


class KeyStorageError(StorageError):
    """The secure credential store failed or holds an unusable key."""


class NotInitializedError(DomainError):
    """Encryption cipher requested before the key manager was initialized."""

    def __init__(self) -> None:
        super().__init__(
            "Encryption has not been initialized. "
            "Call EncryptionKeyManager.initialize() first."
        )


# ---------------------------------------------------------------------------
# Widget mirror
# ---------------------------------------------------------------------------


class SyncBridgeError(DomainError):
    """Writing the widget snapshot or signalling the renderer failed."""


# ---------------------------------------------------------------------------
# Import / export
# ---------------------------------------------------------------------------


class ImportSourceError(DomainError):
    """The import payload is empty, unreadable, unparseable or could not be persisted."""


class NothingToExportError(DomainError):
    """Export requested while the repository holds no affirmations."""

    def __init__(self) -> None:
        super().__init__("No affirmations to export")
