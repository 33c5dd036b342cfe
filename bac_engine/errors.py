"""Engine error types. None of these is fatal to the process."""


class BacEngineError(Exception):
    """Base class for drink tracking errors."""


class InvalidInput(BacEngineError, ValueError):
    """Malformed drink or profile parameters. Raised before any mutation."""


class NotFound(BacEngineError, KeyError):
    """Remove of a record id the ledger does not hold. Ledger is unchanged."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "not found"


class PersistenceFailure(BacEngineError):
    """The storage collaborator could not durably save or load."""
