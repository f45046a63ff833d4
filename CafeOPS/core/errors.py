"""
Error taxonomy of the café engine and its structured form at the boundary.

- configuration_missing : Settings absent when a request needs them
- invalid_input         : rejected settings patch (nothing written)
- storage               : any SQLAlchemy error, propagated unchanged
- internal              : anything else

A debounced tick is not an error: ``process_tick`` reports it as a
``skipped`` outcome.
"""

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError


class CafeOpsError(Exception):
    kind = "internal"


class SettingsMissingError(CafeOpsError):
    kind = "configuration_missing"


class InvalidSettingsError(CafeOpsError):
    kind = "invalid_input"


class Failure(BaseModel):
    kind: str
    message: str


def to_failure(exc: BaseException) -> Failure:
    """Structured failure (kind + message) for an exception reaching the boundary."""
    if isinstance(exc, CafeOpsError):
        return Failure(kind=exc.kind, message=str(exc))
    if isinstance(exc, SQLAlchemyError):
        return Failure(kind="storage", message=str(exc))
    return Failure(kind="internal", message=f"{type(exc).__name__}: {exc}")
