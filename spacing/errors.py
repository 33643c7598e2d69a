"""Error taxonomy shared by the vote core and the HTTP layer.

`ValidationError` is raised by callers before anything reaches storage.
`StoreError` and its `MissingRequiredFieldError` specialisation are raised by
vote stores; they keep the underlying engine error for diagnostics but never
expose engine-specific types in their own attributes.
"""

from __future__ import annotations

from typing import Iterable, List, Optional


class ValidationError(Exception):
    """A vote payload failed validation.

    `invalid_sizes` lists keys whose values break the size grammar;
    `unknown_fields` lists keys that are not sizes at all.
    """

    def __init__(
        self,
        invalid_sizes: Iterable[str],
        *,
        unknown_fields: Iterable[str] = (),
        message: str = "Invalid sizes",
    ) -> None:
        super().__init__(message)
        self.invalid_sizes: List[str] = list(invalid_sizes)
        self.unknown_fields: List[str] = list(unknown_fields)

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else ""


class StoreError(Exception):
    """Generic persistence failure.

    The message defaults to the string form of the wrapped error. The original
    error is kept on `.original` (and chained as `__cause__` by the adapter)
    so logs retain the driver detail.
    """

    def __init__(self, original: Optional[BaseException] = None, message: Optional[str] = None) -> None:
        if message is None:
            message = str(original) if original is not None else "Database error"
        super().__init__(message)
        self.original = original

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else ""


class MissingRequiredFieldError(StoreError):
    """A row was written without its primary key."""


__all__ = [
    "ValidationError",
    "StoreError",
    "MissingRequiredFieldError",
]
