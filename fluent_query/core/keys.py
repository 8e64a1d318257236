"""Holder for keys generated by INSERT statements."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from fluent_query.core.exceptions import InvalidUsageError, KeyRetrievalError


def _as_number(value: Any) -> int | float | Decimal:
    if isinstance(value, bool):
        raise KeyRetrievalError(value)
    if isinstance(value, (int, float, Decimal)):
        return value
    if isinstance(value, (str, bytes)):
        text = value.decode() if isinstance(value, bytes) else value
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return Decimal(text)
        except InvalidOperation:
            raise KeyRetrievalError(value) from None
    raise KeyRetrievalError(value)


class GeneratedKeyHolder:
    """Collects one key map per row affected by a key-returning statement.

    The collaborator appends to ``key_list``; callers read the keys back with
    ``get_key`` (single numeric key) or ``get_keys`` (single row, several
    columns).
    """

    def __init__(self) -> None:
        self.key_list: list[dict[str, Any]] = []

    def get_key(self) -> int | float | Decimal | None:
        """Return the only generated key as a number, or None if there is none.

        Raises:
            InvalidUsageError: if keys were generated for several rows, or
                the key row holds more than one column.
            KeyRetrievalError: if the key is not numeric, including NULL.
        """
        if not self.key_list:
            return None
        if len(self.key_list) > 1 or len(self.key_list[0]) != 1:
            raise InvalidUsageError(
                "get_key should only be used when a single key is returned. "
                f"The current key list contains {len(self.key_list)} row(s): {self.key_list}"
            )
        return _as_number(next(iter(self.key_list[0].values())))

    def get_keys(self) -> dict[str, Any] | None:
        """Return the key map of the only affected row, or None if there is none.

        Raises:
            InvalidUsageError: if keys were generated for several rows.
        """
        if not self.key_list:
            return None
        if len(self.key_list) > 1:
            raise InvalidUsageError(
                "get_keys should only be used when keys for a single row are returned. "
                f"The current key list contains keys for {len(self.key_list)} rows"
            )
        return dict(self.key_list[0])
