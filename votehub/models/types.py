from __future__ import annotations

from typing import Any, Optional

from sqlalchemy.types import String, TypeDecorator


class Amount(TypeDecorator):
    """
    Unsigned currency amount in the smallest unit (1 coin = 10**18 units).

    Stored as decimal text; values exceed the 64-bit INTEGER range of SQLite.
    """

    impl = String(80)
    cache_ok = True

    def process_bind_param(self, value: Any, dialect) -> Optional[str]:  # noqa: ANN001
        if value is None:
            return None
        i = int(value)
        if i < 0:
            raise ValueError("amount must be >= 0")
        return str(i)

    def process_result_value(self, value: Any, dialect) -> Optional[int]:  # noqa: ANN001
        if value is None:
            return None
        return int(value)
