import asyncio
from collections import defaultdict

from stackvod.core.unit_types import UnitKind


def lock_key(kind: UnitKind, unit: str) -> str:
    return f'{kind.value}:{unit}'


class UnitLocks:
    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    def get(self, kind: UnitKind, unit: str) -> asyncio.Lock:
        return self._locks[lock_key(kind, unit)]
