"""Shared infrastructure for examples."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field


# Errors
@dataclass(frozen=True, slots=True)
class NotFound(Exception):
    key: str

    def __str__(self) -> str:
        return f"{self.key} not found"


# Fake API: answers keys like "/users/1", counts round trips
@dataclass(slots=True)
class FakeApi:
    users: dict[str, dict[str, object]] = field(default_factory=lambda: {
        "/users/1": {"id": 1, "name": "Alice"},
        "/users/2": {"id": 2, "name": "Bob"},
    })
    requests: int = 0

    async def fetch(self, key: str) -> dict[str, object]:
        self.requests += 1
        print(f"  [ORIGIN] GET {key}")
        await asyncio.sleep(0.01)
        user = self.users.get(key)
        if user is None:
            raise NotFound(key)
        return dict(user)


# Helpers
def banner(title: str) -> None:
    print(f"\n{'─' * 50}\n{title}\n{'─' * 50}")


def run(main: Callable[[], Coroutine[object, object, None]]) -> None:
    asyncio.run(main())
