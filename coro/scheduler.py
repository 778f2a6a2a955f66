"""Round-robin scheduler for cooperative tasks.

The scheduler is a registry, not an executor: it keeps the ready tasks in a
ring and answers "who runs after this one". Control is always transferred by
the suspending task itself, so the registry may be re-entered freely from
inside a chain of transfers.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from coro._vendor import FrozenDict
from coro.errors import UnknownTokenError
from coro.types import ERASED, Continuation, Token

logger = logging.getLogger(__name__)


@runtime_checkable
class Scheduler(Protocol):
    """Policy deciding which registered continuation runs next."""

    def insert(self, continuation: Continuation) -> Token: ...

    def erase(self, token: Token) -> None: ...

    def resume(self, token: Token) -> tuple[Continuation, bool]: ...

    def __len__(self) -> int: ...


@dataclass(eq=False)
class _Entry:
    continuation: Continuation
    prev: Token
    next: Token


class RoundRobinScheduler:
    """Cyclic registry of continuations in registration order.

    Entries live in a dict keyed by token and are linked into a ring, so
    insert, erase and resume are O(1) and a token stays valid while other
    entries are added or removed. Tokens are never reused.
    """

    def __init__(self) -> None:
        self._entries: dict[Token, _Entry] = {}
        self._head: Token = ERASED
        self._tokens = itertools.count(1)

    def insert(self, continuation: Continuation) -> Token:
        """Register ``continuation`` at the end of the ring.

        Must not be called again for the same continuation before its token
        has been erased.
        """
        token = Token(next(self._tokens))
        if not self._entries:
            self._head = token
            entry = _Entry(continuation, prev=token, next=token)
        else:
            head = self._entries[self._head]
            tail_token = head.prev
            entry = _Entry(continuation, prev=tail_token, next=self._head)
            self._entries[tail_token].next = token
            head.prev = token
        self._entries[token] = entry
        logger.debug("insert %s -> token %d (registered=%d)", _name(continuation), token, len(self))
        return token

    def erase(self, token: Token) -> None:
        """Unregister the entry of ``token``.

        Raises:
            UnknownTokenError: ``token`` is not registered here (erased twice,
                ``ERASED`` or issued by another scheduler).
        """
        entry = self._entries.pop(token, None)
        if entry is None:
            raise UnknownTokenError(token)
        if not self._entries:
            self._head = ERASED
        else:
            self._entries[entry.prev].next = entry.next
            self._entries[entry.next].prev = entry.prev
            if self._head == token:
                self._head = entry.next
        logger.debug("erase token %d %s (registered=%d)", token, _name(entry.continuation), len(self))

    def resume(self, token: Token) -> tuple[Continuation, bool]:
        """Pick the continuation that runs after ``token``.

        Returns:
            The continuation registered right after ``token`` (wrapping from
            the last entry to the first) and whether more than one entry is
            registered. A lone entry gets its own continuation back.
        """
        entry = self._entries.get(token)
        if entry is None:
            raise UnknownTokenError(token)
        following = self._entries[entry.next]
        multiple = len(self._entries) > 1
        logger.debug(
            "resume after token %d -> token %d %s",
            token,
            entry.next,
            _name(following.continuation),
        )
        return following.continuation, multiple

    def tokens(self) -> Iterator[Token]:
        """Iterate registered tokens in ring order, oldest first."""
        if not self._entries:
            return
        token = self._head
        for _ in range(len(self._entries)):
            yield token
            token = self._entries[token].next

    def snapshot(self) -> FrozenDict[Token, str]:
        """Immutable view of the registry: token -> continuation name."""
        return FrozenDict(
            (token, _name(self._entries[token].continuation)) for token in self.tokens()
        )

    def __iter__(self) -> Iterator[Continuation]:
        for token in self.tokens():
            yield self._entries[token].continuation

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, token: object) -> bool:
        return token in self._entries

    def __repr__(self) -> str:
        return f"RoundRobinScheduler(registered={len(self)})"


def _name(continuation: Continuation) -> str:
    return getattr(continuation, "name", None) or repr(continuation)


__all__ = [
    "RoundRobinScheduler",
    "Scheduler",
]
