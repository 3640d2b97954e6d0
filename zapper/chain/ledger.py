"""In-memory sequential ledger with all-or-nothing execution.

The ledger owns the clock, the event log and every deployed contract.
``Ledger.atomic()`` snapshots all contract state on entry and restores it if
the block raises, so a multi-step operation either commits every effect or
none of them. Nested blocks restore only their own effects.

Usage:
    ledger = Ledger(timestamp=1_700_000_000)
    token = ERC20(ledger, "Token A", "TKA")

    with ledger.atomic():
        token.transfer(alice, bob, 10)
        raise RuntimeError  # alice and bob balances are restored
"""

from __future__ import annotations

import copy
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, ClassVar, TypeVar

import structlog

from zapper.models.types import normalize_address

logger = structlog.get_logger()

# Deployed contracts get sequential addresses above this base
_ADDRESS_BASE = 0x5A9000000000000000000000000000000000000

C = TypeVar("C", bound="Contract")


@dataclass(frozen=True)
class Event:
    """A log entry emitted by a contract."""

    address: str
    name: str
    args: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class _Snapshot:
    event_count: int
    contracts: dict[str, dict[str, Any]]


class Contract:
    """Base class for ledger-resident state.

    Subclasses list the attributes that make up their mutable state in
    ``_state_fields``; those are what atomic() saves and restores.
    """

    _state_fields: ClassVar[tuple[str, ...]] = ()

    def __init__(self, ledger: Ledger, address: str | None = None) -> None:
        self.ledger = ledger
        self.address = ledger.register(self, address)

    def snapshot_state(self) -> dict[str, Any]:
        return {name: copy.deepcopy(getattr(self, name)) for name in self._state_fields}

    def restore_state(self, state: dict[str, Any]) -> None:
        for name, value in state.items():
            setattr(self, name, value)

    def emit(self, name: str, **args: Any) -> Event:
        return self.ledger.emit(self.address, name, **args)


class Ledger:
    """Single global ordering of state changes.

    Args:
        timestamp: Initial block timestamp in seconds
    """

    def __init__(self, timestamp: int = 0) -> None:
        self._timestamp = timestamp
        self._contracts: dict[str, Contract] = {}
        self._events: list[Event] = []
        self._depth = 0

    # --- Clock ---

    @property
    def now(self) -> int:
        """Current block timestamp."""
        return self._timestamp

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError(f"Cannot move the clock backwards: {seconds}")
        self._timestamp += seconds
        return self._timestamp

    # --- Contracts ---

    def register(self, contract: Contract, address: str | None = None) -> str:
        """Assign an address to a contract and track its state.

        Raises:
            ValueError: If the address is already in use
        """
        if address is None:
            address = f"0x{_ADDRESS_BASE + len(self._contracts) + 1:040x}"
        address = normalize_address(address, validate=True)
        if address in self._contracts:
            raise ValueError(f"Address already in use: {address}")
        self._contracts[address] = contract
        return address

    def contract(self, address: str, kind: type[C]) -> C:
        """Look up a deployed contract, checking its type.

        Raises:
            LookupError: If nothing of that type is deployed at address
        """
        found = self._contracts.get(normalize_address(address))
        if not isinstance(found, kind):
            raise LookupError(f"No {kind.__name__} deployed at {address}")
        return found

    def has_contract(self, address: str) -> bool:
        return normalize_address(address) in self._contracts

    # --- Events ---

    def emit(self, address: str, name: str, **args: Any) -> Event:
        event = Event(address=address, name=name, args=args)
        self._events.append(event)
        return event

    @property
    def events(self) -> tuple[Event, ...]:
        return tuple(self._events)

    def events_named(self, name: str, address: str | None = None) -> list[Event]:
        """Events with the given name, optionally from one emitter."""
        return [
            e
            for e in self._events
            if e.name == name and (address is None or e.address == normalize_address(address))
        ]

    # --- Atomicity ---

    def _snapshot(self) -> _Snapshot:
        return _Snapshot(
            event_count=len(self._events),
            contracts={addr: c.snapshot_state() for addr, c in self._contracts.items()},
        )

    def _restore(self, snapshot: _Snapshot) -> None:
        # Contracts deployed inside the failed block disappear with it
        for addr in list(self._contracts):
            if addr not in snapshot.contracts:
                del self._contracts[addr]
        for addr, state in snapshot.contracts.items():
            self._contracts[addr].restore_state(state)
        del self._events[snapshot.event_count :]

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Run a block as one indivisible unit.

        Any exception, including arithmetic errors, restores every contract
        and the event log to their state on entry, then propagates unchanged.
        """
        snapshot = self._snapshot()
        self._depth += 1
        try:
            yield
        except BaseException as exc:
            self._restore(snapshot)
            logger.debug(
                "ledger_reverted",
                depth=self._depth,
                error=type(exc).__name__,
                reason=str(exc),
            )
            raise
        finally:
            self._depth -= 1
