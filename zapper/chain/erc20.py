"""ERC20 token on the in-memory ledger.

Follows OpenZeppelin semantics and revert strings. The caller of every
state-changing method is passed explicitly as the first argument.
"""

from __future__ import annotations

from typing import ClassVar

from zapper.chain.ledger import Contract, Ledger
from zapper.errors import InsufficientAllowance, InsufficientBalance, InvalidReceiver
from zapper.models.types import ZERO_ADDRESS, normalize_address
from zapper.safe_int import UINT256_MAX, S


class ERC20(Contract):
    """Fungible token with balances and allowances.

    An allowance of 2**256 - 1 is treated as infinite and never decreases.
    """

    _state_fields: ClassVar[tuple[str, ...]] = ("total_supply", "_balances", "_allowances")

    def __init__(
        self,
        ledger: Ledger,
        name: str,
        symbol: str,
        decimals: int = 18,
        initial_supply: int = 0,
        holder: str | None = None,
        address: str | None = None,
    ) -> None:
        super().__init__(ledger, address)
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self.total_supply = 0
        self._balances: dict[str, int] = {}
        self._allowances: dict[tuple[str, str], int] = {}
        if initial_supply:
            if holder is None:
                raise ValueError("initial_supply requires a holder")
            self._mint(holder, initial_supply)

    def __repr__(self) -> str:
        return f"ERC20({self.symbol}, {self.address})"

    # --- Views ---

    def balance_of(self, account: str) -> int:
        return self._balances.get(normalize_address(account), 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((normalize_address(owner), normalize_address(spender)), 0)

    # --- Mutations ---

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        self._transfer(sender, to, amount)
        return True

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        owner, spender = normalize_address(owner), normalize_address(spender)
        self._allowances[(owner, spender)] = S(amount).value
        self.emit("Approval", owner=owner, spender=spender, value=amount)
        return True

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool:
        """Move amount from owner to ``to`` on behalf of spender.

        Raises:
            InsufficientAllowance: If spender's allowance is below amount
            InsufficientBalance: If owner holds less than amount
        """
        self._spend_allowance(owner, spender, amount)
        self._transfer(owner, to, amount)
        return True

    def _mint(self, to: str, amount: int) -> None:
        """Create tokens. Minting to the zero address is allowed (locked liquidity)."""
        amount = S(amount).value
        to = normalize_address(to)
        self.total_supply = (S(self.total_supply) + amount).value
        self._balances[to] = self.balance_of(to) + amount
        self.emit("Transfer", sender=ZERO_ADDRESS, to=to, value=amount)

    def _transfer(self, sender: str, to: str, amount: int) -> None:
        amount = S(amount).value
        sender, to = normalize_address(sender), normalize_address(to)
        if to == ZERO_ADDRESS:
            raise InvalidReceiver()
        balance = self.balance_of(sender)
        if balance < amount:
            raise InsufficientBalance()
        self._balances[sender] = balance - amount
        self._balances[to] = self.balance_of(to) + amount
        self.emit("Transfer", sender=sender, to=to, value=amount)

    def _spend_allowance(self, owner: str, spender: str, amount: int) -> None:
        current = self.allowance(owner, spender)
        if current == UINT256_MAX:
            return
        if current < amount:
            raise InsufficientAllowance()
        self._allowances[(normalize_address(owner), normalize_address(spender))] = current - amount
