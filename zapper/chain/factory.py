"""UniswapV2 factory: one pair per unordered token pair."""

from __future__ import annotations

from typing import ClassVar

import structlog

from zapper.amm.fees import UNISWAP_V2_FEE, FeeModel
from zapper.amm.uniswap_v2 import sort_tokens
from zapper.chain.ledger import Contract, Ledger
from zapper.chain.pair import UniswapV2Pair
from zapper.errors import PairExists
from zapper.models.types import ZERO_ADDRESS

logger = structlog.get_logger()


class UniswapV2Factory(Contract):
    """Creates pairs and indexes them by canonical token order."""

    _state_fields: ClassVar[tuple[str, ...]] = ("_pairs", "all_pairs")

    def __init__(
        self,
        ledger: Ledger,
        fee: FeeModel = UNISWAP_V2_FEE,
        address: str | None = None,
    ) -> None:
        super().__init__(ledger, address)
        self.fee = fee
        self._pairs: dict[tuple[str, str], str] = {}
        self.all_pairs: list[str] = []

    def get_pair(self, token_a: str, token_b: str) -> str:
        """Pair address for the two tokens, or the zero address if none exists."""
        return self._pairs.get(sort_tokens(token_a, token_b), ZERO_ADDRESS)

    def create_pair(self, token_a: str, token_b: str) -> str:
        """Deploy a pair for two tokens.

        Raises:
            IdenticalAddresses: If token_a == token_b
            PairExists: If the pair was already created
        """
        key = sort_tokens(token_a, token_b)
        if key in self._pairs:
            raise PairExists()

        pair = UniswapV2Pair(self.ledger, key[0], key[1], fee=self.fee)
        self._pairs[key] = pair.address
        self.all_pairs.append(pair.address)
        self.emit("PairCreated", token0=key[0], token1=key[1], pair=pair.address)
        logger.info("pair_created", pair=pair.address, token0=key[0], token1=key[1])
        return pair.address

    def pair(self, address: str) -> UniswapV2Pair:
        """The deployed pair at address.

        Raises:
            LookupError: If no pair is deployed there
        """
        return self.ledger.contract(address, UniswapV2Pair)
