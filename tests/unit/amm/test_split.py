"""Tests for the optimal single-sided split."""

import pytest

from zapper.amm import UNISWAP_V2_FEE, FeeModel, SplitResult, optimal_split
from zapper.amm.uniswap_v2 import get_amount_out, quote
from zapper.errors import InsufficientInputAmount, InvalidSplitInput
from zapper.safe_int import Uint256Overflow
from tests.helpers import ETHER, POOL_RESERVE


class TestSwapAmount:
    """Tests for the closed-form swap amount."""

    def test_small_balanced_pool(self):
        """1000 wei into a 1000/1000 wei pool swaps 414 of it."""
        split = optimal_split.compute_split(1000, 1000, UNISWAP_V2_FEE, 1000)
        assert split == SplitResult(swap_amount=414, keep_amount=586, expected_out=292)

    def test_large_balanced_pool(self):
        """Depositing an amount equal to the reserve swaps about 41.5% of it."""
        swap = optimal_split.swap_amount(POOL_RESERVE, POOL_RESERVE)
        assert 414 * ETHER < swap < 415 * ETHER

    def test_tiny_input_swaps_nothing(self):
        """1 wei against a deep pool rounds the swap down to zero."""
        split = optimal_split.compute_split(POOL_RESERVE, POOL_RESERVE, UNISWAP_V2_FEE, 1)
        assert split.swap_amount == 0
        assert split.keep_amount == 1
        assert split.expected_out == 0

    def test_independent_of_reserve_out(self):
        """Only the input-side reserve enters the swap amount."""
        a = optimal_split.compute_split(10**21, 10**18, UNISWAP_V2_FEE, 10**20)
        b = optimal_split.compute_split(10**21, 10**24, UNISWAP_V2_FEE, 10**20)
        assert a.swap_amount == b.swap_amount

    def test_zero_fee_is_about_half_for_small_inputs(self):
        """Without a fee, a small deposit swaps just under half."""
        swap = optimal_split.swap_amount(10**24, 10**18, FeeModel(1, 1))
        assert 10**18 // 2 - 10**12 < swap < 10**18 // 2

    def test_swap_is_never_above_optimal(self):
        """Post-swap, the kept input is worth at least the swap output."""
        reserve_in, reserve_out, total = 5_000 * ETHER, 7_000 * ETHER, 333 * ETHER
        split = optimal_split.compute_split(reserve_in, reserve_out, UNISWAP_V2_FEE, total)
        new_in = reserve_in + split.swap_amount
        new_out = reserve_out - split.expected_out
        assert quote(split.keep_amount, new_in, new_out) + 1 >= split.expected_out

    def test_split_parts_sum_to_input(self):
        split = optimal_split.compute_split(3 * ETHER, 11 * ETHER, UNISWAP_V2_FEE, 2 * ETHER)
        assert split.amount_in == 2 * ETHER
        assert split.expected_out == get_amount_out(
            split.swap_amount, 3 * ETHER, 11 * ETHER, UNISWAP_V2_FEE
        )

    @pytest.mark.parametrize(
        "reserve_in,reserve_out,total_in",
        [(0, 1000, 1000), (1000, 0, 1000), (1000, 1000, 0)],
    )
    def test_nonpositive_inputs_rejected(self, reserve_in, reserve_out, total_in):
        with pytest.raises(InvalidSplitInput):
            optimal_split.compute_split(reserve_in, reserve_out, UNISWAP_V2_FEE, total_in)

    def test_overflow_propagates(self):
        """Reserves too large for the discriminant abort instead of wrapping."""
        with pytest.raises(Uint256Overflow):
            optimal_split.compute_split(2**200, 2**200, UNISWAP_V2_FEE, 2**200)


class TestQuoteZap:
    """Tests for the replayed swap-and-deposit quote."""

    def test_small_balanced_pool(self):
        """The deposit takes all of the swap output and leaves 3 wei of input."""
        zap_quote = optimal_split.quote_zap(1000, 1000, UNISWAP_V2_FEE, 1000, 1000)
        assert zap_quote.amount_out_deposited == 292
        assert zap_quote.amount_in_deposited == 583
        assert zap_quote.dust == 3
        assert zap_quote.liquidity == 412

    def test_dust_is_small(self):
        zap_quote = optimal_split.quote_zap(
            POOL_RESERVE, POOL_RESERVE, UNISWAP_V2_FEE, POOL_RESERVE, POOL_RESERVE
        )
        assert 0 <= zap_quote.dust < 100
        assert zap_quote.liquidity > 0

    def test_zero_swap_rejected(self):
        """A split that swaps nothing cannot be deposited."""
        with pytest.raises(InsufficientInputAmount):
            optimal_split.quote_zap(POOL_RESERVE, POOL_RESERVE, UNISWAP_V2_FEE, 1, POOL_RESERVE)
