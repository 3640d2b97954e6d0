"""Zapper error classes.

Each error carries ``reason``, the revert string the equivalent contract call
would produce. Callers match on the class; clients of the HTTP API see the
reason.
"""


class ZapperError(Exception):
    """Base error for zap operations."""

    reason: str = "reverted"

    def __init__(self, reason: str | None = None) -> None:
        if reason is not None:
            self.reason = reason
        super().__init__(self.reason)


# --- Request validation ---


class InvalidRequest(ZapperError):
    """The zap request was rejected before any funds moved."""

    pass


class InvalidPairAddress(InvalidRequest):
    reason = "Invalid pair address"


class InvalidTokenAddress(InvalidRequest):
    reason = "Invalid token address"


class InvalidAmount(InvalidRequest):
    reason = "Invalid amount"


class InvalidToAddress(InvalidRequest):
    reason = "Invalid to address"


class Expired(InvalidRequest):
    """Deadline is not strictly in the future."""

    reason = "EXPIRED"


class TokenNotInPair(InvalidRequest):
    reason = "Token not in pair"


# --- Lifecycle ---


class LifecycleError(ZapperError):
    """Initialization misuse. The instance keeps its prior state."""

    pass


class InvalidRouterAddress(LifecycleError):
    reason = "Invalid router address"


class InvalidInitialization(LifecycleError):
    reason = "already initialized"


class NotInitialized(LifecycleError):
    reason = "not initialized"


# --- AMM (library, pair and router) ---


class AmmError(ZapperError):
    """Raised by the pair, factory or router."""

    pass


class InsufficientInputAmount(AmmError):
    reason = "UniswapV2Library: INSUFFICIENT_INPUT_AMOUNT"


class InsufficientOutputAmount(AmmError):
    reason = "UniswapV2Router: INSUFFICIENT_OUTPUT_AMOUNT"


class InsufficientAmount(AmmError):
    reason = "UniswapV2Library: INSUFFICIENT_AMOUNT"


class InsufficientLiquidity(AmmError):
    reason = "UniswapV2Library: INSUFFICIENT_LIQUIDITY"


class InsufficientAAmount(AmmError):
    reason = "UniswapV2Router: INSUFFICIENT_A_AMOUNT"


class InsufficientBAmount(AmmError):
    reason = "UniswapV2Router: INSUFFICIENT_B_AMOUNT"


class RouterExpired(AmmError):
    reason = "UniswapV2Router: EXPIRED"


class InsufficientLiquidityMinted(AmmError):
    reason = "UniswapV2: INSUFFICIENT_LIQUIDITY_MINTED"


class InvariantViolation(AmmError):
    """Swap would decrease the fee-adjusted constant product."""

    reason = "UniswapV2: K"


class PairNotFound(AmmError):
    reason = "UniswapV2Router: PAIR_NOT_FOUND"


class PairExists(AmmError):
    reason = "UniswapV2: PAIR_EXISTS"


class IdenticalAddresses(AmmError):
    reason = "UniswapV2Library: IDENTICAL_ADDRESSES"


class InvalidSplitInput(AmmError):
    """Split requested with empty reserves or zero input."""

    reason = "Zapper: INVALID_SPLIT_INPUT"


# --- Token ---


class TokenError(ZapperError):
    """Raised by the ERC20 token service."""

    pass


class InsufficientAllowance(TokenError):
    reason = "ERC20: insufficient allowance"


class InsufficientBalance(TokenError):
    reason = "ERC20: transfer amount exceeds balance"


class InvalidReceiver(TokenError):
    reason = "ERC20: transfer to the zero address"
