"""Pydantic models for the HTTP API.

Amounts travel as uint256 decimal strings; field aliases follow the
camelCase names of the exchange's contract interface.
"""

from pydantic import BaseModel, Field

from simpledex.models.types import Address, Uint256


class AddLiquidityRequest(BaseModel):
    """Deposit request for addLiquidity."""

    provider: Address
    token_x: Address = Field(alias="tokenX")
    token_y: Address = Field(alias="tokenY")
    amount_x: Uint256 = Field(alias="amountX")
    amount_y: Uint256 = Field(alias="amountY")

    model_config = {"populate_by_name": True}


class AddLiquidityResponse(BaseModel):
    liquidity: Uint256


class RemoveLiquidityRequest(BaseModel):
    """Withdrawal request for removeLiquidity."""

    provider: Address
    token_x: Address = Field(alias="tokenX")
    token_y: Address = Field(alias="tokenY")
    liquidity: Uint256

    model_config = {"populate_by_name": True}


class RemoveLiquidityResponse(BaseModel):
    amount_x: Uint256 = Field(alias="amountX")
    amount_y: Uint256 = Field(alias="amountY")

    model_config = {"populate_by_name": True}


class SwapRequest(BaseModel):
    """Exact-input swap request."""

    trader: Address
    token_in: Address = Field(alias="tokenIn")
    token_out: Address = Field(alias="tokenOut")
    amount_in: Uint256 = Field(alias="amountIn")
    min_amount_out: Uint256 = Field(
        default="0",
        alias="minAmountOut",
        description="Reject the swap if output would be lower. 0 disables the check.",
    )

    model_config = {"populate_by_name": True}


class SwapResponse(BaseModel):
    amount_out: Uint256 = Field(alias="amountOut")

    model_config = {"populate_by_name": True}


class LiquidityResponse(BaseModel):
    """Total pool liquidity, plus a provider's share if one was asked for."""

    liquidity: Uint256
    position: Uint256 | None = None


class PoolResponse(BaseModel):
    """Pool reserves in the caller's token order."""

    token_x: Address = Field(alias="tokenX")
    token_y: Address = Field(alias="tokenY")
    reserve_x: Uint256 = Field(alias="reserveX")
    reserve_y: Uint256 = Field(alias="reserveY")
    liquidity: Uint256

    model_config = {"populate_by_name": True}


class QuoteResponse(BaseModel):
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out: Uint256 = Field(alias="amountOut")

    model_config = {"populate_by_name": True}


class MintRequest(BaseModel):
    token: Address
    account: Address
    amount: Uint256


class ApproveRequest(BaseModel):
    token: Address
    owner: Address
    spender: Address
    amount: Uint256


class TransferRequest(BaseModel):
    token: Address
    sender: Address = Field(alias="from")
    recipient: Address = Field(alias="to")
    amount: Uint256

    model_config = {"populate_by_name": True}


class BalanceResponse(BaseModel):
    token: Address
    account: Address
    balance: Uint256


class EventResponse(BaseModel):
    """An emitted event with its arguments in signature order."""

    name: str
    args: list[str]
    data: str = Field(description="ABI-encoded event payload, 0x-prefixed hex")


class ErrorResponse(BaseModel):
    """Body of every refused request: the error class name and its message."""

    error: str
    detail: str
