"""API endpoints for the exchange."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query

from simpledex.dex import SimpleDEX, get_default_dex
from simpledex.errors import DexError
from simpledex.ledger.memory import InMemoryLedger
from simpledex.models.api import (
    AddLiquidityRequest,
    AddLiquidityResponse,
    ApproveRequest,
    BalanceResponse,
    EventResponse,
    LiquidityResponse,
    MintRequest,
    PoolResponse,
    QuoteResponse,
    RemoveLiquidityRequest,
    RemoveLiquidityResponse,
    SwapRequest,
    SwapResponse,
    TransferRequest,
)
from simpledex.models.types import is_valid_address, normalize_address

logger = structlog.get_logger()

router = APIRouter()


def get_dex() -> SimpleDEX:
    """Dependency provider for the exchange instance.

    Override this in tests to inject a fresh exchange:
        app.dependency_overrides[get_dex] = lambda: dex

    Returns:
        The exchange to operate on.
    """
    return get_default_dex()


def _memory_ledger(dex: SimpleDEX) -> InMemoryLedger:
    """Token admin endpoints need the in-memory ledger's mint/approve."""
    if not isinstance(dex.ledger, InMemoryLedger):
        raise DexError("Token administration requires the in-memory ledger")
    return dex.ledger


def _require_address(name: str, value: str) -> str:
    """Normalize an address taken from the URL, rejecting malformed input."""
    if not is_valid_address(normalize_address(value)):
        raise HTTPException(status_code=422, detail=f"Invalid {name} address: {value}")
    return normalize_address(value)


# --- Pool operations ---


@router.post("/liquidity/add")
def add_liquidity(request: AddLiquidityRequest, dex: SimpleDEX = Depends(get_dex)) -> AddLiquidityResponse:
    """Deposit both tokens of a pair (addLiquidity)."""
    minted = dex.add_liquidity(
        request.provider,
        request.token_x,
        request.token_y,
        int(request.amount_x),
        int(request.amount_y),
    )
    return AddLiquidityResponse(liquidity=minted)


@router.post("/liquidity/remove")
def remove_liquidity(
    request: RemoveLiquidityRequest, dex: SimpleDEX = Depends(get_dex)
) -> RemoveLiquidityResponse:
    """Burn liquidity for a share of both reserves (removeLiquidity)."""
    amount_x, amount_y = dex.remove_liquidity(
        request.provider,
        request.token_x,
        request.token_y,
        int(request.liquidity),
    )
    return RemoveLiquidityResponse(amount_x=amount_x, amount_y=amount_y)


@router.post("/swap")
def swap(request: SwapRequest, dex: SimpleDEX = Depends(get_dex)) -> SwapResponse:
    """Exact-input swap."""
    amount_out = dex.swap(
        request.trader,
        request.token_in,
        request.token_out,
        int(request.amount_in),
        int(request.min_amount_out),
    )
    return SwapResponse(amount_out=amount_out)


@router.get("/liquidity/{token_x}/{token_y}", response_model_exclude_none=True)
def get_liquidity(
    token_x: str,
    token_y: str,
    provider: str | None = None,
    dex: SimpleDEX = Depends(get_dex),
) -> LiquidityResponse:
    """Total liquidity of a pair, and optionally one provider's share."""
    liquidity = dex.get_liquidity(token_x, token_y)
    position = None
    if provider is not None:
        position = dex.liquidity_of(_require_address("provider", provider), token_x, token_y)
    return LiquidityResponse(liquidity=liquidity, position=position)


@router.get("/pools/{token_x}/{token_y}")
def get_pool(token_x: str, token_y: str, dex: SimpleDEX = Depends(get_dex)) -> PoolResponse:
    """Reserves and liquidity of a pair in the requested token order."""
    reserve_x, reserve_y = dex.get_reserves(token_x, token_y)
    return PoolResponse(
        token_x=normalize_address(token_x),
        token_y=normalize_address(token_y),
        reserve_x=reserve_x,
        reserve_y=reserve_y,
        liquidity=dex.get_liquidity(token_x, token_y),
    )


@router.get("/quote")
def quote(
    token_in: str = Query(alias="tokenIn"),
    token_out: str = Query(alias="tokenOut"),
    amount_in: int = Query(alias="amountIn"),
    dex: SimpleDEX = Depends(get_dex),
) -> QuoteResponse:
    """Price an exact-input swap without executing it."""
    amount_out = dex.quote(token_in, token_out, amount_in)
    return QuoteResponse(amount_in=amount_in, amount_out=amount_out)


@router.get("/events")
def list_events(name: str | None = None, dex: SimpleDEX = Depends(get_dex)) -> list[EventResponse]:
    """Events emitted so far, oldest first (requires an EventLog sink)."""
    events_fn = getattr(dex.events, "events", None)
    if events_fn is None:
        return []
    return [
        EventResponse(
            name=event.name,
            args=[str(arg) for arg in event.args],
            data="0x" + event.encode_data().hex(),
        )
        for event in events_fn(name)
    ]


# --- Token ledger administration ---


@router.post("/tokens/mint")
def mint(request: MintRequest, dex: SimpleDEX = Depends(get_dex)) -> BalanceResponse:
    ledger = _memory_ledger(dex)
    ledger.mint(request.token, request.account, int(request.amount))
    return BalanceResponse(
        token=request.token,
        account=request.account,
        balance=ledger.balance_of(request.token, request.account),
    )


@router.post("/tokens/approve")
def approve(request: ApproveRequest, dex: SimpleDEX = Depends(get_dex)) -> dict[str, str]:
    ledger = _memory_ledger(dex)
    ledger.approve(request.token, request.owner, request.spender, int(request.amount))
    return {"allowance": str(ledger.allowance(request.token, request.owner, request.spender))}


@router.post("/tokens/transfer")
def transfer(request: TransferRequest, dex: SimpleDEX = Depends(get_dex)) -> BalanceResponse:
    # Reserves only move through the pool operations
    if normalize_address(request.sender) == normalize_address(dex.address):
        raise HTTPException(status_code=403, detail="Reserve account cannot be debited directly")
    dex.ledger.transfer(request.token, request.sender, request.recipient, int(request.amount))
    return BalanceResponse(
        token=request.token,
        account=request.sender,
        balance=dex.ledger.balance_of(request.token, request.sender),
    )


@router.get("/tokens/{token}/balance/{account}")
def balance(token: str, account: str, dex: SimpleDEX = Depends(get_dex)) -> BalanceResponse:
    token_norm = _require_address("token", token)
    account_norm = _require_address("account", account)
    return BalanceResponse(
        token=token_norm,
        account=account_norm,
        balance=dex.ledger.balance_of(token_norm, account_norm),
    )
