from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal, Optional

from ledgerfx.models import Currency, TransactionAmount
from ledgerfx.services.currency_facade import CurrencyFacade

"""Currency router exposing the facade to the host application.

Endpoints:
    - GET  /currency                        -> active currency, rate, decimals flag
    - GET  /currency/list                   -> selectable currencies (last used first on request)
    - PUT  /currency                        -> switch display currency (waits for the rate)
    - PUT  /currency/decimals               -> toggle decimal display
    - GET  /currency/format                 -> format a USD amount
    - GET  /currency/convert                -> USD <-> display conversion
    - POST /currency/transactions/display   -> resolved amount + caption for a transaction
"""

router = APIRouter(prefix="/currency", tags=["currency"])


def get_facade(request: Request) -> CurrencyFacade:
    return request.app.state.currency


class CurrencySetPayload(BaseModel):
    code: str = Field(..., min_length=3, max_length=3, description="ISO-4217 code, e.g. EUR")


class DecimalsPayload(BaseModel):
    show_decimals: bool


class CurrencyState(BaseModel):
    currency: Currency
    exchange_rate: float
    show_decimals: bool
    degraded: bool
    last_currency: Optional[str] = None


def _state(facade: CurrencyFacade) -> CurrencyState:
    return CurrencyState(
        currency=facade.active_currency,
        exchange_rate=facade.exchange_rate,
        show_decimals=facade.show_decimals,
        degraded=facade.degraded,
        last_currency=facade.last_currency,
    )


@router.get("", summary="Active display currency", response_model=CurrencyState)
async def get_currency(facade: CurrencyFacade = Depends(get_facade)):
    return _state(facade)


@router.get("/list", summary="Selectable display currencies", response_model=List[Currency])
async def list_currencies(
    recent_first: bool = False, facade: CurrencyFacade = Depends(get_facade)
):
    return facade.list_currencies(recent_first=recent_first)


@router.put("", summary="Switch display currency", response_model=CurrencyState)
async def set_currency(
    payload: CurrencySetPayload, facade: CurrencyFacade = Depends(get_facade)
):
    await facade.set_currency(payload.code)
    return _state(facade)


@router.put("/decimals", summary="Toggle decimal display", response_model=CurrencyState)
async def set_decimals(payload: DecimalsPayload, facade: CurrencyFacade = Depends(get_facade)):
    await facade.set_show_decimals(payload.show_decimals)
    return _state(facade)


@router.get("/format", summary="Format a USD amount in the display currency")
async def format_amount(
    amount: float,
    disable_abbreviations: bool = False,
    facade: CurrencyFacade = Depends(get_facade),
) -> Dict[str, Any]:
    return {
        "amount": amount,
        "currency": facade.currency_code,
        "formatted": facade.format_currency(amount, disable_abbreviations=disable_abbreviations),
    }


@router.get("/convert", summary="Convert between USD and the display currency")
async def convert_amount(
    amount: float,
    direction: Literal["to_usd", "from_usd"] = Query("from_usd"),
    facade: CurrencyFacade = Depends(get_facade),
) -> Dict[str, Any]:
    converted = (
        facade.convert_to_usd(amount) if direction == "to_usd" else facade.convert_from_usd(amount)
    )
    return {
        "amount": amount,
        "currency": facade.currency_code,
        "rate": facade.exchange_rate,
        "direction": direction,
        "converted": converted,
    }


@router.post("/transactions/display", summary="Resolve how a transaction amount is shown")
async def transaction_display(
    tx: TransactionAmount, facade: CurrencyFacade = Depends(get_facade)
) -> Dict[str, Optional[Any]]:
    caption = facade.transaction_caption(tx.amount, tx.original_amount, tx.original_currency)
    return {
        "display_amount": facade.get_transaction_display_amount(
            tx.amount, tx.original_amount, tx.original_currency
        ),
        "formatted": facade.format_transaction_amount(
            tx.amount, tx.original_amount, tx.original_currency
        ),
        "caption": caption.text if caption else None,
        "caption_currency": caption.currency if caption else None,
    }
