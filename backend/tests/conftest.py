import asyncio
import inspect
import pathlib
import sys
from datetime import date
from decimal import Decimal

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from dividend_ledger.models import USA, TradeType, TransactionRecord  # noqa: E402


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers used in the suite."""

    config.addinivalue_line("markers", "asyncio: mark test as running in an asyncio event loop")


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Execute async test functions without requiring pytest-asyncio."""

    test_function = pyfuncitem.obj
    if inspect.iscoroutinefunction(test_function):
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            loop.run_until_complete(test_function(**pyfuncitem.funcargs))
        finally:
            asyncio.set_event_loop(None)
            loop.close()
        return True
    return None


def make_tx(
    symbol: str,
    trade_type: str,
    on: date,
    quantity: str | int,
    price: str | int,
    *,
    fx: str | int | None = "1",
    country: str = USA,
    sell_amount: str | int | None = None,
    account: str | None = None,
    sequence: int | None = None,
    tx_id: str | None = None,
) -> TransactionRecord:
    qty = Decimal(str(quantity))
    unit_price = Decimal(str(price))
    return TransactionRecord(
        id=tx_id or f"{symbol}-{trade_type}-{on.isoformat()}-{quantity}",
        symbol=symbol,
        country=country,
        date=on,
        trade_type=TradeType(trade_type),
        quantity=qty,
        unit_price=unit_price,
        gross_amount=qty * unit_price,
        sell_amount=Decimal(str(sell_amount)) if sell_amount is not None else None,
        exchange_rate=Decimal(str(fx)) if fx is not None else None,
        account=account,
        sequence=sequence,
    )


@pytest.fixture
def tx_factory():
    return make_tx
