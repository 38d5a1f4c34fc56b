"""Pytest fixtures and configuration"""

from decimal import Decimal
from typing import AsyncGenerator
from uuid import UUID

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from splitter.main import app
from splitter.models.payment import Payment, PaymentType, SplitMode


@pytest.fixture
def members() -> list[UUID]:
    """Four group members with ids that sort in list order"""
    return [UUID(int=i) for i in range(1, 5)]


@pytest.fixture
def payer(members) -> UUID:
    return members[0]


@pytest.fixture
def make_payment(payer):
    """Factory for payments with sensible defaults"""

    def _make(
        amount="10.00",
        currency="GBP",
        split_mode=SplitMode.EQUAL,
        payment_type=PaymentType.SPENT,
        **kwargs,
    ) -> Payment:
        kwargs.setdefault("payer_id", payer)
        return Payment(
            amount=Decimal(str(amount)),
            currency=currency,
            split_mode=split_mode,
            payment_type=payment_type,
            **kwargs,
        )

    return _make


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create test client against the ASGI app"""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
