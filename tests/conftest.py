"""
Pytest configuration and shared fixtures.

Unit tests run handlers against the in-memory adapters defined here;
integration tests use the Django repositories and the ``db`` fixture.
"""

import uuid
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

import pytest
from asgiref.sync import async_to_sync

from accounts.domain.account import LedgerAccount
from accounts.infrastructure.repositories.django_account_repository import (
    DjangoAccountRepository,
)
from accounts.ports.account_repository import AccountRepository
from core.domain.exceptions import InvalidStateError, ProductNotFoundError, QuotaExceededError
from core.domain.value_objects import TransactionStatus
from core.infrastructure.encryption import EncryptionProvider
from core.infrastructure.events import InMemoryEventBus
from licenses.domain.license_key import LicenseKey
from licenses.infrastructure.repositories.django_license_key_repository import (
    DjangoLicenseKeyRepository,
)
from licenses.ports.license_key_repository import LicenseKeyRepository
from products.domain.product import Product
from products.infrastructure.repositories.django_product_repository import (
    DjangoProductRepository,
)
from products.ports.product_repository import ProductRepository
from wallet.domain.transaction import WalletTransaction
from wallet.infrastructure.lock_stores import InMemoryOperationLockStore
from wallet.infrastructure.repositories.django_transaction_repository import (
    DjangoTransactionRepository,
)
from wallet.ports.transaction_repository import IdempotencyKeyTaken, TransactionRepository

EPOCH = datetime(2026, 1, 1, tzinfo=timezone.utc)

# Modules that publish through the global event bus.
PUBLISHING_MODULES = [
    "licenses.application.handlers.issue_license_key_handler",
    "licenses.application.handlers.deactivate_license_key_handler",
    "wallet.application.handlers.process_payment_handler",
    "wallet.application.handlers.reload_wallet_handler",
]


class FakeClock:
    """Settable clock; ``monotonic`` feeds the in-memory lock store."""

    def __init__(self, now: Optional[datetime] = None):
        self.now = now or datetime(2026, 3, 10, 15, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)

    def monotonic(self) -> float:
        return (self.now - EPOCH).total_seconds()


class FakeEncryption(EncryptionProvider):
    """Reversible stand-in for the AES provider."""

    async def encrypt(self, plaintext: str) -> str:
        return "enc:" + plaintext[::-1]

    async def decrypt(self, blob: str) -> str:
        return blob[len("enc:"):][::-1]


class InMemoryProductRepository(ProductRepository):
    def __init__(self):
        self.products: Dict[uuid.UUID, Product] = {}

    async def save(self, product: Product) -> Product:
        self.products[product.id] = product
        return product

    async def find_by_id(self, product_id: uuid.UUID) -> Optional[Product]:
        return self.products.get(product_id)

    async def list_by_owner(self, owner_account_id: uuid.UUID) -> List[Product]:
        return sorted(
            (p for p in self.products.values() if p.owner_account_id == owner_account_id),
            key=lambda p: p.name,
        )


class InMemoryLicenseKeyRepository(LicenseKeyRepository):
    def __init__(self, product_repository: Optional[InMemoryProductRepository] = None):
        self.keys: Dict[uuid.UUID, LicenseKey] = {}
        self.product_repository = product_repository

    async def add_within_quota(self, license_key: LicenseKey, limit: int) -> LicenseKey:
        if self.product_repository is not None:
            if await self.product_repository.find_by_id(license_key.product_id) is None:
                raise ProductNotFoundError()
        if await self.count_by_product(license_key.product_id) >= limit:
            raise QuotaExceededError(limit)
        self.keys[license_key.id] = license_key
        return license_key

    async def save(self, license_key: LicenseKey, expected_state=None) -> LicenseKey:
        stored = self.keys.get(license_key.id)
        if expected_state is not None and (stored is None or stored.state != expected_state):
            raise InvalidStateError()
        self.keys[license_key.id] = license_key
        return license_key

    async def find_by_id(self, license_key_id: uuid.UUID) -> Optional[LicenseKey]:
        return self.keys.get(license_key_id)

    async def find_by_product(self, product_id: uuid.UUID) -> List[LicenseKey]:
        keys = [k for k in self.keys.values() if k.product_id == product_id]
        return sorted(keys, key=lambda k: k.issued_at, reverse=True)

    async def count_by_product(self, product_id: uuid.UUID) -> int:
        return len([k for k in self.keys.values() if k.product_id == product_id])

    async def find_by_owner(self, owner_account_id: uuid.UUID) -> List[LicenseKey]:
        return [k for k in self.keys.values() if k.owner_account_id == owner_account_id]


class InMemoryAccountRepository(AccountRepository):
    def __init__(self):
        self.accounts: Dict[uuid.UUID, LedgerAccount] = {}
        self.cas_calls: List[Tuple[uuid.UUID, Decimal, Decimal]] = []

    async def save(self, account: LedgerAccount) -> LedgerAccount:
        self.accounts[account.id] = account
        return account

    async def find_by_id(self, account_id: uuid.UUID) -> Optional[LedgerAccount]:
        return self.accounts.get(account_id)

    async def compare_and_set_balance(
        self, account_id: uuid.UUID, expected: Decimal, new_balance: Decimal
    ) -> bool:
        self.cas_calls.append((account_id, expected, new_balance))
        account = self.accounts.get(account_id)
        if account is None or account.balance != expected:
            return False
        self.accounts[account_id] = replace(account, balance=new_balance)
        return True

    async def set_unlocked(self, account_id: uuid.UUID) -> bool:
        account = self.accounts.get(account_id)
        if account is None or not account.is_limited:
            return False
        self.accounts[account_id] = replace(account, is_limited=False)
        return True


class InMemoryTransactionRepository(TransactionRepository):
    def __init__(self):
        self.transactions: Dict[uuid.UUID, WalletTransaction] = {}

    def _by_key(self, account_id, idempotency_key) -> Optional[WalletTransaction]:
        for transaction in self.transactions.values():
            if (
                transaction.account_id == account_id
                and transaction.idempotency_key == idempotency_key
            ):
                return transaction
        return None

    async def find_by_idempotency_key(self, account_id, idempotency_key):
        return self._by_key(account_id, idempotency_key)

    async def claim(self, transaction, stale_before):
        existing = self._by_key(transaction.account_id, transaction.idempotency_key)
        if existing is None:
            self.transactions[transaction.id] = transaction
            return transaction
        if not existing.is_reclaimable(stale_before):
            raise IdempotencyKeyTaken(existing)
        reclaimed = replace(transaction, id=existing.id)
        self.transactions[existing.id] = reclaimed
        return reclaimed

    async def save(self, transaction):
        self.transactions[transaction.id] = transaction
        return transaction

    async def sum_completed(self, account_id, type, since=None):  # pylint: disable=redefined-builtin
        total = Decimal("0.00")
        for transaction in self.transactions.values():
            if (
                transaction.account_id == account_id
                and transaction.type == type
                and transaction.status == TransactionStatus.COMPLETED
                and (since is None or transaction.created_at >= since)
            ):
                total += transaction.amount
        return total

    async def list_completed(self, account_id, limit, offset):
        completed = sorted(
            (
                t
                for t in self.transactions.values()
                if t.account_id == account_id and t.status == TransactionStatus.COMPLETED
            ),
            key=lambda t: t.created_at,
            reverse=True,
        )
        return completed[offset:offset + limit]

    async def fail_stale_pending(self, before):
        stale = [
            t
            for t in self.transactions.values()
            if t.status == TransactionStatus.PENDING and t.updated_at < before
        ]
        for transaction in stale:
            self.transactions[transaction.id] = transaction.fail()
        return len(stale)


class RecordingEventBus(InMemoryEventBus):
    """Event bus that remembers everything published to it."""

    def __init__(self):
        super().__init__()
        self.published = []

    async def publish(self, event) -> None:
        self.published.append(event)
        await super().publish(event)

    def of_type(self, event_type):
        return [event for event in self.published if isinstance(event, event_type)]


@pytest.fixture
def clock():
    """Fixture for a settable clock."""
    return FakeClock()


@pytest.fixture
def encryption():
    """Fixture for a reversible fake encryption provider."""
    return FakeEncryption()


@pytest.fixture
def events(monkeypatch):
    """Swap the global event bus for a recording one in every publisher."""
    bus = RecordingEventBus()
    for module in PUBLISHING_MODULES:
        monkeypatch.setattr(f"{module}.event_bus", bus)
    return bus


@pytest.fixture
def memory_products():
    """Fixture for an in-memory ProductRepository."""
    return InMemoryProductRepository()


@pytest.fixture
def memory_license_keys(memory_products):
    """Fixture for an in-memory LicenseKeyRepository."""
    return InMemoryLicenseKeyRepository(memory_products)


@pytest.fixture
def memory_accounts():
    """Fixture for an in-memory AccountRepository."""
    return InMemoryAccountRepository()


@pytest.fixture
def memory_transactions():
    """Fixture for an in-memory TransactionRepository."""
    return InMemoryTransactionRepository()


@pytest.fixture
def lock_store(clock):
    """Fixture for an in-memory lock store driven by the fake clock."""
    return InMemoryOperationLockStore(clock=clock.monotonic)


@pytest.fixture
def developer_id():
    """Account id of a developer that owns products."""
    return uuid.uuid4()


@pytest.fixture
def product(memory_products, developer_id):
    """Fixture for a Product owned by ``developer_id``."""
    entity = Product.create(owner_account_id=developer_id, name="Space Miners")
    memory_products.products[entity.id] = entity
    return entity


@pytest.fixture
def account(memory_accounts):
    """Fixture for a limited account with an empty wallet."""
    entity = LedgerAccount.create(display_name="Player One")
    memory_accounts.accounts[entity.id] = entity
    return entity


@pytest.fixture
def funded_account(memory_accounts):
    """Fixture for an unlocked account holding $100.00."""
    entity = LedgerAccount.create(
        display_name="Funded Player", balance=Decimal("100.00"), is_limited=False
    )
    memory_accounts.accounts[entity.id] = entity
    return entity


# Django-backed fixtures


@pytest.fixture
def account_repository():
    """Fixture for AccountRepository."""
    return DjangoAccountRepository()


@pytest.fixture
def product_repository():
    """Fixture for ProductRepository."""
    return DjangoProductRepository()


@pytest.fixture
def license_key_repository():
    """Fixture for LicenseKeyRepository."""
    return DjangoLicenseKeyRepository()


@pytest.fixture
def transaction_repository():
    """Fixture for TransactionRepository."""
    return DjangoTransactionRepository()


@pytest.fixture
def db_account(db, account_repository):
    """Fixture for a limited account saved in database."""
    return async_to_sync(account_repository.save)(LedgerAccount.create(display_name="Dev Studio"))


@pytest.fixture
def db_product(db, db_account, product_repository):
    """Fixture for a Product saved in database."""
    return async_to_sync(product_repository.save)(
        Product.create(owner_account_id=db_account.id, name="Space Miners")
    )


@pytest.fixture
def make_user(db):
    """Create a Django user linked to a fresh account."""
    from django.contrib.auth import get_user_model

    from accounts.infrastructure.models import Account

    def make(username: str, balance: Decimal = Decimal("0.00"), is_limited: bool = True):
        user = get_user_model().objects.create_user(username=username, password="secret")
        Account.objects.create(
            user=user, display_name=username, balance=balance, is_limited=is_limited
        )
        return user

    return make


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def clear_cache():
    """Empty the Django cache so cooldown keys from other tests do not leak."""
    from django.core.cache import cache

    cache.clear()
    yield
    cache.clear()

