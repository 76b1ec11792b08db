"""
LicenseKey domain entity.

This is the core domain entity representing an issued license key.
It contains business logic and is independent of infrastructure.
Only the ciphertext of the key is held; the plaintext leaves the
system once, in the issuance response.
"""

import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from core.domain.events import utcnow
from core.domain.exceptions import InvalidStateError
from core.domain.value_objects import LicenseKeyState

MAX_KEYS_PER_PRODUCT = 5
DEFAULT_DEACTIVATION_REASON = "Desactivada por el desarrollador"

STATUS_LABELS = {
    LicenseKeyState.ACTIVE: "Activa",
    LicenseKeyState.REDEEMED: "Canjeada",
    LicenseKeyState.DEACTIVATED: "Desactivada",
}


@dataclass(frozen=True)
class LicenseKey:
    """
    LicenseKey domain entity.

    Keys are never deleted. ``Redeemed`` and ``Deactivated`` are both
    terminal, and every key counts against its product's quota whatever
    its state.
    """

    id: uuid.UUID
    product_id: uuid.UUID
    owner_account_id: uuid.UUID
    ciphertext: str
    state: LicenseKeyState
    issued_at: datetime
    deactivated_at: Optional[datetime] = None
    deactivation_reason: Optional[str] = None
    redeemed_by_account_id: Optional[uuid.UUID] = None
    redeemed_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate license key entity."""
        if not self.ciphertext:
            raise ValueError("Ciphertext is required")
        if not self.product_id:
            raise ValueError("Product ID is required")

    @classmethod
    def create(
        cls,
        product_id: uuid.UUID,
        owner_account_id: uuid.UUID,
        ciphertext: str,
        license_key_id: Optional[uuid.UUID] = None,
        issued_at: Optional[datetime] = None,
    ) -> "LicenseKey":
        """
        Create a new active LicenseKey.

        Args:
            product_id: Owning product UUID
            owner_account_id: Account that issued the key
            ciphertext: Encrypted key blob
            license_key_id: Optional UUID (generated if not provided)
            issued_at: Optional issue time (defaults to now)

        Returns:
            LicenseKey entity instance
        """
        return cls(
            id=license_key_id or uuid.uuid4(),
            product_id=product_id,
            owner_account_id=owner_account_id,
            ciphertext=ciphertext,
            state=LicenseKeyState.ACTIVE,
            issued_at=issued_at or utcnow(),
        )

    @property
    def is_active(self) -> bool:
        return self.state == LicenseKeyState.ACTIVE

    @property
    def status_label(self) -> str:
        """User-facing status (Activa, Canjeada, Desactivada)."""
        return STATUS_LABELS[self.state]

    def deactivate(self, reason: str = "", now: Optional[datetime] = None) -> "LicenseKey":
        """
        Deactivate the key.

        Args:
            reason: Free-text reason; empty falls back to a default
            now: Deactivation time (defaults to now)

        Returns:
            New LicenseKey instance in the deactivated state

        Raises:
            InvalidStateError: If the key is already deactivated or redeemed
        """
        if self.state == LicenseKeyState.DEACTIVATED:
            raise InvalidStateError("Esta llave ya está desactivada")
        if self.state == LicenseKeyState.REDEEMED:
            raise InvalidStateError("No puedes desactivar una llave que ya fue canjeada")

        return replace(
            self,
            state=LicenseKeyState.DEACTIVATED,
            deactivated_at=now or utcnow(),
            deactivation_reason=(reason or "").strip() or DEFAULT_DEACTIVATION_REASON,
        )

    def redeem(self, account_id: uuid.UUID, now: Optional[datetime] = None) -> "LicenseKey":
        """
        Mark the key as redeemed by an account.

        Raises:
            InvalidStateError: If the key is not active
        """
        if self.state != LicenseKeyState.ACTIVE:
            raise InvalidStateError("Esta llave no está disponible para canjear")

        return replace(
            self,
            state=LicenseKeyState.REDEEMED,
            redeemed_by_account_id=account_id,
            redeemed_at=now or utcnow(),
        )
