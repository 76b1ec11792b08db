"""
License key DTOs for API responses.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from core.domain.value_objects import LicenseKeyState
from licenses.domain.license_key import MAX_KEYS_PER_PRODUCT, LicenseKey

ONE_TIME_REVEAL_WARNING = (
    "IMPORTANTE: Guarda esta llave de forma segura. No podrás verla nuevamente."
)


@dataclass
class IssuedLicenseKeyDTO:
    """DTO for a freshly issued key. The only place the plaintext appears."""

    id: uuid.UUID
    product_id: uuid.UUID
    product_name: str
    key: str
    state: str
    issued_at: datetime
    available_slots: int
    message: str = ONE_TIME_REVEAL_WARNING


@dataclass
class LicenseKeyDTO:
    """DTO for a listed key, decrypted for its owner."""

    id: uuid.UUID
    key: str
    state: str
    status_label: str
    issued_at: datetime
    deactivated_at: Optional[datetime] = None
    deactivation_reason: Optional[str] = None
    redeemed_at: Optional[datetime] = None


@dataclass
class KeyCountsDTO:
    """Per-product key counts."""

    total: int
    active: int
    redeemed: int
    deactivated: int
    available: int
    limit: int

    @classmethod
    def from_keys(
        cls, keys: List[LicenseKey], limit: int = MAX_KEYS_PER_PRODUCT
    ) -> "KeyCountsDTO":
        """Count keys by state. Every key uses a slot, whatever its state."""
        states = [key.state for key in keys]
        return cls(
            total=len(keys),
            active=states.count(LicenseKeyState.ACTIVE),
            redeemed=states.count(LicenseKeyState.REDEEMED),
            deactivated=states.count(LicenseKeyState.DEACTIVATED),
            available=max(limit - len(keys), 0),
            limit=limit,
        )


@dataclass
class LicenseKeyListDTO:
    """DTO for the key list of one product."""

    product_id: uuid.UUID
    product_name: str
    keys: List[LicenseKeyDTO]
    counts: KeyCountsDTO


@dataclass
class DeactivatedLicenseKeyDTO:
    """DTO for a deactivation result."""

    id: uuid.UUID
    state: str
    deactivated_at: datetime
    deactivation_reason: str
    message: str = "Llave desactivada exitosamente"


@dataclass
class ProductKeyStatisticsDTO:
    """Key counts of one product inside the developer statistics."""

    product_id: uuid.UUID
    product_name: str
    counts: KeyCountsDTO


@dataclass
class KeyStatisticsDTO:
    """DTO for key totals across a developer's products."""

    total_products: int
    total_keys: int
    active: int
    redeemed: int
    deactivated: int
    capacity: int
    available_slots: int
    products: List[ProductKeyStatisticsDTO] = field(default_factory=list)
