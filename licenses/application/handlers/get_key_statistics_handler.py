"""
GetKeyStatisticsHandler.

Handles the key statistics query.
"""

from collections import defaultdict

from licenses.application.dto.license_key_dto import (
    KeyCountsDTO,
    KeyStatisticsDTO,
    ProductKeyStatisticsDTO,
)
from licenses.application.queries.get_key_statistics import GetKeyStatisticsQuery
from licenses.domain.license_key import MAX_KEYS_PER_PRODUCT
from licenses.ports.license_key_repository import LicenseKeyRepository
from products.ports.product_repository import ProductRepository


class GetKeyStatisticsHandler:
    """Handler for GetKeyStatisticsQuery."""

    def __init__(
        self,
        product_repository: ProductRepository,
        license_key_repository: LicenseKeyRepository,
    ):
        """Initialize handler with repositories."""
        self.product_repository = product_repository
        self.license_key_repository = license_key_repository

    async def handle(self, query: GetKeyStatisticsQuery) -> KeyStatisticsDTO:
        """
        Handle key statistics query.

        Only the owner can issue keys, so the keys an account issued are the
        keys of its products.

        Args:
            query: GetKeyStatisticsQuery

        Returns:
            KeyStatisticsDTO with totals and a per-product breakdown
        """
        products = await self.product_repository.list_by_owner(query.account_id)

        keys_by_product = defaultdict(list)
        for key in await self.license_key_repository.find_by_owner(query.account_id):
            keys_by_product[key.product_id].append(key)

        per_product = [
            ProductKeyStatisticsDTO(
                product_id=product.id,
                product_name=product.name,
                counts=KeyCountsDTO.from_keys(keys_by_product[product.id]),
            )
            for product in products
        ]
        capacity = len(products) * MAX_KEYS_PER_PRODUCT
        total_keys = sum(item.counts.total for item in per_product)

        return KeyStatisticsDTO(
            total_products=len(products),
            total_keys=total_keys,
            active=sum(item.counts.active for item in per_product),
            redeemed=sum(item.counts.redeemed for item in per_product),
            deactivated=sum(item.counts.deactivated for item in per_product),
            capacity=capacity,
            available_slots=capacity - total_keys,
            products=per_product,
        )
