"""
Licenses module - license keys issued for developer products.

This module handles:
- Key format, generation and checksum validation
- LicenseKey entity and its active/redeemed/deactivated lifecycle
- The lifetime key quota per product
- Encrypted key storage and developer statistics
"""
