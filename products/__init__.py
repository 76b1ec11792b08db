"""
Products module - applications that license keys are issued for.

This module handles:
- Product entity and ownership checks
- Product repository (port)
- Product infrastructure (Django ORM adapters)
"""
