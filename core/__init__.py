"""
Shared kernel for the storefront apps.

Holds the error taxonomy and value objects every app agrees on, along
with the ORM, cache and event plumbing the adapters build on.
"""
