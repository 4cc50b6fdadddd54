"""
Feature modules for the EcoBazaar client.

Each module is self-contained with its own:
- interfaces.py: Protocol definitions for the module's public API
- models.py: Pydantic models for data transfer
- service.py: Client-side logic on top of the shared ApiClient
- exceptions.py: Module-specific exceptions (where needed)

Modules communicate through interfaces, not concrete implementations.
"""
