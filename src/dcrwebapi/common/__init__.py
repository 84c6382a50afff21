"""
Common Layer - Shared Utilities
===============================

Helpers shared by the adapters, the store and the HTTP layer.

Structure:
    common/
    └── utils/          # Rounding, version sanitizing, date helpers
"""
