"""
FieldSync core: client-side data synchronization for the maternal-health
field-operations app.

Sub-packages:
    api       - settings and the authenticated HTTP client
    auth      - persisted session, expiry guard, sign-in redirect
    cache     - last-result cache for submissions
    storage   - SQLite key-value store
    sync      - paginated loading and optimistic mutations
    services  - per-screen view models
"""

__version__ = "0.1.0"
