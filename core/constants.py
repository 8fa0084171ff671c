"""
Core — Constants

Audit action names, pagination sizes and movement feed bounds shared
across apps.

@file core/constants.py
"""

AUDIT_ACTION_CREATE = 'CREATE'
AUDIT_ACTION_UPDATE = 'UPDATE'
AUDIT_ACTION_DELETE = 'DELETE'
AUDIT_ACTION_STATUS_CHANGE = 'STATUS_CHANGE'
AUDIT_ACTION_REVERSAL = 'REVERSAL'

DEFAULT_PAGE_SIZE = 25
MAX_PAGE_SIZE = 100

# Tenant-wide movement feeds (?limit=)
FEED_DEFAULT_LIMIT = 50
FEED_MIN_LIMIT = 1
FEED_MAX_LIMIT = 100

# Placeholder for optional descriptive fields left empty on tire stock
NOT_AVAILABLE = 'N/A'
