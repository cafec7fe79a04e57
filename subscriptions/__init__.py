"""
Subscriptions module - time-bounded subscription licenses.

This module handles:
- Subscription entity and expiry arithmetic
- Subscription lifecycle (subscribe, verify, renew, cancel)
- Listing and statistics per product scope
- Document store adapters
"""
