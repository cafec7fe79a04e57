"""
Authentication module - request and admin credential verification.

This module handles:
- Admin secret hashing and constant-time verification
- HMAC request signing over a canonical payload serialization
- Signed envelope validation (required fields, replay window, subject shape)
"""
