"""
Core module for shared service infrastructure.

This module contains:
- Domain exceptions and value objects
- Startup configuration
- Middleware components (rate limiting, security headers, authentication,
  metrics, observability)
- Security audit logging and health views
"""
