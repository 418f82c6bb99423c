"""
Kushfinds application-specific code.

This package contains all Kushfinds-specific implementations:
- services: Business logic (auth, verification codes, users, email)
- routers: HTTP endpoints
- schemas: Request validation models
- config: Application settings

Uses generic infrastructure from the common/ package.
"""

from app.config import settings

__all__ = ["settings"]
