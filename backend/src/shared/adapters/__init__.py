"""
Adapters Package

External service integrations.

Contents:
=========
- redis_adapter: Remote cache client (redis.asyncio)

Note: Database access is handled by shared/db/session.py using async SQLAlchemy.

Usage:
======
    from src.shared.adapters.redis_adapter import RedisAdapter, build_redis_adapter
"""
