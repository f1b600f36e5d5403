# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
RedisLimiter

Distributed limiter sharing one quota between processes. Window counts and
active tokens live in two Redis sorted sets per quota key; acquisition and
release run as atomic Lua scripts.

Key Features:
- Sliding second/minute/hour windows evaluated against Redis server time
- Parallel limit with leased active tokens, so a crashed holder cannot
  block the quota forever
- Hash-tagged keys for Redis Cluster
- Transparent script reload after a Redis restart (NoScriptError)
"""

import logging
from pathlib import Path
from typing import Any, ClassVar

from redis.asyncio import Redis
from redis.exceptions import NoScriptError, RedisError

from ..exceptions import LimiterBackendError
from .base import BaseLimiter
from .config import LimitOpts

logger = logging.getLogger(__name__)


class RedisLimiter(BaseLimiter):
    """
    A Redis-backed limiter.

    A wait on a window slot sleeps until the slot frees, as reported by the
    script. A wait on the parallel limit polls every ``poll_interval``
    seconds, or sooner when a token is released in this process.

    Example:
        >>> limiter = RedisLimiter(
        ...     LimitOpts(per_minute=60, parallel=4),
        ...     key="exchange-api",
        ...     redis_url="redis://localhost:6379",
        ... )
        >>> token = await limiter.acquire(timeout_ms=3000)
    """

    _lua_scripts: ClassVar[dict[str, str]] = {}

    SCRIPT_NAMES = ("sliding_window_acquire", "sliding_window_release")

    def __init__(
        self,
        opts: LimitOpts,
        key: str = "default",
        redis_url: str | None = None,
        redis_client: Any | None = None,
        namespace: str = "limited_web_client",
        lease_seconds: float = 300.0,
        poll_interval: float = 0.1,
    ):
        """
        Initialize the Redis limiter.

        Args:
            opts: The quota to enforce
            key: Quota key; limiters with the same namespace and key share the quota
            redis_url: Redis connection URL (used when redis_client is None)
            redis_client: Existing redis.asyncio client; not closed on dispose
            namespace: Prefix for Redis keys
            lease_seconds: Time after which an unreleased token stops counting
                against the parallel limit
            poll_interval: Poll interval in seconds while blocked on the
                parallel limit

        Raises:
            ValueError: If neither redis_url nor redis_client is given
        """
        super().__init__(opts, key)
        if redis_client is None and redis_url is None:
            raise ValueError("RedisLimiter requires redis_url or redis_client")
        if lease_seconds <= 0:
            raise ValueError("lease_seconds must be positive")
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")

        self.redis_url = redis_url
        self.namespace = namespace
        self.lease_seconds = lease_seconds
        self.poll_interval = poll_interval
        self._owns_client = redis_client is None
        self._redis: Any = (
            redis_client if redis_client is not None else Redis.from_url(redis_url)
        )
        self._script_shas: dict[str, str] = {}

    @classmethod
    def _load_lua_scripts(cls) -> None:
        """Load Lua scripts from files at class level."""
        if cls._lua_scripts:
            return

        lua_dir = Path(__file__).parent / "lua"
        for script_name in cls.SCRIPT_NAMES:
            script_path = lua_dir / f"{script_name}.lua"
            cls._lua_scripts[script_name] = script_path.read_text(encoding="utf-8")

    def _get_hash_tag(self) -> str:
        return f"{{{self._key}}}"

    @property
    def acquisitions_key(self) -> str:
        return f"{self.namespace}:{self._get_hash_tag()}:acquisitions"

    @property
    def active_key(self) -> str:
        return f"{self.namespace}:{self._get_hash_tag()}:active"

    async def _load_scripts(self) -> None:
        """Load Lua scripts into Redis."""
        self.__class__._load_lua_scripts()
        for script_name in self.SCRIPT_NAMES:
            self._script_shas[script_name] = await self._redis.script_load(
                self._lua_scripts[script_name]
            )

    async def _evalsha_with_reload(
        self, script_name: str, num_keys: int, *args: Any
    ) -> Any:
        """
        Execute EVALSHA, reloading the scripts once on NoScriptError.

        Raises:
            LimiterBackendError: If Redis fails
        """
        try:
            script_sha = self._script_shas.get(script_name)
            if not script_sha:
                await self._load_scripts()
                script_sha = self._script_shas[script_name]

            try:
                return await self._redis.evalsha(script_sha, num_keys, *args)
            except NoScriptError:
                # Redis lost our scripts (restart, failover)
                logger.warning(
                    "Script '%s' not found in Redis (SHA: %s). Reloading Lua scripts...",
                    script_name,
                    script_sha,
                )
                self._script_shas.clear()
                await self._load_scripts()
                return await self._redis.evalsha(
                    self._script_shas[script_name], num_keys, *args
                )
        except RedisError as e:
            raise LimiterBackendError(
                f"Redis limiter operation '{script_name}' failed: {e}"
            ) from e

    async def _try_acquire(self, token_id: str) -> float:
        opts = self._opts
        result = await self._evalsha_with_reload(
            "sliding_window_acquire",
            2,
            self.acquisitions_key,
            self.active_key,
            token_id,
            int(self.lease_seconds * 1000),
            opts.parallel or 0,
            opts.per_second or 0,
            opts.per_minute or 0,
            opts.per_hour or 0,
        )
        granted, wait_ms = int(result[0]), int(result[1])
        if granted:
            return 0.0
        if wait_ms < 0:
            return self.poll_interval
        return max(wait_ms / 1000.0, 0.001)

    async def _release_token(self, token_id: str) -> None:
        removed = await self._evalsha_with_reload(
            "sliding_window_release", 1, self.active_key, token_id
        )
        if not int(removed):
            logger.debug(
                "Limit token %s was not active (lease expired or already released)",
                token_id,
            )
        self._wake_waiters()

    async def _on_dispose(self) -> None:
        await super()._on_dispose()
        if self._owns_client:
            await self._redis.aclose()


__all__ = ["RedisLimiter"]
