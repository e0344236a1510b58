"""
Valkey (Redis-compatible) client for sessions and cached page data.

Thin wrapper around redis-py holding JSON documents. Connection URL from Vault.
Fail-fast on connect; per-call errors surface as redis.RedisError.
"""

import json
import logging

import redis

logger = logging.getLogger(__name__)


class ValkeyClient:
    """
    JSON document store on Valkey.

    Usage:
        client = ValkeyClient("redis://localhost:6379/0")
        client.set_json("view:/dashboard/invoices", rows, expire_seconds=300)
        rows = client.get_json("view:/dashboard/invoices")  # None if missing
        client.delete_matching("view:/dashboard/invoices*")
    """

    def __init__(self, url: str):
        """
        Connect and ping.

        Raises:
            redis.ConnectionError: If Valkey is unreachable
        """
        self._client = redis.from_url(url, decode_responses=True)
        self._client.ping()
        logger.info("ValkeyClient connected")

    def ping(self) -> bool:
        """Health check. Raises redis.ConnectionError if unreachable."""
        self._client.ping()
        return True

    def set_json(self, key: str, value: dict | list, expire_seconds: int | None = None) -> None:
        """Store a JSON-serializable value, optionally with a TTL in seconds."""
        payload = json.dumps(value)
        if expire_seconds is not None:
            self._client.setex(key, expire_seconds, payload)
        else:
            self._client.set(key, payload)

    def get_json(self, key: str) -> dict | list | None:
        """
        Load a JSON value.

        Returns None if key doesn't exist.
        Raises ValueError if the stored value is not valid JSON.
        """
        value = self._client.get(key)
        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in key '{key}': {e}")

    def delete(self, key: str) -> bool:
        """Delete key. Returns True if it existed."""
        return self._client.delete(key) > 0

    def incr(self, key: str) -> int:
        """Increment an integer counter, creating it at 0. Returns the new value."""
        return self._client.incr(key)

    def get_ints(self, keys: list[str]) -> list[int]:
        """Read integer counters in one round trip. Missing keys read as 0."""
        if not keys:
            return []
        return [int(v) if v is not None else 0 for v in self._client.mget(keys)]

    def delete_matching(self, pattern: str) -> int:
        """
        Delete every key matching a glob pattern.

        Uses SCAN so large keyspaces are not blocked. Returns count deleted.
        """
        keys = list(self._client.scan_iter(match=pattern, count=100))
        if not keys:
            return 0
        return self._client.delete(*keys)

    def close(self) -> None:
        """Close the connection."""
        self._client.close()
        logger.info("ValkeyClient closed")
