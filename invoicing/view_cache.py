"""
Cached page data keyed by route path.

Read routes store their JSON payload here; mutations revalidate the paths
they made stale. Invalidation is fire-and-forget: a Valkey failure is logged
and never fails the mutation that triggered it. At worst the next reader
sees stale data until the entry's TTL runs out.

Each path and each of its ancestors carry a generation counter that
revalidate() bumps. A reader takes the generation before querying the
database and stores it next to the payload; an entry whose generation no
longer matches is a miss. A read that overlaps a mutation therefore never
leaves its result behind as a fresh entry.
"""

import logging

import redis

from clients.valkey_client import ValkeyClient

logger = logging.getLogger(__name__)

INVOICES_PATH = "/dashboard/invoices"


def _lineage(path: str) -> list[str]:
    """The path and every ancestor below the root, outermost first."""
    parts = [p for p in path.split("/") if p]
    return ["/" + "/".join(parts[: i + 1]) for i in range(len(parts))]


class ViewCache:
    """Path-keyed JSON cache on Valkey."""

    KEY_PREFIX = "view:"
    GENERATION_PREFIX = "view:gen:"
    DEFAULT_TTL_SECONDS = 300

    def __init__(self, valkey: ValkeyClient, ttl_seconds: int = DEFAULT_TTL_SECONDS):
        self._valkey = valkey
        self._ttl_seconds = ttl_seconds

    def _key(self, path: str) -> str:
        return f"{self.KEY_PREFIX}{path}"

    def _generation_keys(self, path: str) -> list[str]:
        return [f"{self.GENERATION_PREFIX}{p}" for p in _lineage(path)]

    def generation(self, path: str) -> list[int] | None:
        """
        Current generation of path, to be taken before reading the data to cache.

        Returns None if Valkey is unavailable; put() then skips the write.
        """
        try:
            return self._valkey.get_ints(self._generation_keys(path))
        except redis.RedisError as e:
            logger.warning(f"View cache generation read failed for {path}: {e}")
            return None

    def get(self, path: str) -> dict | list | None:
        """Cached payload for path, or None on miss, stale entry or cache failure."""
        try:
            entry = self._valkey.get_json(self._key(path))
            if not isinstance(entry, dict) or "payload" not in entry:
                return None
            if entry.get("generation") != self._valkey.get_ints(self._generation_keys(path)):
                logger.debug(f"Discarding stale view cache entry for {path}")
                return None
            return entry["payload"]
        except (redis.RedisError, ValueError) as e:
            logger.warning(f"View cache read failed for {path}: {e}")
            return None

    def put(self, path: str, payload: dict | list, generation: list[int] | None) -> None:
        """Store payload for path, tagged with the generation taken before it was read."""
        if generation is None:
            return
        entry = {"generation": generation, "payload": payload}
        try:
            self._valkey.set_json(self._key(path), entry, expire_seconds=self._ttl_seconds)
        except redis.RedisError as e:
            logger.warning(f"View cache write failed for {path}: {e}")

    def revalidate(self, path: str) -> None:
        """Drop the cached payload for path and every path below it."""
        try:
            self._valkey.incr(f"{self.GENERATION_PREFIX}{path}")
            self._valkey.delete(self._key(path))
            removed = self._valkey.delete_matching(f"{self._key(path)}/*")
        except redis.RedisError as e:
            logger.warning(f"View cache revalidation failed for {path}: {e}")
            return
        logger.debug(f"Revalidated {path} ({removed} nested entries)")
