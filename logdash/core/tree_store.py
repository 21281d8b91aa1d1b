"""Hierarchical JSON tree stored in Redis.

Paths look like ``searchLogs/2024/05/01/<logId>``. Every scalar or list leaf
is kept under its own Redis key, so a subtree can be read back with a single
prefix scan and replaced field by field.
"""

import json
import logging
import re
import time
import uuid
from typing import Any, Iterator

from logdash.config.settings import get_settings
from logdash.core.redis_client import get_redis_client

logger = logging.getLogger(__name__)

_INVALID_SEGMENT = re.compile(r"[.#$\[\]]")
_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


def split_path(path: str) -> list[str]:
    segments = path.strip("/").split("/")
    for segment in segments:
        if not segment:
            raise ValueError(f"Invalid path {path!r}: empty segment")
        if _INVALID_SEGMENT.search(segment):
            raise ValueError(
                f"Invalid path {path!r}: segment {segment!r} contains one of .#$[]"
            )
    return segments


def join_path(*parts: str) -> str:
    return "/".join(str(part).strip("/") for part in parts)


def new_push_key() -> str:
    # millisecond prefix keeps pushed children in insertion order
    return f"{int(time.time() * 1000):013d}{uuid.uuid4().hex[:8]}"


class TreeStore:
    def __init__(self):
        self.redis = None
        self.settings = get_settings()

    async def initialize(self):
        if not self.redis:
            self.redis = await get_redis_client()

    def _key(self, segments: list[str]) -> str:
        return f"{self.settings.tree_key_prefix}:{'/'.join(segments)}"

    def _subtree_pattern(self, segments: list[str]) -> str:
        return _GLOB_SPECIAL.sub(r"\\\1", self._key(segments)) + "/*"

    def _flatten(self, segments: list[str], value: Any) -> Iterator[tuple[str, str]]:
        if isinstance(value, dict):
            for child, child_value in value.items():
                yield from self._flatten(
                    segments + split_path(str(child)), child_value
                )
        elif value is not None:
            yield self._key(segments), json.dumps(value)

    async def _subtree_keys(self, segments: list[str]) -> list[bytes]:
        return sorted(await self.redis.keys(self._subtree_pattern(segments)))

    async def _stale_keys(self, segments: list[str]) -> list:
        keys: list = await self._subtree_keys(segments)
        keys.append(self._key(segments))
        keys.extend(self._key(segments[:i]) for i in range(1, len(segments)))
        return keys

    async def get(self, path: str) -> Any:
        await self.initialize()
        segments = split_path(path)
        key = self._key(segments)

        data = await self.redis.get(key)
        if data is not None:
            return json.loads(data)

        keys = await self._subtree_keys(segments)
        if not keys:
            return None

        values = await self.redis.mget(keys)
        tree: dict = {}
        offset = len(key) + 1
        for raw_key, raw_value in zip(keys, values):
            if raw_value is None:
                continue
            relative = raw_key.decode()[offset:].split("/")
            node = tree
            for segment in relative[:-1]:
                node = node.setdefault(segment, {})
            node[relative[-1]] = json.loads(raw_value)

        return tree or None

    async def exists(self, path: str) -> bool:
        await self.initialize()
        segments = split_path(path)
        if await self.redis.exists(self._key(segments)) > 0:
            return True
        return bool(await self._subtree_keys(segments))

    async def set(self, path: str, value: Any) -> None:
        await self.initialize()
        segments = split_path(path)
        stale = await self._stale_keys(segments)
        leaves = dict(self._flatten(segments, value))

        async with self.redis.pipeline() as pipe:
            pipe.delete(*stale)
            if leaves:
                pipe.mset(leaves)
            await pipe.execute()

    async def update(self, path: str, fields: dict) -> None:
        await self.initialize()
        segments = split_path(path)

        stale: list = []
        leaves: dict[str, str] = {}
        for field, value in fields.items():
            child = segments + split_path(str(field))
            stale.extend(await self._stale_keys(child))
            leaves.update(self._flatten(child, value))

        if not stale:
            return

        async with self.redis.pipeline() as pipe:
            pipe.delete(*stale)
            if leaves:
                pipe.mset(leaves)
            await pipe.execute()

    async def push(self, path: str, value: Any) -> str:
        key = new_push_key()
        await self.set(join_path(path, key), value)
        return key

    async def remove(self, path: str) -> None:
        await self.initialize()
        segments = split_path(path)
        keys = await self._subtree_keys(segments)
        keys.append(self._key(segments))
        await self.redis.delete(*keys)
        logger.debug(f"Removed {path} ({len(keys)} keys)")


_store = TreeStore()


def get_tree_store() -> TreeStore:
    return _store
