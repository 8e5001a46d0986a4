import asyncio
import json
import logging
from collections import OrderedDict
from typing import Dict, List, Optional, Protocol, Tuple

import redis.asyncio as redis_asyncio

from benefits_portal.core.config import settings

logger = logging.getLogger(__name__)

Message = Dict[str, str]
ConversationKey = Tuple[int, int]


class ConversationCache(Protocol):
    """Rolling chat window per (company, user), consumed by the chat answer flow."""

    async def get_window(self, company_id: int, user_id: int) -> List[Message]:
        ...

    async def append(self, company_id: int, user_id: int, *messages: Message) -> List[Message]:
        ...

    async def clear(self, company_id: int, user_id: int) -> None:
        ...


def trim_window(messages: List[Message], max_messages: int) -> List[Message]:
    if max_messages <= 0:
        return []
    return messages[-max_messages:]


class InMemoryConversationCache:
    """
    Bounded in-process map. The least recently used conversation is evicted once
    max_conversations is reached. Only valid for a single worker process.
    """

    def __init__(self, max_messages: int = 10, max_conversations: int = 1000):
        self.max_messages = max_messages
        self.max_conversations = max_conversations
        self._windows: "OrderedDict[ConversationKey, List[Message]]" = OrderedDict()
        self._lock = asyncio.Lock()

    async def get_window(self, company_id: int, user_id: int) -> List[Message]:
        async with self._lock:
            window = self._windows.get((company_id, user_id))
            if window is None:
                return []
            self._windows.move_to_end((company_id, user_id))
            return list(window)

    async def append(self, company_id: int, user_id: int, *messages: Message) -> List[Message]:
        key = (company_id, user_id)
        async with self._lock:
            window = self._windows.pop(key, [])
            window = trim_window(window + [dict(m) for m in messages], self.max_messages)
            self._windows[key] = window
            while len(self._windows) > self.max_conversations:
                self._windows.popitem(last=False)
            return list(window)

    async def clear(self, company_id: int, user_id: int) -> None:
        async with self._lock:
            self._windows.pop((company_id, user_id), None)

    def __len__(self) -> int:
        return len(self._windows)


class RedisConversationCache:
    """Shared window stored as a capped Redis list, for deployments with several workers."""

    def __init__(self, redis_client, max_messages: int = 10, ttl_seconds: int = 86400):
        self.redis = redis_client
        self.max_messages = max_messages
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def _key(company_id: int, user_id: int) -> str:
        return f"conversation:{company_id}:{user_id}"

    async def get_window(self, company_id: int, user_id: int) -> List[Message]:
        raw_items = await self.redis.lrange(self._key(company_id, user_id), 0, -1)
        return [json.loads(item) for item in raw_items]

    async def append(self, company_id: int, user_id: int, *messages: Message) -> List[Message]:
        key = self._key(company_id, user_id)
        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.rpush(key, *[json.dumps(m) for m in messages])
            pipe.ltrim(key, -self.max_messages, -1)
            pipe.expire(key, self.ttl_seconds)
            pipe.lrange(key, 0, -1)
            results = await pipe.execute()
        return [json.loads(item) for item in results[-1]]

    async def clear(self, company_id: int, user_id: int) -> None:
        await self.redis.delete(self._key(company_id, user_id))


def build_conversation_cache(backend: Optional[str] = None) -> ConversationCache:
    backend = (backend or settings.CONVERSATION_CACHE_BACKEND).lower()
    if backend == "redis":
        logger.info("Using Redis conversation cache at %s", settings.REDIS_URL)
        client = redis_asyncio.from_url(settings.REDIS_URL, decode_responses=True)
        return RedisConversationCache(
            client,
            max_messages=settings.CONVERSATION_WINDOW_SIZE,
            ttl_seconds=settings.CONVERSATION_CACHE_TTL_SECONDS,
        )
    if backend != "memory":
        raise ValueError(f"Unknown conversation cache backend: {backend}")
    return InMemoryConversationCache(
        max_messages=settings.CONVERSATION_WINDOW_SIZE,
        max_conversations=settings.CONVERSATION_CACHE_MAX_ENTRIES,
    )
