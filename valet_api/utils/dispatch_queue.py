import logging
from typing import List, Optional
from redis import Redis, RedisError

logger = logging.getLogger(__name__)


class DispatchQueue:
    def __init__(self, client: Optional[Redis], key: str = "valet_queue"):
        self.client = client
        self.key = key

    @classmethod
    def from_url(cls, redis_url: Optional[str], key: str = "valet_queue") -> "DispatchQueue":
        if not redis_url:
            logger.info("REDIS_URL not set, valet dispatch queue disabled")
            return cls(None, key)
        return cls(Redis.from_url(redis_url), key)

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def ping(self) -> bool:
        if not self.enabled:
            return False
        try:
            return bool(self.client.ping())
        except RedisError as e:
            logger.error(f"Failed to reach Redis: {e}")
            return False

    def enqueue(self, request_id: int) -> None:
        if not self.enabled:
            return
        try:
            self.client.rpush(self.key, request_id)
        except RedisError as e:
            logger.warning(f"Could not queue request {request_id} for dispatch: {e}")

    def discard(self, request_id: int) -> None:
        if not self.enabled:
            return
        try:
            self.client.lrem(self.key, 0, request_id)
        except RedisError as e:
            logger.warning(f"Could not remove request {request_id} from dispatch queue: {e}")

    def pending(self) -> List[int]:
        if not self.enabled:
            return []
        try:
            return [int(item) for item in self.client.lrange(self.key, 0, -1)]
        except RedisError as e:
            logger.warning(f"Could not read dispatch queue: {e}")
            return []
