# app/services/lock_service.py
import threading
import uuid
from contextlib import contextmanager

import redis
from redis.exceptions import RedisError
from tenacity import (
    retry,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    stop_after_delay,
    wait_exponential,
)

from app.domain.errors import ConcurrencyError, StorageError
from app.utils.settings import LOCK_BACKEND, LOCK_TTL_SECONDS, LOCK_WAIT_SECONDS, REDIS_URL
from app.utils.logging import get_logger

logger = get_logger(__name__)

#LUA porównaj i usuń, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#redis wykonuje skrypt lua atomowo, nikt nie wciśnie się między GET a DEL
#więc lock zwalnia tylko ten, kto go wziął (token)

#tenacity retry na błędy połączenia
def redis_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(RedisError),
    )


class RedisLockService:
    """
    -jeden writer na użytkownika (koszyk + zamówienia)
    -lock w redisie: SET NX PX z losowym tokenem
    -czekanie na lock przez tenacity, zwalnianie atomowo przez lua
    """

    def __init__(
        self,
        url: str | None = None,
        ttl: int = LOCK_TTL_SECONDS,
        wait_seconds: float = LOCK_WAIT_SECONDS,
    ):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl
        self.wait_seconds = wait_seconds

    @staticmethod
    def _key(user_id: int) -> str:
        return f"user:{user_id}:lock"

    @redis_retry()
    def _try_acquire(self, key: str, token: str) -> bool:
        #SET user:1:lock "<token>" NX PX 10000
        return bool(self.redis.set(name=key, value=token, nx=True, px=self.ttl * 1000))

    @redis_retry()
    def _release(self, key: str, token: str) -> bool:
        return bool(self.redis.eval(_RELEASE_LUA, 1, key, token))

    def acquire(self, user_id: int, token: str) -> bool:
        wait_for_lock = retry(
            stop=stop_after_delay(self.wait_seconds),
            wait=wait_exponential(multiplier=0.01, min=0.01, max=0.2),
            retry=retry_if_result(lambda locked: not locked),
            retry_error_callback=lambda state: False,
        )
        try:
            return wait_for_lock(self._try_acquire)(self._key(user_id), token)
        except RedisError as e:
            logger.error(f"Redis unavailable while locking user {user_id}: {e}")
            raise StorageError(str(e)) from e

    def release(self, user_id: int, token: str) -> bool:
        try:
            return self._release(self._key(user_id), token)
        except RedisError as e:
            # lock i tak wygaśnie po ttl
            logger.warning(f"Failed to release lock for user {user_id}: {e}")
            return False

    @contextmanager
    def user_lock(self, user_id: int):
        token = uuid.uuid4().hex
        if not self.acquire(user_id, token):
            raise ConcurrencyError("Another request is updating this account, try again")
        try:
            yield
        finally:
            self.release(user_id, token)


class LocalLockService:
    """Lock w pamięci procesu, dla jednego workera i testów."""

    def __init__(self, wait_seconds: float = LOCK_WAIT_SECONDS):
        self.wait_seconds = wait_seconds
        self._locks: dict[int, threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, user_id: int) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(user_id, threading.Lock())

    @contextmanager
    def user_lock(self, user_id: int):
        lock = self._lock_for(user_id)
        if not lock.acquire(timeout=self.wait_seconds):
            raise ConcurrencyError("Another request is updating this account, try again")
        try:
            yield
        finally:
            lock.release()


LockService = RedisLockService | LocalLockService


def build_lock_service(backend: str = LOCK_BACKEND) -> LockService:
    if backend == "local":
        return LocalLockService()
    if backend == "redis":
        return RedisLockService()
    raise ValueError(f"Unknown LOCK_BACKEND: {backend}")
