import threading
import time
import uuid
from contextlib import contextmanager

import redis
from redis.exceptions import RedisError

from order_service.domain.errors import ConcurrentModification, UpstreamUnavailable
from order_service.utils.retry import redis_retry
from order_service.utils.settings import REDIS_URL, LOCK_TTL_SECONDS, LOCK_WAIT_SECONDS
from order_service.utils.logging import get_logger

logger = get_logger(__name__)

#LUA porownaj i usun, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#LUA porownaj i przedluz ttl - cudzego locka nie ruszamy
_EXTEND_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('EXPIRE', KEYS[1], ARGV[2])
else
    return 0
end
"""

#redis wykonuje skrypt lua atomowo, nie mozna wcisnac sie miedzy GET a DEL
#token per akwizycja - zwalnia tylko ten kto zalozyl locka


class LockService:
    """
    Serializacja operacji per user (koszyk + checkout):
    -zakladanie locka (SET NX EX)
    -przedluzanie locka w tle dopoki trwa cialo (heartbeat co ttl/3)
    -zwalnianie locka (lua compare-and-delete)
    -user_lock() jako context manager z czekaniem
    """

    def __init__(
        self,
        url: str | None = None,
        ttl: int = LOCK_TTL_SECONDS,
        wait: float = LOCK_WAIT_SECONDS,
        client: redis.Redis | None = None,
        renew_every: float | None = None,
    ):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl
        self.wait = wait
        self.renew_every = renew_every if renew_every is not None else ttl / 3

    @staticmethod
    def _key(user_id: str) -> str:
        return f"user:{user_id}:cart:lock"

    @redis_retry()
    def acquire(self, user_id: str, token: str) -> bool:
        key = self._key(user_id)
        #SET user:1:cart:lock "<token>" NX EX 30
        return bool(self.redis.set(name=key, value=token, nx=True, ex=self.ttl))

    @redis_retry()
    def extend(self, user_id: str, token: str) -> bool:
        key = self._key(user_id)
        res = self.redis.eval(_EXTEND_LUA, 1, key, token, self.ttl)
        return bool(res)

    @redis_retry()
    def release(self, user_id: str, token: str) -> bool:
        key = self._key(user_id)
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)

    def _heartbeat(self, user_id: str, token: str, stop: threading.Event):
        # wolania do katalogu moga trwac dluzej niz ttl (retry + timeouty)
        while not stop.wait(self.renew_every):
            try:
                if not self.extend(user_id, token):
                    logger.warning(f"Lock for user {user_id} lost before renewal")
                    return
            except RedisError as e:
                logger.warning(f"Failed to renew lock for user {user_id}: {e}")

    @contextmanager
    def user_lock(self, user_id: str):
        token = uuid.uuid4().hex
        deadline = time.monotonic() + self.wait

        try:
            while not self.acquire(user_id, token):
                if time.monotonic() >= deadline:
                    logger.warning(f"Lock busy for user {user_id}")
                    raise ConcurrentModification(
                        "Cart is being modified by another request, retry later"
                    )
                time.sleep(0.05)
        except RedisError as e:
            logger.error(f"Redis unavailable while locking user {user_id}: {e}")
            raise UpstreamUnavailable("Lock service unavailable") from e

        logger.info(f"Acquired lock for user {user_id}")
        stop = threading.Event()
        renewer = threading.Thread(
            target=self._heartbeat,
            args=(user_id, token, stop),
            name=f"lock-renew-{user_id}",
            daemon=True,
        )
        renewer.start()
        try:
            yield
        finally:
            stop.set()
            renewer.join()
            try:
                self.release(user_id, token)
                logger.info(f"Released lock for user {user_id}")
            except RedisError as e:
                # lock i tak wygasnie po ttl
                logger.warning(f"Failed to release lock for user {user_id}: {e}")
