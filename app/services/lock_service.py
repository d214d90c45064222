import threading
import uuid
from contextlib import contextmanager
from typing import Iterable, Iterator

import redis
from app.domain.errors import Conflict
from app.utils.retry import lock_wait, redis_retry
from app.utils.settings import (
    LOCK_BACKEND,
    LOCK_TIMEOUT_SECONDS,
    LOCK_TTL_SECONDS,
    REDIS_URL,
)
from app.utils.logging import get_logger

logger = get_logger(__name__)

#LUA porownaj i usun, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#redis wykonuje atomowo przez lua, skrypt dziala jako jedna nieprzerywalna operacja
#nie mozna wcisnac sie miedzy GET a DEL, wiec tu jest get + porownanie + del wszystko naraz


def cart_lock_key(session_id: str) -> str:
    return f"cart:{session_id}:lock"


def product_lock_key(product_id: int) -> str:
    return f"product:{product_id}:lock"


def order_lock_key(order_id: int) -> str:
    return f"order:{order_id}:lock"


def customer_lock_key(email: str) -> str:
    return f"customer:{email.strip().lower()}:lock"


class BaseLockService:
    """
    Nazwane blokady wzajemnego wykluczania.

    -serializacja zmian koszyka jednego wlasciciela
    -serializacja sprawdzenia + zdjecia stanu produktu przy checkoucie
    Podklasy implementuja try_acquire / release dla pojedynczego klucza.
    """

    def __init__(self, timeout: float = LOCK_TIMEOUT_SECONDS):
        self.timeout = timeout

    def try_acquire(self, key: str, token: str) -> bool:
        raise NotImplementedError

    def release(self, key: str, token: str) -> bool:
        raise NotImplementedError

    def acquire(self, key: str, token: str) -> bool:
        return lock_wait(self.timeout)(self.try_acquire)(key, token)

    @contextmanager
    def hold(self, keys: Iterable[str]) -> Iterator[str]:
        """
        Bierze wszystkie klucze w posortowanej kolejnosci (brak zakleszczen
        miedzy dwoma checkoutami) i zwalnia je w odwrotnej.
        Timeout -> Conflict, klient moze ponowic.
        """
        token = uuid.uuid4().hex
        acquired = []
        try:
            for key in sorted(set(keys)):
                if not self.acquire(key, token):
                    logger.warning(f"Lock {key} not acquired within {self.timeout}s")
                    raise Conflict(f"Resource {key} is busy, retry later")
                acquired.append(key)
            yield token
        finally:
            for key in reversed(acquired):
                try:
                    self.release(key, token)
                except redis.RedisError:
                    # klucz i tak wygasnie po TTL
                    logger.exception(f"Failed to release lock {key}")


class LockService(BaseLockService):
    """
    -rezerwacja klucza w redisie (SET NX EX)
    -zwalnianie locka tylko przez wlasciciela
    -atomowosc przy pomocy lua
    """

    def __init__(
        self,
        url: str | None = None,
        ttl: int = LOCK_TTL_SECONDS,
        timeout: float = LOCK_TIMEOUT_SECONDS,
    ):
        super().__init__(timeout=timeout)
        self.ttl = ttl
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @redis_retry()
    def try_acquire(self, key: str, token: str) -> bool:
        logger.debug(f"Acquire lock {key} ({token})")
        #SET cart:abc:lock "token" NX EX 30
        return bool(
            self.redis.set(
                name=key,
                value=token,
                nx=True, #jesli klucz istnieje to nic nie rob i None
                ex=self.ttl, #wygasa sam, lock po padnietym procesie nie wisi wiecznie
            )
        )

    @redis_retry()
    def release(self, key: str, token: str) -> bool:
        logger.debug(f"Release lock {key} ({token})")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)


class LocalLockService(BaseLockService):
    """Blokady w pamieci procesu - jeden worker, testy, dev."""

    def __init__(self, timeout: float = LOCK_TIMEOUT_SECONDS):
        super().__init__(timeout=timeout)
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._owners: dict[str, str] = {}

    def _lock_for(self, key: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(key, threading.Lock())

    def try_acquire(self, key: str, token: str) -> bool:
        if self._lock_for(key).acquire(blocking=False):
            self._owners[key] = token
            return True
        return False

    def acquire(self, key: str, token: str) -> bool:
        if self._lock_for(key).acquire(timeout=self.timeout):
            self._owners[key] = token
            return True
        return False

    def release(self, key: str, token: str) -> bool:
        if self._owners.get(key) != token:
            return False
        del self._owners[key]
        self._lock_for(key).release()
        return True


_lock_service: BaseLockService | None = None


def get_lock_service() -> BaseLockService:
    """Jedna instancja na proces, backend wybierany przez LOCK_BACKEND."""
    global _lock_service
    if _lock_service is None:
        if LOCK_BACKEND == "local":
            _lock_service = LocalLockService()
        else:
            _lock_service = LockService()
        logger.info(f"Lock backend: {type(_lock_service).__name__}")
    return _lock_service
