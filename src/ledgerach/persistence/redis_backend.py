"""Redis lock backend implementing ILockBackend."""

from __future__ import annotations

import redis

from ledgerach.core.exceptions import LockError


class RedisLockBackend:
    """Production ILockBackend: SET NX EX to acquire, token-checked delete to release."""

    def __init__(self, host: str = "localhost", port: int = 6379, db: int = 0) -> None:
        self._client = redis.Redis(
            host=host, port=port, db=db, decode_responses=True,
        )

    def acquire(self, key: str, token: str, ttl: int) -> bool:
        try:
            return bool(self._client.set(key, token, nx=True, ex=ttl))
        except Exception as exc:
            raise LockError(f"Redis SET NX failed for key={key!r}: {exc}") from exc

    def release(self, key: str, token: str) -> bool:
        try:
            with self._client.pipeline() as pipe:
                pipe.watch(key)
                if pipe.get(key) != token:
                    pipe.unwatch()
                    return False
                pipe.multi()
                pipe.delete(key)
                pipe.execute()
                return True
        except redis.WatchError:
            return False
        except Exception as exc:
            raise LockError(f"Redis release failed for key={key!r}: {exc}") from exc
