"""Lock state - who holds the exclusive lock on a repository file."""

from dataclasses import dataclass

import redis
import structlog

from src.orchestrator.config import Settings

logger = structlog.get_logger()


@dataclass
class LockResult:
    """Result of a lock acquisition attempt."""
    acquired: bool
    path: str
    holder: str | None = None


def _decode(value: bytes | str) -> str:
    return value.decode() if isinstance(value, bytes) else value


class RedisLockStore:
    """Lock records kept in Redis, keyed by repo-relative path.
    
    The value of each key is the identity of the committer holding it.
    """
    
    def __init__(self, settings: Settings, committer: str, client: redis.Redis | None = None):
        self.settings = settings
        self.committer = committer
        self.redis = client
    
    def _get_redis(self) -> redis.Redis:
        """Lazy Redis connection."""
        if self.redis is None:
            self.redis = redis.from_url(self.settings.redis_url)
        return self.redis
    
    def _lock_key(self, path: str) -> str:
        """Generate Redis key for file lock."""
        return f"lock:{self.settings.lock_namespace}:{path}"
    
    def get_holder(self, path: str) -> str | None:
        """Identity holding the lock on ``path``, if any."""
        holder = self._get_redis().get(self._lock_key(path))
        return _decode(holder) if holder else None
    
    def is_locked_by_current_committer(self, path: str) -> bool:
        """Whether the configured committer holds the lock on ``path``."""
        return self.get_holder(path) == self.committer
    
    def lock_file(self, path: str) -> LockResult:
        """Take the lock on ``path`` unless someone else holds it.

        If the lock disappears between the failed SET and reading its holder,
        the SET is tried once more. A lock that keeps vanishing is reported
        as not acquired with no holder.
        """
        r = self._get_redis()

        for _ in range(2):
            # NX: never overwrite another committer's lock
            if r.set(self._lock_key(path), self.committer, nx=True):
                logger.info("Acquired file lock", path=path, committer=self.committer)
                return LockResult(acquired=True, path=path, holder=self.committer)

            holder = self.get_holder(path)
            if holder is not None:
                return LockResult(acquired=holder == self.committer, path=path, holder=holder)

        logger.warning("File lock changed hands while locking", path=path)
        return LockResult(acquired=False, path=path)
    
    def unlock_file(self, path: str) -> bool:
        """Release the lock on ``path`` if the current committer holds it."""
        if not self.is_locked_by_current_committer(path):
            return False
        
        self._get_redis().delete(self._lock_key(path))
        logger.info("Released file lock", path=path, committer=self.committer)
        return True
    
    def get_locked_files(self) -> dict[str, str]:
        """Get all locked files with their holders."""
        r = self._get_redis()
        pattern = self._lock_key("*")
        prefix_len = len(self._lock_key(""))
        
        locks = {}
        for key in r.scan_iter(match=pattern):
            holder = r.get(key)
            if holder:
                locks[_decode(key)[prefix_len:]] = _decode(holder)
        
        return locks
