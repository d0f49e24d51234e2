import itertools
import secrets

from ..core.ports import KeyGenerator


class HexKey(KeyGenerator):
    """Random hex keys; keys already handed out are never repeated."""

    # Shared by all instances and kept for the life of the process, so keys
    # from separate runs (or requests under `serve`) never collide.
    _seen: dict[int, set[str]] = {}

    def __init__(self, nbytes: int = 3):  # 3 bytes -> 6 hex chars
        self.nbytes = nbytes

    def new_key(self) -> str:
        seen = HexKey._seen.setdefault(self.nbytes, set())
        if len(seen) >= 256 ** self.nbytes:
            raise LookupError(f"All {self.nbytes}-byte keys have been used")
        while True:
            key = secrets.token_hex(self.nbytes)
            if key not in seen:
                seen.add(key)
                return key


class CounterKey(KeyGenerator):
    """Deterministic keys ``<prefix>0``, ``<prefix>1``, ... for reproducible output."""

    def __init__(self, prefix: str = "b", start: int = 0):
        self.prefix = prefix
        self._counter = itertools.count(start)

    def new_key(self) -> str:
        return f"{self.prefix}{next(self._counter)}"
