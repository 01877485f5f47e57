"""On-disk account name cache.

One file per account (``account_<id>``) holding the display name; the file's
mtime is the fetch time. Entries expire after CACHE_EXPIRY seconds and are
never cleaned up explicitly.
"""
from __future__ import annotations

import logging
import os
import time
from typing import Callable, Dict, Optional

LOG = logging.getLogger(__name__)

CACHE_DIR = os.path.join(os.path.expanduser("~"), ".aws_cost_analysis_cache")
CACHE_EXPIRY = 3600


class NameCache:
    """Resolve account ids to display names, best effort.

    ``lookup`` is anything with a ``lookup(account_id) -> Optional[str]`` method.
    """

    def __init__(self, lookup, cache_dir: str = CACHE_DIR, expiry: int = CACHE_EXPIRY,
                 clock: Callable[[], float] = time.time):
        self.lookup = lookup
        self.cache_dir = cache_dir
        self.expiry = expiry
        self.clock = clock
        self.enabled = True
        self._resolved: Dict[str, str] = {}

    def init(self) -> bool:
        """Create the cache directory (mode 0700). Disables caching if that fails."""
        try:
            os.makedirs(self.cache_dir, mode=0o700, exist_ok=True)
            os.chmod(self.cache_dir, 0o700)
        except OSError as e:
            LOG.warning("Could not create cache directory %s (%s); continuing without cache", self.cache_dir, e)
            self.enabled = False
        return self.enabled

    def entry_path(self, account_id: str) -> str:
        return os.path.join(self.cache_dir, f"account_{account_id}")

    def read(self, account_id: str) -> Optional[str]:
        path = self.entry_path(account_id)
        try:
            age = self.clock() - os.path.getmtime(path)
            if age >= self.expiry:
                LOG.debug("Cache entry for %s expired (%.0fs old)", account_id, age)
                return None
            with open(path, "r", encoding="utf-8") as f:
                name = f.read().rstrip("\n")
        except FileNotFoundError:
            return None
        except OSError as e:
            LOG.debug("Could not read cache entry %s: %s", path, e)
            return None
        return name or None

    def write(self, account_id: str, name: str) -> None:
        path = self.entry_path(account_id)
        try:
            with open(path, "w", encoding="utf-8") as f:
                f.write(name + "\n")
        except OSError as e:
            LOG.warning("Could not write cache entry %s: %s", path, e)

    def resolve(self, account_id: str, use_cache: bool = True) -> str:
        if account_id in self._resolved:
            return self._resolved[account_id]

        use_cache = use_cache and self.enabled
        name = self.read(account_id) if use_cache else None
        if name is None:
            try:
                name = self.lookup.lookup(account_id)
            except Exception as e:
                LOG.debug("Name lookup failed for %s: %s", account_id, e)
                name = None
            if name:
                if use_cache:
                    self.write(account_id, name)
            else:
                LOG.debug("No name found for account %s; using the id", account_id)
                name = account_id

        self._resolved[account_id] = name
        return name
