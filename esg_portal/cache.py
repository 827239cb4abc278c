"""
Response cache for GET endpoints.

Bounded TTL map: entries expire after `ttl` seconds and the oldest entry is
evicted once `max_entries` is reached. Keys are "<user_id>:<full path>" so a
user's entries can be dropped with invalidate(f"{user_id}:").
"""

import logging
import threading
import time
from collections import OrderedDict
from functools import wraps

from flask import current_app, jsonify, request
from flask_login import current_user

from esg_portal import db
from esg_portal.models import User

logger = logging.getLogger(__name__)


class ResponseCache:
    def __init__(self, ttl=60, max_entries=512, clock=time.monotonic):
        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries = OrderedDict()  # {key: (stored_at, value)}
        self._lock = threading.Lock()

    def get(self, key):
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._clock() - stored_at >= self.ttl:
                del self._entries[key]
                return None
            return value

    def set(self, key, value):
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = (self._clock(), value)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def invalidate(self, prefix):
        """Drop every key starting with `prefix`. Returns the number removed."""
        with self._lock:
            stale = [k for k in self._entries if k.startswith(prefix)]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.debug(f"Cache invalidated {len(stale)} entries matching {prefix!r}")
        return len(stale)

    def clear(self):
        with self._lock:
            self._entries.clear()

    def __len__(self):
        return len(self._entries)


def get_cache():
    return current_app.extensions["response_cache"]


def user_cache_prefix(user_id):
    return f"{user_id}:"


def cached_response(view):
    """Cache the JSON body of a successful GET view per user and full path."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        if request.method != "GET":
            return view(*args, **kwargs)
        cache = get_cache()
        key = f"{user_cache_prefix(current_user.get_id())}{request.full_path}"
        body = cache.get(key)
        if body is not None:
            return jsonify(body)

        rv = view(*args, **kwargs)
        response = current_app.make_response(rv)
        if response.status_code == 200 and response.is_json:
            cache.set(key, response.get_json())
        return response
    return wrapper


def invalidate_user_views(user_id):
    """Drop cached views of `user_id` and of every admin, whose views span all users."""
    cache = get_cache()
    removed = cache.invalidate(user_cache_prefix(user_id))
    admin_ids = db.session.query(User.id).filter(User.role == "admin", User.id != user_id)
    for (admin_id,) in admin_ids:
        removed += cache.invalidate(user_cache_prefix(admin_id))
    return removed
