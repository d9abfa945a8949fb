"""
Shared client instances — Redis.

redis.from_url() does not connect until the first command, so importing this
module is always safe (even when Redis is not running during tests).
"""
import redis

from spam_auditor.config import REDIS_URL

# Report cache, run lock, schedule bookkeeping
redis_client = redis.from_url(REDIS_URL, decode_responses=True)

# RQ stores pickled payloads, so its connection must not decode responses
rq_connection = redis.from_url(REDIS_URL)
