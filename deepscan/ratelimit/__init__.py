from deepscan.ratelimit.api_limiter import ApiRateLimiter
from deepscan.ratelimit.base import BaseCounterStore
from deepscan.ratelimit.factory import CounterStoreFactory
from deepscan.ratelimit.request_limiter import RequestRateLimiter

__all__ = ["ApiRateLimiter", "BaseCounterStore", "CounterStoreFactory", "RequestRateLimiter"]
