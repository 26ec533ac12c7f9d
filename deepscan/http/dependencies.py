from fastapi import Request

from deepscan.http.services import Services
from deepscan.ratelimit.request_limiter import client_fingerprint


def get_services(request: Request) -> Services:
    services: Services = request.app.state.services
    return services


class RateLimit:
    """Route dependency counting the request against one route class ceiling."""

    def __init__(self, route_class: str) -> None:
        self.route_class = route_class

    # async so counters are only mutated on the event loop thread
    async def __call__(self, request: Request) -> None:
        services = get_services(request)
        services.request_limiter.hit(self.route_class, client_fingerprint(request.headers))
