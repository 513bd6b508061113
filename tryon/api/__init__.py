"""External API clients."""

from .aitunnel_client import AITunnelClient, AITunnelRequestError

__all__ = ["AITunnelClient", "AITunnelRequestError"]
