from src.gateway.client import GatewayError, RestGateway
from src.gateway.config import GatewaySettings, get_gateway_settings

__all__ = [
    "GatewayError",
    "GatewaySettings",
    "RestGateway",
    "get_gateway_settings",
]
