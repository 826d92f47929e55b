"""Remote data gateway: the single path to the HomeSphere API."""

from homesphere.gateway.api import HomeSphereAPI
from homesphere.gateway.client import GatewayClient, error_from_response
from homesphere.gateway.normalize import Normalized, ResourceShape, ShapeMismatch, normalize, unwrap
from homesphere.gateway.retry import retry_read

__all__ = [
    "GatewayClient",
    "HomeSphereAPI",
    "Normalized",
    "ResourceShape",
    "ShapeMismatch",
    "error_from_response",
    "normalize",
    "retry_read",
    "unwrap",
]
