"""SSH connector for Juniper JunOS devices."""

__version__ = "0.4.0"

from junos_connector.errors import (  # noqa: E402
    CommandRejectedError,
    ConfigurationError,
    ConnectorError,
    TransportError,
)
from junos_connector.services.connection import JunosConnection  # noqa: E402

__all__ = [
    "CommandRejectedError",
    "ConfigurationError",
    "ConnectorError",
    "JunosConnection",
    "TransportError",
    "__version__",
]
