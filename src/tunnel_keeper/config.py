"""Loading of tunnel configuration files."""

from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from .common.exceptions import ConfigurationError
from .common.logging import get_logger
from .tunnels.models import TunnelConfig

logger = get_logger(__name__)

_CONFIGS_ADAPTER = TypeAdapter(list[TunnelConfig])


def parse_tunnel_configs(data: str | bytes) -> list[TunnelConfig]:
    """Parse a JSON array of tunnel configurations.

    Args:
        data: JSON document

    Returns:
        Configurations in document order

    Raises:
        ConfigurationError: If the document is not a valid list of tunnels
    """
    try:
        return _CONFIGS_ADAPTER.validate_json(data)
    except ValidationError as e:
        raise ConfigurationError(f"unmarshaling configs: {e}") from e


def load_tunnel_configs(path: str | Path) -> list[TunnelConfig]:
    """Read and parse a tunnel configuration file.

    Example file::

        [
            {"name": "db", "local_port": 5432,
             "k8s": {"namespace": "data", "service": "svc/postgres", "port": 5432}},
            {"name": "web", "local_port": 8080, "custom": "ssh -N -L 8080:localhost:80 bastion"}
        ]

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    config_path = Path(path)
    try:
        data = config_path.read_bytes()
    except OSError as e:
        raise ConfigurationError(f"reading file {config_path}: {e}") from e

    configs = parse_tunnel_configs(data)
    logger.info("Loaded tunnel configs", path=str(config_path), tunnels=len(configs))
    return configs
