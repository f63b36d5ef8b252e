from typing import Any

import yaml

from blobpath.asyncio.azure import AsyncAzureBackend
from blobpath.asyncio.backend import AsyncBlobBackend
from blobpath.asyncio.local import AsyncLocalBackend
from blobpath.asyncio.memory import AsyncMemoryBackend
from blobpath.asyncio.s3 import AsyncS3Backend
from blobpath.errors import ConfigError

BACKENDS: dict[str, type[AsyncBlobBackend]] = {
    's3': AsyncS3Backend,
    'azure': AsyncAzureBackend,
    'local': AsyncLocalBackend,
    'memory': AsyncMemoryBackend,
}

REQUIRED_FIELDS = {
    's3': ['endpoint_url', 'aws_access_key_id', 'aws_secret_access_key'],
    'azure': ['connection_string'],
    'local': ['root'],
    'memory': [],
}


def parse_config(path: str) -> dict[str, Any]:
    """Read and validate backend configuration file.

    Parameters
    ----------
    path : str
        Path to YAML configuration file. ``backend`` key selects backend
        (``s3`` if absent), other keys are backend arguments.

    Returns
    -------
    dict[str, Any]
        Configuration.
    """
    with open(path) as f:
        config = yaml.safe_load(f)
    if not isinstance(config, dict):
        raise ConfigError(f"Configuration file must be a mapping: '{path}'")
    config.setdefault('backend', 's3')
    backend = config['backend']
    if backend not in BACKENDS:
        raise ConfigError(f"invalid backend: '{backend}'")
    for field in REQUIRED_FIELDS[backend]:
        if field not in config:
            raise ConfigError(f"Configuration file must contain '{field}' field")
    return config


def backend_from_config(config: dict[str, Any]) -> AsyncBlobBackend:
    params = dict(config)
    name = params.pop('backend', 's3')
    if name not in BACKENDS:
        raise ConfigError(f"invalid backend: '{name}'")
    try:
        return BACKENDS[name](**params)
    except TypeError as err:
        raise ConfigError(f"invalid '{name}' backend configuration: {err}") from err


def backend_from_yaml(path: str) -> AsyncBlobBackend:
    return backend_from_config(parse_config(path))
