import hashlib
import json
from dataclasses import asdict
from typing import Any
from imgchain.domain.interfaces import IProcessor


def calculate_config_hash(config: Any) -> str:
    """
    Calculates a stable MD5 hash for a configuration.
    Processors hash by identifier, dataclasses by their fields.
    """
    if isinstance(config, IProcessor):
        data: Any = config.identifier
    elif hasattr(config, "__dataclass_fields__"):
        data = asdict(config)
    else:
        data = str(config)

    serialized = json.dumps(data, sort_keys=True, default=str)
    return hashlib.md5(serialized.encode("utf-8")).hexdigest()


def processed_cache_key(source_key: str, processor: IProcessor) -> str:
    """
    Cache key for the output of `processor` applied to the source at `source_key`.
    The default (identity/decode) processor maps to the source key itself.
    """
    identifier = processor.identifier
    if not identifier:
        return source_key
    return f"{source_key}@{identifier}"
