"""SCALE encoding helpers on top of scalecodec."""

from typing import Any, Optional

from scalecodec.base import RuntimeConfigurationObject, ScaleBytes
from scalecodec.type_registry import load_type_registry_preset

__all__ = ["runtime_config", "encode", "decode", "compact", "ScaleBytes"]

_runtime_config: Optional[RuntimeConfigurationObject] = None


def runtime_config() -> RuntimeConfigurationObject:
    """Shared type registry with the core and legacy presets loaded."""
    global _runtime_config
    if _runtime_config is None:
        config = RuntimeConfigurationObject()
        config.update_type_registry(load_type_registry_preset("core"))
        config.update_type_registry(load_type_registry_preset("legacy"))
        _runtime_config = config
    return _runtime_config


def encode(type_string: str, value: Any) -> bytes:
    """SCALE-encode ``value`` as ``type_string`` and return the raw bytes."""
    obj = runtime_config().create_scale_object(type_string)
    return bytes(obj.encode(value).data)


def decode(type_string: str, data: ScaleBytes) -> Any:
    """Decode one value from ``data``, advancing its offset."""
    obj = runtime_config().create_scale_object(type_string, data=data)
    return obj.decode(check_remaining=False)


def compact(value: int) -> bytes:
    """SCALE compact (variable-length) encoding of an unsigned integer."""
    return encode("Compact<u128>", value)
