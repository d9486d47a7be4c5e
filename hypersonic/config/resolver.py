"""Layered pull request configuration resolution.

Three layers are merged field by field, highest precedence last:

    built-in defaults  <  client defaults  <  per-call values

A layer only contributes the fields that were explicitly set on it, so a
per-call config that sets just ``title`` leaves every other field to fall
through to the client defaults, then to the built-in defaults.
"""

import copy
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ..errors import ConfigurationError
from .schema import DEFAULT_PR_CONFIG, PullRequestConfig

ConfigInput = Union[PullRequestConfig, Mapping[str, Any]]


def explicit_fields(layer: Optional[ConfigInput]) -> Dict[str, Any]:
    """Return the fields explicitly set on a configuration layer.

    Args:
        layer: A PullRequestConfig, a mapping of field names, or None

    Returns:
        Dict of field name to a deep copy of its value

    Raises:
        ConfigurationError: If a mapping has unknown fields or bad values
    """
    if layer is None:
        return {}

    if not isinstance(layer, PullRequestConfig):
        try:
            layer = PullRequestConfig(**dict(layer))
        except (PydanticValidationError, TypeError) as e:
            raise ConfigurationError(f"Invalid pull request config: {e}", cause=e) from e

    return {name: copy.deepcopy(getattr(layer, name)) for name in layer.model_fields_set}


def resolve_pr_config(
    instance_default: Optional[ConfigInput] = None,
    config: Optional[ConfigInput] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> PullRequestConfig:
    """Merge built-in, instance and per-call configuration into one config.

    A call supplies either a full ``config`` object or discrete ``overrides``,
    never both.

    Args:
        instance_default: The client's default pull request config or its explicit fields
        config: Per-call config object or mapping
        overrides: Per-call discrete field overrides

    Returns:
        A fresh PullRequestConfig whose ``model_fields_set`` holds the fields
        set by the instance or call layer

    Raises:
        ConfigurationError: If both ``config`` and ``overrides`` are given, or
            if either contains invalid fields
    """
    if config is not None and overrides:
        raise ConfigurationError("cannot provide both a full config and discrete overrides")

    instance_layer = explicit_fields(instance_default)
    call_layer = explicit_fields(config if config is not None else overrides)

    merged = DEFAULT_PR_CONFIG.model_dump()
    merged.update(instance_layer)
    merged.update(call_layer)

    try:
        validated = PullRequestConfig(**merged)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid pull request config: {e}", cause=e) from e

    # Keep track of which fields came from a caller-controlled layer
    return PullRequestConfig.model_construct(
        _fields_set=set(instance_layer) | set(call_layer),
        **validated.model_dump(),
    )
