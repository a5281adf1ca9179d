"""Configuration model for structure organizer.

A structure file describes the container hierarchy and which containers
organize their children, e.g.::

    {
      "containers": [
        {"path": "/Site"},
        {"path": "/Site/News", "organizer": {"type": "date", "levels": ["year", "month"]}}
      ]
    }
"""

from pathlib import Path
from typing import List, Optional, Union, get_args, get_origin
import json
from dataclasses import dataclass, field

from ..domain.policies import (
    AttributeOrganizingPolicy,
    DateOrganizingPolicy,
    RedirectPolicy,
)
from ..exceptions import ConfigurationError
from ..infrastructure.memory_store import InMemoryContainerStore

ORGANIZER_TYPES = ("date", "attribute", "redirect")
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


@dataclass
class OrganizerConfig:
    """Configuration of an organizing policy."""
    type: str = "date"
    levels: List[str] = field(default_factory=lambda: ["year", "month"])
    date_attribute: str = "published"
    attribute: Optional[str] = None  # for "attribute"
    default: Optional[str] = None  # for "attribute"
    target: Optional[str] = None  # path for "redirect"
    create_missing: bool = True


@dataclass
class ContainerConfig:
    """Configuration of a single container."""
    path: str
    organizer: Optional[OrganizerConfig] = None


@dataclass
class ResolverSettings:
    """General settings."""
    log_level: str = "WARNING"
    provider: Optional[str] = None


@dataclass
class StructureConfig:
    """Main configuration model."""
    containers: List[ContainerConfig] = field(default_factory=list)
    settings: ResolverSettings = field(default_factory=ResolverSettings)

    @classmethod
    def default(cls) -> "StructureConfig":
        """Create an example structure with a date and a category organizer."""
        return cls(containers=[
            ContainerConfig(path="/Site"),
            ContainerConfig(
                path="/Site/News",
                organizer=OrganizerConfig(type="date", levels=["year", "month"])
            ),
            ContainerConfig(
                path="/Site/Articles",
                organizer=OrganizerConfig(type="attribute", attribute="category", default="General")
            ),
            ContainerConfig(
                path="/Site/Press",
                organizer=OrganizerConfig(type="redirect", target="/Site/News")
            ),
        ])


def _dataclass_to_dict(obj):
    """Convert dataclass to dict recursively."""
    from dataclasses import is_dataclass, asdict
    if is_dataclass(obj):
        result = {}
        for key, value in asdict(obj).items():
            result[key] = _dataclass_to_dict(value)
        return result
    elif isinstance(obj, Path):
        return str(obj)
    elif isinstance(obj, dict):
        return {key: _dataclass_to_dict(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [_dataclass_to_dict(item) for item in obj]
    else:
        return obj


def _unwrap_optional(field_type):
    if get_origin(field_type) is Union:
        args = [arg for arg in get_args(field_type) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return field_type


def _dict_to_dataclass(data, dataclass_type):
    """Convert dict to dataclass recursively."""
    from dataclasses import is_dataclass, fields
    if not is_dataclass(dataclass_type):
        return data
    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected an object for {dataclass_type.__name__}, got {type(data).__name__}")

    field_types = {f.name: _unwrap_optional(f.type) for f in fields(dataclass_type)}

    unknown = set(data) - set(field_types)
    if unknown:
        raise ConfigurationError(
            f"Unknown {dataclass_type.__name__} keys: {', '.join(sorted(unknown))}"
        )

    kwargs = {}
    for field_name, field_type in field_types.items():
        if field_name not in data:
            continue
        value = data[field_name]
        if value is None:
            kwargs[field_name] = None
        elif hasattr(field_type, '__dataclass_fields__'):
            kwargs[field_name] = _dict_to_dataclass(value, field_type)
        elif get_origin(field_type) is list:
            (item_type,) = get_args(field_type)
            if not isinstance(value, list):
                raise ConfigurationError(f"Expected a list for '{field_name}'")
            kwargs[field_name] = [_dict_to_dataclass(item, item_type) for item in value]
        else:
            kwargs[field_name] = value

    try:
        return dataclass_type(**kwargs)
    except TypeError as e:
        raise ConfigurationError(f"Invalid {dataclass_type.__name__}: {e}") from e


def validate_config(config: StructureConfig) -> None:
    """Check the structure for mistakes that would only show up at build time.

    Raises:
        ConfigurationError: If the structure is invalid.
    """
    level = config.settings.log_level
    if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
        raise ConfigurationError(f"Unknown log level: {level!r}")
    if config.settings.provider is not None and not isinstance(config.settings.provider, str):
        raise ConfigurationError(f"Provider must be a string: {config.settings.provider!r}")

    seen = set()
    for container in config.containers:
        if not isinstance(container.path, str):
            raise ConfigurationError(f"Container path must be a string: {container.path!r}")
        if not container.path.startswith("/") or container.path.strip("/") == "":
            raise ConfigurationError(f"Container path must be absolute: {container.path!r}")
        if container.path in seen:
            raise ConfigurationError(f"Duplicate container path: {container.path}")
        seen.add(container.path)

        organizer = container.organizer
        if organizer is None:
            continue
        if not isinstance(organizer.type, str) or organizer.type not in ORGANIZER_TYPES:
            raise ConfigurationError(
                f"Unknown organizer type '{organizer.type}' for {container.path}"
            )
        if organizer.type == "attribute" and not organizer.attribute:
            raise ConfigurationError(f"Attribute organizer for {container.path} needs 'attribute'")
        if organizer.type == "redirect" and not organizer.target:
            raise ConfigurationError(f"Redirect organizer for {container.path} needs 'target'")
        for key in ("attribute", "default", "target", "date_attribute"):
            value = getattr(organizer, key)
            if value is not None and not isinstance(value, str):
                raise ConfigurationError(f"Organizer '{key}' for {container.path} must be a string")
        if not all(isinstance(level, str) for level in organizer.levels or []):
            raise ConfigurationError(f"Organizer 'levels' for {container.path} must be strings")


def load_config(config_path: Path) -> StructureConfig:
    """Load configuration from JSON file."""
    try:
        with open(config_path, 'r') as f:
            config_data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read structure file {config_path}: {e}") from e

    config = _dict_to_dataclass(config_data, StructureConfig)
    validate_config(config)
    return config


def save_config(config: StructureConfig, config_path: Path) -> None:
    """Save configuration to JSON file."""
    config_dict = _dataclass_to_dict(config)

    with open(config_path, 'w') as f:
        json.dump(config_dict, f, indent=2)


def create_default_config(config_path: Path) -> None:
    """Create an example structure file."""
    save_config(StructureConfig.default(), config_path)


def build_store(config: StructureConfig) -> InMemoryContainerStore:
    """Create an in-memory store holding the configured structure.

    Missing ancestors are created as plain containers. Policies are attached
    once every container exists, so redirects may point anywhere.
    """
    validate_config(config)
    store = InMemoryContainerStore(provider=config.settings.provider)

    for container in config.containers:
        _ensure_path(store, container.path)

    for container in config.containers:
        if container.organizer is None:
            continue
        ref = store.find_by_path(container.path)
        store.set_policy(ref, _build_policy(store, ref, container))

    return store


def _ensure_path(store: InMemoryContainerStore, path: str):
    current = None
    for name in [part for part in path.split("/") if part]:
        if current is None:
            current = store.find_by_path("/" + name) or store.add_container(name)
        else:
            current = store.get_or_create_child(current, name)
    return current


def _build_policy(store: InMemoryContainerStore, ref, container: ContainerConfig):
    organizer = container.organizer
    try:
        if organizer.type == "date":
            return DateOrganizingPolicy(
                store, ref,
                levels=organizer.levels,
                date_attribute=organizer.date_attribute,
                create_missing=organizer.create_missing,
            )
        if organizer.type == "attribute":
            return AttributeOrganizingPolicy(
                store, ref,
                attribute=organizer.attribute,
                default=organizer.default,
                create_missing=organizer.create_missing,
            )
    except ValueError as e:
        raise ConfigurationError(f"Invalid organizer for {container.path}: {e}") from e

    target = store.find_by_path(organizer.target)
    if target is None:
        raise ConfigurationError(
            f"Redirect target '{organizer.target}' of {container.path} does not exist"
        )
    return RedirectPolicy(target)
