"""Custom exceptions for structure organizer."""


class StructureOrganizerError(Exception):
    """Base exception for structure organizer errors."""
    pass


class StoreLookupError(StructureOrganizerError):
    """Raised when the store cannot tell whether a container is organizing."""
    pass


class ContainerNotFoundError(StoreLookupError):
    """Raised when a container reference does not exist in the store."""

    def __init__(self, ref):
        super().__init__(f"Container not found: {ref}")
        self.ref = ref


class ItemNotFoundError(StructureOrganizerError):
    """Raised when an item does not exist in the store."""

    def __init__(self, item_id: str):
        super().__init__(f"Item not found: {item_id}")
        self.item_id = item_id


class ConfigurationError(StructureOrganizerError):
    """Raised when there's an error in configuration."""
    pass
