__all__ = [
    "BindingError",
    "ConversionError",
    "TypeResolutionError",
    "ContainerMaterialisationError",
]


class BindingError(Exception):
    """Raised when a configuration node cannot be bound to the requested type."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class ConversionError(BindingError):
    """Raised when scalar text cannot be converted to a target type."""

    pass


class TypeResolutionError(BindingError):
    """Raised when a type name cannot be resolved to a class."""

    pass


class ContainerMaterialisationError(Exception):
    """Raised when a container selected as constructible cannot be built or populated."""

    pass
