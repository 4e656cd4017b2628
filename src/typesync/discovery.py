"""Model type discovery.

Application code declares data types by decorating a class::

    from typesync.discovery import data_type

    @data_type(
        "colorpicker.editor",
        name="Color Picker",
        id="6c4d7a4e-2b56-4b2a-8c59-0d7e6b8f1a10",
        pre_values={"swatches": "red,green"},
    )
    class ColorPicker:
        pass

``TypeResolver`` imports the configured modules, finds decorated classes
and turns them into ``ModelDescriptor`` instances for the synchronizer.

Usage:
    from typesync.discovery import TypeResolver

    resolver = TypeResolver(["myapp.models"])
    models = await resolver.get_models()
"""

import importlib
import inspect
import logging
import pkgutil
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from types import ModuleType
from typing import Any, TypeVar
from uuid import UUID

from typesync.sync.models import ModelDescriptor

logger = logging.getLogger(__name__)

ATTRIBUTE_NAME = "__typesync_data_type__"

T = TypeVar("T", bound=type)


@dataclass(frozen=True)
class DataTypeAttribute:
    """Metadata attached to a class by ``@data_type``."""

    editor: str
    value_type: type = str
    name: str | None = None
    id: UUID | None = None
    pre_values: dict[str, str] | None = None


def data_type(
    editor: str,
    *,
    value_type: type = str,
    name: str | None = None,
    id: UUID | str | None = None,
    pre_values: dict[str, str] | None = None,
) -> Callable[[T], T]:
    """Class decorator declaring a data type.

    Args:
        editor: Editor identifier that renders and stores the values.
        value_type: Declared value type (``int``, ``datetime``, ``str``, ...).
        name: Display name.  Defaults to the class name.
        id: Stable id that survives renames, as ``UUID`` or string.
        pre_values: Pre-values to configure.  ``{}`` clears stored ones,
            ``None`` leaves them alone.

    Raises:
        ValueError: If ``editor`` is empty or ``id`` is not a valid UUID.
    """
    if not editor:
        raise ValueError("editor is required")

    attribute = DataTypeAttribute(
        editor=editor,
        value_type=value_type,
        name=name,
        id=UUID(id) if isinstance(id, str) else id,
        pre_values=dict(pre_values) if pre_values is not None else None,
    )

    def decorate(cls: T) -> T:
        setattr(cls, ATTRIBUTE_NAME, attribute)
        return cls

    return decorate


def is_data_type(obj: Any) -> bool:
    """True if *obj* is a class decorated with ``@data_type`` itself."""
    # vars() so subclasses of a decorated class are not model types
    return inspect.isclass(obj) and ATTRIBUTE_NAME in vars(obj)


def describe(cls: type) -> ModelDescriptor:
    """Build the ``ModelDescriptor`` for a decorated class.

    Raises:
        TypeError: If *cls* is not a model type.
    """
    if not is_data_type(cls):
        raise TypeError(f"Type {cls!r} is not a model type.")

    attribute: DataTypeAttribute = vars(cls)[ATTRIBUTE_NAME]
    return ModelDescriptor(
        name=attribute.name or cls.__name__,
        editor=attribute.editor,
        value_type=attribute.value_type,
        id=attribute.id,
        pre_values=attribute.pre_values,
        source_type=cls,
    )


def _iter_modules(module_names: Iterable[str]) -> Iterable[ModuleType]:
    for module_name in module_names:
        module = importlib.import_module(module_name)
        yield module

        # Packages: walk every submodule as well
        if hasattr(module, "__path__"):
            for info in pkgutil.walk_packages(module.__path__, prefix=f"{module_name}."):
                yield importlib.import_module(info.name)


class TypeResolver:
    """``ModelDiscovery`` over decorated classes in importable modules.

    Only classes defined in a scanned module count, so re-exports are not
    reported twice.  Import errors propagate.
    """

    def __init__(self, modules: Sequence[str]) -> None:
        self._modules = list(modules)

    def find_types(self) -> list[type]:
        """Return every decorated class, deduplicated, in name order."""
        found: dict[str, type] = {}
        for module in _iter_modules(self._modules):
            for _, obj in inspect.getmembers(module, is_data_type):
                if obj.__module__ == module.__name__:
                    found[f"{obj.__module__}.{obj.__qualname__}"] = obj
        return [found[key] for key in sorted(found)]

    async def get_models(self) -> list[ModelDescriptor]:
        types = self.find_types()
        logger.debug("Discovered %d data types in %s", len(types), self._modules)
        return sorted((describe(cls) for cls in types), key=lambda m: m.name)


class StaticDiscovery:
    """``ModelDiscovery`` over a fixed sequence of descriptors."""

    def __init__(self, models: Iterable[ModelDescriptor]) -> None:
        self._models = list(models)

    async def get_models(self) -> list[ModelDescriptor]:
        return list(self._models)
