"""Router import resolution: ``"module:attribute"`` strings to Router instances.

Shared by ``waypoint routes`` and ``waypoint run``.
"""

import importlib

from waypoint.routing.router import Router


def resolve_router(import_string: str) -> Router:
    """Resolve an import string to a waypoint Router.

    Accepts ``"module:attribute"``. When the attribute is omitted it
    defaults to ``"router"`` (``"myservice"`` resolves to
    ``myservice.router``). A zero-argument factory is called; route
    registration happens inside it, so setup errors surface here.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not a Router or a factory
            returning one.
        ConfigurationError: If building the route table fails.
    """
    module_path, _, attr_name = import_string.partition(":")
    attr_name = attr_name or "router"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, Router):
        obj = obj()

    if not isinstance(obj, Router):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a waypoint Router"
        raise TypeError(msg)
    return obj
