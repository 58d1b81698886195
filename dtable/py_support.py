from importlib import import_module
from typing import Any, Callable, cast


def get_symbol_from_path(path: str) -> object:
    """Given a `module.path:name`, load the python module and return the symbol.

    Args:
        path: The module path and symbol name, e.g. `module.path:name`.
    """

    if ":" in path:
        module_path, symbol = path.split(":", 1)
    else:
        module_path = path
        symbol = None

    module = import_module(module_path)

    if symbol is not None:
        return getattr(module, symbol)
    return module


def get_callable_from_path(path: str) -> Callable[..., Any]:
    """Load a function given as `module.path:name`.

    Args:
        path: The module path and the name of the function.

    Raises:
        ValueError: If the path does not name a symbol or the symbol is not
            callable.
    """
    if ":" not in path:
        raise ValueError(
            f"Expected a `module.path:name` reference, got {path!r}"
        )
    symbol = get_symbol_from_path(path)
    if not callable(symbol):
        raise ValueError(f"{path} does not refer to a callable")
    return cast(Callable[..., Any], symbol)
