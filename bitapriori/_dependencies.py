from __future__ import annotations

import importlib
import types
import warnings
from typing import Literal, Optional

#: Extra of the ``bitapriori`` distribution that installs a module.
_EXTRAS = {"polars": "polars"}


def import_optional_dependency(
    name: str,
    extra: str = "",
    errors: Literal["raise", "warn", "ignore"] = "raise",
) -> Optional[types.ModuleType]:
    """Import an optional dependency, explaining how to install it if missing.

    Parameters
    ----------
    name : str
        The module name, e.g. ``"polars"`` or ``"pyarrow.compute"``.
    extra : str
        Additional text appended to the error message.
    errors : {'raise', 'warn', 'ignore'}
        What to do when the module cannot be imported: raise an
        ``ImportError``, emit a ``UserWarning`` and return ``None``, or just
        return ``None``.
    """
    if errors not in ("raise", "warn", "ignore"):
        raise ValueError(f"Invalid value for errors: {errors}")

    try:
        return importlib.import_module(name)
    except ImportError:
        package = name.split(".")[0]
        msg = f"Missing optional dependency '{package}'."
        if package in _EXTRAS:
            msg += f" Install it with `pip install bitapriori[{_EXTRAS[package]}]`."
        else:
            msg += f" Use pip or conda to install {package}."
        if extra:
            msg += f" {extra}"

        if errors == "raise":
            raise ImportError(msg) from None
        if errors == "warn":
            warnings.warn(msg, UserWarning, stacklevel=2)
        return None
