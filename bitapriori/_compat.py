from __future__ import annotations

from typing import Any


def frame_kind(data: Any) -> str:
    """Name the container family of *data*: pandas, polars, pyarrow, numpy, scipy or other."""
    _type = type(data)
    name = _type.__name__
    mod = getattr(_type, "__module__", "") or ""

    if name == "Table" and mod.startswith("pyarrow"):
        return "pyarrow"
    if name == "DataFrame" and mod.startswith("polars"):
        return "polars"
    if name == "DataFrame" and mod.startswith("pandas"):
        return "pandas"
    if name == "ndarray":
        return "numpy"
    if mod.startswith("scipy.sparse"):
        return "scipy"
    return "other"


def to_pandas(data: Any) -> Any:
    """Coerce polars/pyarrow frames to pandas; return everything else unchanged."""
    kind = frame_kind(data)

    if kind == "pyarrow":
        return data.to_pandas()

    if kind == "polars":
        from ._dependencies import import_optional_dependency

        import_optional_dependency("pyarrow", extra="pyarrow is required to convert polars frames.")
        return data.to_pandas()

    return data
