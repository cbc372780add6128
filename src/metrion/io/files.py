"""
metrion.io.files
================

Plain-text persistence of vectors: one line per saved vector, components
tab-separated and expressed in a caller-chosen unit. Files have no header;
saving appends.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, List, Union

if TYPE_CHECKING:  # pragma: no cover - typing aid only
    from metrion.core.unit import Unit
    from metrion.geometry.vector import Vector

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


def save_vector(vector: "Vector", path: PathLike, unit: "Unit | str | None" = None) -> None:
    """Append ``vector`` to ``path`` as one line of values expressed in ``unit``."""
    values = vector.values_as(unit)
    line = "\t".join(repr(v) for v in values)
    with open(path, "a", encoding="utf-8") as f:
        f.write(line + "\n")
    logger.debug("Appended %d-component vector to %s", len(values), os.fspath(path))


def load_vectors(path: PathLike, unit: "Unit | str | None" = None) -> List["Vector"]:
    """Read every vector saved in ``path``; values are interpreted in ``unit``."""
    from metrion.geometry.vector import Vector

    vectors: List[Vector] = []
    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            fields = line.split()
            if not fields:
                continue
            try:
                values = [float(x) for x in fields]
            except ValueError:
                raise ValueError(f"{os.fspath(path)}:{lineno}: malformed vector line {line.strip()!r}") from None
            vectors.append(Vector.from_values(values, unit))
    logger.debug("Loaded %d vectors from %s", len(vectors), os.fspath(path))
    return vectors


__all__ = ["save_vector", "load_vectors"]
