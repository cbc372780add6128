"""
metrion.geometry.matrix
=======================

Defines `Matrix`, an immutable column-major matrix of measurements stored as
a tuple of column `Vector`s.

Determinant, cofactors, adjoint and inverse use recursive Laplace expansion
down column 0 in row order. They assume every entry shares one dimension;
mixed-dimension matrices give dimensionally meaningless results whenever the
entries happen to combine without a `DimensionMismatchError`.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Tuple, Union

from metrion.core.measurement import Measurement, _is_number
from metrion.core.unit import Unit
from metrion.errors import DivideByZeroError
from metrion.geometry.vector import Vector, _accumulate, _is_scalar

_ONE = Measurement(1.0)


def _as_column(col: object) -> Vector:
    if isinstance(col, Vector):
        return col
    return Vector(col)  # type: ignore[arg-type]


class Matrix:
    """
    An R×C matrix of measurements, stored column-major.

    ``Matrix(columns)`` takes C columns of R entries each; `from_rows` builds
    one from rows instead. Plain numbers become dimensionless entries.
    """
    __slots__ = ("_columns",)

    def __init__(self, columns: Iterable[Union[Vector, Iterable]]):
        cols = tuple(_as_column(c) for c in columns)
        if not cols:
            raise ValueError("A Matrix needs at least one column")
        rows = len(cols[0])
        if any(len(c) != rows for c in cols):
            raise ValueError(
                f"All columns must have the same length, got {[len(c) for c in cols]}"
            )
        self._columns: Tuple[Vector, ...] = cols

    # --- Construction helpers ---
    @classmethod
    def from_rows(cls, rows: Iterable[Iterable]) -> "Matrix":
        rows = [Vector(r) if not isinstance(r, Vector) else r for r in rows]
        if not rows:
            raise ValueError("A Matrix needs at least one row")
        return cls(rows).transpose()

    @classmethod
    def identity(cls, n: int, unit: "Unit | str | None" = None) -> "Matrix":
        if n < 1:
            raise ValueError(f"Identity size must be positive, got {n}")
        return cls(Vector.basis(n, j, unit) for j in range(n))

    # --- Shape and access ---
    @property
    def shape(self) -> Tuple[int, int]:
        """(rows, columns)"""
        return len(self._columns[0]), len(self._columns)

    @property
    def is_square(self) -> bool:
        r, c = self.shape
        return r == c

    @property
    def columns(self) -> Tuple[Vector, ...]:
        return self._columns

    def __getitem__(self, index: Tuple[int, int]) -> Measurement:
        i, j = index
        return self._columns[j][i]

    def column(self, j: int) -> Vector:
        return self._columns[j]

    def row(self, i: int) -> Vector:
        return Vector(c[i] for c in self._columns)

    def rows(self) -> Iterator[Vector]:
        for i in range(self.shape[0]):
            yield self.row(i)

    def values_as(self, unit: "Unit | str | None" = None) -> List[List[float]]:
        """Entry values row by row, in ``unit`` (canonical when None)."""
        return [r.values_as(unit) for r in self.rows()]

    def _require_square(self, fname: str) -> int:
        r, c = self.shape
        if r != c:
            raise ValueError(f"{fname}() requires a square matrix, got {r}x{c}")
        return r

    def diagonal(self) -> Vector:
        n = self._require_square("diagonal")
        return Vector(self[i, i] for i in range(n))

    def transpose(self) -> "Matrix":
        return Matrix(self.rows())

    @property
    def T(self) -> "Matrix":
        return self.transpose()

    def submatrix(self, i: int, j: int) -> "Matrix":
        """The matrix without row ``i`` and column ``j``."""
        r, c = self.shape
        if r < 2 or c < 2:
            raise ValueError(f"Cannot remove a row and column from a {r}x{c} matrix")
        return Matrix(
            [col[k] for k in range(r) if k != i]
            for jj, col in enumerate(self._columns)
            if jj != j
        )

    # --- Square-matrix algebra ---
    def trace(self) -> Measurement:
        return _accumulate(self.diagonal().components)

    def determinant(self) -> Measurement:
        n = self._require_square("determinant")
        if n == 1:
            return self[0, 0]
        if n == 2:
            return self[0, 0] * self[1, 1] - self[0, 1] * self[1, 0]
        terms = []
        for i in range(n):
            term = self[i, 0] * self.submatrix(i, 0).determinant()
            terms.append(-term if i % 2 else term)
        return _accumulate(terms)

    def cofactor(self, i: int, j: int) -> Measurement:
        n = self._require_square("cofactor")
        if n == 1:
            return _ONE
        minor = self.submatrix(i, j).determinant()
        return -minor if (i + j) % 2 else minor

    def adjoint(self) -> "Matrix":
        """Transposed matrix of cofactors."""
        n = self._require_square("adjoint")
        # column j of the adjoint holds cofactor(j, i) for each row i
        return Matrix(
            [self.cofactor(j, i) for i in range(n)]
            for j in range(n)
        )

    def inverse(self) -> "Matrix":
        det = self.determinant()
        if det.value == 0.0:
            raise DivideByZeroError("Cannot invert a singular matrix (determinant is zero)")
        return self.adjoint() / det

    def solve(self, b: Union[Vector, "Matrix"]) -> Union[Vector, "Matrix"]:
        """Solve ``self @ x == b`` for ``x``."""
        return self.inverse() @ b

    # --- Comparison ---
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and all(
            a == b for a, b in zip(self._columns, other._columns)
        )

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None  # type: ignore[assignment]

    # --- Elementwise arithmetic ---
    def _same_shape(self, other: "Matrix") -> None:
        if self.shape != other.shape:
            raise ValueError(f"Matrix shape mismatch: {self.shape} and {other.shape}")

    def __add__(self, other: object) -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        self._same_shape(other)
        return Matrix(a + b for a, b in zip(self._columns, other._columns))

    def __sub__(self, other: object) -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        self._same_shape(other)
        return Matrix(a - b for a, b in zip(self._columns, other._columns))

    def __neg__(self) -> "Matrix":
        return Matrix(-c for c in self._columns)

    def __mul__(self, other: object) -> "Matrix":
        if not _is_scalar(other):
            return NotImplemented
        return Matrix(c * other for c in self._columns)

    def __rmul__(self, other: object) -> "Matrix":
        if not (isinstance(other, Measurement) or _is_number(other)):
            return NotImplemented
        return Matrix(other * c for c in self._columns)

    def __truediv__(self, other: object) -> "Matrix":
        if not _is_scalar(other):
            return NotImplemented
        return Matrix(c / other for c in self._columns)

    # --- Matrix products ---
    def __matmul__(self, other: object) -> Union[Vector, "Matrix"]:
        if isinstance(other, Vector):
            r, c = self.shape
            if len(other) != c:
                raise ValueError(f"Cannot multiply a {r}x{c} matrix by a {len(other)}-component vector")
            return Vector(
                _accumulate([self[i, k] * other[k] for k in range(c)])
                for i in range(r)
            )
        if isinstance(other, Matrix):
            if self.shape[1] != other.shape[0]:
                raise ValueError(
                    f"Cannot multiply a {self.shape[0]}x{self.shape[1]} matrix "
                    f"by a {other.shape[0]}x{other.shape[1]} matrix"
                )
            return Matrix(self @ col for col in other._columns)
        return NotImplemented

    # --- Text ---
    def __repr__(self) -> str:
        rows = "; ".join(", ".join(repr(x) for x in r) for r in self.rows())
        return f"Matrix([{rows}])"


__all__ = ["Matrix"]
