"""
Universal DataSource for PyStreamReg.

DataSource is the "I have data" abstraction. It doesn't know it is
feeding a regression; it just provides named arrays, either all at once
or in row batches for incremental consumers.

Usage:
    from pystreamreg import DataSource

    ds = DataSource.from_arrays(X=X, y=y)
    ds = DataSource.from_file("data.csv")
    ds = DataSource.from_dataframe(df)

    ds.keys()  # frozenset({'X', 'y'})
    for batch in ds.batches(500):
        model.add_observations(batch['X'], batch['y'])
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pystreamreg.core.exceptions import ValidationError
from pystreamreg.core.capabilities import (
    CAPABILITY_MATERIALIZED,
    CAPABILITY_STREAMING,
    CAPABILITY_REPEATABLE,
)

if TYPE_CHECKING:
    import pandas as pd


_IN_MEMORY = frozenset({CAPABILITY_MATERIALIZED, CAPABILITY_STREAMING, CAPABILITY_REPEATABLE})


@dataclass
class DataSource:
    """
    Universal data container. Domain-agnostic.

    Construct via factory classmethods, not directly.
    """
    _data: dict[str, Any]
    _capabilities: frozenset[str]
    _metadata: dict[str, Any] = field(default_factory=dict)

    # === Array Access ===

    def keys(self) -> frozenset[str]:
        """
        Return the names of all available arrays.

        Example:
            >>> ds = DataSource.from_arrays(X=X, y=y)
            >>> ds.keys()
            frozenset({'X', 'y'})
        """
        return frozenset(k for k in self._data.keys() if not k.startswith('_'))

    def __getitem__(self, key: str) -> Any:
        """
        Access a named array.

        Raises:
            KeyError: If key not found, with a message listing available keys
        """
        if key not in self._data:
            available = self.keys()
            raise KeyError(
                f"DataSource has no array '{key}'. Available: {available}"
            )
        return self._data[key]

    def __contains__(self, key: str) -> bool:
        return key in self._data

    # === Properties ===

    @property
    def n_observations(self) -> int:
        """Number of statistical units (rows)."""
        return self._metadata.get('n_observations', 0)

    @property
    def metadata(self) -> dict[str, Any]:
        return self._metadata.copy()

    def supports(self, capability: str) -> bool:
        """
        Check if this DataSource supports a capability.

        Unknown capabilities return False, never raise.
        """
        return capability in self._capabilities

    # === Streaming ===

    def batches(
        self,
        batch_size: int,
        keys: tuple[str, ...] | None = None,
    ) -> Iterator[dict[str, NDArray]]:
        """
        Yield consecutive row slices of the named arrays.

        Args:
            batch_size: Maximum rows per batch (the last one may be shorter)
            keys: Arrays to include; all public arrays if None

        Yields:
            dict mapping each key to its slice for the batch
        """
        if batch_size < 1:
            raise ValidationError(f"batch_size: must be >= 1, got {batch_size}")
        if not self.supports(CAPABILITY_STREAMING):
            raise ValidationError("DataSource does not support streaming")
        names = keys if keys is not None else tuple(sorted(self.keys()))
        n = self.n_observations
        for start in range(0, n, batch_size):
            stop = min(start + batch_size, n)
            yield {name: self[name][start:stop] for name in names}

    # === Factory Methods ===

    @classmethod
    def from_arrays(
        cls,
        *,
        X: NDArray | None = None,
        y: NDArray | None = None,
        data: NDArray | None = None,
        columns: list[str] | None = None,
        **named_arrays: NDArray,
    ) -> DataSource:
        """Construct from NumPy arrays."""
        storage: dict[str, Any] = {}
        n_obs: int | None = None

        if X is not None:
            X = np.asarray(X, dtype=np.float64)
            if X.ndim == 1:
                X = X.reshape(-1, 1)
            storage['X'] = X
            n_obs = X.shape[0]

        if y is not None:
            y = np.asarray(y, dtype=np.float64)
            if y.ndim == 2 and y.shape[1] == 1:
                y = y.ravel()
            storage['y'] = y
            n_obs = n_obs if n_obs is not None else y.shape[0]

        if data is not None:
            data = np.asarray(data, dtype=np.float64)
            n_obs = n_obs if n_obs is not None else data.shape[0]
            if columns is not None:
                for i, col in enumerate(columns):
                    storage[col] = data[:, i]
            else:
                storage['_data'] = data

        for name, arr in named_arrays.items():
            storage[name] = np.asarray(arr, dtype=np.float64)
            n_obs = n_obs if n_obs is not None else storage[name].shape[0]

        return cls(
            _data=storage,
            _capabilities=_IN_MEMORY,
            _metadata={'n_observations': n_obs or 0, 'source': 'arrays'},
        )

    @classmethod
    def from_file(cls, path: str | Path, *, columns: list[str] | None = None) -> DataSource:
        """Construct from file (CSV, TSV, NPY)."""
        path = Path(path)
        suffix = path.suffix.lower()

        if suffix in ('.csv', '.tsv'):
            import pandas as pd
            sep = '\t' if suffix == '.tsv' else ','
            df = pd.read_csv(path, usecols=columns, sep=sep)
            return cls.from_dataframe(df, source_path=str(path))
        elif suffix == '.npy':
            data = np.load(path)
            return cls.from_arrays(data=data, columns=columns)
        else:
            raise ValidationError(f"Unknown file format: {suffix}")

    @classmethod
    def from_dataframe(cls, df: 'pd.DataFrame', *, source_path: str | None = None) -> DataSource:
        """Construct from pandas DataFrame, one array per column."""
        storage: dict[str, Any] = {}

        for col in df.columns:
            storage[str(col)] = df[col].to_numpy(dtype=np.float64)

        metadata = {
            'n_observations': len(df),
            'source': 'dataframe',
            'columns': [str(c) for c in df.columns],
        }
        if source_path:
            metadata['source_path'] = source_path

        return cls(
            _data=storage,
            _capabilities=_IN_MEMORY,
            _metadata=metadata,
        )
