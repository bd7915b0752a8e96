"""Módulo de limpieza de características."""

from .pipeline import FeaturePipeline
from .filters import (
    ColumnDropper,
    MissingValueFilter,
    NearZeroVarianceFilter,
    SchemaEnforcer,
)

__all__ = [
    'FeaturePipeline',
    'NearZeroVarianceFilter',
    'MissingValueFilter',
    'ColumnDropper',
    'SchemaEnforcer'
]
