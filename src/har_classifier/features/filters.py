"""
================================================================================
FILTROS DE COLUMNAS PARA LA LIMPIEZA DE CARACTERÍSTICAS
================================================================================
Sistema de ML para Reconocimiento de Actividad Humana (HAR)

Transformadores compatibles con scikit-learn que aprenden qué columnas
eliminar a partir del conjunto de entrenamiento y aplican exactamente el mismo
esquema a test y validación:

1. NearZeroVarianceFilter: columnas con varianza casi nula (un valor
   dominante y pocos valores distintos).
2. MissingValueFilter: columnas con más de un 95% de valores faltantes
   (las columnas de resumen por ventana del dataset WLE).
3. ColumnDropper: columnas identificadoras y de tiempo que no describen el
   movimiento (usuario, timestamps, ventana).
4. SchemaEnforcer: fija el orden y tipo numérico de las columnas finales.
================================================================================
"""

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.utils.validation import check_is_fitted
from typing import List, Optional

from ..exceptions import DataValidationError


class NearZeroVarianceFilter(BaseEstimator, TransformerMixin):
    """
    Elimina predictores con varianza cero o casi cero.

    Una columna se marca cuando tiene un único valor distinto, o cuando
    cumple a la vez:
    - ratio de frecuencias (valor más común / segundo más común) > freq_cut
    - porcentaje de valores distintos sobre el total de filas <= unique_cut

    Los valores faltantes no cuentan como valor distinto.
    """

    def __init__(self, freq_cut: float = 95 / 5, unique_cut: float = 10):
        """
        Args:
            freq_cut: Umbral del ratio entre el valor más frecuente y el segundo
            unique_cut: Umbral del porcentaje de valores distintos
        """
        self.freq_cut = freq_cut
        self.unique_cut = unique_cut

    def fit(self, X: pd.DataFrame, y=None):
        self.metrics_ = pd.DataFrame(
            [self._column_metrics(X[col]) for col in X.columns],
            index=X.columns,
            columns=['freq_ratio', 'percent_unique', 'zero_var', 'nzv']
        )
        self.dropped_columns_ = self.metrics_.index[self.metrics_['nzv']].tolist()
        self.feature_names_in_ = np.asarray(X.columns, dtype=object)
        return self

    def _column_metrics(self, column: pd.Series) -> tuple:
        counts = column.dropna().value_counts()
        n_unique = len(counts)
        percent_unique = 100.0 * n_unique / len(column) if len(column) else 0.0

        if n_unique <= 1:
            return (np.nan, percent_unique, True, True)

        freq_ratio = counts.iloc[0] / counts.iloc[1]
        nzv = freq_ratio > self.freq_cut and percent_unique <= self.unique_cut
        return (float(freq_ratio), percent_unique, False, bool(nzv))

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        check_is_fitted(self, 'dropped_columns_')
        return X.drop(columns=self.dropped_columns_, errors='ignore')

    def get_feature_names_out(self, input_features=None):
        check_is_fitted(self, 'dropped_columns_')
        return np.asarray(
            [c for c in self.feature_names_in_ if c not in set(self.dropped_columns_)],
            dtype=object
        )


class MissingValueFilter(BaseEstimator, TransformerMixin):
    """Elimina columnas cuya proporción de faltantes supera el umbral."""

    def __init__(self, threshold: float = 0.95):
        self.threshold = threshold

    def fit(self, X: pd.DataFrame, y=None):
        self.missing_share_ = X.isna().mean()
        self.dropped_columns_ = self.missing_share_.index[
            self.missing_share_ > self.threshold
        ].tolist()
        self.feature_names_in_ = np.asarray(X.columns, dtype=object)
        return self

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        check_is_fitted(self, 'dropped_columns_')
        return X.drop(columns=self.dropped_columns_, errors='ignore')

    def get_feature_names_out(self, input_features=None):
        check_is_fitted(self, 'dropped_columns_')
        return np.asarray(
            [c for c in self.feature_names_in_ if c not in set(self.dropped_columns_)],
            dtype=object
        )


class ColumnDropper(BaseEstimator, TransformerMixin):
    """Elimina una lista fija de columnas (las ausentes se ignoran)."""

    def __init__(self, columns: Optional[List[str]] = None):
        self.columns = columns

    def fit(self, X: pd.DataFrame, y=None):
        columns = self.columns or []
        self.dropped_columns_ = [c for c in columns if c in X.columns]
        self.feature_names_in_ = np.asarray(X.columns, dtype=object)
        return self

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        check_is_fitted(self, 'dropped_columns_')
        return X.drop(columns=self.dropped_columns_, errors='ignore')

    def get_feature_names_out(self, input_features=None):
        check_is_fitted(self, 'dropped_columns_')
        return np.asarray(
            [c for c in self.feature_names_in_ if c not in set(self.dropped_columns_)],
            dtype=object
        )


class SchemaEnforcer(BaseEstimator, TransformerMixin):
    """
    Fija el esquema final de características.

    En ``fit`` registra las columnas supervivientes; en ``transform``
    reordena cualquier split a ese esquema, descarta columnas sobrantes
    (p.ej. ``problem_id``) y convierte todo a float.
    """

    def fit(self, X: pd.DataFrame, y=None):
        non_numeric = [
            c for c in X.columns if not pd.api.types.is_numeric_dtype(X[c])
        ]
        if non_numeric:
            raise DataValidationError(
                f"Columnas no numéricas tras la limpieza: {non_numeric}. "
                "Añádelas a cleaning.drop_columns."
            )
        self.columns_ = list(X.columns)
        return self

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        check_is_fitted(self, 'columns_')
        missing = [c for c in self.columns_ if c not in X.columns]
        if missing:
            raise DataValidationError(
                f"Faltan {len(missing)} columnas del esquema aprendido: {missing[:10]}"
            )

        out = X[self.columns_]
        try:
            return out.apply(pd.to_numeric).astype(float)
        except (ValueError, TypeError) as e:
            raise DataValidationError(f"Valores no numéricos en las características: {e}") from e

    def get_feature_names_out(self, input_features=None):
        check_is_fitted(self, 'columns_')
        return np.asarray(self.columns_, dtype=object)
