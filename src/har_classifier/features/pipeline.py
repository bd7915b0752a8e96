"""
================================================================================
PIPELINE DE LIMPIEZA DE CARACTERÍSTICAS
================================================================================
Sistema de ML para Reconocimiento de Actividad Humana (HAR)

Integra los filtros de columnas en un único Pipeline de scikit-learn que se
ajusta sobre el split de entrenamiento y se aplica a test y validación.

Pasos (en este orden):
1. Varianza casi nula (NearZeroVarianceFilter)
2. Columnas con >95% de faltantes (MissingValueFilter)
3. Columnas identificadoras y de tiempo (ColumnDropper)
4. Esquema final numérico (SchemaEnforcer)

Sobre el dataset WLE completo, las 159 columnas de mediciones quedan reducidas a
52 predictores de sensores (cinturón, brazo, antebrazo y mancuerna).
================================================================================
"""

import joblib
import pandas as pd
from sklearn.pipeline import Pipeline
from typing import Dict, List

from .filters import (
    ColumnDropper,
    MissingValueFilter,
    NearZeroVarianceFilter,
    SchemaEnforcer,
)


class FeaturePipeline:
    """
    Pipeline de limpieza de características del dataset HAR.

    Sigue la interfaz de scikit-learn (fit/transform) y puede serializarse
    para aplicar exactamente el mismo esquema en predicción.
    """

    def __init__(self, config: dict):
        """
        Inicializa el pipeline desde el diccionario de configuración.

        Args:
            config: Configuración con la sección ``cleaning``
        """
        self.config = config
        self.pipeline = None
        self.feature_names = []
        self.input_columns = []
        self.is_fitted = False

    def build(self) -> Pipeline:
        """
        Construye el pipeline de limpieza.

        Returns:
            Pipeline de scikit-learn
        """
        cleaning = self.config['cleaning']
        nzv_config = cleaning['near_zero_variance']

        self.pipeline = Pipeline([
            ('near_zero_variance', NearZeroVarianceFilter(
                freq_cut=nzv_config['freq_cut'],
                unique_cut=nzv_config['unique_cut']
            )),
            ('missing', MissingValueFilter(threshold=cleaning['missing_threshold'])),
            ('identifiers', ColumnDropper(columns=list(cleaning['drop_columns']))),
            ('schema', SchemaEnforcer())
        ])
        return self.pipeline

    def fit(self, X: pd.DataFrame, y=None):
        """
        Ajusta el pipeline al split de entrenamiento.

        Args:
            X: DataFrame de entrenamiento sin la columna de etiqueta
            y: Etiquetas (no usadas en la limpieza)

        Returns:
            self
        """
        if self.pipeline is None:
            self.build()

        self.input_columns = list(X.columns)
        self.pipeline.fit(X, y)
        self.feature_names = list(self.pipeline.named_steps['schema'].columns_)
        self.is_fitted = True

        return self

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        """
        Aplica el esquema aprendido a nuevos datos.

        Args:
            X: DataFrame a limpiar (test o validación)

        Returns:
            DataFrame con las características finales
        """
        if not self.is_fitted:
            raise RuntimeError("Pipeline no ajustado. Llama fit() primero.")

        return self.pipeline.transform(X)

    def fit_transform(self, X: pd.DataFrame, y=None) -> pd.DataFrame:
        """Ajusta y transforma en un solo paso."""
        self.fit(X, y)
        return self.transform(X)

    def get_feature_names(self) -> List[str]:
        """Retorna nombres de las características finales."""
        return self.feature_names

    def get_cleaning_report(self) -> Dict:
        """
        Resume las columnas eliminadas en cada paso.

        Returns:
            Diccionario con número de columnas antes/después y eliminadas por paso
        """
        if not self.is_fitted:
            raise RuntimeError("Pipeline no ajustado. Llama fit() primero.")

        steps = self.pipeline.named_steps
        dropped = {
            name: list(steps[name].dropped_columns_)
            for name in ('near_zero_variance', 'missing', 'identifiers')
        }

        return {
            'n_columns_before': len(self.input_columns),
            'n_columns_after': len(self.feature_names),
            'dropped': dropped,
            'n_dropped': {name: len(cols) for name, cols in dropped.items()},
            'features': list(self.feature_names)
        }

    def print_cleaning_report(self) -> None:
        """Imprime el resumen de limpieza."""
        report = self.get_cleaning_report()

        print("\n" + "="*50)
        print("LIMPIEZA DE CARACTERÍSTICAS")
        print("="*50)
        print(f"Columnas originales: {report['n_columns_before']}")
        print(f"  - Varianza casi nula: -{report['n_dropped']['near_zero_variance']}")
        print(f"  - >{self.config['cleaning']['missing_threshold']:.0%} faltantes: "
              f"-{report['n_dropped']['missing']}")
        print(f"  - Identificadores/tiempo: -{report['n_dropped']['identifiers']}")
        print(f"Características finales: {report['n_columns_after']}")
        print("="*50)

    def save(self, path: str):
        """
        Guarda el pipeline ajustado.

        Args:
            path: Ruta de guardado
        """
        if not self.is_fitted:
            raise RuntimeError("Pipeline no ajustado.")

        joblib.dump({
            'pipeline': self.pipeline,
            'feature_names': self.feature_names,
            'input_columns': self.input_columns,
            'config': self.config
        }, path)
        print(f"Pipeline guardado en: {path}")

    @classmethod
    def load(cls, path: str) -> 'FeaturePipeline':
        """
        Carga un pipeline guardado.

        Args:
            path: Ruta del archivo

        Returns:
            Instancia de FeaturePipeline
        """
        data = joblib.load(path)

        instance = cls.__new__(cls)
        instance.pipeline = data['pipeline']
        instance.feature_names = data['feature_names']
        instance.input_columns = data['input_columns']
        instance.config = data['config']
        instance.is_fitted = True

        return instance
