"""

Sistema de ML para Reconocimiento de Actividad Humana (HAR)

Módulo de carga de datos del dataset Weight Lifting Exercises.

"""

import logging
import pandas as pd
from pathlib import Path
from typing import Dict, Optional

from .download import download_file
from ..exceptions import DataValidationError

logger = logging.getLogger(__name__)

# Columna de índice que escribe R al exportar el CSV sin nombre de cabecera
_UNNAMED_INDEX = 'Unnamed: 0'


class DataLoader:
    """Cargador de los ficheros de entrenamiento y validación del dataset HAR."""

    def __init__(self, config: dict, force_download: bool = False):
        """
        Inicializa el cargador de datos.

        Args:
            config: Diccionario de configuración (ver ``load_config``)
            force_download: Si True, vuelve a descargar los CSV aunque existan
        """
        self.config = config
        data_config = config['data']
        self.data_path = Path(data_config['raw_path'])
        self.na_values = data_config['na_values']
        self.label_column = data_config['label_column']
        self.id_column = data_config['id_column']
        self.timeout = data_config.get('download_timeout', 60)
        self.force_download = force_download

    def load_training(self) -> pd.DataFrame:
        """
        Carga el fichero fuente de entrenamiento (se dividirá en train/test).

        Returns:
            DataFrame con las mediciones y la columna de etiqueta
        """
        path = self._ensure_file(self.config['data']['training_url'],
                                 self.config['data']['training_file'])
        df = self._read_csv(path)
        self._validate_data(df, required_column=self.label_column, name='entrenamiento')
        return df

    def load_validation(self) -> pd.DataFrame:
        """
        Carga el fichero de validación (20 casos sin etiqueta).

        Returns:
            DataFrame con las mediciones y la columna identificadora
        """
        path = self._ensure_file(self.config['data']['validation_url'],
                                 self.config['data']['validation_file'])
        df = self._read_csv(path)
        self._validate_data(df, required_column=self.id_column, name='validación')
        return df

    def _ensure_file(self, url: str, filename: str) -> Path:
        """Descarga el fichero si no está en el directorio de datos crudos."""
        return download_file(
            url, self.data_path / filename,
            timeout=self.timeout, force=self.force_download
        )

    def _read_csv(self, path: Path) -> pd.DataFrame:
        """Lee un CSV tratando los marcadores de valor faltante del dataset."""
        df = pd.read_csv(path, na_values=self.na_values, keep_default_na=True, low_memory=False)

        if len(df.columns) and df.columns[0] == _UNNAMED_INDEX:
            df = df.drop(columns=_UNNAMED_INDEX)

        logger.debug("Leído %s: %d filas x %d columnas", path, *df.shape)
        return df

    def _validate_data(self, df: pd.DataFrame, required_column: str, name: str) -> None:
        """
        Valida la integridad de los datos cargados.

        Args:
            df: DataFrame cargado
            required_column: Columna que debe estar presente
            name: Nombre del conjunto para los mensajes de error

        Raises:
            DataValidationError: Si los datos no pasan validación
        """
        if df.empty:
            raise DataValidationError(f"El conjunto de {name} está vacío")
        if required_column not in df.columns:
            raise DataValidationError(
                f"Falta la columna '{required_column}' en el conjunto de {name}"
            )
        if df[required_column].isna().any():
            raise DataValidationError(
                f"La columna '{required_column}' del conjunto de {name} tiene valores faltantes"
            )

    def get_statistics(self, df: pd.DataFrame, missing_threshold: float = 0.95) -> Dict:
        """
        Retorna estadísticas básicas del dataset.

        Args:
            df: DataFrame a describir
            missing_threshold: Proporción a partir de la cual una columna
                se considera mayoritariamente vacía

        Returns:
            Diccionario con estadísticas
        """
        missing_share = df.isna().mean()
        stats = {
            'n_samples': int(df.shape[0]),
            'n_columns': int(df.shape[1]),
            'dtypes': {str(k): int(v) for k, v in df.dtypes.astype(str).value_counts().items()},
            'memory_mb': round(df.memory_usage(deep=True).sum() / (1024**2), 2),
            'n_columns_with_missing': int((missing_share > 0).sum()),
            'n_columns_mostly_missing': int((missing_share > missing_threshold).sum()),
            'missing_cells_pct': round(float(df.isna().to_numpy().mean() * 100), 2),
        }

        if self.label_column in df.columns:
            counts = df[self.label_column].value_counts().sort_index()
            stats['n_classes'] = int(len(counts))
            stats['class_distribution'] = {str(k): int(v) for k, v in counts.items()}
            stats['class_proportions'] = {
                str(k): round(float(v) / len(df), 4) for k, v in counts.items()
            }

        return stats

    def print_summary(self, df: pd.DataFrame, title: str = "RESUMEN DEL DATASET") -> None:
        """Imprime un resumen formateado del dataset."""
        stats = self.get_statistics(df)

        print("\n" + "="*60)
        print(title)
        print("="*60)
        print(f"\nDimensiones:")
        print(f"  - Muestras: {stats['n_samples']}")
        print(f"  - Columnas: {stats['n_columns']}")
        print(f"  - Memoria: {stats['memory_mb']} MB")

        print(f"\nTipos de datos:")
        for dtype, count in stats['dtypes'].items():
            print(f"  - {dtype}: {count} columnas")

        print(f"\nValores faltantes:")
        print(f"  - Columnas con faltantes: {stats['n_columns_with_missing']}")
        print(f"  - Columnas >95% vacías: {stats['n_columns_mostly_missing']}")
        print(f"  - Celdas vacías: {stats['missing_cells_pct']}%")

        if 'class_distribution' in stats:
            print(f"\nClases ({stats['n_classes']} categorías):")
            for cls, count in stats['class_distribution'].items():
                pct = 100 * count / stats['n_samples']
                print(f"  - Clase {cls}: {count} muestras ({pct:.1f}%)")
        print("="*60 + "\n")
