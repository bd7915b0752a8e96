"""

Sistema de ML para Reconocimiento de Actividad Humana (HAR)

Módulo de división estratificada de datos.

"""

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split, StratifiedKFold
from typing import Dict, Tuple


class DataSplitter:
    """División estratificada del fichero de entrenamiento en train/test."""

    def __init__(self, train_ratio: float = 0.75, random_state: int = 42,
                 stratify: bool = True, verbose: bool = True):
        """
        Inicializa el divisor de datos.

        Args:
            train_ratio: Proporción de filas destinadas a entrenamiento
            random_state: Semilla para reproducibilidad
            stratify: Si True, mantiene la proporción de clases en cada split
            verbose: Si True, imprime el resumen de la división
        """
        if not 0 < train_ratio < 1:
            raise ValueError(f"train_ratio debe estar en (0, 1), se obtuvo {train_ratio}")

        self.train_ratio = train_ratio
        self.test_ratio = 1 - train_ratio
        self.random_state = random_state
        self.stratify = stratify
        self.verbose = verbose

    @classmethod
    def from_config(cls, config: dict) -> 'DataSplitter':
        """Crea el divisor a partir del diccionario de configuración."""
        split_config = config['data']['split']
        return cls(
            train_ratio=split_config['train_ratio'],
            random_state=config['project']['random_state'],
            stratify=split_config.get('stratify', True)
        )

    def split(self, X, y) -> Dict[str, Tuple]:
        """
        Divide datos en train/test manteniendo estratificación.

        Args:
            X: Datos de entrada
            y: Etiquetas

        Returns:
            Diccionario con splits: {'train': (X, y), 'test': (X, y)}
        """
        X_train, X_test, y_train, y_test = train_test_split(
            X, y,
            train_size=self.train_ratio,
            stratify=y if self.stratify else None,
            random_state=self.random_state
        )

        splits = {
            'train': (X_train, y_train),
            'test': (X_test, y_test)
        }

        if self.verbose:
            self._print_split_info(splits, y)

        return splits

    def split_frame(self, df: pd.DataFrame,
                    label_column: str) -> Tuple[pd.DataFrame, pd.DataFrame]:
        """
        Divide un DataFrame completo (características + etiqueta).

        Args:
            df: DataFrame con la columna de etiqueta
            label_column: Nombre de la columna de etiqueta

        Returns:
            Tuple con (train_df, test_df)
        """
        splits = self.split(df, df[label_column])
        return splits['train'][0], splits['test'][0]

    def get_cv_folds(self, n_splits: int = 5) -> StratifiedKFold:
        """
        Retorna objeto de cross-validation estratificado.

        Args:
            n_splits: Número de folds

        Returns:
            StratifiedKFold configurado
        """
        return StratifiedKFold(
            n_splits=n_splits,
            shuffle=True,
            random_state=self.random_state
        )

    def _print_split_info(self, splits: Dict, y_original) -> None:
        """Imprime información sobre la división realizada."""
        print("\n" + "="*50)
        print("DIVISIÓN DE DATOS")
        print("="*50)

        for name, (X, y) in splits.items():
            pct = 100 * len(y) / len(y_original)
            unique, counts = np.unique(np.asarray(y), return_counts=True)
            print(f"\n{name.upper()}: {len(y)} muestras ({pct:.1f}%)")
            print(f"  Distribución de clases:")
            for cls, cnt in zip(unique, counts):
                print(f"    Clase {cls}: {cnt}")

        print("\n" + "="*50)
