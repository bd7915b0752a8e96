"""

Sistema de ML para Reconocimiento de Actividad Humana (HAR)

Entrenamiento con búsqueda de hiperparámetros y validación cruzada k-fold.

Los tres modelos comparten el mismo procedimiento: GridSearchCV sobre una
rejilla pequeña, con accuracy como métrica, y reajuste del mejor candidato
sobre todo el split de entrenamiento.

"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict

import numpy as np
import pandas as pd
from sklearn.model_selection import GridSearchCV

logger = logging.getLogger(__name__)


@dataclass
class TrainingResult:
    """Resultado del entrenamiento de un modelo."""

    name: str
    model: Any
    best_params: Dict[str, Any]
    cv_accuracy_mean: float
    cv_accuracy_std: float
    fit_time: float
    cv_results: pd.DataFrame = field(repr=False, default_factory=pd.DataFrame)

    def summary(self) -> Dict[str, Any]:
        """Resumen serializable (sin el estimador)."""
        return {
            'name': self.name,
            'best_params': {k: _to_builtin(v) for k, v in self.best_params.items()},
            'cv_accuracy_mean': round(self.cv_accuracy_mean, 4),
            'cv_accuracy_std': round(self.cv_accuracy_std, 4),
            'fit_time': round(self.fit_time, 2)
        }


def _to_builtin(value):
    if isinstance(value, np.generic):
        return value.item()
    return value


def train_with_cv(estimator: Any, param_grid: Dict, X, y, cv, name: str,
                  n_jobs: int = -1) -> TrainingResult:
    """
    Ajusta un estimador con búsqueda en rejilla y validación cruzada.

    Args:
        estimator: Estimador de scikit-learn sin ajustar
        param_grid: Rejilla de hiperparámetros (vacía = sin búsqueda)
        X: Características de entrenamiento
        y: Etiquetas codificadas
        cv: Objeto de cross-validation (p.ej. StratifiedKFold)
        name: Nombre legible del modelo
        n_jobs: Procesos paralelos para la búsqueda

    Returns:
        TrainingResult con el mejor estimador reajustado
    """
    n_candidates = int(np.prod([len(v) for v in param_grid.values()])) if param_grid else 1
    n_folds = cv.get_n_splits() if hasattr(cv, 'get_n_splits') else cv
    print(f"   🔧 {name}: {n_candidates} candidatos x {n_folds} folds")

    search = GridSearchCV(
        estimator,
        param_grid=param_grid or {},
        scoring='accuracy',
        cv=cv,
        n_jobs=n_jobs,
        refit=True,
        error_score='raise'
    )

    start_time = time.time()
    search.fit(X, y)
    fit_time = time.time() - start_time

    best = search.best_index_
    cv_results = pd.DataFrame(search.cv_results_)

    result = TrainingResult(
        name=name,
        model=search.best_estimator_,
        best_params=dict(search.best_params_),
        cv_accuracy_mean=float(cv_results.loc[best, 'mean_test_score']),
        cv_accuracy_std=float(cv_results.loc[best, 'std_test_score']),
        fit_time=fit_time,
        cv_results=cv_results
    )

    logger.debug("%s mejores parámetros: %s", name, result.best_params)
    print(f"      Mejores parámetros: {result.best_params}")
    print(f"      Accuracy CV: {result.cv_accuracy_mean:.4f} ± {result.cv_accuracy_std:.4f}")
    print(f"      Tiempo: {fit_time:.1f} s")

    return result
