"""Gradient Boosting con XGBoost."""

import numpy as np
from xgboost import XGBClassifier

from .training import TrainingResult, train_with_cv


def get_xgb_model(config: dict) -> XGBClassifier:
    """
    Retorna un clasificador XGBoost sin ajustar.

    Args:
        config: Diccionario de configuración

    Returns:
        XGBClassifier configurado para clasificación multiclase
    """
    params = {
        k: v for k, v in config['models']['gradient_boosting'].items() if k != 'param_grid'
    }
    params.setdefault('tree_method', 'hist')
    params.setdefault('eval_metric', 'mlogloss')
    params.setdefault('n_jobs', 1)
    return XGBClassifier(random_state=config['project']['random_state'], **params)


def train_gradient_boosting(X, y, config: dict, cv) -> TrainingResult:
    """
    Entrena el modelo de gradient boosting con validación cruzada.

    XGBoost exige etiquetas enteras consecutivas desde 0; el pipeline las
    codifica con LabelEncoder antes de llegar aquí.

    Raises:
        ValueError: Si las etiquetas no son enteros 0..K-1
    """
    labels = np.unique(np.asarray(y))
    if not np.issubdtype(labels.dtype, np.integer) or not np.array_equal(labels, np.arange(len(labels))):
        raise ValueError("XGBoost requiere etiquetas codificadas como 0..K-1")

    return train_with_cv(
        get_xgb_model(config),
        config['models']['gradient_boosting'].get('param_grid', {}),
        X, y, cv,
        name='Gradient Boosting',
        n_jobs=config['training']['n_jobs']
    )
