"""

Sistema de ML para Reconocimiento de Actividad Humana (HAR)

Registro de modelos disponibles y persistencia con joblib.

"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Tuple

import joblib

from .boosting import train_gradient_boosting
from .decision_tree import train_decision_tree
from .random_forest import train_random_forest
from .training import TrainingResult

logger = logging.getLogger(__name__)

# clave de configuración -> (nombre legible, función de entrenamiento)
MODEL_REGISTRY: Dict[str, Tuple[str, Callable[..., TrainingResult]]] = {
    'decision_tree': ('Decision Tree', train_decision_tree),
    'random_forest': ('Random Forest', train_random_forest),
    'gradient_boosting': ('Gradient Boosting', train_gradient_boosting),
}


def train_all_models(X, y, config: dict, cv) -> Dict[str, TrainingResult]:
    """
    Entrena todos los modelos configurados en ``training.models``.

    Args:
        X: Características de entrenamiento
        y: Etiquetas codificadas
        config: Diccionario de configuración
        cv: Objeto de cross-validation

    Returns:
        Diccionario {nombre legible: TrainingResult} en orden de configuración
    """
    results = {}
    for i, key in enumerate(config['training']['models'], start=1):
        name, trainer = MODEL_REGISTRY[key]
        print(f"\n   {i}/{len(config['training']['models'])} Entrenando {name}...")
        results[name] = trainer(X, y, config, cv)
    return results


def save_model(model: Any, path: str) -> Path:
    """Guarda un modelo ajustado con joblib."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    joblib.dump(model, path)
    logger.info("Modelo guardado en %s", path)
    return path


def load_model(path: str) -> Any:
    """Carga un modelo guardado con joblib."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Archivo no encontrado: {path}")
    return joblib.load(path)
