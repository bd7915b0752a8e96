"""Módulo de modelos de clasificación."""

from .training import TrainingResult, train_with_cv
from .decision_tree import get_dt_model, train_decision_tree
from .random_forest import get_rf_model, train_random_forest
from .boosting import get_xgb_model, train_gradient_boosting
from .registry import MODEL_REGISTRY, train_all_models, save_model, load_model

__all__ = [
    'TrainingResult',
    'train_with_cv',
    'get_dt_model',
    'train_decision_tree',
    'get_rf_model',
    'train_random_forest',
    'get_xgb_model',
    'train_gradient_boosting',
    'MODEL_REGISTRY',
    'train_all_models',
    'save_model',
    'load_model'
]
