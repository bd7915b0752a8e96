"""Módulo de evaluación de modelos."""

from .metrics import ModelEvaluator, accuracy_confidence_interval
from . import plots

__all__ = ['ModelEvaluator', 'accuracy_confidence_interval', 'plots']
