"""Módulo de interpretabilidad."""

from .shap_analysis import SHAPAnalyzer

__all__ = ['SHAPAnalyzer']
