"""
Sistema de ML para Reconocimiento de Actividad Humana (HAR)
===========================================================

Clasificación de la calidad de ejecución de ejercicios de levantamiento de
pesas a partir de sensores inerciales (dataset Weight Lifting Exercises).

Módulos principales:
- data: Descarga, carga y división de datos
- features: Limpieza de características
- models: Árbol de decisión, Random Forest y Gradient Boosting
- evaluation: Métricas, comparación y gráficos
- explainability: Análisis SHAP
"""

__version__ = "1.0.0"
