#!/usr/bin/env python3
"""
Pipeline Principal de Machine Learning para Reconocimiento de Actividad Humana
================================================================================

Ejecuta el informe completo sobre el dataset Weight Lifting Exercises:
carga, exploración, limpieza, entrenamiento de Decision Tree, Random Forest y
Gradient Boosting, comparación en test y predicción de los 20 casos de
validación con el mejor modelo.

Uso:
    python main_pipeline.py --config config.yaml
    python main_pipeline.py --skip-shap --log-level DEBUG
"""

import sys

from har_classifier.pipeline import main

if __name__ == "__main__":
    sys.exit(main())
