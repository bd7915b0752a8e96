"""

Sistema de ML para Reconocimiento de Actividad Humana (HAR)

Análisis de interpretabilidad con SHAP para modelos de ML.

Este módulo calcula valores SHAP (SHapley Additive exPlanations) del mejor
modelo para identificar qué sensores y ejes pesan más en la clasificación de
cada forma de ejecución del ejercicio.
"""

import logging
import shap
import numpy as np
import pandas as pd
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class SHAPAnalyzer:
    """
    Analizador SHAP para interpretabilidad de modelos.

    Proporciona importancia global y por clase a partir de las explicaciones
    locales de cada predicción.
    """

    def __init__(self, model: Any, X_background,
                 feature_names: Optional[List[str]] = None,
                 class_names: Optional[List[str]] = None,
                 random_state: int = 42):
        """
        Inicializa el analizador SHAP.

        Args:
            model: Modelo entrenado a explicar
            X_background: Datos de entrenamiento para background
            feature_names: Nombres de las características
            class_names: Nombres de las clases
            random_state: Semilla para el muestreo de background
        """
        self.model = model
        self.X_background = np.asarray(X_background, dtype=float)
        self.feature_names = feature_names or [
            f"Feature_{i}" for i in range(self.X_background.shape[1])
        ]
        self.class_names = class_names
        self.random_state = random_state
        self.explainer = None
        self.shap_values = None
        self.expected_value = None

        # Determinar tipo de explainer según el modelo
        self._initialize_explainer()

    def _initialize_explainer(self):
        """
        Inicializa el explainer SHAP apropiado según el tipo de modelo.

        - TreeExplainer: Para modelos basados en árboles (DT, RF, XGBoost)
        - KernelExplainer: Para cualquier otro modelo (más lento pero universal)
        """
        model_type = type(self.model).__name__
        print(f"🔮 Inicializando SHAP Explainer para {model_type}...")

        is_tree = ('Forest' in model_type or 'Tree' in model_type
                   or 'XGB' in model_type or 'Boosting' in model_type)

        if is_tree:
            try:
                self.explainer = shap.TreeExplainer(self.model)
                print("   Usando TreeExplainer (exacto y rápido)")
                return
            except Exception as e:
                logger.warning("TreeExplainer no disponible para %s: %s", model_type, e)

        background = shap.sample(self.X_background, min(100, len(self.X_background)),
                                 random_state=self.random_state)
        predict_fn = (self.model.predict_proba if hasattr(self.model, 'predict_proba')
                      else self.model.predict)
        self.explainer = shap.KernelExplainer(predict_fn, background)
        print("   Usando KernelExplainer (aproximación)")

    def explain_predictions(self, X_explain, sample_size: Optional[int] = None) -> Dict:
        """
        Calcula valores SHAP para las predicciones.

        Args:
            X_explain: Datos a explicar
            sample_size: Número de muestras a explicar (None = todas)

        Returns:
            Diccionario con valores SHAP y análisis
        """
        X_explain = np.asarray(X_explain, dtype=float)
        if sample_size and sample_size < X_explain.shape[0]:
            rng = np.random.RandomState(self.random_state)
            idx = rng.choice(X_explain.shape[0], size=sample_size, replace=False)
            X_explain = X_explain[np.sort(idx)]

        print(f"\n📊 Calculando valores SHAP para {X_explain.shape[0]} muestras...")

        if isinstance(self.explainer, shap.KernelExplainer):
            # KernelExplainer puede ser lento, limitar muestras
            X_explain = X_explain[:min(100, X_explain.shape[0])]
            raw_values = self.explainer.shap_values(X_explain)
        else:
            raw_values = self.explainer.shap_values(X_explain, check_additivity=False)

        self.shap_values = self._as_3d(raw_values)
        self.expected_value = getattr(self.explainer, 'expected_value', None)

        return {
            'shap_values': self.shap_values,
            'expected_value': self.expected_value,
            'analysis': self._analyze_shap_values()
        }

    @staticmethod
    def _as_3d(raw_values) -> np.ndarray:
        """
        Normaliza la salida de SHAP a (muestras, características, clases).

        Según la versión de SHAP y el modelo, la salida multiclase llega
        como lista de arrays por clase o como array 3D.
        """
        if isinstance(raw_values, list):
            return np.stack([np.asarray(v) for v in raw_values], axis=-1)

        values = np.asarray(raw_values)
        if values.ndim == 2:
            return values[:, :, np.newaxis]
        return values

    def _class_labels(self, n_classes: int) -> List[str]:
        if self.class_names and len(self.class_names) == n_classes:
            return [str(c) for c in self.class_names]
        return [f"Class_{i}" for i in range(n_classes)]

    def _analyze_shap_values(self) -> Dict:
        """
        Analiza los valores SHAP calculados.

        Returns:
            Diccionario con ranking de importancia global y por clase
        """
        if self.shap_values is None:
            return {}

        # |SHAP| medio por característica y clase -> (características, clases)
        mean_abs = np.abs(self.shap_values).mean(axis=0)
        avg_abs_shap = mean_abs.mean(axis=1)

        total = avg_abs_shap.sum()
        global_importance = avg_abs_shap / total if total > 0 else avg_abs_shap

        class_importance = {}
        for j, class_name in enumerate(self._class_labels(mean_abs.shape[1])):
            col = mean_abs[:, j]
            col_total = col.sum()
            class_importance[class_name] = dict(zip(
                self.feature_names, col / col_total if col_total > 0 else col
            ))

        feature_ranking = sorted(
            zip(self.feature_names, global_importance),
            key=lambda x: x[1],
            reverse=True
        )

        # Features necesarias para acumular el 80% de la importancia
        cumsum = np.cumsum(sorted(global_importance, reverse=True))
        n_dominant = int(np.argmax(cumsum >= 0.8) + 1) if len(cumsum) else 0

        return {
            'global_importance': dict(zip(self.feature_names, global_importance)),
            'feature_ranking': feature_ranking,
            'top_10_features': feature_ranking[:10],
            'n_dominant_features': n_dominant,
            'class_specific_importance': class_importance
        }

    def global_importance(self) -> pd.Series:
        """Importancia global (|SHAP| medio, normalizado) como Serie ordenada."""
        if self.shap_values is None:
            raise RuntimeError("Primero debe ejecutar explain_predictions()")
        analysis = self._analyze_shap_values()
        return pd.Series(analysis['global_importance']).sort_values(ascending=False)

    def generate_feature_importance_report(self) -> pd.DataFrame:
        """
        Genera un reporte de importancia de características.

        Returns:
            DataFrame con importancia por clase, global y ranking
        """
        if self.shap_values is None:
            raise RuntimeError("Primero debe ejecutar explain_predictions()")

        mean_abs = np.abs(self.shap_values).mean(axis=0)
        global_imp = mean_abs.mean(axis=1)

        importance_data = []
        for j, class_name in enumerate(self._class_labels(mean_abs.shape[1])):
            for i, feat in enumerate(self.feature_names):
                importance_data.append({
                    'Feature': feat,
                    'Class': class_name,
                    'Importance': float(mean_abs[i, j]),
                    'Global_Importance': float(global_imp[i])
                })

        df = pd.DataFrame(importance_data)

        global_ranking = df.groupby('Feature')['Global_Importance'].mean().rank(
            ascending=False, method='min'
        )
        df['Global_Rank'] = df['Feature'].map(global_ranking).astype(int)

        df['Normalized_Importance'] = df.groupby('Class')['Importance'].transform(
            lambda x: x / x.sum() if x.sum() > 0 else x
        )

        return df.sort_values(['Global_Rank', 'Class']).reset_index(drop=True)
