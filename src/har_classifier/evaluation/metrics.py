"""

Sistema de ML para Reconocimiento de Actividad Humana (HAR)

Sistema de evaluación y métricas para los modelos de clasificación.

Para cada modelo se construye la matriz de confusión sobre el split de test y
se derivan las estadísticas habituales de un informe de clasificación
multiclase: accuracy con su intervalo de confianza exacto al 95%, tasa de no
información (NIR) y p-valor de [Acc > NIR], kappa de Cohen, error fuera de
muestra y métricas por clase (sensibilidad, especificidad, valores
predictivos, prevalencia y balanced accuracy).

"""

from collections import Counter
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd
from scipy import stats
from sklearn.metrics import (
    accuracy_score, cohen_kappa_score, confusion_matrix,
    f1_score, precision_score, recall_score
)


class ModelEvaluator:
    """
    Evaluador para modelos de clasificación multiclase.

    Almacena los resultados de cada modelo evaluado para poder compararlos
    y elegir el mejor.
    """

    def __init__(self, class_names: Optional[List[str]] = None, verbose: bool = True):
        """
        Inicializa el evaluador.

        Args:
            class_names: Nombres de las clases, indexados por la etiqueta codificada
            verbose: Si True, imprime el resumen de cada evaluación
        """
        self.class_names = class_names
        self.verbose = verbose
        self.evaluation_results = {}

    def evaluate_model(self, model: Any, X_test, y_test, model_name: str) -> Dict:
        """
        Evaluación completa de un modelo individual.

        Args:
            model: Modelo entrenado
            X_test: Características de test
            y_test: Etiquetas verdaderas (codificadas)
            model_name: Nombre del modelo para identificación

        Returns:
            Diccionario con todas las métricas calculadas
        """
        y_true = np.asarray(y_test)
        y_pred = np.asarray(model.predict(X_test)).ravel()

        labels = self._labels(y_true, y_pred)
        names = self._names(labels)

        cm = confusion_matrix(y_true, y_pred, labels=labels)

        results = {
            'model_name': model_name,
            'overall_metrics': self._calculate_overall_metrics(y_true, y_pred, cm),
            'per_class_metrics': self._calculate_per_class_metrics(cm, names),
            'error_analysis': self._analyze_errors(y_true, y_pred),
            'confusion_matrix': pd.DataFrame(
                cm,
                index=pd.Index(names, name='Reference'),
                columns=pd.Index(names, name='Prediction')
            ),
            'predictions': y_pred
        }

        # Almacenar para comparación posterior
        self.evaluation_results[model_name] = results

        if self.verbose:
            self._print_evaluation_summary(results)

        return results

    def _labels(self, y_true: np.ndarray, y_pred: np.ndarray) -> List:
        if self.class_names is not None:
            return list(range(len(self.class_names)))
        return sorted(set(y_true.tolist()) | set(y_pred.tolist()))

    def _names(self, labels: List) -> List[str]:
        if self.class_names is not None:
            return [str(self.class_names[i]) for i in labels]
        return [str(label) for label in labels]

    def _calculate_overall_metrics(self, y_true: np.ndarray, y_pred: np.ndarray,
                                   cm: np.ndarray) -> Dict:
        """
        Calcula las métricas globales de clasificación.

        Args:
            y_true: Etiquetas verdaderas
            y_pred: Predicciones
            cm: Matriz de confusión

        Returns:
            Diccionario con métricas globales
        """
        n = int(cm.sum())
        correct = int(np.trace(cm))
        accuracy = accuracy_score(y_true, y_pred)

        ci_lower, ci_upper = accuracy_confidence_interval(correct, n)

        # Tasa de no información: accuracy de predecir siempre la clase mayoritaria
        nir = float(cm.sum(axis=1).max() / n) if n else 0.0
        p_value = float(stats.binomtest(correct, n, nir, alternative='greater').pvalue) if n else 1.0

        return {
            'accuracy': float(accuracy),
            'accuracy_ci_lower': ci_lower,
            'accuracy_ci_upper': ci_upper,
            'no_information_rate': nir,
            'p_value_acc_gt_nir': p_value,
            'kappa': float(cohen_kappa_score(y_true, y_pred)),
            'out_of_sample_error': float(1 - accuracy),
            'precision_macro': float(precision_score(y_true, y_pred, average='macro', zero_division=0)),
            'precision_weighted': float(precision_score(y_true, y_pred, average='weighted', zero_division=0)),
            'recall_macro': float(recall_score(y_true, y_pred, average='macro', zero_division=0)),
            'recall_weighted': float(recall_score(y_true, y_pred, average='weighted', zero_division=0)),
            'f1_macro': float(f1_score(y_true, y_pred, average='macro', zero_division=0)),
            'f1_weighted': float(f1_score(y_true, y_pred, average='weighted', zero_division=0)),
            'n_samples': n
        }

    def _calculate_per_class_metrics(self, cm: np.ndarray, names: List[str]) -> Dict:
        """
        Calcula métricas por clase (uno contra el resto) desde la matriz de confusión.

        Args:
            cm: Matriz de confusión (filas = referencia, columnas = predicción)
            names: Nombres de las clases en el orden de la matriz

        Returns:
            Diccionario {clase: métricas}
        """
        total = cm.sum()
        per_class = {}

        for i, class_name in enumerate(names):
            tp = cm[i, i]
            fn = cm[i, :].sum() - tp
            fp = cm[:, i].sum() - tp
            tn = total - tp - fn - fp

            sensitivity = tp / (tp + fn) if (tp + fn) > 0 else 0.0
            specificity = tn / (tn + fp) if (tn + fp) > 0 else 0.0

            per_class[class_name] = {
                'sensitivity': float(sensitivity),
                'specificity': float(specificity),
                'pos_pred_value': float(tp / (tp + fp)) if (tp + fp) > 0 else 0.0,
                'neg_pred_value': float(tn / (tn + fn)) if (tn + fn) > 0 else 0.0,
                'prevalence': float((tp + fn) / total) if total else 0.0,
                'detection_rate': float(tp / total) if total else 0.0,
                'balanced_accuracy': float((sensitivity + specificity) / 2),
                'support': int(tp + fn)
            }

        return per_class

    def _analyze_errors(self, y_true: np.ndarray, y_pred: np.ndarray) -> Dict:
        """
        Análisis de los pares (real, predicho) más confundidos.

        Args:
            y_true: Etiquetas verdaderas
            y_pred: Predicciones

        Returns:
            Diccionario con análisis de errores
        """
        errors_mask = y_true != y_pred
        n_errors = int(np.sum(errors_mask))

        error_counter = Counter(
            (self._name_of(t), self._name_of(p))
            for t, p in zip(y_true[errors_mask], y_pred[errors_mask])
        )

        return {
            'total_errors': n_errors,
            'error_rate': n_errors / len(y_true) if len(y_true) else 0.0,
            'top_confusion_pairs': error_counter.most_common(5)
        }

    def _name_of(self, label) -> str:
        if self.class_names is not None:
            return str(self.class_names[int(label)])
        return str(label)

    def compare_models(self, models_dict: Dict[str, Any], X_test, y_test) -> pd.DataFrame:
        """
        Compara múltiples modelos sistemáticamente.

        Args:
            models_dict: Diccionario {nombre: modelo}
            X_test: Características de test
            y_test: Etiquetas de test

        Returns:
            DataFrame con comparación de métricas, ordenado por accuracy
        """
        if self.verbose:
            print("\n🔍 Comparación de Modelos")
            print("=" * 70)

        for model_name, model in models_dict.items():
            self.evaluate_model(model, X_test, y_test, model_name)

        return self.comparison_table()

    def comparison_table(self) -> pd.DataFrame:
        """Tabla comparativa de los modelos ya evaluados."""
        rows = []
        for model_name, results in self.evaluation_results.items():
            overall = results['overall_metrics']
            rows.append({
                'Model': model_name,
                'Accuracy': overall['accuracy'],
                'CI Lower': overall['accuracy_ci_lower'],
                'CI Upper': overall['accuracy_ci_upper'],
                'Kappa': overall['kappa'],
                'Precision': overall['precision_macro'],
                'Recall': overall['recall_macro'],
                'F1-Score': overall['f1_macro'],
                'OOS Error': overall['out_of_sample_error']
            })

        comparison_df = pd.DataFrame(rows)
        if comparison_df.empty:
            return comparison_df

        # mergesort es estable: en empate se conserva el orden de evaluación
        comparison_df = comparison_df.sort_values(
            ['Accuracy', 'Kappa'], ascending=False, kind='mergesort'
        ).reset_index(drop=True)
        comparison_df['Rank'] = range(1, len(comparison_df) + 1)

        numeric_cols = [c for c in comparison_df.select_dtypes(include=[np.number]).columns
                        if c != 'Rank']
        comparison_df[numeric_cols] = comparison_df[numeric_cols].round(4)

        return comparison_df

    def best_model_name(self) -> str:
        """
        Nombre del modelo con mayor accuracy en test.

        En empate decide el kappa y, después, el orden de evaluación.
        """
        if not self.evaluation_results:
            raise RuntimeError("No hay modelos evaluados")

        best_name, best_key = None, None
        for model_name, results in self.evaluation_results.items():
            overall = results['overall_metrics']
            key = (overall['accuracy'], overall['kappa'])
            if best_key is None or key > best_key:
                best_name, best_key = model_name, key
        return best_name

    def _print_evaluation_summary(self, results: Dict):
        """
        Imprime un resumen de la evaluación con la matriz de confusión.

        Args:
            results: Diccionario de resultados de evaluación
        """
        print(f"\n📈 Resumen de {results['model_name']}:")
        print("-" * 40)

        print("Matriz de confusión:")
        print(results['confusion_matrix'].to_string())

        overall = results['overall_metrics']
        print(f"\nAccuracy:    {overall['accuracy']:.4f} "
              f"(IC 95%: {overall['accuracy_ci_lower']:.4f} - {overall['accuracy_ci_upper']:.4f})")
        print(f"NIR:         {overall['no_information_rate']:.4f}")
        print(f"P [Acc>NIR]: {overall['p_value_acc_gt_nir']:.3g}")
        print(f"Kappa:       {overall['kappa']:.4f}")
        print(f"F1 (macro):  {overall['f1_macro']:.4f}")
        print(f"Error OOS:   {overall['out_of_sample_error']:.4f}")

        errors = results['error_analysis']
        print(f"\n❌ Errores: {errors['total_errors']} ({errors['error_rate']:.2%})")

    def generate_report(self, output_path: str = "evaluation_report.txt"):
        """
        Genera un informe completo de evaluación.

        Args:
            output_path: Ruta para guardar el informe
        """
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write("=" * 70 + "\n")
            f.write("INFORME COMPLETO DE EVALUACIÓN DE MODELOS\n")
            f.write("=" * 70 + "\n\n")

            for model_name, results in self.evaluation_results.items():
                f.write(f"\n{model_name}\n")
                f.write("-" * len(model_name) + "\n\n")

                f.write("Matriz de Confusión:\n")
                f.write(results['confusion_matrix'].to_string() + "\n\n")

                f.write("Métricas Globales:\n")
                for metric, value in results['overall_metrics'].items():
                    if isinstance(value, float):
                        f.write(f"  {metric}: {value:.4f}\n")
                    else:
                        f.write(f"  {metric}: {value}\n")

                f.write("\nMétricas por Clase:\n")
                for class_name, metrics in results['per_class_metrics'].items():
                    f.write(f"  {class_name}:\n")
                    for metric, value in metrics.items():
                        if isinstance(value, float):
                            f.write(f"    {metric}: {value:.4f}\n")
                        else:
                            f.write(f"    {metric}: {value}\n")

                pairs = results['error_analysis']['top_confusion_pairs']
                if pairs:
                    f.write("\nConfusiones más frecuentes (real -> predicho):\n")
                    for (true_cls, pred_cls), count in pairs:
                        f.write(f"  {true_cls} -> {pred_cls}: {count}\n")

                f.write("\n" + "=" * 70 + "\n")

        print(f"\n📝 Informe guardado en: {output_path}")


def accuracy_confidence_interval(correct: int, n: int, level: float = 0.95):
    """
    Intervalo de confianza exacto (Clopper-Pearson) para la accuracy.

    Args:
        correct: Número de aciertos
        n: Número total de predicciones
        level: Nivel de confianza

    Returns:
        Tuple (inferior, superior)
    """
    if n == 0:
        return (0.0, 1.0)

    alpha = 1 - level
    lower = stats.beta.ppf(alpha / 2, correct, n - correct + 1) if correct > 0 else 0.0
    upper = stats.beta.ppf(1 - alpha / 2, correct + 1, n - correct) if correct < n else 1.0
    return (float(lower), float(upper))
