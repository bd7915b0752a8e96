"""
Pipeline Principal de Machine Learning para Reconocimiento de Actividad Humana
================================================================================

Ejecuta el informe completo sobre el dataset Weight Lifting Exercises:
1. Descarga y carga de los ficheros de entrenamiento y validación
2. Análisis exploratorio (estructura, faltantes, balance de clases)
3. División estratificada 75/25 en train/test
4. Limpieza de características (varianza casi nula, faltantes, identificadores)
5. Entrenamiento con validación cruzada de 3 modelos (Decision Tree,
   Random Forest, Gradient Boosting)
6. Evaluación en test con matriz de confusión y comparación de accuracy
7. Análisis de interpretabilidad con SHAP del mejor modelo
8. Predicción de los 20 casos de validación con el mejor modelo
9. Generación de informes y visualizaciones
"""

import argparse
import json
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

import pandas as pd
from sklearn.preprocessing import LabelEncoder

from .config import load_config
from .data.loader import DataLoader
from .data.splitter import DataSplitter
from .evaluation import plots
from .evaluation.metrics import ModelEvaluator
from .exceptions import HARError
from .explainability.shap_analysis import SHAPAnalyzer
from .features.pipeline import FeaturePipeline
from .models.registry import save_model, train_all_models
from .utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _banner(title: str):
    print("\n" + "="*60)
    print(title)
    print("="*60)


class HARPipeline:
    """
    Pipeline completo para clasificar la forma de ejecución del ejercicio.

    Cada fase es un método independiente que deja su resultado en atributos
    de la instancia, de modo que puede ejecutarse el flujo completo con
    ``run_complete_pipeline`` o fase a fase.
    """

    def __init__(self, config_path: Optional[str] = "config.yaml",
                 config: Optional[dict] = None, force_download: bool = False):
        """
        Inicializa el pipeline con configuración.

        Args:
            config_path: Ruta al archivo de configuración YAML
            config: Configuración ya cargada (tiene prioridad sobre config_path)
            force_download: Si True, vuelve a descargar los CSV
        """
        self.config = config if config is not None else load_config(config_path)
        self.force_download = force_download

        data_config = self.config['data']
        self.label_column = data_config['label_column']
        self.id_column = data_config['id_column']

        # Componentes
        self.data_loader = None
        self.data_splitter = None
        self.feature_pipeline = None
        self.label_encoder = None
        self.evaluator = None

        # Datos
        self.raw_training = None
        self.raw_validation = None
        self.X_train = None
        self.X_test = None
        self._X_train_raw = None
        self._X_test_raw = None
        self.X_validation = None
        self.y_train = None
        self.y_test = None

        # Resultados
        self.eda_stats = {}
        self.training_results = {}
        self.comparison = None
        self.best_model_name = None
        self.feature_importance = None
        self.validation_predictions = None
        self.execution_time = {}

        self.output_paths = {
            key: Path(self.config['output'][key])
            for key in ('models_path', 'reports_path', 'figures_path')
        }

    def _create_directories(self):
        """Crea directorios de salida."""
        for path in self.output_paths.values():
            path.mkdir(parents=True, exist_ok=True)
        logger.debug("Directorios de salida verificados: %s", list(self.output_paths.values()))

    def run_complete_pipeline(self, run_shap: Optional[bool] = None) -> Dict:
        """
        Ejecuta el pipeline completo de principio a fin.

        Args:
            run_shap: Fuerza activar/desactivar SHAP (None = según configuración)

        Returns:
            Diccionario resumen de resultados
        """
        print("\n" + "="*80)
        print("PIPELINE DE MACHINE LEARNING PARA RECONOCIMIENTO DE ACTIVIDAD HUMANA")
        print("="*80)
        print(f"Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

        self._create_directories()
        if run_shap is None:
            run_shap = self.config['explainability']['enabled']

        phases = [
            ("FASE 1: CARGA DE DATOS", self.load_data),
            ("FASE 2: ANÁLISIS EXPLORATORIO", self.explore_data),
            ("FASE 3: DIVISIÓN DE DATOS", self.split_data),
            ("FASE 4: LIMPIEZA DE CARACTERÍSTICAS", self.clean_features),
            ("FASE 5: ENTRENAMIENTO DE MODELOS", self.train_models),
            ("FASE 6: EVALUACIÓN DE MODELOS", self.evaluate_models),
        ]
        if run_shap:
            phases.append(("FASE 7: ANÁLISIS DE INTERPRETABILIDAD (SHAP)", self.perform_shap_analysis))
        phases += [
            ("FASE 8: PREDICCIÓN DEL CONJUNTO DE VALIDACIÓN", self.predict_validation),
            ("FASE 9: GENERACIÓN DE INFORMES", self.generate_reports),
        ]

        start_time = time.time()

        for title, phase in phases:
            _banner(title)
            try:
                phase()
            except Exception as e:
                print(f"\n❌ ERROR EN EL PIPELINE ({title}): {str(e)}")
                raise

        total_time = time.time() - start_time
        self.print_final_summary(total_time)
        print("\n✅ PIPELINE COMPLETADO EXITOSAMENTE")

        return self.summary()

    def load_data(self):
        """Descarga (si falta) y carga los ficheros de entrenamiento y validación."""
        start_time = time.time()

        print("\n📊 Cargando dataset Weight Lifting Exercises...")
        self.data_loader = DataLoader(self.config, force_download=self.force_download)

        self.raw_training = self.data_loader.load_training()
        self.raw_validation = self.data_loader.load_validation()

        print(f"   ✅ Entrenamiento: {self.raw_training.shape[0]} filas x {self.raw_training.shape[1]} columnas")
        print(f"   ✅ Validación:    {self.raw_validation.shape[0]} filas x {self.raw_validation.shape[1]} columnas")

        self.execution_time['data_loading'] = time.time() - start_time

    def explore_data(self):
        """Inspecciona la estructura y el balance de clases del fichero de entrenamiento."""
        start_time = time.time()

        threshold = self.config['cleaning']['missing_threshold']
        self.eda_stats = self.data_loader.get_statistics(self.raw_training, missing_threshold=threshold)
        self.data_loader.print_summary(self.raw_training, title="RESUMEN DEL FICHERO DE ENTRENAMIENTO")

        figures = self.output_paths['figures_path']
        plots.plot_class_distribution(self.raw_training, self.label_column,
                                      figures / 'class_distribution.png')
        plots.plot_missing_profile(self.raw_training, figures / 'missing_profile.png',
                                   threshold=threshold)
        print(f"   📈 Gráficos exploratorios guardados en {figures}")

        self.execution_time['exploration'] = time.time() - start_time

    def split_data(self):
        """Divide el fichero de entrenamiento en train/test y codifica etiquetas."""
        start_time = time.time()

        print("\n✂️ Dividiendo datos en train/test...")
        self.data_splitter = DataSplitter.from_config(self.config)
        train_df, test_df = self.data_splitter.split_frame(self.raw_training, self.label_column)

        self.label_encoder = LabelEncoder()
        self.y_train = self.label_encoder.fit_transform(train_df[self.label_column])
        self.y_test = self.label_encoder.transform(test_df[self.label_column])

        self._X_train_raw = train_df.drop(columns=[self.label_column])
        self._X_test_raw = test_df.drop(columns=[self.label_column])

        ratio = self.data_splitter.train_ratio
        print(f"\n📊 División de datos completada:")
        print(f"   Train: {len(train_df)} muestras ({ratio*100:.0f}%)")
        print(f"   Test:  {len(test_df)} muestras ({(1 - ratio)*100:.0f}%)")
        print(f"   Validación: {len(self.raw_validation)} casos")
        print(f"   Clases: {list(self.label_encoder.classes_)}")

        self.execution_time['data_splitting'] = time.time() - start_time

    def clean_features(self):
        """Aprende el esquema de columnas en train y lo aplica a test y validación."""
        start_time = time.time()

        print("\n🧹 Limpiando características...")
        self.feature_pipeline = FeaturePipeline(self.config)
        self.X_train = self.feature_pipeline.fit_transform(self._X_train_raw)
        self.X_test = self.feature_pipeline.transform(self._X_test_raw)
        self.X_validation = self.feature_pipeline.transform(self.raw_validation)

        self.feature_pipeline.print_cleaning_report()

        n_missing = int(self.X_train.isna().sum().sum())
        if n_missing:
            logger.warning("Quedan %d valores faltantes en train tras la limpieza", n_missing)

        self.execution_time['feature_cleaning'] = time.time() - start_time

    def train_models(self):
        """Entrena los modelos configurados con validación cruzada k-fold."""
        start_time = time.time()

        n_folds = self.config['training']['cv_folds']
        cv = self.data_splitter.get_cv_folds(n_splits=n_folds)
        print(f"\n🤖 Entrenando modelos ({n_folds}-fold CV, {self.X_train.shape[1]} características)...")

        self.training_results = train_all_models(self.X_train, self.y_train, self.config, cv)

        self.execution_time['training'] = time.time() - start_time

    def evaluate_models(self):
        """Evalúa cada modelo en test y selecciona el de mayor accuracy."""
        start_time = time.time()

        class_names = [str(c) for c in self.label_encoder.classes_]
        self.evaluator = ModelEvaluator(class_names=class_names)

        models = {name: result.model for name, result in self.training_results.items()}
        self.comparison = self.evaluator.compare_models(models, self.X_test, self.y_test)
        self.best_model_name = self.evaluator.best_model_name()

        cv_scores = {name: r.cv_accuracy_mean for name, r in self.training_results.items()}
        self.comparison['CV Accuracy'] = self.comparison['Model'].map(cv_scores).round(4)

        print("\n📋 Tabla comparativa:")
        print(self.comparison.to_string(index=False))
        print(f"\n🏆 Mejor modelo: {self.best_model_name}")

        figures = self.output_paths['figures_path']
        for name, results in self.evaluator.evaluation_results.items():
            slug = name.lower().replace(' ', '_')
            plots.plot_confusion_matrix(results['confusion_matrix'], f"Matriz de confusión - {name}",
                                        figures / f"confusion_matrix_{slug}.png")
        plots.plot_model_comparison(self.comparison, figures / 'model_comparison.png')

        best_model = self.training_results[self.best_model_name].model
        if hasattr(best_model, 'feature_importances_'):
            self.feature_importance = pd.Series(
                best_model.feature_importances_, index=self.feature_pipeline.get_feature_names()
            ).sort_values(ascending=False)
            plots.plot_feature_importance(
                self.feature_importance, figures / 'feature_importance.png',
                title=f"Importancia de características - {self.best_model_name}"
            )

        self.execution_time['evaluation'] = time.time() - start_time

    def perform_shap_analysis(self):
        """Calcula importancias SHAP del mejor modelo sobre una muestra de test."""
        start_time = time.time()

        best_model = self.training_results[self.best_model_name].model
        try:
            analyzer = SHAPAnalyzer(
                best_model, self.X_train,
                feature_names=self.feature_pipeline.get_feature_names(),
                class_names=[str(c) for c in self.label_encoder.classes_],
                random_state=self.config['project']['random_state']
            )
            analyzer.explain_predictions(self.X_test,
                                         sample_size=self.config['explainability']['sample_size'])
        except Exception as e:
            # La interpretabilidad es opcional: el informe continúa sin ella
            logger.warning("Análisis SHAP no disponible: %s", e, exc_info=True)
            self.execution_time['shap'] = time.time() - start_time
            return

        report = analyzer.generate_feature_importance_report()
        report.to_csv(self.output_paths['reports_path'] / 'shap_importance.csv', index=False)

        importance = analyzer.global_importance()
        plots.plot_feature_importance(
            importance, self.output_paths['figures_path'] / 'shap_importance.png',
            title=f"Importancia SHAP - {self.best_model_name}"
        )

        print("\n🔝 Top 10 características (SHAP):")
        for feat, value in importance.head(10).items():
            print(f"   {feat:<25} {value:.4f}")

        self.execution_time['shap'] = time.time() - start_time

    def predict_validation(self) -> pd.DataFrame:
        """
        Predice los casos de validación con el mejor modelo.

        Returns:
            DataFrame con el identificador de cada caso y la clase predicha
        """
        start_time = time.time()

        best_model = self.training_results[self.best_model_name].model
        encoded = best_model.predict(self.X_validation)
        predicted = self.label_encoder.inverse_transform(encoded.astype(int).ravel())

        self.validation_predictions = pd.DataFrame({
            self.id_column: self.raw_validation[self.id_column].to_numpy(),
            'prediction': predicted
        })

        print(f"\n🎯 Predicciones de validación ({self.best_model_name}):")
        print(self.validation_predictions.to_string(index=False))

        self.execution_time['validation_prediction'] = time.time() - start_time
        return self.validation_predictions

    def generate_reports(self):
        """Guarda tablas, informe de evaluación, resultados y modelos ajustados."""
        start_time = time.time()

        reports = self.output_paths['reports_path']
        models_dir = self.output_paths['models_path']

        self.comparison.to_csv(reports / 'model_comparison.csv', index=False)
        self.validation_predictions.to_csv(reports / 'validation_predictions.csv', index=False)
        self.evaluator.generate_report(str(reports / 'evaluation_report.txt'))

        with open(reports / 'cleaning_report.json', 'w', encoding='utf-8') as f:
            json.dump(self.feature_pipeline.get_cleaning_report(), f, indent=2)

        with open(reports / 'results.json', 'w', encoding='utf-8') as f:
            json.dump(self.summary(), f, indent=2, default=str)

        for name, result in self.training_results.items():
            slug = name.lower().replace(' ', '_')
            save_model(result.model, models_dir / f"{slug}.joblib")
        self.feature_pipeline.save(str(models_dir / 'feature_pipeline.joblib'))
        save_model(self.label_encoder, models_dir / 'label_encoder.joblib')

        print(f"\n📁 Informes guardados en {reports}")
        print(f"📁 Modelos guardados en {models_dir}")

        self.execution_time['reporting'] = time.time() - start_time

    def summary(self) -> Dict:
        """Resumen serializable de la ejecución."""
        summary = {
            'project': self.config['project']['name'],
            'timestamp': datetime.now().isoformat(timespec='seconds'),
            'dataset': self.eda_stats,
            'best_model': self.best_model_name,
            'execution_time': {k: round(v, 2) for k, v in self.execution_time.items()}
        }
        if self.feature_pipeline is not None and self.feature_pipeline.is_fitted:
            summary['n_features'] = len(self.feature_pipeline.get_feature_names())
        if self.training_results:
            summary['training'] = {n: r.summary() for n, r in self.training_results.items()}
        if self.comparison is not None:
            summary['comparison'] = self.comparison.to_dict(orient='records')
        if self.validation_predictions is not None:
            summary['validation_predictions'] = self.validation_predictions.to_dict(orient='records')
        return summary

    def print_final_summary(self, total_time: float):
        """Imprime el resumen final de la ejecución."""
        _banner("RESUMEN FINAL")

        if self.comparison is not None:
            best = self.comparison.iloc[0]
            print(f"🏆 Mejor modelo: {self.best_model_name}")
            print(f"   Accuracy test: {best['Accuracy']:.4f} "
                  f"(IC 95%: {best['CI Lower']:.4f} - {best['CI Upper']:.4f})")
            print(f"   Error fuera de muestra estimado: {best['OOS Error']:.4f}")

        print(f"\n⏱️ Tiempos por fase:")
        for phase, seconds in self.execution_time.items():
            print(f"   {phase:<25} {seconds:8.2f} s")
        print(f"   {'total':<25} {total_time:8.2f} s")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Clasificación HAR: árbol de decisión, random forest y gradient boosting"
    )
    parser.add_argument('--config', default='config.yaml',
                        help='Ruta al fichero de configuración YAML')
    parser.add_argument('--skip-shap', action='store_true',
                        help='No ejecutar el análisis de interpretabilidad SHAP')
    parser.add_argument('--force-download', action='store_true',
                        help='Volver a descargar los CSV aunque existan')
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help='Nivel de logging de diagnóstico')
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Punto de entrada de línea de comandos."""
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        pipeline = HARPipeline(config_path=args.config, force_download=args.force_download)
        pipeline.run_complete_pipeline(run_shap=False if args.skip_shap else None)
    except HARError as e:
        logger.error("%s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
