"""End-to-end tests for the HAR pipeline."""

import json
from pathlib import Path

import pandas as pd
import pytest
import yaml

from har_classifier.exceptions import DataValidationError
from har_classifier.models import load_model
from har_classifier.pipeline import HARPipeline, main, parse_args

from conftest import SENSOR_COLUMNS


@pytest.fixture
def fast_config(test_config):
    test_config['training']['models'] = ['decision_tree', 'random_forest']
    return test_config


class TestHARPipeline:
    """Test HARPipeline class."""

    def test_complete_pipeline(self, fast_config, raw_files):
        """Test the full run produces predictions and reports."""
        pipeline = HARPipeline(config=fast_config)
        summary = pipeline.run_complete_pipeline(run_shap=False)

        assert summary['best_model'] in ('Decision Tree', 'Random Forest')
        assert summary['n_features'] == len(SENSOR_COLUMNS)

        predictions = pipeline.validation_predictions
        assert list(predictions.columns) == ['problem_id', 'prediction']
        assert predictions['problem_id'].tolist() == list(range(1, 21))
        assert set(predictions['prediction']) <= set('ABCDE')

        reports = Path(fast_config['output']['reports_path'])
        for name in ('model_comparison.csv', 'validation_predictions.csv',
                     'evaluation_report.txt', 'cleaning_report.json', 'results.json'):
            assert (reports / name).exists(), name

        figures = Path(fast_config['output']['figures_path'])
        assert (figures / 'class_distribution.png').exists()
        assert (figures / 'confusion_matrix_random_forest.png').exists()
        assert (figures / 'model_comparison.png').exists()

        models = Path(fast_config['output']['models_path'])
        assert (models / 'decision_tree.joblib').exists()
        assert (models / 'feature_pipeline.joblib').exists()

    def test_split_and_cleaning_phases(self, fast_config, raw_files):
        """Test phases can run one at a time."""
        pipeline = HARPipeline(config=fast_config)
        pipeline.load_data()
        pipeline.split_data()
        pipeline.clean_features()

        assert len(pipeline.X_train) == 225
        assert len(pipeline.X_test) == 75
        assert list(pipeline.X_validation.columns) == list(pipeline.X_train.columns)
        assert list(pipeline.label_encoder.classes_) == list('ABCDE')

    def test_best_model_matches_comparison(self, fast_config, raw_files):
        """Test the best model is the top row of the comparison."""
        pipeline = HARPipeline(config=fast_config)
        pipeline.run_complete_pipeline(run_shap=False)

        comparison = pd.read_csv(Path(fast_config['output']['reports_path']) / 'model_comparison.csv')
        assert comparison.loc[0, 'Model'] == pipeline.best_model_name
        assert comparison.loc[0, 'Accuracy'] > 0.8
        assert 'CV Accuracy' in comparison.columns

    def test_saved_model_reproduces_predictions(self, fast_config, raw_files):
        """Test persisted artefacts predict the same validation labels."""
        pipeline = HARPipeline(config=fast_config)
        pipeline.run_complete_pipeline(run_shap=False)

        models = Path(fast_config['output']['models_path'])
        slug = pipeline.best_model_name.lower().replace(' ', '_')
        model = load_model(models / f"{slug}.joblib")
        encoder = load_model(models / 'label_encoder.joblib')

        from har_classifier.features import FeaturePipeline
        features = FeaturePipeline.load(str(models / 'feature_pipeline.joblib'))
        X_val = features.transform(pipeline.raw_validation)

        labels = encoder.inverse_transform(model.predict(X_val))
        assert labels.tolist() == pipeline.validation_predictions['prediction'].tolist()

    def test_results_json(self, fast_config, raw_files):
        """Test the results file is valid JSON with the comparison."""
        HARPipeline(config=fast_config).run_complete_pipeline(run_shap=False)

        with open(Path(fast_config['output']['reports_path']) / 'results.json') as f:
            results = json.load(f)

        assert len(results['comparison']) == 2
        assert len(results['validation_predictions']) == 20
        assert results['dataset']['n_classes'] == 5

    def test_shap_phase(self, fast_config, raw_files):
        """Test the SHAP phase writes its importance table."""
        fast_config['explainability']['enabled'] = True
        HARPipeline(config=fast_config).run_complete_pipeline()

        reports = Path(fast_config['output']['reports_path'])
        assert (reports / 'shap_importance.csv').exists()

    def test_phase_error_propagates(self, fast_config, raw_files, har_frame):
        """Test failures inside a phase are raised to the caller."""
        path = raw_files / fast_config['data']['training_file']
        har_frame.drop(columns=['classe']).to_csv(path)

        with pytest.raises(DataValidationError):
            HARPipeline(config=fast_config).run_complete_pipeline(run_shap=False)


class TestCLI:
    """Test command line entry point."""

    def test_parse_args_defaults(self):
        """Test default CLI arguments."""
        args = parse_args([])

        assert args.config == 'config.yaml'
        assert args.skip_shap is False
        assert args.log_level == 'INFO'

    def test_main_success(self, fast_config, raw_files, tmp_path):
        """Test main returns 0 on a successful run."""
        config_path = tmp_path / 'config.yaml'
        config_path.write_text(yaml.safe_dump(fast_config))

        assert main(['--config', str(config_path), '--skip-shap']) == 0

    def test_main_handled_error(self, fast_config, raw_files, har_frame, tmp_path):
        """Test main returns 1 on a data validation error."""
        har_frame.drop(columns=['classe']).to_csv(raw_files / fast_config['data']['training_file'])
        config_path = tmp_path / 'config.yaml'
        config_path.write_text(yaml.safe_dump(fast_config))

        assert main(['--config', str(config_path), '--skip-shap']) == 1
