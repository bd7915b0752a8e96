"""Tests for SHAP analysis."""

import numpy as np
import pytest
from sklearn.ensemble import RandomForestClassifier
from sklearn.preprocessing import LabelEncoder

from har_classifier.explainability import SHAPAnalyzer
from har_classifier.features import FeaturePipeline

from conftest import SENSOR_COLUMNS


@pytest.fixture
def fitted_forest(test_config, har_frame):
    X = FeaturePipeline(test_config).fit_transform(har_frame.drop(columns=['classe']))
    y = LabelEncoder().fit_transform(har_frame['classe'])
    model = RandomForestClassifier(n_estimators=10, max_depth=4, random_state=0).fit(X, y)
    return model, X


class TestSHAPAnalyzer:
    """Test SHAPAnalyzer class."""

    def test_tree_explainer_selected(self, fitted_forest):
        """Test tree models use TreeExplainer."""
        import shap

        model, X = fitted_forest
        analyzer = SHAPAnalyzer(model, X, feature_names=SENSOR_COLUMNS)

        assert isinstance(analyzer.explainer, shap.TreeExplainer)

    def test_explain_predictions(self, fitted_forest):
        """Test SHAP values have one slice per class."""
        model, X = fitted_forest
        analyzer = SHAPAnalyzer(model, X, feature_names=SENSOR_COLUMNS,
                                class_names=list('ABCDE'))

        result = analyzer.explain_predictions(X, sample_size=25)

        assert result['shap_values'].shape == (25, len(SENSOR_COLUMNS), 5)
        analysis = result['analysis']
        assert sum(analysis['global_importance'].values()) == pytest.approx(1.0)
        assert set(analysis['class_specific_importance']) == set('ABCDE')
        assert 1 <= analysis['n_dominant_features'] <= len(SENSOR_COLUMNS)

    def test_feature_importance_report(self, fitted_forest):
        """Test the report has one row per feature and class."""
        model, X = fitted_forest
        analyzer = SHAPAnalyzer(model, X, feature_names=SENSOR_COLUMNS,
                                class_names=list('ABCDE'))
        analyzer.explain_predictions(X, sample_size=20)

        report = analyzer.generate_feature_importance_report()

        assert len(report) == len(SENSOR_COLUMNS) * 5
        assert report['Global_Rank'].min() == 1
        sums = report.groupby('Class')['Normalized_Importance'].sum()
        np.testing.assert_allclose(sums.to_numpy(), 1.0)

        importance = analyzer.global_importance()
        assert list(importance.index)[0] == report.iloc[0]['Feature']

    def test_report_before_explain(self, fitted_forest):
        """Test the report requires computed SHAP values."""
        model, X = fitted_forest
        analyzer = SHAPAnalyzer(model, X)

        with pytest.raises(RuntimeError):
            analyzer.generate_feature_importance_report()


class TestShapeNormalisation:
    """Test conversion of SHAP outputs to (samples, features, classes)."""

    def test_list_per_class(self):
        """Test list-per-class output is stacked on the last axis."""
        values = [np.zeros((4, 3)), np.ones((4, 3))]
        out = SHAPAnalyzer._as_3d(values)

        assert out.shape == (4, 3, 2)
        assert out[0, 0, 1] == 1

    def test_2d_output(self):
        """Test single-output arrays gain a class axis."""
        assert SHAPAnalyzer._as_3d(np.zeros((4, 3))).shape == (4, 3, 1)

    def test_3d_output_unchanged(self):
        """Test 3-D arrays are returned as-is."""
        assert SHAPAnalyzer._as_3d(np.zeros((4, 3, 5))).shape == (4, 3, 5)
