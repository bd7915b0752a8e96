"""Tests for configuration loading."""

import pytest

from har_classifier.config import get_default_config, load_config, validate_config
from har_classifier.exceptions import ConfigurationError


class TestLoadConfig:
    """Test load_config function."""

    def test_defaults_when_no_path(self):
        """Test defaults are returned when no path is given."""
        config = load_config(None)

        assert config['data']['label_column'] == 'classe'
        assert config['data']['split']['train_ratio'] == 0.75
        assert config['cleaning']['missing_threshold'] == 0.95
        assert config['training']['models'] == [
            'decision_tree', 'random_forest', 'gradient_boosting'
        ]

    def test_missing_file_falls_back_to_defaults(self, tmp_path):
        """Test a missing file yields the default configuration."""
        config = load_config(str(tmp_path / 'nope.yaml'))

        assert config == get_default_config()

    def test_yaml_overrides_are_merged(self, tmp_path):
        """Test partial YAML overrides keep the remaining defaults."""
        path = tmp_path / 'config.yaml'
        path.write_text(
            "training:\n"
            "  cv_folds: 3\n"
            "models:\n"
            "  random_forest:\n"
            "    n_estimators: 50\n"
        )

        config = load_config(str(path))

        assert config['training']['cv_folds'] == 3
        assert config['training']['n_jobs'] == -1
        assert config['models']['random_forest']['n_estimators'] == 50
        assert 'param_grid' in config['models']['random_forest']

    def test_param_grid_replaced_not_merged(self, tmp_path):
        """Test a YAML grid replaces the default grid entirely."""
        path = tmp_path / 'config.yaml'
        path.write_text(
            "models:\n"
            "  decision_tree:\n"
            "    param_grid:\n"
            "      max_depth: [5]\n"
        )

        config = load_config(str(path))

        assert config['models']['decision_tree']['param_grid'] == {'max_depth': [5]}

    def test_non_mapping_yaml_rejected(self, tmp_path):
        """Test a YAML list at top level is rejected."""
        path = tmp_path / 'config.yaml'
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError):
            load_config(str(path))

    def test_repository_config_is_valid(self):
        """Test the shipped config.yaml loads."""
        from pathlib import Path

        root_config = Path(__file__).resolve().parents[1] / 'config.yaml'
        config = load_config(str(root_config))

        assert config['data']['id_column'] == 'problem_id'
        assert config['models']['decision_tree']['param_grid']['max_depth'][-1] is None


class TestValidateConfig:
    """Test validate_config function."""

    @pytest.mark.parametrize("ratio", [0, 1, 1.5, -0.2])
    def test_invalid_train_ratio(self, ratio):
        """Test train ratios outside (0, 1) are rejected."""
        config = get_default_config()
        config['data']['split']['train_ratio'] = ratio

        with pytest.raises(ConfigurationError):
            validate_config(config)

    def test_invalid_cv_folds(self):
        """Test fewer than two folds is rejected."""
        config = get_default_config()
        config['training']['cv_folds'] = 1

        with pytest.raises(ConfigurationError):
            validate_config(config)

    def test_unknown_model(self):
        """Test unknown model names are rejected."""
        config = get_default_config()
        config['training']['models'] = ['decision_tree', 'svm']

        with pytest.raises(ConfigurationError, match="svm"):
            validate_config(config)

    def test_empty_model_list(self):
        """Test an empty model list is rejected."""
        config = get_default_config()
        config['training']['models'] = []

        with pytest.raises(ConfigurationError):
            validate_config(config)
