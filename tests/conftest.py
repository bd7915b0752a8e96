"""Fixtures compartidas: dataset sintético con la estructura del dataset HAR."""

import numpy as np
import pandas as pd
import pytest

from har_classifier.config import get_default_config

CLASSES = ['A', 'B', 'C', 'D', 'E']
SENSOR_COLUMNS = [
    'roll_belt', 'pitch_belt', 'yaw_belt', 'gyros_arm_x',
    'accel_forearm_z', 'magnet_dumbbell_y', 'roll_dumbbell', 'pitch_forearm'
]
ID_COLUMNS = [
    'user_name', 'raw_timestamp_part_1', 'raw_timestamp_part_2',
    'cvtd_timestamp', 'num_window'
]


def _sensor_block(labels: np.ndarray, rng: np.random.RandomState) -> dict:
    codes = np.array([CLASSES.index(c) for c in labels])
    block = {}
    for j, col in enumerate(SENSOR_COLUMNS):
        scale = 3.0 + j
        block[col] = codes * scale * ((-1) ** j) + rng.normal(0, 1.0, len(codes))
    return block


def make_har_frame(n_per_class: int = 60, seed: int = 0) -> pd.DataFrame:
    """Frame con columnas id/tiempo, de resumen casi vacías, constantes y sensores."""
    rng = np.random.RandomState(seed)
    labels = np.repeat(CLASSES, n_per_class)
    rng.shuffle(labels)
    n = len(labels)

    new_window = np.array(['no'] * n, dtype=object)
    new_window[:2] = 'yes'

    kurtosis = np.full(n, np.nan, dtype=object)
    kurtosis[:4] = rng.normal(size=4)
    kurtosis[4:6] = '#DIV/0!'

    max_roll = np.full(n, np.nan)
    max_roll[:3] = rng.normal(size=3)

    data = {
        'user_name': rng.choice(['adelmo', 'carlitos', 'charles', 'eurico', 'jeremy', 'pedro'], n),
        'raw_timestamp_part_1': 1322489729 + np.arange(n),
        'raw_timestamp_part_2': rng.randint(0, 999999, n),
        'cvtd_timestamp': rng.choice(['05/12/2011 11:23', '05/12/2011 11:24',
                                      '30/11/2011 17:11', '02/12/2011 13:32'], n),
        'new_window': new_window,
        'num_window': rng.randint(1, 864, n),
        'kurtosis_roll_belt': kurtosis,
        'max_roll_belt': max_roll,
        'amplitude_yaw_belt': np.zeros(n),
    }
    data.update(_sensor_block(labels, rng))
    data['classe'] = labels
    return pd.DataFrame(data)


def make_validation_frame(n: int = 20, seed: int = 1) -> pd.DataFrame:
    """Frame de validación: mismas columnas, sin etiqueta y con ``problem_id``."""
    df = make_har_frame(n_per_class=4, seed=seed).head(n)
    df = df.drop(columns=['classe'])
    df['kurtosis_roll_belt'] = np.nan
    df['max_roll_belt'] = np.nan
    df['problem_id'] = np.arange(1, n + 1)
    return df.reset_index(drop=True)


@pytest.fixture
def har_frame():
    return make_har_frame()


@pytest.fixture
def validation_frame():
    return make_validation_frame()


@pytest.fixture
def test_config(tmp_path):
    """Configuración reducida que escribe todo bajo tmp_path."""
    config = get_default_config()
    config['data']['raw_path'] = str(tmp_path / 'raw')
    config['training']['cv_folds'] = 3
    config['training']['n_jobs'] = 1
    config['models']['decision_tree']['param_grid'] = {'max_depth': [3, None]}
    config['models']['random_forest']['n_estimators'] = 20
    config['models']['random_forest']['param_grid'] = {'max_features': ['sqrt']}
    config['models']['gradient_boosting']['param_grid'] = {
        'n_estimators': [20], 'max_depth': [2]
    }
    config['explainability']['enabled'] = False
    config['explainability']['sample_size'] = 20
    config['output'] = {
        'models_path': str(tmp_path / 'models'),
        'reports_path': str(tmp_path / 'reports'),
        'figures_path': str(tmp_path / 'reports' / 'figures'),
    }
    return config


@pytest.fixture
def raw_files(test_config, har_frame, validation_frame):
    """Escribe los CSV como los exporta R: con columna índice sin nombre."""
    from pathlib import Path

    raw = Path(test_config['data']['raw_path'])
    raw.mkdir(parents=True, exist_ok=True)
    har_frame.to_csv(raw / test_config['data']['training_file'], index=True, na_rep='NA')
    validation_frame.to_csv(raw / test_config['data']['validation_file'], index=True, na_rep='NA')
    return raw
