"""

Sistema de ML para Reconocimiento de Actividad Humana (HAR)

Módulo de configuración del pipeline.

La configuración se lee de un fichero YAML y se combina sobre los valores
por defecto, de modo que el fichero solo necesita contener las claves que
cambian.

"""

import copy
import logging
from pathlib import Path
from typing import Dict, Optional

import yaml

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

SUPPORTED_MODELS = ('decision_tree', 'random_forest', 'gradient_boosting')


def get_default_config() -> dict:
    """
    Retorna la configuración por defecto del pipeline.

    Returns:
        Diccionario con configuración por defecto
    """
    return {
        'project': {
            'name': 'HAR Weight Lifting Classification',
            'version': '1.0.0',
            'random_state': 42
        },
        'data': {
            'training_url': 'https://d396qusza40orc.cloudfront.net/predmachlearn/pml-training.csv',
            'validation_url': 'https://d396qusza40orc.cloudfront.net/predmachlearn/pml-testing.csv',
            'raw_path': 'data/raw',
            'training_file': 'pml-training.csv',
            'validation_file': 'pml-testing.csv',
            'na_values': ['NA', '', '#DIV/0!'],
            'label_column': 'classe',
            'id_column': 'problem_id',
            'download_timeout': 60,
            'split': {
                'train_ratio': 0.75,
                'stratify': True
            }
        },
        'cleaning': {
            'drop_columns': [
                'X',
                'user_name',
                'raw_timestamp_part_1',
                'raw_timestamp_part_2',
                'cvtd_timestamp',
                'new_window',
                'num_window'
            ],
            'missing_threshold': 0.95,
            'near_zero_variance': {
                'freq_cut': 95 / 5,
                'unique_cut': 10
            }
        },
        'training': {
            'cv_folds': 5,
            'n_jobs': -1,
            'models': list(SUPPORTED_MODELS)
        },
        'models': {
            'decision_tree': {
                'param_grid': {
                    'max_depth': [10, 20, None],
                    'min_samples_leaf': [1, 5]
                }
            },
            'random_forest': {
                'n_estimators': 200,
                'param_grid': {
                    'max_features': [2, 'sqrt', 27]
                }
            },
            'gradient_boosting': {
                'learning_rate': 0.1,
                'subsample': 0.8,
                'param_grid': {
                    'n_estimators': [50, 150],
                    'max_depth': [3, 6]
                }
            }
        },
        'explainability': {
            'enabled': True,
            'sample_size': 200
        },
        'output': {
            'models_path': 'models/',
            'reports_path': 'reports/',
            'figures_path': 'reports/figures/'
        }
    }


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Combina recursivamente ``override`` sobre ``base``.

    Las rejillas de hiperparámetros se sustituyen completas, no se combinan.
    """
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if key == 'param_grid':
            merged[key] = copy.deepcopy(value)
        elif isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def validate_config(config: dict) -> None:
    """
    Valida los valores de configuración que el pipeline necesita.

    Args:
        config: Diccionario de configuración

    Raises:
        ConfigurationError: Si algún valor es inválido
    """
    train_ratio = config['data']['split']['train_ratio']
    if not 0 < train_ratio < 1:
        raise ConfigurationError(
            f"train_ratio debe estar en (0, 1), se obtuvo {train_ratio}"
        )

    cv_folds = config['training']['cv_folds']
    if not isinstance(cv_folds, int) or cv_folds < 2:
        raise ConfigurationError(f"cv_folds debe ser un entero >= 2, se obtuvo {cv_folds}")

    threshold = config['cleaning']['missing_threshold']
    if not 0 <= threshold <= 1:
        raise ConfigurationError(
            f"missing_threshold debe estar en [0, 1], se obtuvo {threshold}"
        )

    unknown = [m for m in config['training']['models'] if m not in SUPPORTED_MODELS]
    if unknown:
        raise ConfigurationError(
            f"Modelos no soportados: {unknown}. Opciones: {list(SUPPORTED_MODELS)}"
        )
    if not config['training']['models']:
        raise ConfigurationError("Debe configurarse al menos un modelo")


def load_config(config_path: Optional[str] = None) -> dict:
    """
    Carga configuración desde archivo YAML.

    Si el archivo no existe se usa la configuración por defecto.

    Args:
        config_path: Ruta al archivo de configuración

    Returns:
        Diccionario de configuración validado
    """
    config = get_default_config()

    if config_path is not None and Path(config_path).exists():
        logger.info("Cargando configuración desde %s", config_path)
        with open(config_path) as f:
            user_config = yaml.safe_load(f) or {}
        if not isinstance(user_config, dict):
            raise ConfigurationError(
                f"El fichero {config_path} no contiene un mapeo YAML"
            )
        config = _deep_merge(config, user_config)
    elif config_path is not None:
        logger.warning(
            "Archivo de configuración %s no encontrado. Usando configuración por defecto.",
            config_path
        )

    validate_config(config)
    return config
