"""Random Forest."""

from sklearn.ensemble import RandomForestClassifier

from .training import TrainingResult, train_with_cv


def get_rf_model(config: dict) -> RandomForestClassifier:
    """
    Retorna un Random Forest sin ajustar.

    ``max_features`` (número de variables candidatas por división) es el
    hiperparámetro que se busca en la rejilla; el paralelismo se deja a
    GridSearchCV.
    """
    params = {
        k: v for k, v in config['models']['random_forest'].items() if k != 'param_grid'
    }
    params.setdefault('n_jobs', 1)
    return RandomForestClassifier(random_state=config['project']['random_state'], **params)


def train_random_forest(X, y, config: dict, cv) -> TrainingResult:
    """Entrena el Random Forest con validación cruzada."""
    return train_with_cv(
        get_rf_model(config),
        config['models']['random_forest'].get('param_grid', {}),
        X, y, cv,
        name='Random Forest',
        n_jobs=config['training']['n_jobs']
    )
