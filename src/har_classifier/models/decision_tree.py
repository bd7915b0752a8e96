"""Árbol de decisión (CART)."""

from sklearn.tree import DecisionTreeClassifier

from .training import TrainingResult, train_with_cv


def get_dt_model(config: dict) -> DecisionTreeClassifier:
    """Retorna un árbol de decisión sin ajustar."""
    params = {
        k: v for k, v in config['models']['decision_tree'].items() if k != 'param_grid'
    }
    return DecisionTreeClassifier(random_state=config['project']['random_state'], **params)


def train_decision_tree(X, y, config: dict, cv) -> TrainingResult:
    """
    Entrena el árbol de decisión con validación cruzada.

    Args:
        X: Características de entrenamiento
        y: Etiquetas codificadas
        config: Diccionario de configuración
        cv: Objeto de cross-validation

    Returns:
        TrainingResult del mejor árbol
    """
    return train_with_cv(
        get_dt_model(config),
        config['models']['decision_tree'].get('param_grid', {}),
        X, y, cv,
        name='Decision Tree',
        n_jobs=config['training']['n_jobs']
    )
