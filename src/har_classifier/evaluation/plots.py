"""

Sistema de ML para Reconocimiento de Actividad Humana (HAR)

Gráficos del informe: exploración del dataset, matrices de confusión,
comparación de modelos e importancia de características.

"""

from pathlib import Path
from typing import Union

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

PathLike = Union[str, Path]


def _save(fig, output_path: PathLike) -> Path:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(output_path, dpi=120, bbox_inches='tight')
    plt.close(fig)
    return output_path


def plot_class_distribution(df: pd.DataFrame, label_column: str,
                            output_path: PathLike) -> Path:
    """Gráfico de barras con el número de muestras por clase."""
    counts = df[label_column].value_counts().sort_index()

    fig, ax = plt.subplots(figsize=(7, 4))
    sns.barplot(x=counts.index.astype(str), y=counts.values, ax=ax, color='steelblue')
    for i, value in enumerate(counts.values):
        ax.text(i, value, f"{value}", ha='center', va='bottom', fontsize=9)
    ax.set_xlabel('Clase')
    ax.set_ylabel('Muestras')
    ax.set_title('Distribución de clases')

    return _save(fig, output_path)


def plot_missing_profile(df: pd.DataFrame, output_path: PathLike,
                         threshold: float = 0.95) -> Path:
    """Histograma de la proporción de valores faltantes por columna."""
    missing_share = df.isna().mean()

    fig, ax = plt.subplots(figsize=(7, 4))
    sns.histplot(missing_share.values, bins=20, ax=ax, color='indianred')
    ax.axvline(threshold, linestyle='--', color='black', label=f'umbral {threshold:.0%}')
    ax.set_xlabel('Proporción de valores faltantes')
    ax.set_ylabel('Columnas')
    ax.set_title('Perfil de valores faltantes por columna')
    ax.legend()

    return _save(fig, output_path)


def plot_confusion_matrix(cm: pd.DataFrame, title: str, output_path: PathLike,
                          normalize: bool = True) -> Path:
    """
    Mapa de calor de la matriz de confusión.

    Args:
        cm: Matriz de confusión etiquetada (filas = referencia)
        title: Título del gráfico
        output_path: Ruta del PNG
        normalize: Si True, colorea por proporción de cada fila
    """
    values = cm.to_numpy(dtype=float)
    if normalize:
        row_sums = values.sum(axis=1, keepdims=True)
        values = np.divide(values, row_sums, out=np.zeros_like(values), where=row_sums > 0)

    fig, ax = plt.subplots(figsize=(6, 5))
    sns.heatmap(
        pd.DataFrame(values, index=cm.index, columns=cm.columns),
        annot=cm.to_numpy(), fmt='d', cmap='Blues', cbar=normalize, ax=ax
    )
    ax.set_xlabel('Predicción')
    ax.set_ylabel('Referencia')
    ax.set_title(title)

    return _save(fig, output_path)


def plot_model_comparison(comparison_df: pd.DataFrame, output_path: PathLike) -> Path:
    """Accuracy de test por modelo con su intervalo de confianza al 95%."""
    df = comparison_df.sort_values('Accuracy')
    lower = df['Accuracy'] - df['CI Lower']
    upper = df['CI Upper'] - df['Accuracy']

    fig, ax = plt.subplots(figsize=(7, 3 + 0.4 * len(df)))
    ax.barh(df['Model'], df['Accuracy'], xerr=[lower, upper],
            color=sns.color_palette('husl', len(df)), capsize=4)
    for y, acc in enumerate(df['Accuracy']):
        ax.text(acc, y, f"  {acc:.4f}", va='center', fontsize=9)
    ax.set_xlim(0, 1.08)
    ax.set_xlabel('Accuracy (test)')
    ax.set_title('Comparación de modelos')

    return _save(fig, output_path)


def plot_feature_importance(importance: pd.Series, output_path: PathLike,
                            top_n: int = 20, title: str = 'Importancia de características') -> Path:
    """
    Barras horizontales con las ``top_n`` características más importantes.

    Args:
        importance: Serie indexada por nombre de característica
        output_path: Ruta del PNG
        top_n: Número de características a mostrar
        title: Título del gráfico
    """
    top = importance.sort_values(ascending=False).head(top_n)[::-1]

    fig, ax = plt.subplots(figsize=(7, 0.3 * len(top) + 1.5))
    ax.barh(top.index.astype(str), top.values, color='seagreen')
    ax.set_xlabel('Importancia')
    ax.set_title(title)

    return _save(fig, output_path)
