"""Módulo de descarga, carga y división de datos."""

from .download import download_file
from .loader import DataLoader
from .splitter import DataSplitter

__all__ = ['DataLoader', 'DataSplitter', 'download_file']
