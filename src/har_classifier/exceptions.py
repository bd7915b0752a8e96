"""
Excepciones del sistema de clasificación HAR.
"""


class HARError(Exception):
    """Excepción base del proyecto."""
    pass


class ConfigurationError(HARError):
    """Error en la configuración del pipeline."""
    pass


class DataDownloadError(HARError):
    """Error al descargar un fichero del dataset."""
    pass


class DataValidationError(HARError):
    """Los datos cargados no cumplen el esquema esperado."""
    pass
