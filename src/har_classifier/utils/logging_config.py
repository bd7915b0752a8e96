"""
Configuración de logging

El informe de consola del pipeline se imprime directamente; este módulo
configura el logging de diagnóstico (descargas, avisos, reutilización de
ficheros) que emiten los módulos del paquete.
"""

import logging
import sys


def setup_logging(log_level: str = 'INFO'):
    """
    Configura el logger raíz.

    Args:
        log_level: Nivel de log (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"Nivel de log inválido: {log_level}")

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    ))
    root_logger.addHandler(console_handler)

    # Silenciar loggers ruidosos
    for noisy in ('urllib3', 'matplotlib', 'shap', 'PIL'):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug("Logging configurado: level=%s", log_level)
