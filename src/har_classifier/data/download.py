"""

Sistema de ML para Reconocimiento de Actividad Humana (HAR)

Módulo de descarga de los ficheros CSV del dataset.

"""

import logging
from pathlib import Path
from typing import Union

import requests
from tqdm import tqdm

from ..exceptions import DataDownloadError

logger = logging.getLogger(__name__)


def download_file(url: str, destination: Union[str, Path], timeout: int = 60,
                  chunk_size: int = 1024 * 64, force: bool = False) -> Path:
    """
    Descarga un fichero por HTTP(S) a disco.

    El contenido se escribe primero en un fichero temporal que se renombra
    al terminar, de forma que una descarga interrumpida nunca deja un CSV
    truncado en la ruta final.

    Args:
        url: URL del recurso
        destination: Ruta de destino
        timeout: Timeout de la petición en segundos
        chunk_size: Tamaño de bloque para la descarga en streaming
        force: Si True, descarga aunque el fichero ya exista

    Returns:
        Ruta del fichero descargado

    Raises:
        DataDownloadError: Si la petición falla
    """
    destination = Path(destination)

    if destination.exists() and not force:
        logger.info("Reutilizando fichero existente: %s", destination)
        return destination

    destination.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = destination.with_name(destination.name + '.part')

    logger.info("Descargando %s -> %s", url, destination)

    try:
        with requests.get(url, stream=True, timeout=timeout) as response:
            response.raise_for_status()
            total = int(response.headers.get('content-length', 0)) or None

            with open(tmp_path, 'wb') as f, tqdm(
                total=total, unit='B', unit_scale=True,
                desc=destination.name, leave=False
            ) as progress:
                for chunk in response.iter_content(chunk_size=chunk_size):
                    if chunk:
                        f.write(chunk)
                        progress.update(len(chunk))
    except requests.RequestException as e:
        if tmp_path.exists():
            tmp_path.unlink()
        raise DataDownloadError(f"Error descargando {url}: {e}") from e

    tmp_path.replace(destination)
    logger.info("Descarga completada: %s (%d bytes)", destination, destination.stat().st_size)

    return destination
