"""
assetrev - versionado de assets por hash de contenido (cache busting)

Copia los assets compilados al directorio de build, añade un hash
corto al nombre de cada fichero y escribe rev-manifest.json con la
correspondencia original -> versionado.
"""

from .versioner import Versioner, VersionResult, VersionTask

__all__ = [
    'Versioner',
    'VersionResult',
    'VersionTask'
]
