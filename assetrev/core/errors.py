class AssetRevError(Exception):
    """Base de todos los errores de assetrev."""

class EmptySourcesError(AssetRevError, ValueError):
    pass

class SourceMissingError(AssetRevError, FileNotFoundError):
    pass

class PathMappingError(AssetRevError, ValueError):
    """La ruta no cuelga de la raíz esperada."""

class ManifestParseError(AssetRevError, ValueError):
    def __init__(self, path:str, reason:str):
        super().__init__(f"rev-manifest inválido en {path}: {reason}")
        self.path = path
        self.reason = reason
