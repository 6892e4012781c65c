import os
from dataclasses import dataclass
from typing import Optional

CORRUPT_POLICIES = ("fail", "ignore")

@dataclass
class Settings:
    """Configuración de assetrev (se lee de variables de entorno)"""
    public_root: str = "public"
    build_dir: Optional[str] = None
    hash_length: int = 10
    manifest_name: str = "rev-manifest.json"
    on_corrupt_manifest: str = "fail"  # 'fail' | 'ignore'
    watch_debounce: float = 2.0

    def resolve_build_dir(self, build_dir:Optional[str]=None)->str:
        if build_dir:
            return build_dir
        if self.build_dir:
            return self.build_dir
        return os.path.join(self.public_root, "build")

def load_settings(**overrides)->Settings:
    policy = os.getenv("ON_CORRUPT_MANIFEST", "fail").strip().lower()
    if policy not in CORRUPT_POLICIES:
        raise ValueError(f"ON_CORRUPT_MANIFEST inválido: {policy} (fail|ignore)")
    hash_length = int(os.getenv("HASH_LENGTH", "10"))
    if not 4 <= hash_length <= 32:
        raise ValueError(f"HASH_LENGTH fuera de rango [4, 32]: {hash_length}")
    settings = Settings(
        public_root=os.getenv("PUBLIC_ROOT", "public"),
        build_dir=(os.getenv("BUILD_DIR") or None),
        hash_length=hash_length,
        manifest_name=os.getenv("MANIFEST_NAME", "rev-manifest.json"),
        on_corrupt_manifest=policy,
        watch_debounce=float(os.getenv("WATCH_DEBOUNCE_SECS", "2.0")),
    )
    for k, v in overrides.items():
        if v is not None:
            setattr(settings, k, v)
    return settings
