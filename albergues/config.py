# ==============================================================================
# CONFIGURACIÓN
# ==============================================================================
# Valores leídos de variables de entorno con defaults de desarrollo.
# Settings agrupa todo para poder sobreescribirlo por app (tests, CLI).
#
# Variables:
#   ALBERGUES_DATA_DIR            → carpeta de los archivos JSON
#   ALBERGUES_SECRET_KEY          → secret key de Flask
#   STOCK_INICIAL_MIN / _MAX      → stock de un producto recién creado
#   CATEGORIA_MEDICAMENTOS        → categoría de bodega que recibe stock
#   ALLOCATION_LOCK_TIMEOUT       → segundos de espera por medicamento
#   MERGE_DISEASE_MEDICATIONS     → sumar medicamentos de las enfermedades
#   ENABLE_PROFILING              → logs de rendimiento en /logs/
# ==============================================================================

import os
from dataclasses import dataclass, field, replace

from albergues.models import CATEGORIA_MEDICAMENTOS as _CATEGORIA_DEFAULT

BASE = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

_TRUE_VALUES = ('1', 'true', 'yes', 'si', 'sí', 'on')


def env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


def env_float(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


# SECRET_KEY: En producción DEBE definirse via variable de entorno
_DEFAULT_SECRET = 'albergues_dev_secret_key_change_in_production'


@dataclass(frozen=True)
class Settings:
    """
    Configuración de la aplicación.

    Attributes:
        data_dir: Carpeta donde viven los JSON de cada colección
        secret_key: Secret key de Flask
        stock_inicial_min: stockMin de un producto nuevo
        stock_inicial_max: stockMax de un producto nuevo
        categoria_medicamentos: Categoría de bodega que participa en la distribución
        allocation_lock_timeout: Espera máxima (s) por el lock de un medicamento; <0 = sin límite
        merge_disease_medications: Si True, los medicamentos de las enfermedades
            se suman a los declarados
        enable_profiling: Activa performance_logger
    """
    data_dir: str = field(default_factory=lambda: os.environ.get(
        'ALBERGUES_DATA_DIR', os.path.join(BASE, 'data')))
    secret_key: str = field(default_factory=lambda: os.environ.get(
        'ALBERGUES_SECRET_KEY', _DEFAULT_SECRET))
    stock_inicial_min: int = field(default_factory=lambda: env_int('STOCK_INICIAL_MIN', 1))
    stock_inicial_max: int = field(default_factory=lambda: env_int('STOCK_INICIAL_MAX', 10))
    categoria_medicamentos: str = field(default_factory=lambda: os.environ.get(
        'CATEGORIA_MEDICAMENTOS', _CATEGORIA_DEFAULT))
    allocation_lock_timeout: float = field(default_factory=lambda: env_float(
        'ALLOCATION_LOCK_TIMEOUT', 10.0))
    merge_disease_medications: bool = field(default_factory=lambda: env_bool(
        'MERGE_DISEASE_MEDICATIONS', False))
    enable_profiling: bool = field(default_factory=lambda: env_bool('ENABLE_PROFILING', True))

    def override(self, **changes) -> 'Settings':
        """Copia con algunos valores cambiados."""
        return replace(self, **changes)

    @property
    def uses_default_secret(self) -> bool:
        return self.secret_key == _DEFAULT_SECRET


def load_settings(**overrides) -> Settings:
    """Lee la configuración del entorno aplicando overrides explícitos."""
    return Settings(**overrides)


# Servidor de desarrollo
DEBUG = env_bool('FLASK_DEBUG', False)
HOST = os.environ.get('FLASK_HOST', '0.0.0.0')
PORT = env_int('FLASK_PORT', 5000)
