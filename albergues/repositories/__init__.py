# ==============================================================================
# CAPA DE REPOSITORIOS - Acceso a datos
# ==============================================================================
# Esta capa encapsula todo el acceso a la persistencia (actualmente JSON).
# Cuando se migre a otra base de datos, solo hay que modificar esta capa.
#
# ESTRUCTURA:
# ├── interfaces.py             → Protocolos/Interfaces (contratos)
# ├── base.py                   → BaseRepository, EntityRepository (JSON)
# ├── ciudadano_repository.py   → ciudadanos.json
# ├── domicilio_repository.py   → domicilios.json
# ├── medicamento_repository.py → medicamentos.json, enfermedades.json
# └── inventory_repository.py   → bodegas.json, productos.json
# ==============================================================================

from albergues.repositories.interfaces import (
    IRepository,
    ICiudadanoRepository,
    IDomicilioRepository,
    IMedicamentoRepository,
    IEnfermedadRepository,
    IBodegaRepository,
    IProductoRepository,
)

from albergues.repositories.base import BaseRepository, EntityRepository
from albergues.repositories.ciudadano_repository import CiudadanoRepository
from albergues.repositories.domicilio_repository import DomicilioRepository
from albergues.repositories.medicamento_repository import MedicamentoRepository, EnfermedadRepository
from albergues.repositories.inventory_repository import BodegaRepository, ProductoRepository

__all__ = [
    # Interfaces
    'IRepository',
    'ICiudadanoRepository',
    'IDomicilioRepository',
    'IMedicamentoRepository',
    'IEnfermedadRepository',
    'IBodegaRepository',
    'IProductoRepository',

    # Clases base
    'BaseRepository',
    'EntityRepository',

    # Implementaciones JSON
    'CiudadanoRepository',
    'DomicilioRepository',
    'MedicamentoRepository',
    'EnfermedadRepository',
    'BodegaRepository',
    'ProductoRepository',
]
