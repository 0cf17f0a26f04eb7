# ==============================================================================
# CAPA DE SERVICIOS - Lógica de negocio
# ==============================================================================
# PRINCIPIOS:
# 1. Los servicios orquestan operaciones entre repositorios
# 2. Aplican reglas de negocio y validaciones
# 3. Las rutas solo llaman a servicios y traducen errores a HTTP
# 4. Los servicios NO conocen el tipo de almacenamiento
#
# ESTRUCTURA:
# ├── errors.py               → Excepciones del dominio
# ├── input_normalizer.py     → Normalización + esquema del registro
# ├── medication_resolver.py  → Enfermedades/medicamentos → catálogo
# ├── inventory_allocator.py  → Distribución de stock entre bodegas
# ├── citizen_service.py      → Registro y consultas de ciudadanos
# └── catalog_service.py      → Carga de datos de referencia
# ==============================================================================

from albergues.services.errors import (
    RegistroError,
    ValidationError,
    DuplicateIdentityError,
    ResidenceNotFoundError,
    UnknownMedicationError,
    CitizenNotFoundError,
    AllocationCapacityReached,
    UnexpectedError,
)
from albergues.services.input_normalizer import (
    ActualizacionCiudadano,
    InputNormalizer,
    RegistroCiudadano,
)
from albergues.services.medication_resolver import DiseaseMedicationResolver, MedicationResolver
from albergues.services.inventory_allocator import AllocationResult, InventoryAllocator
from albergues.services.citizen_service import (
    CitizenRegistrationService,
    CitizenService,
    RegistrationResult,
)
from albergues.services.catalog_service import CatalogService

__all__ = [
    'RegistroError',
    'ValidationError',
    'DuplicateIdentityError',
    'ResidenceNotFoundError',
    'UnknownMedicationError',
    'CitizenNotFoundError',
    'AllocationCapacityReached',
    'UnexpectedError',
    'InputNormalizer',
    'RegistroCiudadano',
    'ActualizacionCiudadano',
    'DiseaseMedicationResolver',
    'MedicationResolver',
    'AllocationResult',
    'InventoryAllocator',
    'CitizenRegistrationService',
    'CitizenService',
    'RegistrationResult',
    'CatalogService',
]
