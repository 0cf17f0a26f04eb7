# ==============================================================================
# CAPA DE MODELOS - Estructuras de datos del sistema
# ==============================================================================
# Entidades del dominio definidas con dataclasses.
# Independientes del mecanismo de persistencia (JSON ahora, otra BD después).
# ==============================================================================

from .entities import (
    CATEGORIA_MEDICAMENTOS,
    new_object_id,

    # Datos de referencia
    Domicilio,
    Enfermedad,
    Medicamento,

    # Inventario
    Bodega,
    Producto,

    # Ciudadanos
    Ciudadano,
)

__all__ = [
    'CATEGORIA_MEDICAMENTOS',
    'new_object_id',
    'Domicilio',
    'Enfermedad',
    'Medicamento',
    'Bodega',
    'Producto',
    'Ciudadano',
]
