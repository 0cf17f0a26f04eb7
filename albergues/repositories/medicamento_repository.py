# ==============================================================================
# REPOSITORIOS DEL CATÁLOGO MÉDICO
# ==============================================================================
# Encapsula el acceso a medicamentos.json y enfermedades.json
# Ambos se buscan por nombre exacto.
# ==============================================================================

from typing import Optional

from albergues.models import Enfermedad, Medicamento
from albergues.repositories.base import EntityRepository


class MedicamentoRepository(EntityRepository):
    """
    Repositorio de medicamentos.

    Formato de datos en medicamentos.json:
    {
        "65e1...": {
            "_id": "65e1...",
            "nombre": "Insulina",
            "descripcion": "...",
            "fechaVencimiento": "2026-01-31"
        }
    }
    """

    file_name = 'medicamentos.json'
    entity_class = Medicamento

    def find_by_nombre(self, nombre: str) -> Optional[Medicamento]:
        return self.find_by('nombre', nombre)


class EnfermedadRepository(EntityRepository):
    """Repositorio de enfermedades con sus medicamentos asociados (IDs)."""

    file_name = 'enfermedades.json'
    entity_class = Enfermedad

    def find_by_nombre(self, nombre: str) -> Optional[Enfermedad]:
        return self.find_by('nombre', nombre)
