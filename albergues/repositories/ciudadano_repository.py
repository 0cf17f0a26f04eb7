# ==============================================================================
# REPOSITORIO DE CIUDADANOS
# ==============================================================================
# Encapsula todo el acceso a ciudadanos.json
# Formato: {_id: {datos_ciudadano}}. La cédula es única.
# ==============================================================================

from typing import Any, Dict, List, Optional

from albergues.models import Ciudadano
from albergues.models.entities import now_iso
from albergues.repositories.base import EntityRepository


class CiudadanoRepository(EntityRepository):
    """
    Repositorio de ciudadanos registrados.

    Formato de datos en ciudadanos.json:
    {
        "65f0a1...": {
            "_id": "65f0a1...",
            "nombre": "Ana",
            "cedula": "0102030405",
            "domicilio": "65e9...",
            "medicamentos": ["65e1..."],
            ...
        }
    }
    """

    file_name = 'ciudadanos.json'
    entity_class = Ciudadano

    # Campos que nunca se modifican con una actualización parcial
    IMMUTABLE_FIELDS = frozenset(['_id', 'cedula', 'createdAt'])

    def get_by_cedula(self, cedula: str) -> Optional[Ciudadano]:
        return self.find_by('cedula', cedula)

    def cedula_exists(self, cedula: str) -> bool:
        return self.get_by_cedula(cedula) is not None

    def create_if_cedula_free(self, ciudadano: Ciudadano) -> bool:
        """
        Inserta el ciudadano solo si su cédula no está registrada.
        Verificación e inserción ocurren bajo el mismo lock.

        Returns:
            True si se insertó, False si la cédula ya existía
        """
        with self._file_lock:
            if self.cedula_exists(ciudadano.cedula):
                return False
            self.add(ciudadano)
            return True

    def find_by_albergue(self, albergue_id: str) -> List[Ciudadano]:
        return self.find_all('albergue', albergue_id)

    def update_fields(self, ciudadano_id: str, updates: Dict[str, Any]) -> Optional[Ciudadano]:
        """
        Actualización parcial de un ciudadano.

        Args:
            ciudadano_id: ID del ciudadano
            updates: Campos a mezclar (formato de to_dict)

        Returns:
            Ciudadano actualizado o None si no existe
        """
        with self._file_lock:
            data = dict(self.load())
            record = data.get(ciudadano_id)
            if record is None:
                return None
            record = dict(record)
            for key, value in updates.items():
                if key not in self.IMMUTABLE_FIELDS:
                    record[key] = value
            record['updatedAt'] = now_iso()
            # Si el registro no se puede reconstruir no se escribe
            ciudadano = self._to_entity(record)
            data[ciudadano_id] = record
            self.save_all(data)
        return ciudadano
