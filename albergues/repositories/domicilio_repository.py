# ==============================================================================
# REPOSITORIO DE DOMICILIOS
# ==============================================================================
# Encapsula todo el acceso a domicilios.json
# ==============================================================================

from typing import Optional

from albergues.models import Domicilio
from albergues.repositories.base import EntityRepository


class DomicilioRepository(EntityRepository):
    """Repositorio de domicilios (datos de referencia, solo se consultan)."""

    file_name = 'domicilios.json'
    entity_class = Domicilio

    def find_by_nombre(self, nombre: str) -> Optional[Domicilio]:
        return self.find_by('nombre', nombre)
