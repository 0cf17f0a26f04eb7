# ==============================================================================
# SERVICIO DE CATÁLOGO - Carga de datos de referencia
# ==============================================================================
# Domicilios, medicamentos, enfermedades y bodegas se cargan desde un JSON:
#
# {
#   "domicilios":   [{"nombre": "...", "cordenadas_x": 1.0, "cordenadas_y": 2.0}],
#   "medicamentos": [{"nombre": "Insulina", "descripcion": "...", "fechaVencimiento": "..."}],
#   "enfermedades": [{"nombre": "Diabetes", "medicamentos": ["Insulina"]}],
#   "bodegas":      [{"nombre": "Bodega Norte", "categoria": "Medicamentos"}]
# }
#
# Los registros cuyo nombre ya existe se omiten (la carga es repetible).
# En enfermedades, los medicamentos se indican por NOMBRE.
# ==============================================================================

import logging
from typing import Any, Dict, List

from albergues.models import Bodega, Domicilio, Enfermedad, Medicamento
from albergues.repositories import (
    BodegaRepository,
    DomicilioRepository,
    EnfermedadRepository,
    MedicamentoRepository,
)
from albergues.services.errors import ValidationError
from albergues.services.medication_resolver import MedicationResolver

logger = logging.getLogger('albergues.catalogo')


class CatalogService:
    """Carga idempotente de datos de referencia."""

    SECTIONS = ('domicilios', 'medicamentos', 'enfermedades', 'bodegas')

    def __init__(
        self,
        domicilio_repo: DomicilioRepository,
        medicamento_repo: MedicamentoRepository,
        enfermedad_repo: EnfermedadRepository,
        bodega_repo: BodegaRepository
    ):
        self.domicilio_repo = domicilio_repo
        self.medicamento_repo = medicamento_repo
        self.enfermedad_repo = enfermedad_repo
        self.bodega_repo = bodega_repo
        self.medication_resolver = MedicationResolver(medicamento_repo)

    @staticmethod
    def _records(data: Dict[str, Any], section: str) -> List[Dict[str, Any]]:
        records = data.get(section) or []
        if not isinstance(records, list):
            raise ValidationError(f'"{section}" debe ser una lista', field=section)
        for record in records:
            if not isinstance(record, dict) or not record.get('nombre'):
                raise ValidationError(f'"{section}": cada registro necesita "nombre"', field=section)
        return records

    def load_catalog(self, data: Any) -> Dict[str, int]:
        """
        Carga un documento de catálogo.

        Returns:
            Cantidad de registros creados por sección

        Raises:
            ValidationError: estructura inválida
            UnknownMedicationError: una enfermedad menciona un medicamento inexistente
        """
        if not isinstance(data, dict):
            raise ValidationError('El catálogo debe ser un objeto JSON')

        secciones = {section: self._records(data, section) for section in self.SECTIONS}
        creados = dict.fromkeys(self.SECTIONS, 0)

        for record in secciones['domicilios']:
            if self.domicilio_repo.find_by_nombre(record['nombre']) is None:
                self.domicilio_repo.add(Domicilio(
                    nombre=record['nombre'],
                    cordenadas_x=float(record.get('cordenadas_x', 0)),
                    cordenadas_y=float(record.get('cordenadas_y', 0)),
                ))
                creados['domicilios'] += 1

        for record in secciones['medicamentos']:
            if self.medicamento_repo.find_by_nombre(record['nombre']) is None:
                self.medicamento_repo.add(Medicamento(
                    nombre=record['nombre'],
                    descripcion=record.get('descripcion', ''),
                    fecha_vencimiento=record.get('fechaVencimiento'),
                ))
                creados['medicamentos'] += 1

        for record in secciones['enfermedades']:
            if self.enfermedad_repo.find_by_nombre(record['nombre']) is None:
                medicamentos = self.medication_resolver.resolve_ids(record.get('medicamentos') or [])
                self.enfermedad_repo.add(Enfermedad(nombre=record['nombre'], medicamentos=medicamentos))
                creados['enfermedades'] += 1

        for record in secciones['bodegas']:
            if self.bodega_repo.find_by_nombre(record['nombre']) is None:
                self.bodega_repo.add(Bodega(
                    nombre=record['nombre'],
                    categoria=record.get('categoria', ''),
                ))
                creados['bodegas'] += 1

        logger.info("Catálogo cargado: %s", creados)
        return creados
