# ==============================================================================
# RESOLUCIÓN DE ENFERMEDADES Y MEDICAMENTOS
# ==============================================================================
# Traduce texto libre (nombres) a referencias del catálogo.
#   - Enfermedades desconocidas se ignoran.
#   - Un medicamento desconocido aborta TODO el registro.
# ==============================================================================

import logging
from typing import Iterable, List, Union

from albergues.models import Medicamento
from albergues.repositories.interfaces import IEnfermedadRepository, IMedicamentoRepository
from albergues.services.errors import UnknownMedicationError

logger = logging.getLogger('albergues.resolver')


class DiseaseMedicationResolver:
    """
    Resuelve enfermedades a la lista de medicamentos que las tratan.
    """

    def __init__(
        self,
        enfermedad_repo: IEnfermedadRepository,
        medicamento_repo: IMedicamentoRepository
    ):
        self.enfermedad_repo = enfermedad_repo
        self.medicamento_repo = medicamento_repo

    @staticmethod
    def split_names(enfermedades: Union[str, Iterable[str], None]) -> List[str]:
        """
        Separa 'Diabetes, Hipertensión' en ['Diabetes', 'Hipertensión'].
        Acepta también una lista ya separada.
        """
        if not enfermedades:
            return []
        if isinstance(enfermedades, str):
            enfermedades = enfermedades.split(',')
        return [nombre.strip() for nombre in enfermedades if nombre and nombre.strip()]

    def resolve(self, enfermedades: Union[str, Iterable[str], None]) -> List[Medicamento]:
        """
        Concatena los medicamentos de cada enfermedad reconocida.

        No elimina duplicados: si dos enfermedades comparten un
        medicamento, aparece dos veces.

        Args:
            enfermedades: Nombres separados por coma (o lista)

        Returns:
            Lista de medicamentos en el orden de las enfermedades
        """
        medicamentos: List[Medicamento] = []
        for nombre in self.split_names(enfermedades):
            enfermedad = self.enfermedad_repo.find_by_nombre(nombre)
            if enfermedad is None:
                logger.debug("Enfermedad '%s' no registrada, se ignora", nombre)
                continue
            encontrados = self.medicamento_repo.get_many(enfermedad.medicamentos)
            medicamentos.extend(
                encontrados[med_id] for med_id in enfermedad.medicamentos if med_id in encontrados
            )
        return medicamentos


class MedicationResolver:
    """
    Resuelve nombres de medicamentos a entidades del catálogo (todo o nada).
    """

    def __init__(self, medicamento_repo: IMedicamentoRepository):
        self.medicamento_repo = medicamento_repo

    def resolve(self, nombres: Iterable[str]) -> List[Medicamento]:
        """
        Busca cada nombre por coincidencia exacta.

        Returns:
            Medicamentos en el mismo orden que los nombres

        Raises:
            UnknownMedicationError: con el primer nombre que no existe
        """
        resueltos = []
        for nombre in nombres:
            medicamento = self.medicamento_repo.find_by_nombre(nombre)
            if medicamento is None:
                raise UnknownMedicationError(nombre)
            resueltos.append(medicamento)
        return resueltos

    def resolve_ids(self, nombres: Iterable[str]) -> List[str]:
        """Igual que resolve() pero retorna solo los IDs."""
        return [medicamento.id for medicamento in self.resolve(nombres)]
