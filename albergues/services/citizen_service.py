# ==============================================================================
# SERVICIO DE CIUDADANOS
# ==============================================================================
# Registro de ciudadanos (con distribución de medicamentos) y consultas.
#
# FLUJO DEL REGISTRO:
#   normalizar → validar → cédula duplicada → domicilio → enfermedades →
#   medicamentos → guardar ciudadano → distribuir stock → respuesta
#
# Todo lo anterior a "guardar ciudadano" no tiene efectos: si falla, no
# queda nada escrito. La distribución de stock es posterior y sus fallos
# no deshacen el registro.
# ==============================================================================

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from albergues.models import Ciudadano, Medicamento
from albergues.performance_logger import profile_function
from albergues.repositories.interfaces import (
    ICiudadanoRepository,
    IDomicilioRepository,
    IMedicamentoRepository,
)
from albergues.services.errors import (
    CitizenNotFoundError,
    DuplicateIdentityError,
    ResidenceNotFoundError,
)
from albergues.services.input_normalizer import InputNormalizer
from albergues.services.inventory_allocator import AllocationResult, InventoryAllocator
from albergues.services.medication_resolver import DiseaseMedicationResolver, MedicationResolver

logger = logging.getLogger('albergues.ciudadanos')


@dataclass
class RegistrationResult:
    """
    Resultado de un registro exitoso.

    Attributes:
        ciudadano: Ciudadano guardado
        medicamentos_enfermedades: Medicamentos derivados de las enfermedades
        asignaciones: Resultado de la distribución por medicamento
    """
    ciudadano: Ciudadano
    medicamentos_enfermedades: List[Medicamento] = field(default_factory=list)
    asignaciones: List[AllocationResult] = field(default_factory=list)


class CitizenRegistrationService:
    """
    Orquesta el caso de uso "registrar ciudadano".

    Los medicamentos derivados de las enfermedades se calculan siempre;
    solo se guardan y distribuyen si merge_disease_medications es True.
    """

    def __init__(
        self,
        ciudadano_repo: ICiudadanoRepository,
        domicilio_repo: IDomicilioRepository,
        disease_resolver: DiseaseMedicationResolver,
        medication_resolver: MedicationResolver,
        allocator: InventoryAllocator,
        merge_disease_medications: bool = False
    ):
        self.ciudadano_repo = ciudadano_repo
        self.domicilio_repo = domicilio_repo
        self.disease_resolver = disease_resolver
        self.medication_resolver = medication_resolver
        self.allocator = allocator
        self.merge_disease_medications = merge_disease_medications

    @staticmethod
    def _merge(declarados: List[Medicamento], derivados: List[Medicamento]) -> List[Medicamento]:
        """Unión sin duplicados: primero los declarados, luego los derivados."""
        vistos = set()
        resultado = []
        for medicamento in declarados + derivados:
            if medicamento.id not in vistos:
                vistos.add(medicamento.id)
                resultado.append(medicamento)
        return resultado

    @profile_function(name="Registrar ciudadano")
    def register(self, payload: Any) -> RegistrationResult:
        """
        Registra un ciudadano y distribuye sus medicamentos.

        Args:
            payload: Cuerpo crudo de la solicitud

        Returns:
            RegistrationResult con el ciudadano guardado

        Raises:
            ValidationError: payload inválido
            DuplicateIdentityError: cédula ya registrada
            ResidenceNotFoundError: domicilio inexistente
            UnknownMedicationError: algún medicamento no existe
        """
        registro = InputNormalizer.parse(payload)

        if self.ciudadano_repo.cedula_exists(registro.cedula):
            raise DuplicateIdentityError(registro.cedula)

        domicilio_id = registro.domicilio.lower()
        domicilio = self.domicilio_repo.get(domicilio_id)
        if domicilio is None:
            raise ResidenceNotFoundError(registro.domicilio)

        derivados = self.disease_resolver.resolve(registro.lista_enfermedades())
        medicamentos = self.medication_resolver.resolve(registro.medicamentos)
        if self.merge_disease_medications:
            medicamentos = self._merge(medicamentos, derivados)

        ciudadano = Ciudadano(
            nombre=registro.nombre,
            apellido=registro.apellido,
            edad=registro.edad_normalizada,
            cedula=registro.cedula,
            email=registro.email,
            telefono=registro.telefono,
            enfermedades=registro.lista_enfermedades(),
            domicilio=domicilio.id,
            medicamentos=[medicamento.id for medicamento in medicamentos],
            qr_url=registro.qr_url,
        )

        # Otro registro concurrente pudo tomar la cédula después del chequeo
        if not self.ciudadano_repo.create_if_cedula_free(ciudadano):
            raise DuplicateIdentityError(registro.cedula)

        logger.info("Ciudadano %s registrado (%s)", ciudadano.cedula, ciudadano.id)

        asignaciones = self.allocator.allocate_all(medicamentos)
        for asignacion in asignaciones:
            if not asignacion.changed_stock:
                logger.warning(
                    "Registro %s: %s sin cambio de stock (%s)",
                    ciudadano.cedula, asignacion.medicamento, asignacion.action
                )

        return RegistrationResult(ciudadano, derivados, asignaciones)


class CitizenService:
    """
    Consultas y mantenimiento de ciudadanos ya registrados.

    Las referencias se expanden en memoria con lecturas por lote,
    nunca dentro del repositorio.
    """

    def __init__(
        self,
        ciudadano_repo: ICiudadanoRepository,
        domicilio_repo: IDomicilioRepository,
        medicamento_repo: IMedicamentoRepository
    ):
        self.ciudadano_repo = ciudadano_repo
        self.domicilio_repo = domicilio_repo
        self.medicamento_repo = medicamento_repo

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def _nombres_medicamentos(self, ciudadanos: List[Ciudadano]) -> Dict[str, str]:
        ids = {med_id for c in ciudadanos for med_id in c.medicamentos}
        return {med_id: med.nombre for med_id, med in self.medicamento_repo.get_many(ids).items()}

    def list_by_shelter(self, albergue_id: str) -> List[Dict[str, Any]]:
        """
        Ciudadanos de un albergue con los medicamentos como nombres.
        Un ID de medicamento que ya no existe se muestra tal cual.
        """
        ciudadanos = self.ciudadano_repo.find_by_albergue(albergue_id)
        nombres = self._nombres_medicamentos(ciudadanos)

        resultado = []
        for ciudadano in ciudadanos:
            data = ciudadano.to_dict()
            data['medicamentos'] = [nombres.get(med_id, med_id) for med_id in ciudadano.medicamentos]
            resultado.append(data)
        return resultado

    def list_all(self) -> List[Dict[str, Any]]:
        """
        Todos los ciudadanos con medicamentos como nombres y el domicilio
        como {_id, nombre}. Referencias rotas se omiten (domicilio → None).
        """
        ciudadanos = self.ciudadano_repo.find_all()
        nombres = self._nombres_medicamentos(ciudadanos)
        domicilios = self.domicilio_repo.get_many({c.domicilio for c in ciudadanos})

        resultado = []
        for ciudadano in ciudadanos:
            data = ciudadano.to_dict()
            data['medicamentos'] = [nombres[med_id] for med_id in ciudadano.medicamentos if med_id in nombres]
            domicilio = domicilios.get(ciudadano.domicilio)
            data['domicilio'] = {'_id': domicilio.id, 'nombre': domicilio.nombre} if domicilio else None
            resultado.append(data)
        return resultado

    def count(self) -> int:
        return self.ciudadano_repo.count()

    def get(self, ciudadano_id: str) -> Ciudadano:
        ciudadano = self.ciudadano_repo.get(ciudadano_id)
        if ciudadano is None:
            raise CitizenNotFoundError(ciudadano_id)
        return ciudadano

    # =========================================================================
    # MANTENIMIENTO
    # =========================================================================

    def update(self, ciudadano_id: str, updates: Any) -> Ciudadano:
        """
        Actualización parcial. Los campos se validan antes de escribir nada;
        la cédula y las claves desconocidas se ignoran.

        Raises:
            ValidationError: si updates no es un objeto o tiene un campo inválido
            CitizenNotFoundError: si el ciudadano no existe
        """
        cambios = InputNormalizer.parse_update(updates)
        ciudadano = self.ciudadano_repo.update_fields(ciudadano_id, cambios)
        if ciudadano is None:
            raise CitizenNotFoundError(ciudadano_id)
        logger.info("Ciudadano %s actualizado: %s", ciudadano_id, sorted(cambios))
        return ciudadano

    def delete(self, ciudadano_id: str) -> Ciudadano:
        """
        Raises:
            CitizenNotFoundError: si el ciudadano no existe
        """
        removed = self.ciudadano_repo.delete(ciudadano_id)
        if removed is None:
            raise CitizenNotFoundError(ciudadano_id)
        logger.info("Ciudadano %s eliminado", ciudadano_id)
        return removed
