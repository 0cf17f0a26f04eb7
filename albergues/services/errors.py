# ==============================================================================
# ERRORES DEL DOMINIO
# ==============================================================================
# Las rutas traducen estas excepciones a códigos HTTP:
#   400 → ValidationError, DuplicateIdentityError, ResidenceNotFoundError,
#         UnknownMedicationError
#   404 → CitizenNotFoundError
#   500 → cualquier otra (envuelta en UnexpectedError)
# AllocationCapacityReached nunca sale del asignador: solo se registra en log.
# ==============================================================================

from typing import Optional


class RegistroError(Exception):
    """Base de todas las excepciones del registro de ciudadanos."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RegistroError):
    """Campo ausente o con formato inválido. Lleva la primera regla violada."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class DuplicateIdentityError(RegistroError):
    """Ya existe un ciudadano con la misma cédula."""

    status_code = 400

    def __init__(self, cedula: str):
        super().__init__('La cédula ya está registrada')
        self.cedula = cedula


class ResidenceNotFoundError(RegistroError):
    """El domicilio referenciado no existe."""

    status_code = 400

    def __init__(self, domicilio_id: str):
        super().__init__('Domicilio no encontrado')
        self.domicilio_id = domicilio_id


class UnknownMedicationError(RegistroError):
    """Un nombre de medicamento no existe en el catálogo."""

    status_code = 400

    def __init__(self, nombre: str):
        super().__init__(f'Medicamento {nombre} no encontrado')
        self.nombre = nombre


class CitizenNotFoundError(RegistroError):
    """El ciudadano a actualizar o eliminar no existe."""

    status_code = 404

    def __init__(self, ciudadano_id: str):
        super().__init__('Ciudadano no encontrado')
        self.ciudadano_id = ciudadano_id


class AllocationCapacityReached(RegistroError):
    """El producto elegido ya alcanzó su stock máximo (no fatal)."""

    def __init__(self, medicamento: str, bodega_id: str):
        super().__init__(
            f'No se puede aumentar el stock de {medicamento} en la bodega '
            f'{bodega_id}. Ya está en su máximo.'
        )
        self.medicamento = medicamento
        self.bodega_id = bodega_id


class UnexpectedError(RegistroError):
    """Error no previsto; conserva la causa para diagnóstico."""

    def __init__(self, cause: Exception):
        super().__init__(str(cause))
        self.cause = cause
