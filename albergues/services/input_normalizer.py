# ==============================================================================
# NORMALIZACIÓN Y VALIDACIÓN DE ENTRADA
# ==============================================================================
# Paso 1: normalizar (medicamentos escalar → lista de un elemento).
# Paso 2: validar con el esquema fijo del registro (o de la actualización).
# Después de este módulo nadie vuelve a preguntar "¿es string o lista?".
# ==============================================================================

import re
from typing import Annotated, Any, Dict, List, Optional, Union

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

from albergues.services.errors import ValidationError


OBJECT_ID_PATTERN = r'^[0-9a-fA-F]{24}$'
_EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[A-Za-z0-9-]{2,}$')

NonEmptyStr = Annotated[str, Field(min_length=1)]
ObjectIdStr = Annotated[str, Field(pattern=OBJECT_ID_PATTERN)]


def _rechazar_booleano(value):
    if isinstance(value, bool):
        raise ValueError('debe ser un número')
    return value


def _validar_email(value):
    if value is not None and not _EMAIL_RE.match(value):
        raise ValueError('debe ser un email válido')
    return value


def _normalizar_edad(edad):
    """La edad como int cuando no tiene decimales."""
    return int(edad) if float(edad).is_integer() else edad


class RegistroCiudadano(BaseModel):
    """
    Esquema del cuerpo de POST /ciudadanos.

    Las claves desconocidas se rechazan. Todas las cadenas deben ser
    cadenas (no se convierten números a texto).
    """

    model_config = ConfigDict(extra='forbid', populate_by_name=True)

    nombre: str = Field(min_length=2, max_length=100)
    apellido: str = Field(min_length=2, max_length=100)
    edad: float = Field(allow_inf_nan=False)
    cedula: str = Field(min_length=10, max_length=10)
    email: str = Field(min_length=4, max_length=100)
    telefono: str = Field(min_length=10, max_length=10)
    enfermedades: Optional[NonEmptyStr] = None
    medicamentos: List[NonEmptyStr] = Field(default_factory=list)
    qr_url: NonEmptyStr = Field(alias='qrURL')
    domicilio: str = Field(pattern=OBJECT_ID_PATTERN)

    _edad_no_booleana = field_validator('edad', mode='before')(_rechazar_booleano)
    _email_valido = field_validator('email')(_validar_email)

    @property
    def edad_normalizada(self):
        return _normalizar_edad(self.edad)

    def lista_enfermedades(self) -> List[str]:
        """Nombres de enfermedades separados por coma, sin espacios ni vacíos."""
        if not self.enfermedades:
            return []
        return [nombre.strip() for nombre in self.enfermedades.split(',') if nombre.strip()]


class ActualizacionCiudadano(BaseModel):
    """
    Esquema del cuerpo de PUT /ciudadanos/<id> (actualización parcial).

    Todos los campos son opcionales. Las claves que no están aquí (incluida
    la cédula) se ignoran. Los campos presentes no aceptan null, salvo
    albergue.
    """

    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    nombre: str = Field(default=None, min_length=2, max_length=100)
    apellido: str = Field(default=None, min_length=2, max_length=100)
    edad: float = Field(default=None, allow_inf_nan=False)
    email: str = Field(default=None, min_length=4, max_length=100)
    telefono: str = Field(default=None, min_length=10, max_length=10)
    enfermedades: Union[str, List[NonEmptyStr]] = None
    medicamentos: List[ObjectIdStr] = None
    qr_url: NonEmptyStr = Field(default=None, alias='qrURL')
    domicilio: ObjectIdStr = None
    albergue: Optional[str] = None

    _edad_no_booleana = field_validator('edad', mode='before')(_rechazar_booleano)
    _email_valido = field_validator('email')(_validar_email)

    @field_validator('enfermedades')
    @classmethod
    def _lista_enfermedades(cls, value):
        if isinstance(value, str):
            value = value.split(',')
        return [nombre.strip() for nombre in value if nombre.strip()]

    @field_validator('domicilio')
    @classmethod
    def _domicilio_minusculas(cls, value: str) -> str:
        return value.lower()

    @field_validator('medicamentos')
    @classmethod
    def _ids_minusculas(cls, value: List[str]) -> List[str]:
        return [med_id.lower() for med_id in value]

    def cambios(self) -> Dict[str, Any]:
        """Solo los campos enviados, con las claves del almacenamiento."""
        data = self.model_dump(by_alias=True, exclude_unset=True)
        if 'edad' in data:
            data['edad'] = _normalizar_edad(data['edad'])
        return data


class InputNormalizer:
    """
    Convierte el payload crudo del registro en un RegistroCiudadano.

    Uso:
        registro = InputNormalizer.parse(request.get_json())
    """

    MEDICATION_FIELD = 'medicamentos'

    @classmethod
    def normalize(cls, payload: Any) -> Dict[str, Any]:
        """
        Normaliza el payload sin validarlo.

        - medicamentos escalar (str) → [valor]
        - medicamentos ausente o null → []
        - cualquier otro valor se deja para que lo rechace la validación

        Returns:
            Copia del payload normalizado

        Raises:
            ValidationError: si el payload no es un objeto
        """
        if not isinstance(payload, dict):
            raise ValidationError('El cuerpo de la solicitud debe ser un objeto JSON')

        data = dict(payload)
        medicamentos = data.get(cls.MEDICATION_FIELD)
        if medicamentos is None:
            data[cls.MEDICATION_FIELD] = []
        elif isinstance(medicamentos, str):
            data[cls.MEDICATION_FIELD] = [medicamentos]
        elif isinstance(medicamentos, tuple):
            data[cls.MEDICATION_FIELD] = list(medicamentos)
        return data

    @classmethod
    def validate(cls, data: Dict[str, Any]) -> RegistroCiudadano:
        """
        Valida el payload ya normalizado.

        Raises:
            ValidationError: con la primera regla violada
        """
        try:
            return RegistroCiudadano.model_validate(data)
        except pydantic.ValidationError as exc:
            raise cls._first_error(exc) from exc

    @classmethod
    def parse(cls, payload: Any) -> RegistroCiudadano:
        """Normaliza y valida en un solo paso."""
        return cls.validate(cls.normalize(payload))

    @classmethod
    def parse_update(cls, payload: Any) -> Dict[str, Any]:
        """
        Valida una actualización parcial.

        Returns:
            Campos a guardar (claves de almacenamiento, sin los ignorados)

        Raises:
            ValidationError: si el payload no es un objeto o algún campo es inválido
        """
        if not isinstance(payload, dict):
            raise ValidationError('El cuerpo de la solicitud debe ser un objeto JSON')
        try:
            return ActualizacionCiudadano.model_validate(payload).cambios()
        except pydantic.ValidationError as exc:
            raise cls._first_error(exc) from exc

    @staticmethod
    def _first_error(exc: 'pydantic.ValidationError') -> ValidationError:
        error = exc.errors()[0]
        loc = error.get('loc') or ()
        campo = '.'.join(str(part) for part in loc) if loc else None
        mensaje = error.get('msg', 'valor inválido')
        if mensaje.startswith('Value error, '):
            mensaje = mensaje[len('Value error, '):]
        texto = f'"{campo}": {mensaje}' if campo else mensaje
        return ValidationError(texto, field=str(loc[0]) if loc else None)
