# ==============================================================================
# ENTIDADES DEL DOMINIO - Definiciones de dataclasses
# ==============================================================================
# Cada entidad representa un concepto del negocio.
# Diseñadas para ser independientes del mecanismo de persistencia.
# Las claves de to_dict() son las que se guardan en JSON y viajan por la API.
# ==============================================================================

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


# Categoría de bodega que participa en la distribución de medicamentos
CATEGORIA_MEDICAMENTOS = 'Medicamentos'


def new_object_id() -> str:
    """Genera un identificador hexadecimal de 24 caracteres."""
    return uuid.uuid4().hex[:24]


def now_iso() -> str:
    return datetime.now().strftime('%Y-%m-%dT%H:%M:%S')


# ==============================================================================
# DATOS DE REFERENCIA
# ==============================================================================

@dataclass
class Domicilio:
    """
    Domicilio geocodificado al que se asigna un ciudadano.

    Attributes:
        nombre: Nombre o dirección del domicilio
        cordenadas_x: Coordenada X
        cordenadas_y: Coordenada Y
    """
    nombre: str
    cordenadas_x: float = 0.0
    cordenadas_y: float = 0.0
    id: str = field(default_factory=new_object_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            '_id': self.id,
            'nombre': self.nombre,
            'cordenadas_x': self.cordenadas_x,
            'cordenadas_y': self.cordenadas_y,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Domicilio':
        return cls(
            id=data.get('_id') or new_object_id(),
            nombre=data.get('nombre', ''),
            cordenadas_x=data.get('cordenadas_x', 0.0),
            cordenadas_y=data.get('cordenadas_y', 0.0),
        )


@dataclass
class Medicamento:
    """
    Medicamento del catálogo. El nombre es la clave de unión con el
    inventario de las bodegas.
    """
    nombre: str
    descripcion: str = ''
    fecha_vencimiento: Optional[str] = None
    id: str = field(default_factory=new_object_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            '_id': self.id,
            'nombre': self.nombre,
            'descripcion': self.descripcion,
            'fechaVencimiento': self.fecha_vencimiento,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Medicamento':
        return cls(
            id=data.get('_id') or new_object_id(),
            nombre=data.get('nombre', ''),
            descripcion=data.get('descripcion', ''),
            fecha_vencimiento=data.get('fechaVencimiento'),
        )


@dataclass
class Enfermedad:
    """
    Enfermedad del catálogo con sus medicamentos asociados.

    Attributes:
        nombre: Nombre exacto de la enfermedad
        medicamentos: IDs de los medicamentos que la tratan
    """
    nombre: str
    medicamentos: List[str] = field(default_factory=list)
    id: str = field(default_factory=new_object_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            '_id': self.id,
            'nombre': self.nombre,
            'medicamentos': list(self.medicamentos),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Enfermedad':
        return cls(
            id=data.get('_id') or new_object_id(),
            nombre=data.get('nombre', ''),
            medicamentos=list(data.get('medicamentos', [])),
        )


# ==============================================================================
# ENTIDADES DE INVENTARIO
# ==============================================================================

@dataclass
class Producto:
    """
    Línea de stock de una bodega para un medicamento.

    Es una copia desnormalizada: el nombre NO es una referencia al
    medicamento sino su texto.

    Attributes:
        nombre: Nombre del medicamento
        stock_min: Stock actual (piso)
        stock_max: Capacidad (techo)
        bodega: ID de la bodega dueña
        descripcion: Copiada del medicamento
        fecha_vencimiento: Copiada del medicamento
    """
    nombre: str
    bodega: str
    stock_min: int = 1
    stock_max: int = 10
    descripcion: str = ''
    fecha_vencimiento: Optional[str] = None
    id: str = field(default_factory=new_object_id)

    @property
    def has_capacity(self) -> bool:
        """True si el stock todavía puede crecer."""
        return self.stock_min < self.stock_max

    def to_dict(self) -> Dict[str, Any]:
        return {
            '_id': self.id,
            'nombre': self.nombre,
            'stockMin': self.stock_min,
            'stockMax': self.stock_max,
            'descripcion': self.descripcion,
            'fechaVencimiento': self.fecha_vencimiento,
            'bodega': self.bodega,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Producto':
        return cls(
            id=data.get('_id') or new_object_id(),
            nombre=data.get('nombre', ''),
            bodega=data.get('bodega', ''),
            stock_min=int(data.get('stockMin', 0)),
            stock_max=int(data.get('stockMax', 0)),
            descripcion=data.get('descripcion', ''),
            fecha_vencimiento=data.get('fechaVencimiento'),
        )


@dataclass
class Bodega:
    """
    Bodega de insumos. Solo las de categoría 'Medicamentos' reciben
    stock durante el registro de ciudadanos.
    """
    nombre: str
    categoria: str = CATEGORIA_MEDICAMENTOS
    productos: List[str] = field(default_factory=list)
    id: str = field(default_factory=new_object_id)

    def has_producto(self, producto_id: str) -> bool:
        return producto_id in self.productos

    def to_dict(self) -> Dict[str, Any]:
        return {
            '_id': self.id,
            'nombre': self.nombre,
            'categoria': self.categoria,
            'productos': list(self.productos),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Bodega':
        return cls(
            id=data.get('_id') or new_object_id(),
            nombre=data.get('nombre', ''),
            categoria=data.get('categoria', ''),
            productos=list(data.get('productos', [])),
        )


# ==============================================================================
# CIUDADANOS
# ==============================================================================

@dataclass
class Ciudadano:
    """
    Persona desplazada registrada en un albergue.

    Attributes:
        cedula: Identificador nacional (único e inmutable)
        enfermedades: Nombres de enfermedades tal como se declararon
        domicilio: ID del domicilio asignado
        medicamentos: IDs de medicamentos
        qr_url: Referencia al documento/QR de registro
        albergue: ID del albergue (opcional)
    """
    nombre: str
    apellido: str
    edad: float
    cedula: str
    email: str
    telefono: str
    domicilio: str
    qr_url: str
    enfermedades: List[str] = field(default_factory=list)
    medicamentos: List[str] = field(default_factory=list)
    albergue: Optional[str] = None
    id: str = field(default_factory=new_object_id)
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)

    def to_dict(self) -> Dict[str, Any]:
        return {
            '_id': self.id,
            'nombre': self.nombre,
            'apellido': self.apellido,
            'edad': self.edad,
            'cedula': self.cedula,
            'email': self.email,
            'telefono': self.telefono,
            'enfermedades': list(self.enfermedades),
            'domicilio': self.domicilio,
            'medicamentos': list(self.medicamentos),
            'qrURL': self.qr_url,
            'albergue': self.albergue,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Ciudadano':
        return cls(
            id=data.get('_id') or new_object_id(),
            nombre=data.get('nombre', ''),
            apellido=data.get('apellido', ''),
            edad=data.get('edad', 0),
            cedula=data.get('cedula', ''),
            email=data.get('email', ''),
            telefono=data.get('telefono', ''),
            enfermedades=list(data.get('enfermedades', [])),
            domicilio=data.get('domicilio', ''),
            medicamentos=list(data.get('medicamentos', [])),
            qr_url=data.get('qrURL', ''),
            albergue=data.get('albergue'),
            created_at=data.get('createdAt') or now_iso(),
            updated_at=data.get('updatedAt') or now_iso(),
        )
