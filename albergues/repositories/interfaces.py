# ==============================================================================
# INTERFACES DE REPOSITORIOS
# ==============================================================================
#
# Contratos (protocolos) que los repositorios deben cumplir. Permiten:
#
# 1. INDEPENDENCIA DE ALMACENAMIENTO
#    - Los servicios dependen de interfaces, NO de implementaciones concretas
#    - Cambiar JSON → otra base de datos solo requiere nueva implementación
#
# 2. TESTING
#    - Fácil crear dobles que implementen estas interfaces
#
# Para otra base de datos, `increment_stock_if_below_max` debe ser un
# UPDATE condicional (WHERE stockMin < stockMax), no una lectura + escritura.
# ==============================================================================

from typing import Any, Dict, Iterable, List, Optional, Protocol, runtime_checkable

from albergues.models import Bodega, Ciudadano, Domicilio, Enfermedad, Medicamento, Producto


@runtime_checkable
class IRepository(Protocol):
    """Operaciones mínimas que cualquier repositorio debe soportar."""

    def reload(self) -> None:
        """Recarga datos desde el almacenamiento."""
        ...

    def close(self) -> None:
        """Libera recursos al apagar."""
        ...


@runtime_checkable
class ICiudadanoRepository(IRepository, Protocol):

    def get(self, record_id: str) -> Optional[Ciudadano]:
        ...

    def get_by_cedula(self, cedula: str) -> Optional[Ciudadano]:
        ...

    def cedula_exists(self, cedula: str) -> bool:
        ...

    def create_if_cedula_free(self, ciudadano: Ciudadano) -> bool:
        """Inserta solo si la cédula está libre (verificación + inserción atómica)."""
        ...

    def find_by_albergue(self, albergue_id: str) -> List[Ciudadano]:
        ...

    def find_all(self, field: Optional[str] = None, value: Any = None) -> List[Ciudadano]:
        ...

    def count(self) -> int:
        ...

    def update_fields(self, ciudadano_id: str, updates: Dict[str, Any]) -> Optional[Ciudadano]:
        ...

    def delete(self, record_id: str) -> Optional[Ciudadano]:
        ...


@runtime_checkable
class IDomicilioRepository(IRepository, Protocol):

    def get(self, record_id: str) -> Optional[Domicilio]:
        ...

    def get_many(self, record_ids: Iterable[str]) -> Dict[str, Domicilio]:
        ...


@runtime_checkable
class IMedicamentoRepository(IRepository, Protocol):

    def get(self, record_id: str) -> Optional[Medicamento]:
        ...

    def get_many(self, record_ids: Iterable[str]) -> Dict[str, Medicamento]:
        ...

    def find_by_nombre(self, nombre: str) -> Optional[Medicamento]:
        ...


@runtime_checkable
class IEnfermedadRepository(IRepository, Protocol):

    def find_by_nombre(self, nombre: str) -> Optional[Enfermedad]:
        ...


@runtime_checkable
class IBodegaRepository(IRepository, Protocol):

    def find_by_categoria(self, categoria: str) -> List[Bodega]:
        """Bodegas de la categoría en un orden estable."""
        ...

    def attach_producto(self, bodega_id: str, producto_id: str) -> bool:
        ...


@runtime_checkable
class IProductoRepository(IRepository, Protocol):

    def find_by_nombre_y_bodega(self, nombre: str, bodega_id: str) -> Optional[Producto]:
        ...

    def create_if_absent(self, producto: Producto) -> Producto:
        ...

    def increment_stock_if_below_max(self, producto_id: str, delta: int = 1) -> Optional[Producto]:
        ...
