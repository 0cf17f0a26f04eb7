# ==============================================================================
# REPOSITORIOS DE INVENTARIO
# ==============================================================================
# Encapsula el acceso a bodegas.json y productos.json
# Un producto pertenece a exactamente una bodega y se identifica, dentro
# de ella, por el nombre del medicamento.
# ==============================================================================

from typing import List, Optional

from albergues.models import Bodega, Producto
from albergues.repositories.base import EntityRepository


class BodegaRepository(EntityRepository):
    """
    Repositorio de bodegas.

    Formato de datos en bodegas.json:
    {
        "65d0...": {
            "_id": "65d0...",
            "nombre": "Bodega Norte",
            "categoria": "Medicamentos",
            "productos": ["65d9...", ...]
        }
    }
    """

    file_name = 'bodegas.json'
    entity_class = Bodega

    def find_by_categoria(self, categoria: str) -> List[Bodega]:
        """Bodegas de una categoría, en orden de inserción."""
        return self.find_all('categoria', categoria)

    def find_by_nombre(self, nombre: str) -> Optional[Bodega]:
        return self.find_by('nombre', nombre)

    def attach_producto(self, bodega_id: str, producto_id: str) -> bool:
        """
        Agrega un producto a la lista de la bodega si no estaba.

        Returns:
            True si se agregó, False si ya estaba o la bodega no existe
        """
        with self._file_lock:
            bodega = self.get(bodega_id)
            if bodega is None or bodega.has_producto(producto_id):
                return False
            bodega.productos.append(producto_id)
            self.save(bodega)
            return True


class ProductoRepository(EntityRepository):
    """
    Repositorio de productos (líneas de stock).

    Formato de datos en productos.json:
    {
        "65d9...": {
            "_id": "65d9...",
            "nombre": "Paracetamol",
            "stockMin": 3,
            "stockMax": 12,
            "descripcion": "...",
            "fechaVencimiento": "2026-01-31",
            "bodega": "65d0..."
        }
    }
    """

    file_name = 'productos.json'
    entity_class = Producto

    def find_by_nombre_y_bodega(self, nombre: str, bodega_id: str) -> Optional[Producto]:
        return self.find_first(
            lambda r: r.get('nombre') == nombre and r.get('bodega') == bodega_id
        )

    def find_by_bodega(self, bodega_id: str) -> List[Producto]:
        return self.find_all('bodega', bodega_id)

    def create_if_absent(self, producto: Producto) -> Producto:
        """
        Inserta el producto salvo que la bodega ya tenga uno con ese nombre.

        Returns:
            El producto guardado (el existente si ya había uno)
        """
        with self._file_lock:
            existing = self.find_by_nombre_y_bodega(producto.nombre, producto.bodega)
            if existing is not None:
                return existing
            return self.add(producto)

    def increment_stock_if_below_max(self, producto_id: str, delta: int = 1) -> Optional[Producto]:
        """
        Incremento condicional atómico: suma `delta` a stockMin y stockMax
        solo si stockMin < stockMax al momento de escribir.

        Args:
            producto_id: ID del producto
            delta: Unidades a sumar

        Returns:
            Producto actualizado, o None si no existe o ya está en su máximo
        """
        with self._file_lock:
            producto = self.get(producto_id)
            if producto is None or not producto.has_capacity:
                return None
            producto.stock_min += delta
            producto.stock_max += delta
            self.save(producto)
            return producto
