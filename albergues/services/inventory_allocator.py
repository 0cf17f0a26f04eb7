# ==============================================================================
# DISTRIBUCIÓN DE MEDICAMENTOS ENTRE BODEGAS
# ==============================================================================
# Por cada medicamento que necesita un ciudadano se elige la bodega de
# categoría 'Medicamentos' con MENOS stock de ese medicamento y se le suma
# una unidad:
#   - sin producto en la bodega → se crea con stockMin=1, stockMax=10
#   - con producto y stockMin < stockMax → stockMin += 1, stockMax += 1
#   - con producto en su máximo → no se hace nada (solo log)
#
# CONCURRENCIA:
# La lectura de stocks + escritura de un mismo medicamento se hace dentro
# de un lock por nombre de medicamento. Medicamentos distintos no se
# bloquean entre sí. El incremento además es condicional en el repositorio.
# ==============================================================================

import logging
import threading
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from albergues.models import Bodega, Medicamento, Producto
from albergues.performance_logger import profile_function
from albergues.repositories.interfaces import IBodegaRepository, IProductoRepository
from albergues.services.errors import AllocationCapacityReached

logger = logging.getLogger('albergues.inventario')


@dataclass
class AllocationResult:
    """
    Resultado de asignar un medicamento.

    Attributes:
        medicamento: Nombre del medicamento
        action: creado | incrementado | sin_capacidad | sin_bodegas | timeout | error
        bodega_id: Bodega elegida (si hubo)
        producto: Estado del producto después de la operación (si hubo)
        detail: Mensaje del error cuando action es 'error'
    """
    medicamento: str
    action: str
    bodega_id: Optional[str] = None
    producto: Optional[Producto] = None
    detail: Optional[str] = None

    CREATED = 'creado'
    INCREMENTED = 'incrementado'
    AT_CAPACITY = 'sin_capacidad'
    NO_WAREHOUSES = 'sin_bodegas'
    TIMEOUT = 'timeout'
    ERROR = 'error'

    @property
    def changed_stock(self) -> bool:
        return self.action in (self.CREATED, self.INCREMENTED)


class InventoryAllocator:
    """
    Asigna stock de medicamentos a la bodega menos cargada.
    """

    def __init__(
        self,
        bodega_repo: IBodegaRepository,
        producto_repo: IProductoRepository,
        categoria: str = 'Medicamentos',
        stock_inicial_min: int = 1,
        stock_inicial_max: int = 10,
        lock_timeout: float = 10.0
    ):
        """
        Args:
            bodega_repo: Repositorio de bodegas
            producto_repo: Repositorio de productos
            categoria: Categoría de bodega que participa
            stock_inicial_min: stockMin de un producto nuevo
            stock_inicial_max: stockMax de un producto nuevo
            lock_timeout: Segundos de espera por el lock de un medicamento
                (negativo = esperar sin límite)
        """
        self.bodega_repo = bodega_repo
        self.producto_repo = producto_repo
        self.categoria = categoria
        self.stock_inicial_min = stock_inicial_min
        self.stock_inicial_max = stock_inicial_max
        self.lock_timeout = lock_timeout

        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    # =========================================================================
    # LOCKS POR MEDICAMENTO
    # =========================================================================

    def _get_lock(self, nombre: str) -> threading.RLock:
        """Obtiene o crea el lock de un medicamento."""
        with self._locks_guard:
            if nombre not in self._locks:
                self._locks[nombre] = threading.RLock()
            return self._locks[nombre]

    def _acquire(self, lock: threading.RLock) -> bool:
        if self.lock_timeout is None or self.lock_timeout < 0:
            return lock.acquire()
        return lock.acquire(timeout=self.lock_timeout)

    # =========================================================================
    # SELECCIÓN DE BODEGA
    # =========================================================================

    def fetch_bodegas(self) -> List[Bodega]:
        """Bodegas de medicamentos, en el orden del repositorio."""
        return self.bodega_repo.find_by_categoria(self.categoria)

    def select_bodega(
        self,
        nombre: str,
        bodegas: Iterable[Bodega]
    ) -> Tuple[Optional[Bodega], Optional[Producto]]:
        """
        Elige la bodega con menor stockMin del medicamento.

        Un producto ausente cuenta como 0. Ante empate gana la primera
        bodega en el orden recibido.

        Returns:
            (bodega, producto existente o None); (None, None) si no hay bodegas
        """
        seleccionada = None
        producto_seleccionado = None
        menor_cantidad = None

        for bodega in bodegas:
            producto = self.producto_repo.find_by_nombre_y_bodega(nombre, bodega.id)
            cantidad = producto.stock_min if producto else 0
            if menor_cantidad is None or cantidad < menor_cantidad:
                menor_cantidad = cantidad
                seleccionada = bodega
                producto_seleccionado = producto

        return seleccionada, producto_seleccionado

    # =========================================================================
    # ASIGNACIÓN
    # =========================================================================

    def _new_producto(self, medicamento: Medicamento, bodega: Bodega) -> Producto:
        return Producto(
            nombre=medicamento.nombre,
            bodega=bodega.id,
            stock_min=self.stock_inicial_min,
            stock_max=self.stock_inicial_max,
            descripcion=medicamento.descripcion,
            fecha_vencimiento=medicamento.fecha_vencimiento,
        )

    def _increment(self, producto: Producto, bodega: Bodega) -> Producto:
        actualizado = self.producto_repo.increment_stock_if_below_max(producto.id)
        if actualizado is None:
            raise AllocationCapacityReached(producto.nombre, bodega.id)
        return actualizado

    def allocate(self, medicamento: Medicamento, bodegas: List[Bodega]) -> AllocationResult:
        """
        Asigna una unidad de un medicamento a la bodega menos cargada.

        Args:
            medicamento: Medicamento resuelto
            bodegas: Bodegas de medicamentos (obtenidas una vez por registro)

        Returns:
            AllocationResult con lo que ocurrió
        """
        nombre = medicamento.nombre
        lock = self._get_lock(nombre)
        if not self._acquire(lock):
            logger.warning("Tiempo de espera agotado asignando %s; se omite", nombre)
            return AllocationResult(nombre, AllocationResult.TIMEOUT)

        try:
            bodega, producto = self.select_bodega(nombre, bodegas)
            if bodega is None:
                logger.warning("No hay bodegas de %s para asignar %s", self.categoria, nombre)
                return AllocationResult(nombre, AllocationResult.NO_WAREHOUSES)

            try:
                if producto is None:
                    nuevo = self._new_producto(medicamento, bodega)
                    guardado = self.producto_repo.create_if_absent(nuevo)
                    if guardado.id != nuevo.id:
                        # Otro proceso lo creó entre la lectura y la escritura
                        guardado = self._increment(guardado, bodega)
                        action = AllocationResult.INCREMENTED
                    else:
                        action = AllocationResult.CREATED
                else:
                    guardado = self._increment(producto, bodega)
                    action = AllocationResult.INCREMENTED
            except AllocationCapacityReached as exc:
                logger.info(exc.message)
                return AllocationResult(nombre, AllocationResult.AT_CAPACITY, bodega.id, producto)

            if self.bodega_repo.attach_producto(bodega.id, guardado.id):
                bodega.productos.append(guardado.id)

            logger.debug(
                "%s asignado a bodega %s (%s/%s)",
                nombre, bodega.id, guardado.stock_min, guardado.stock_max
            )
            return AllocationResult(nombre, action, bodega.id, guardado)
        finally:
            lock.release()

    @profile_function(name="Distribuir medicamentos")
    def allocate_all(self, medicamentos: Iterable[Medicamento]) -> List[AllocationResult]:
        """
        Asigna cada medicamento de la lista (una pasada por medicamento).

        Las bodegas se consultan una sola vez. Un fallo en un medicamento
        no afecta a los demás ni se propaga.

        Returns:
            Un AllocationResult por medicamento, en el mismo orden
        """
        medicamentos = list(medicamentos)
        if not medicamentos:
            return []

        bodegas = self.fetch_bodegas()
        resultados = []
        for medicamento in medicamentos:
            try:
                resultados.append(self.allocate(medicamento, bodegas))
            except Exception as exc:
                logger.exception("Error asignando %s", medicamento.nombre)
                resultados.append(AllocationResult(
                    medicamento.nombre, AllocationResult.ERROR, detail=str(exc)
                ))
        return resultados
