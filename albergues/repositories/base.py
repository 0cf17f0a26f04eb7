# ==============================================================================
# REPOSITORIO BASE - Funcionalidad común para acceso a archivos JSON
# ==============================================================================

import json
import os
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, List, Optional, Type


class BaseRepository(ABC):
    """
    Clase base abstracta para todos los repositorios.
    Proporciona funcionalidad común para lectura/escritura de archivos JSON
    con manejo de concurrencia mediante locks.

    Al migrar a otra base de datos:
    - Esta clase se reemplazará por una conexión
    - Los métodos load/save se convertirán en queries
    - Los locks se reemplazarán por transacciones/updates condicionales
    """

    # Lock global para evitar escrituras concurrentes a archivos
    _file_lock = threading.RLock()

    def __init__(self, file_path: str):
        """
        Inicializa el repositorio con la ruta al archivo JSON.

        Args:
            file_path: Ruta absoluta al archivo JSON de datos
        """
        self.file_path = file_path
        self._ensure_file_exists()

    def _ensure_file_exists(self) -> None:
        """Crea el archivo con datos vacíos si no existe."""
        directory = os.path.dirname(self.file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        if not os.path.exists(self.file_path):
            self._write_raw(self._empty_data())

    @abstractmethod
    def _empty_data(self) -> Any:
        """
        Retorna la estructura de datos vacía para este repositorio.

        Returns:
            Estructura vacía (dict, list, etc.) según el repositorio
        """

    def _read_raw(self) -> Any:
        """
        Lee los datos crudos del archivo JSON.

        Returns:
            Datos parseados del JSON, o la estructura vacía si el
            archivo no existe o está corrupto
        """
        with self._file_lock:
            try:
                with open(self.file_path, 'r', encoding='utf-8') as f:
                    return json.load(f)
            except (json.JSONDecodeError, FileNotFoundError):
                return self._empty_data()

    def _write_raw(self, data: Any) -> None:
        """
        Escribe datos al archivo JSON (temporal + replace para atomicidad).

        Raises:
            OSError: Si hay error de escritura
        """
        with self._file_lock:
            temp_path = self.file_path + '.tmp'
            try:
                with open(temp_path, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(temp_path, self.file_path)
            except Exception:
                if os.path.exists(temp_path):
                    os.remove(temp_path)
                raise

    def reload(self) -> None:
        """Recarga los datos desde el archivo (sin caché en la base)."""

    def close(self) -> None:
        """Libera los recursos del repositorio al apagar la aplicación."""


class EntityRepository(BaseRepository):
    """
    Repositorio de entidades almacenadas como diccionario {_id: registro}.

    Las subclases definen `file_name` y `entity_class`; la entidad debe
    exponer `id`, `to_dict()` y `from_dict()`.

    Ejemplo: bodegas.json -> {"65f0...": {"_id": "65f0...", ...}, ...}
    """

    file_name: str = ''
    entity_class: Type = None

    def __init__(self, base_path: str):
        """
        Args:
            base_path: Directorio donde viven los archivos JSON
        """
        super().__init__(os.path.join(base_path, self.file_name))
        self._cache: Dict[str, Dict[str, Any]] = {}
        self._cache_loaded = False

    def _empty_data(self) -> Dict:
        return {}

    # =========================================================================
    # CARGA Y GUARDADO
    # =========================================================================

    def load(self) -> Dict[str, Dict[str, Any]]:
        """
        Carga todos los registros crudos.
        Usa caché para evitar lecturas repetidas.
        """
        with self._file_lock:
            if not self._cache_loaded:
                raw = self._read_raw()
                self._cache = raw if isinstance(raw, dict) else {}
                self._cache_loaded = True
            return self._cache

    def save_all(self, data: Dict[str, Dict[str, Any]]) -> None:
        """Guarda todos los registros (reemplazo completo)."""
        with self._file_lock:
            self._cache = data
            self._cache_loaded = True
            self._write_raw(data)

    def reload(self) -> None:
        """Fuerza recarga desde archivo ignorando caché."""
        with self._file_lock:
            self._cache_loaded = False
            self.load()

    def close(self) -> None:
        with self._file_lock:
            self._cache = {}
            self._cache_loaded = False

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def _to_entity(self, record: Dict[str, Any]):
        return self.entity_class.from_dict(dict(record))

    def get(self, record_id: str):
        """
        Obtiene una entidad por su ID.

        Returns:
            Entidad o None si no existe
        """
        record = self.load().get(record_id)
        return self._to_entity(record) if record else None

    def get_many(self, record_ids: Iterable[str]) -> Dict[str, Any]:
        """
        Obtiene varias entidades en una sola lectura.

        Returns:
            Diccionario {id: entidad} solo con los IDs existentes
        """
        data = self.load()
        result = {}
        for record_id in record_ids:
            record = data.get(record_id)
            if record:
                result[record_id] = self._to_entity(record)
        return result

    def find_first(self, predicate: Callable[[Dict[str, Any]], bool]):
        """Primera entidad (en orden de inserción) que cumple el predicado."""
        for record in self.load().values():
            if predicate(record):
                return self._to_entity(record)
        return None

    def find_by(self, field: str, value: Any):
        """Primera entidad cuyo campo coincide exactamente."""
        return self.find_first(lambda r: r.get(field) == value)

    def find_all(self, field: Optional[str] = None, value: Any = None) -> List[Any]:
        """
        Todas las entidades, opcionalmente filtradas por un campo.
        Mantiene el orden de inserción.
        """
        records = self.load().values()
        if field is not None:
            records = [r for r in records if r.get(field) == value]
        return [self._to_entity(r) for r in records]

    def count(self) -> int:
        return len(self.load())

    # =========================================================================
    # ESCRITURA
    # =========================================================================

    def add(self, entity):
        """
        Inserta o reemplaza una entidad.

        Returns:
            La misma entidad
        """
        with self._file_lock:
            data = dict(self.load())
            data[entity.id] = entity.to_dict()
            self.save_all(data)
        return entity

    # Para esta capa insertar y actualizar una entidad completa es lo mismo
    save = add

    def delete(self, record_id: str):
        """
        Elimina una entidad.

        Returns:
            Entidad eliminada o None si no existía
        """
        with self._file_lock:
            data = dict(self.load())
            removed = data.pop(record_id, None)
            if removed is not None:
                self.save_all(data)
        return self._to_entity(removed) if removed else None
