# ==============================================================================
# CONTENEDOR DE DEPENDENCIAS - Inyección de servicios
# ==============================================================================
# Construye repositorios y servicios a partir de un Settings. Facilita:
#   - Inyección de dependencias
#   - Testing (cada test arma su contenedor sobre una carpeta temporal)
#   - Migración (cambiar repos sin tocar servicios)
#
# NO es un singleton: se crea al iniciar el proceso, se pasa a create_app()
# y se cierra al apagar (close()).
# ==============================================================================

import logging
from typing import Optional

from albergues.config import Settings, load_settings

# ═══════════════════════════════════════════════════════════════════════════════
# REPOSITORIOS - Capa de persistencia (JSON)
# ═══════════════════════════════════════════════════════════════════════════════
from albergues.repositories import (
    BodegaRepository,
    CiudadanoRepository,
    DomicilioRepository,
    EnfermedadRepository,
    MedicamentoRepository,
    ProductoRepository,
)

# ═══════════════════════════════════════════════════════════════════════════════
# SERVICIOS - Capa de lógica de negocio
# ═══════════════════════════════════════════════════════════════════════════════
from albergues.services import (
    CatalogService,
    CitizenRegistrationService,
    CitizenService,
    DiseaseMedicationResolver,
    InventoryAllocator,
    MedicationResolver,
)

logger = logging.getLogger('albergues.container')


class AppContainer:
    """
    Contenedor de dependencias de la aplicación.

    Cada repositorio y servicio se crea una vez por contenedor (lazy).

    Uso:
        container = AppContainer(load_settings())
        container.registration_service.register(payload)
        ...
        container.close()
    """

    def __init__(self, settings: Optional[Settings] = None):
        """
        Args:
            settings: Configuración; por defecto se lee del entorno
        """
        self.settings = settings or load_settings()
        self._closed = False

        # Repositorios (lazy loading)
        self._ciudadano_repo: Optional[CiudadanoRepository] = None
        self._domicilio_repo: Optional[DomicilioRepository] = None
        self._medicamento_repo: Optional[MedicamentoRepository] = None
        self._enfermedad_repo: Optional[EnfermedadRepository] = None
        self._bodega_repo: Optional[BodegaRepository] = None
        self._producto_repo: Optional[ProductoRepository] = None

        # Servicios (lazy loading)
        self._allocator: Optional[InventoryAllocator] = None
        self._registration_service: Optional[CitizenRegistrationService] = None
        self._citizen_service: Optional[CitizenService] = None
        self._catalog_service: Optional[CatalogService] = None

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError('El contenedor ya fue cerrado')

    # =========================================================================
    # REPOSITORIOS
    # =========================================================================

    @property
    def ciudadano_repo(self) -> CiudadanoRepository:
        self._check_open()
        if self._ciudadano_repo is None:
            self._ciudadano_repo = CiudadanoRepository(self.settings.data_dir)
        return self._ciudadano_repo

    @property
    def domicilio_repo(self) -> DomicilioRepository:
        self._check_open()
        if self._domicilio_repo is None:
            self._domicilio_repo = DomicilioRepository(self.settings.data_dir)
        return self._domicilio_repo

    @property
    def medicamento_repo(self) -> MedicamentoRepository:
        self._check_open()
        if self._medicamento_repo is None:
            self._medicamento_repo = MedicamentoRepository(self.settings.data_dir)
        return self._medicamento_repo

    @property
    def enfermedad_repo(self) -> EnfermedadRepository:
        self._check_open()
        if self._enfermedad_repo is None:
            self._enfermedad_repo = EnfermedadRepository(self.settings.data_dir)
        return self._enfermedad_repo

    @property
    def bodega_repo(self) -> BodegaRepository:
        self._check_open()
        if self._bodega_repo is None:
            self._bodega_repo = BodegaRepository(self.settings.data_dir)
        return self._bodega_repo

    @property
    def producto_repo(self) -> ProductoRepository:
        self._check_open()
        if self._producto_repo is None:
            self._producto_repo = ProductoRepository(self.settings.data_dir)
        return self._producto_repo

    # =========================================================================
    # SERVICIOS
    # =========================================================================

    @property
    def allocator(self) -> InventoryAllocator:
        """Asignador de stock (uno por contenedor: comparte los locks)."""
        if self._allocator is None:
            self._allocator = InventoryAllocator(
                self.bodega_repo,
                self.producto_repo,
                categoria=self.settings.categoria_medicamentos,
                stock_inicial_min=self.settings.stock_inicial_min,
                stock_inicial_max=self.settings.stock_inicial_max,
                lock_timeout=self.settings.allocation_lock_timeout,
            )
        return self._allocator

    @property
    def registration_service(self) -> CitizenRegistrationService:
        if self._registration_service is None:
            self._registration_service = CitizenRegistrationService(
                self.ciudadano_repo,
                self.domicilio_repo,
                DiseaseMedicationResolver(self.enfermedad_repo, self.medicamento_repo),
                MedicationResolver(self.medicamento_repo),
                self.allocator,
                merge_disease_medications=self.settings.merge_disease_medications,
            )
        return self._registration_service

    @property
    def citizen_service(self) -> CitizenService:
        if self._citizen_service is None:
            self._citizen_service = CitizenService(
                self.ciudadano_repo,
                self.domicilio_repo,
                self.medicamento_repo,
            )
        return self._citizen_service

    @property
    def catalog_service(self) -> CatalogService:
        if self._catalog_service is None:
            self._catalog_service = CatalogService(
                self.domicilio_repo,
                self.medicamento_repo,
                self.enfermedad_repo,
                self.bodega_repo,
            )
        return self._catalog_service

    # =========================================================================
    # CICLO DE VIDA
    # =========================================================================

    def reload(self) -> None:
        """Recarga todos los repositorios ya abiertos desde disco."""
        for repo in self._open_repositories():
            repo.reload()

    def _open_repositories(self):
        return [
            repo for repo in (
                self._ciudadano_repo,
                self._domicilio_repo,
                self._medicamento_repo,
                self._enfermedad_repo,
                self._bodega_repo,
                self._producto_repo,
            )
            if repo is not None
        ]

    def close(self) -> None:
        """Cierra los repositorios. Llamar una sola vez al apagar."""
        if self._closed:
            return
        for repo in self._open_repositories():
            repo.close()
        self._closed = True
        logger.info("Contenedor cerrado (%s)", self.settings.data_dir)

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> 'AppContainer':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
