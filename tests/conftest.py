from types import SimpleNamespace

import pytest

from albergues import performance_logger
from albergues.app_container import AppContainer
from albergues.config import load_settings
from albergues.main import create_app
from albergues.models import Bodega, Domicilio, Enfermedad, Medicamento


@pytest.fixture(autouse=True)
def no_profiling(tmp_path):
    # los tests no deben escribir en /logs/ del proyecto
    performance_logger.configure(enabled=False, logs_dir=str(tmp_path / 'logs'))
    yield
    performance_logger.reset_stats()


@pytest.fixture
def settings(tmp_path):
    return load_settings(
        data_dir=str(tmp_path / 'data'),
        secret_key='test-secret',
        stock_inicial_min=1,
        stock_inicial_max=10,
        categoria_medicamentos='Medicamentos',
        allocation_lock_timeout=5.0,
        merge_disease_medications=False,
        enable_profiling=False,
    )


@pytest.fixture
def container(settings):
    c = AppContainer(settings)
    yield c
    c.close()


@pytest.fixture
def catalogo(container):
    """Datos de referencia: 1 domicilio, 4 medicamentos, 2 enfermedades, 3 bodegas."""
    domicilio = container.domicilio_repo.add(Domicilio(nombre='Calle 1', cordenadas_x=-78.5, cordenadas_y=-0.2))

    meds = {}
    for nombre in ('Insulina', 'Metformina', 'Losartan', 'Paracetamol'):
        meds[nombre] = container.medicamento_repo.add(Medicamento(
            nombre=nombre,
            descripcion=f'{nombre} genérico',
            fecha_vencimiento='2027-12-31',
        ))

    container.enfermedad_repo.add(Enfermedad(
        nombre='Diabetes',
        medicamentos=[meds['Insulina'].id, meds['Metformina'].id],
    ))
    container.enfermedad_repo.add(Enfermedad(
        nombre='Hipertensión',
        medicamentos=[meds['Losartan'].id],
    ))

    norte = container.bodega_repo.add(Bodega(nombre='Bodega Norte', categoria='Medicamentos'))
    sur = container.bodega_repo.add(Bodega(nombre='Bodega Sur', categoria='Medicamentos'))
    alimentos = container.bodega_repo.add(Bodega(nombre='Bodega Víveres', categoria='Alimentos'))

    return SimpleNamespace(
        domicilio=domicilio,
        meds=meds,
        norte=norte,
        sur=sur,
        alimentos=alimentos,
    )


@pytest.fixture
def make_payload(catalogo):
    def _make(**overrides):
        payload = {
            'nombre': 'Ana',
            'apellido': 'Quispe',
            'edad': 34,
            'cedula': '0102030405',
            'email': 'ana.quispe@example.com',
            'telefono': '0991234567',
            'enfermedades': 'Diabetes',
            'medicamentos': ['Insulina'],
            'qrURL': 'https://qr.example.com/0102030405.png',
            'domicilio': catalogo.domicilio.id,
        }
        payload.update(overrides)
        return {k: v for k, v in payload.items() if v is not _MISSING}
    return _make


# Marcador para quitar una clave del payload en make_payload(campo=MISSING)
_MISSING = object()


@pytest.fixture
def MISSING():
    return _MISSING


@pytest.fixture
def app(container):
    application = create_app(container)
    application.config['TESTING'] = True
    return application


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c
