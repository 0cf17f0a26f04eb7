import json
import os

import pytest

from albergues.models import Bodega, Ciudadano, Producto
from albergues.repositories import BodegaRepository, CiudadanoRepository, ProductoRepository


def make_ciudadano(**overrides):
    data = dict(
        nombre='Luis', apellido='Paredes', edad=50, cedula='1712345678',
        email='luis@example.com', telefono='0987654321', domicilio='a' * 24,
        qr_url='https://qr.example.com/1712345678.png',
    )
    data.update(overrides)
    return Ciudadano(**data)


def test_file_created_empty(tmp_path):
    repo = CiudadanoRepository(str(tmp_path / 'nuevo'))
    assert os.path.exists(repo.file_path)
    assert repo.count() == 0


def test_records_persist_across_instances(tmp_path):
    CiudadanoRepository(str(tmp_path)).add(make_ciudadano())

    with open(tmp_path / 'ciudadanos.json', 'r', encoding='utf-8') as f:
        raw = json.load(f)
    record = next(iter(raw.values()))
    assert record['cedula'] == '1712345678'
    assert record['qrURL'].startswith('https://')
    assert '_id' in record and 'createdAt' in record

    other = CiudadanoRepository(str(tmp_path))
    assert other.get_by_cedula('1712345678').nombre == 'Luis'


def test_corrupted_file_reads_as_empty(tmp_path):
    (tmp_path / 'bodegas.json').write_text('{no es json', encoding='utf-8')
    assert BodegaRepository(str(tmp_path)).find_all() == []


def test_create_if_cedula_free(tmp_path):
    repo = CiudadanoRepository(str(tmp_path))
    assert repo.create_if_cedula_free(make_ciudadano())
    assert not repo.create_if_cedula_free(make_ciudadano(nombre='Otro'))
    assert repo.count() == 1
    assert repo.get_by_cedula('1712345678').nombre == 'Luis'


def test_update_fields_keeps_identity(tmp_path):
    repo = CiudadanoRepository(str(tmp_path))
    ciudadano = repo.add(make_ciudadano())

    updated = repo.update_fields(ciudadano.id, {
        'telefono': '0999999999', 'cedula': '0000000000', '_id': 'otro',
    })

    assert updated.id == ciudadano.id
    assert updated.cedula == '1712345678'
    assert updated.telefono == '0999999999'
    assert updated.updated_at >= ciudadano.updated_at
    assert repo.update_fields('no-existe', {'telefono': 'x'}) is None


def test_delete_returns_removed(tmp_path):
    repo = CiudadanoRepository(str(tmp_path))
    ciudadano = repo.add(make_ciudadano())
    assert repo.delete(ciudadano.id).cedula == ciudadano.cedula
    assert repo.delete(ciudadano.id) is None
    assert repo.count() == 0


def test_find_by_categoria_keeps_insertion_order(tmp_path):
    repo = BodegaRepository(str(tmp_path))
    a = repo.add(Bodega(nombre='A', categoria='Medicamentos'))
    repo.add(Bodega(nombre='B', categoria='Ropa'))
    c = repo.add(Bodega(nombre='C', categoria='Medicamentos'))
    assert [b.id for b in repo.find_by_categoria('Medicamentos')] == [a.id, c.id]


def test_attach_producto_is_idempotent(tmp_path):
    repo = BodegaRepository(str(tmp_path))
    bodega = repo.add(Bodega(nombre='A', categoria='Medicamentos'))
    assert repo.attach_producto(bodega.id, 'p1')
    assert not repo.attach_producto(bodega.id, 'p1')
    assert not repo.attach_producto('no-existe', 'p1')
    assert repo.get(bodega.id).productos == ['p1']


def test_increment_stock_if_below_max(tmp_path):
    repo = ProductoRepository(str(tmp_path))
    producto = repo.add(Producto(nombre='Insulina', bodega='b1', stock_min=9, stock_max=10))

    updated = repo.increment_stock_if_below_max(producto.id)
    assert (updated.stock_min, updated.stock_max) == (10, 11)

    capped = repo.add(Producto(nombre='Losartan', bodega='b1', stock_min=10, stock_max=10))
    assert repo.increment_stock_if_below_max(capped.id) is None
    assert repo.get(capped.id).stock_min == 10
    assert repo.increment_stock_if_below_max('no-existe') is None


def test_create_if_absent_returns_existing(tmp_path):
    repo = ProductoRepository(str(tmp_path))
    first = repo.create_if_absent(Producto(nombre='Insulina', bodega='b1'))
    second = repo.create_if_absent(Producto(nombre='Insulina', bodega='b1', stock_min=5, stock_max=9))
    other = repo.create_if_absent(Producto(nombre='Insulina', bodega='b2'))

    assert second.id == first.id
    assert other.id != first.id
    assert repo.count() == 2


def test_reload_picks_up_external_changes(tmp_path):
    repo = BodegaRepository(str(tmp_path))
    repo.add(Bodega(nombre='A', categoria='Medicamentos'))

    BodegaRepository(str(tmp_path)).save_all({})
    assert repo.count() == 1
    repo.reload()
    assert repo.count() == 0


def test_update_fields_does_not_write_unreadable_record(tmp_path):
    repo = CiudadanoRepository(str(tmp_path))
    ciudadano = repo.add(make_ciudadano())

    with pytest.raises(TypeError):
        repo.update_fields(ciudadano.id, {'medicamentos': 5})

    repo.reload()
    assert repo.get(ciudadano.id).medicamentos == []
