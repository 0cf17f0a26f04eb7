import json


def test_post_ciudadano_created(client, container, catalogo, make_payload):
    r = client.post('/ciudadanos', json=make_payload(medicamentos='Insulina'))
    assert r.status_code == 201
    body = r.get_json()
    assert body['success'] is True
    assert body['ciudadano']['cedula'] == '0102030405'
    assert body['ciudadano']['medicamentos'] == [catalogo.meds['Insulina'].id]
    assert body['ciudadano']['qrURL'].startswith('https://')
    assert container.ciudadano_repo.count() == 1


def test_post_validation_error(client, make_payload):
    r = client.post('/ciudadanos', json=make_payload(email='sin-arroba'))
    assert r.status_code == 400
    body = r.get_json()
    assert body['success'] is False
    assert 'email' in body['error']


def test_post_non_json_body(client):
    r = client.post('/ciudadanos', data='nombre=Ana', content_type='text/plain')
    assert r.status_code == 400
    assert r.get_json()['success'] is False


def test_post_duplicate(client, make_payload):
    assert client.post('/ciudadanos', json=make_payload()).status_code == 201
    r = client.post('/ciudadanos', json=make_payload())
    assert r.status_code == 400
    assert r.get_json() == {'success': False, 'error': 'La cédula ya está registrada'}


def test_post_unknown_residence(client, make_payload):
    r = client.post('/ciudadanos', json=make_payload(domicilio='0' * 24))
    assert r.status_code == 400
    assert r.get_json()['error'] == 'Domicilio no encontrado'


def test_post_unknown_medication(client, container, make_payload):
    r = client.post('/ciudadanos', json=make_payload(medicamentos=['Aspirina']))
    assert r.status_code == 400
    assert r.get_json()['error'] == 'Medicamento Aspirina no encontrado'
    assert container.ciudadano_repo.count() == 0


def test_post_unexpected_error(client, container, make_payload, monkeypatch):
    def boom(payload):
        raise RuntimeError('base de datos caída')
    monkeypatch.setattr(container.registration_service, 'register', boom)

    r = client.post('/ciudadanos', json=make_payload())
    assert r.status_code == 500
    body = r.get_json()
    assert body['success'] is False
    assert body['error'] == 'base de datos caída'
    assert 'registrarte' in body['message']


def test_total(client, make_payload):
    assert client.get('/ciudadanos/total').get_json() == {'success': True, 'totalCiudadanos': 0}
    client.post('/ciudadanos', json=make_payload())
    assert client.get('/ciudadanos/total').get_json() == {'success': True, 'totalCiudadanos': 1}


def test_list_all(client, catalogo, make_payload):
    client.post('/ciudadanos', json=make_payload(medicamentos=['Insulina', 'Paracetamol']))
    r = client.get('/ciudadanos')
    assert r.status_code == 200
    listado = r.get_json()
    assert listado[0]['medicamentos'] == ['Insulina', 'Paracetamol']
    assert listado[0]['domicilio']['nombre'] == 'Calle 1'


def test_list_by_shelter(client, make_payload):
    creado = client.post('/ciudadanos', json=make_payload()).get_json()['ciudadano']
    client.put(f"/ciudadanos/{creado['_id']}", json={'albergue': 'a1'})

    listado = client.get('/ciudadanos/a1').get_json()
    assert [c['_id'] for c in listado] == [creado['_id']]
    assert listado[0]['medicamentos'] == ['Insulina']
    assert client.get('/ciudadanos/a2').get_json() == []


def test_update(client, make_payload):
    creado = client.post('/ciudadanos', json=make_payload()).get_json()['ciudadano']
    r = client.put(f"/ciudadanos/{creado['_id']}", json={'telefono': '0900000000', 'cedula': '1'})
    assert r.status_code == 200
    body = r.get_json()
    assert body['success'] is True
    assert body['ciudadano']['telefono'] == '0900000000'
    assert body['ciudadano']['cedula'] == creado['cedula']


def test_update_not_found(client, catalogo):
    r = client.put('/ciudadanos/no-existe', json={'telefono': '0900000000'})
    assert r.status_code == 404
    assert r.get_json() == {'success': False, 'error': 'Ciudadano no encontrado'}


def test_delete(client, make_payload):
    creado = client.post('/ciudadanos', json=make_payload()).get_json()['ciudadano']
    r = client.delete(f"/ciudadanos/{creado['_id']}")
    assert r.status_code == 200
    assert r.get_json() == {'success': True}
    assert client.delete(f"/ciudadanos/{creado['_id']}").status_code == 404


def test_unknown_route_is_json(client):
    r = client.get('/albergues')
    assert r.status_code == 404
    assert r.get_json()['success'] is False


def test_cli_cargar_catalogo(app, container, tmp_path):
    archivo = tmp_path / 'catalogo.json'
    archivo.write_text(json.dumps({
        'medicamentos': [{'nombre': 'Ibuprofeno', 'descripcion': 'AINE'}],
        'enfermedades': [{'nombre': 'Fiebre', 'medicamentos': ['Ibuprofeno']}],
        'bodegas': [{'nombre': 'Central', 'categoria': 'Medicamentos'}],
    }), encoding='utf-8')

    result = app.test_cli_runner().invoke(args=['cargar-catalogo', str(archivo)])

    assert result.exit_code == 0, result.output
    assert 'medicamentos: 1 nuevos' in result.output
    assert container.enfermedad_repo.find_by_nombre('Fiebre') is not None


def test_cli_cargar_catalogo_invalid_json(app, tmp_path):
    archivo = tmp_path / 'roto.json'
    archivo.write_text('{', encoding='utf-8')
    result = app.test_cli_runner().invoke(args=['cargar-catalogo', str(archivo)])
    assert result.exit_code != 0
    assert 'JSON inválido' in result.output


def test_post_non_finite_age(client, container, make_payload):
    r = client.post('/ciudadanos', json=make_payload(edad='nan'))
    assert r.status_code == 400
    assert 'edad' in r.get_json()['error']
    assert container.ciudadano_repo.count() == 0


def test_update_with_wrong_types_keeps_listing_working(client, make_payload):
    creado = client.post('/ciudadanos', json=make_payload()).get_json()['ciudadano']

    r = client.put(f"/ciudadanos/{creado['_id']}", json={'medicamentos': 5})
    assert r.status_code == 400
    assert 'medicamentos' in r.get_json()['error']

    r = client.put(f"/ciudadanos/{creado['_id']}", json={'domicilio': ['x']})
    assert r.status_code == 400
    assert 'domicilio' in r.get_json()['error']

    r = client.get('/ciudadanos')
    assert r.status_code == 200
    listado = r.get_json()
    assert listado[0]['medicamentos'] == ['Insulina']
    assert listado[0]['domicilio']['_id'] == creado['domicilio']
