import pytest

from albergues.services import InputNormalizer, ValidationError


def test_scalar_medication_becomes_single_element_list(make_payload):
    data = InputNormalizer.normalize(make_payload(medicamentos='Insulina'))
    assert data['medicamentos'] == ['Insulina']


def test_missing_or_null_medication_becomes_empty_list(make_payload, MISSING):
    assert InputNormalizer.normalize(make_payload(medicamentos=MISSING))['medicamentos'] == []
    assert InputNormalizer.normalize(make_payload(medicamentos=None))['medicamentos'] == []


def test_normalize_does_not_mutate_payload(make_payload):
    payload = make_payload(medicamentos='Insulina')
    InputNormalizer.normalize(payload)
    assert payload['medicamentos'] == 'Insulina'


def test_scalar_and_list_parse_identically(make_payload):
    as_scalar = InputNormalizer.parse(make_payload(medicamentos='Insulina'))
    as_list = InputNormalizer.parse(make_payload(medicamentos=['Insulina']))
    assert as_scalar == as_list


def test_valid_payload(make_payload):
    registro = InputNormalizer.parse(make_payload(enfermedades='Diabetes, Hipertensión ,'))
    assert registro.qr_url.startswith('https://')
    assert registro.edad_normalizada == 34
    assert isinstance(registro.edad_normalizada, int)
    assert registro.lista_enfermedades() == ['Diabetes', 'Hipertensión']


def test_numeric_string_age_is_accepted(make_payload):
    assert InputNormalizer.parse(make_payload(edad='40')).edad_normalizada == 40


@pytest.mark.parametrize('overrides, field', [
    ({'nombre': 'A'}, 'nombre'),
    ({'apellido': 'x' * 101}, 'apellido'),
    ({'edad': 'treinta'}, 'edad'),
    ({'edad': True}, 'edad'),
    ({'edad': 'nan'}, 'edad'),
    ({'edad': 'inf'}, 'edad'),
    ({'edad': '1e400'}, 'edad'),
    ({'edad': float('nan')}, 'edad'),
    ({'edad': float('-inf')}, 'edad'),
    ({'cedula': '123456789'}, 'cedula'),
    ({'cedula': 1020304050}, 'cedula'),
    ({'email': 'no-es-email'}, 'email'),
    ({'email': 'a@b'}, 'email'),
    ({'telefono': '09912345678'}, 'telefono'),
    ({'enfermedades': ''}, 'enfermedades'),
    ({'medicamentos': [1]}, 'medicamentos'),
    ({'medicamentos': 5}, 'medicamentos'),
    ({'domicilio': 'xyz'}, 'domicilio'),
    ({'domicilio': 'g' * 24}, 'domicilio'),
    ({'qrURL': ''}, 'qrURL'),
])
def test_invalid_field_reports_that_field(make_payload, overrides, field):
    with pytest.raises(ValidationError) as info:
        InputNormalizer.parse(make_payload(**overrides))
    assert info.value.field == field
    assert field in info.value.message


def test_missing_required_field(make_payload, MISSING):
    with pytest.raises(ValidationError) as info:
        InputNormalizer.parse(make_payload(qrURL=MISSING))
    assert info.value.field == 'qrURL'


def test_first_violated_rule_is_reported(make_payload):
    with pytest.raises(ValidationError) as info:
        InputNormalizer.parse(make_payload(nombre='A', telefono='1'))
    assert info.value.field == 'nombre'


def test_unknown_keys_are_rejected(make_payload):
    with pytest.raises(ValidationError) as info:
        InputNormalizer.parse(make_payload(rol='admin'))
    assert info.value.field == 'rol'


def test_uppercase_hex_residence_is_valid(make_payload):
    registro = InputNormalizer.parse(make_payload(domicilio='ABCDEF0123456789ABCDEF01'))
    assert registro.domicilio == 'ABCDEF0123456789ABCDEF01'


@pytest.mark.parametrize('payload', [None, [], 'texto', 42])
def test_non_object_payload(payload):
    with pytest.raises(ValidationError):
        InputNormalizer.parse(payload)


# =============================================================================
# ACTUALIZACIÓN PARCIAL
# =============================================================================

def test_update_keeps_only_sent_fields():
    cambios = InputNormalizer.parse_update({
        'telefono': '0911111111',
        'edad': '41',
        'qrURL': 'https://qr.example.com/nuevo.png',
        'cedula': '9999999999',
        'rol': 'admin',
    })
    assert cambios == {
        'telefono': '0911111111',
        'edad': 41,
        'qrURL': 'https://qr.example.com/nuevo.png',
    }


def test_update_normalizes_references():
    cambios = InputNormalizer.parse_update({
        'enfermedades': 'Asma, ,Gripe',
        'domicilio': 'ABCDEF0123456789ABCDEF01',
        'medicamentos': ['ABCDEF0123456789ABCDEF02'],
        'albergue': None,
    })
    assert cambios['enfermedades'] == ['Asma', 'Gripe']
    assert cambios['domicilio'] == 'abcdef0123456789abcdef01'
    assert cambios['medicamentos'] == ['abcdef0123456789abcdef02']
    assert cambios['albergue'] is None
    assert InputNormalizer.parse_update({'enfermedades': ['Asma']})['enfermedades'] == ['Asma']


def test_update_empty_body_changes_nothing():
    assert InputNormalizer.parse_update({}) == {}


@pytest.mark.parametrize('updates, field', [
    ({'medicamentos': 5}, 'medicamentos'),
    ({'medicamentos': 'Insulina'}, 'medicamentos'),
    ({'medicamentos': ['Insulina']}, 'medicamentos'),
    ({'medicamentos': None}, 'medicamentos'),
    ({'domicilio': ['x']}, 'domicilio'),
    ({'domicilio': 'xyz'}, 'domicilio'),
    ({'enfermedades': 5}, 'enfermedades'),
    ({'enfermedades': None}, 'enfermedades'),
    ({'edad': 'nan'}, 'edad'),
    ({'edad': 'viejo'}, 'edad'),
    ({'nombre': None}, 'nombre'),
    ({'email': 'sin-arroba'}, 'email'),
    ({'telefono': '123'}, 'telefono'),
    ({'albergue': 7}, 'albergue'),
    ({'qrURL': ''}, 'qrURL'),
])
def test_update_invalid_field(updates, field):
    with pytest.raises(ValidationError) as info:
        InputNormalizer.parse_update(updates)
    assert info.value.field == field


@pytest.mark.parametrize('payload', [None, ['telefono'], 'texto'])
def test_update_non_object_payload(payload):
    with pytest.raises(ValidationError):
        InputNormalizer.parse_update(payload)
