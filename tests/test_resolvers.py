import pytest

from albergues.services import (
    DiseaseMedicationResolver,
    MedicationResolver,
    UnknownMedicationError,
)


@pytest.fixture
def disease_resolver(container, catalogo):
    return DiseaseMedicationResolver(container.enfermedad_repo, container.medicamento_repo)


@pytest.fixture
def medication_resolver(container, catalogo):
    return MedicationResolver(container.medicamento_repo)


def names(medicamentos):
    return [m.nombre for m in medicamentos]


def test_split_names():
    assert DiseaseMedicationResolver.split_names('Diabetes, Hipertensión') == ['Diabetes', 'Hipertensión']
    assert DiseaseMedicationResolver.split_names(' ,Asma,, ') == ['Asma']
    assert DiseaseMedicationResolver.split_names(None) == []
    assert DiseaseMedicationResolver.split_names(['Diabetes ', '']) == ['Diabetes']


def test_diseases_resolve_in_order(disease_resolver):
    result = disease_resolver.resolve('Diabetes,Hipertensión')
    assert names(result) == ['Insulina', 'Metformina', 'Losartan']


def test_unknown_diseases_are_skipped(disease_resolver):
    assert names(disease_resolver.resolve('Gripe, Hipertensión')) == ['Losartan']
    assert disease_resolver.resolve('Gripe') == []
    assert disease_resolver.resolve('') == []


def test_disease_medications_are_not_deduplicated(disease_resolver):
    assert names(disease_resolver.resolve('Diabetes, Diabetes')) == [
        'Insulina', 'Metformina', 'Insulina', 'Metformina'
    ]


def test_disease_match_is_exact(disease_resolver):
    assert disease_resolver.resolve('diabetes') == []


def test_medications_resolve_in_order(medication_resolver, catalogo):
    result = medication_resolver.resolve(['Paracetamol', 'Insulina'])
    assert [m.id for m in result] == [catalogo.meds['Paracetamol'].id, catalogo.meds['Insulina'].id]
    assert medication_resolver.resolve_ids([]) == []


def test_unknown_medication_fails_whole_list(medication_resolver):
    with pytest.raises(UnknownMedicationError) as info:
        medication_resolver.resolve(['Insulina', 'Aspirina', 'Ibuprofeno'])
    assert info.value.nombre == 'Aspirina'
    assert info.value.message == 'Medicamento Aspirina no encontrado'


def test_medication_match_is_case_sensitive(medication_resolver):
    with pytest.raises(UnknownMedicationError):
        medication_resolver.resolve(['insulina'])
