import pytest
from saveplate import get_db
from saveplate.models.waste_log import WasteLog
from saveplate.utils.validation import ValidationError
from tests.test_utils_seed import ensure_location, ensure_user, create_waste_log


def _log(**overrides):
    fields = dict(location_id=1, logged_by=1, waste_category='Spoilage', food_item='Tomatoes', quantity=1.0, unit='lbs')
    fields.update(overrides)
    return WasteLog(**fields)


def test_negative_quantity_rejected():
    with pytest.raises(ValidationError):
        _log(quantity=-1)


def test_zero_quantity_accepted():
    assert _log(quantity=0).quantity == 0


def test_unknown_category_rejected():
    with pytest.raises(ValidationError):
        _log(waste_category='Not A Category')


def test_known_category_accepted():
    assert _log(waste_category='Spoilage').waste_category == 'Spoilage'


@pytest.mark.parametrize('field,value', [
    ('unit', 'stone'),
    ('root_cause', 'Gremlins'),
    ('quantity', float('nan')),
    ('quantity', True),
    ('quantity', 'a lot'),
    ('estimated_cost', -0.01),
    ('food_item', '   '),
])
def test_invalid_fields_rejected(field, value):
    with pytest.raises(ValidationError):
        _log(**{field: value})


def test_optional_fields_may_be_absent():
    log = _log(root_cause=None, estimated_cost=None)
    assert log.root_cause is None
    assert log.estimated_cost is None


def test_food_item_trimmed():
    assert _log(food_item='  Bread ').food_item == 'Bread'


def test_logs_are_immutable_once_stored():
    loc = ensure_location('Immutable Diner')
    user = ensure_user('immutable@example.com', location=loc)
    log = create_waste_log(loc, user, food_item='Rice', quantity=2)
    session = get_db()
    log.notes = 'edited later'
    with pytest.raises(ValidationError):
        session.commit()
    session.rollback()
    session.refresh(log)
    assert log.notes is None
