import pytest
from werkzeug.exceptions import BadRequest
from saveplate.utils.fsm import TransitionValidator


def test_transition_validator_allows_valid(app_instance):
    fsm = TransitionValidator({'A': {'B'}, 'B': set()})
    assert fsm.can_transition('A', 'B')
    with app_instance.test_request_context():
        assert fsm.assert_can_transition('A', 'B') is True


def test_transition_validator_blocks_invalid(app_instance):
    fsm = TransitionValidator({'A': {'B'}, 'B': set()})
    assert not fsm.can_transition('A', 'C')
    assert not fsm.can_transition('unknown', 'A')
    with app_instance.test_request_context():
        with pytest.raises(BadRequest) as exc:
            fsm.assert_can_transition('B', 'A')
    assert 'B -> A' in exc.value.description


def test_terminal_states():
    fsm = TransitionValidator({'A': {'B'}, 'B': []})
    assert fsm.states == ('A', 'B')
    assert fsm.targets('A') == frozenset({'B'})
    assert fsm.is_terminal('B')
    assert not fsm.is_terminal('A')
