import pytest

from ruistic.environment import Environment
from ruistic.errors import RuisticError
from ruistic.types import NIL


def test_define_and_get():
    env = Environment()
    env.define('a', 1.0)
    assert env.get('a') == 1.0


def test_lookup_walks_parent_chain():
    root = Environment()
    root.define('a', 'outer')
    child = Environment(parent=Environment(parent=root))
    assert child.get('a') == 'outer'
    assert child.depth == 2


def test_define_shadows_without_touching_parent():
    root = Environment()
    root.define('a', 1.0)
    child = Environment(parent=root)
    child.define('a', 2.0)
    assert child.get('a') == 2.0
    assert root.get('a') == 1.0


def test_assign_updates_nearest_defining_scope():
    root = Environment()
    root.define('a', 1.0)
    child = Environment(parent=root)
    assert child.assign('a', 5.0) == 5.0
    assert root.get('a') == 5.0
    assert 'a' not in child.values


def test_lookup_never_sees_child_scopes():
    root = Environment()
    child = Environment(parent=root)
    child.define('inner', NIL)
    with pytest.raises(RuisticError) as info:
        root.get('inner')
    assert info.value.err.name == 'NameError'


def test_assign_undefined_fails_and_defines_nothing():
    env = Environment(parent=Environment())
    with pytest.raises(RuisticError) as info:
        env.assign('x', 5.0, line=7)
    assert str(info.value) == "[line 7] NameError: undefined variable 'x'"
    assert not env.is_defined('x')
