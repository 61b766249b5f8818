import pytest

from pairstore.core.keys import encode_key, external_key, primary_key, scope_prefix
from pairstore.core.models import Direction


def test_encode_key_layout():
    assert encode_key("0", Direction.PRIMARY, "123") == "1:0:p:123"
    assert encode_key("0", Direction.EXTERNAL, "234") == "1:0:e:234"
    assert primary_key("acme", "42") == "4:acme:p:42"
    assert external_key("acme", "42") == "4:acme:e:42"


def test_encode_key_accepts_raw_tag():
    assert encode_key("s", "e", "x") == encode_key("s", Direction.EXTERNAL, "x")
    with pytest.raises(ValueError):
        encode_key("s", "b", "x")


def test_directions_never_collide():
    assert primary_key("s", "1") != external_key("s", "1")


@pytest.mark.parametrize(
    ("left", "right"),
    [
        (("a:b", Direction.PRIMARY, "x"), ("a", Direction.PRIMARY, "b:p:x")),
        (("a:p", Direction.EXTERNAL, "x"), ("a", Direction.PRIMARY, "e:x")),
        (("1", Direction.PRIMARY, "x"), ("11", Direction.PRIMARY, "x")),
        (("a", Direction.PRIMARY, "x:y"), ("a:x", Direction.PRIMARY, "y")),
    ],
)
def test_delimiter_in_scope_does_not_collide(left, right):
    assert encode_key(*left) != encode_key(*right)


def test_scope_prefix_does_not_cover_neighbour_scopes():
    prefix = scope_prefix("a")
    assert primary_key("a", "1").startswith(prefix)
    assert external_key("a", "1").startswith(prefix)
    assert not primary_key("a:b", "1").startswith(prefix)
    assert not external_key("ab", "1").startswith(prefix)
    assert not primary_key("b", "a").startswith(prefix)
