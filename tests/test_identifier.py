import pytest
from hypothesis import given, strategies as st

from iggywire.identifier import (
    Consumer,
    ConsumerKind,
    IdKind,
    Identifier,
    MessagePolling,
    PollingStrategy,
    new_identifier,
)


def test_numeric_identifier():
    ident = new_identifier(123)
    assert ident == Identifier(IdKind.NUMERIC, 4, 123)


def test_string_identifier():
    ident = new_identifier("Hello")
    assert ident.kind is IdKind.STRING
    assert ident.length == len("Hello")
    assert ident.value == "Hello"


def test_empty_string_identifier():
    ident = new_identifier("")
    assert ident.kind is IdKind.STRING
    assert ident.length == 0


def test_string_identifier_length_counts_bytes():
    text = "żółw"
    assert new_identifier(text).length == len(text.encode("utf-8"))


@given(st.integers(min_value=0, max_value=2**32 - 1))
def test_numeric_identifier_always_four_bytes(value):
    ident = new_identifier(value)
    assert ident.kind is IdKind.NUMERIC
    assert ident.length == 4
    assert ident.value == value


@pytest.mark.parametrize("bad", [1.5, None, b"abc", True])
def test_invalid_identifier_type(bad):
    with pytest.raises(TypeError):
        new_identifier(bad)


def test_kind_values():
    assert IdKind(1) is IdKind.NUMERIC
    assert IdKind(2) is IdKind.STRING
    assert ConsumerKind(1) is ConsumerKind.SINGLE
    assert ConsumerKind(2) is ConsumerKind.GROUP


def test_consumer_holds_identifier():
    consumer = Consumer(ConsumerKind.GROUP, new_identifier("group"))
    assert consumer.kind is ConsumerKind.GROUP
    assert consumer.id.value == "group"


@pytest.mark.parametrize(
    "factory, kind",
    [
        (PollingStrategy.first, MessagePolling.FIRST),
        (PollingStrategy.last, MessagePolling.LAST),
        (PollingStrategy.next, MessagePolling.NEXT),
    ],
)
def test_valueless_strategies(factory, kind):
    strategy = factory()
    assert strategy.kind is kind
    assert strategy.value == 0


@given(st.integers(min_value=0, max_value=2**64 - 1))
def test_valued_strategies(value):
    assert PollingStrategy.offset(value) == PollingStrategy(MessagePolling.OFFSET, value)
    assert PollingStrategy.timestamp(value) == PollingStrategy(MessagePolling.TIMESTAMP, value)


@pytest.mark.parametrize(
    "value, kind",
    [
        (1, MessagePolling.OFFSET),
        (2, MessagePolling.TIMESTAMP),
        (3, MessagePolling.FIRST),
        (4, MessagePolling.LAST),
        (5, MessagePolling.NEXT),
    ],
)
def test_polling_kind_values(value, kind):
    assert MessagePolling(value) is kind