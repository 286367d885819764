from collections.abc import Iterator

import pytest

import combichain as cc


@pytest.fixture
def restore_config() -> Iterator[None]:
    """Restore the active config after a test changes it."""
    previous = cc.get_config()
    yield
    cc.set_config(word_bits=previous.word_bits, max_repr_items=previous.max_repr_items)
