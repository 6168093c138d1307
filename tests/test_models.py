import pytest

from khajiit_wares.models import ProcessedItem


@pytest.mark.django_db
def test_insert_is_insert_if_absent():
    assert ProcessedItem.insert("1054962210118705152") is True
    assert ProcessedItem.insert("1054962210118705152") is False
    assert ProcessedItem.insert("1054962210118705153") is True
    assert ProcessedItem.objects.count() == 2


@pytest.mark.django_db
def test_integer_keys_share_the_string_key_space():
    assert ProcessedItem.insert(42) is True
    assert ProcessedItem.insert("42") is False
