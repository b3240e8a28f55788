"""Tests for collection event models."""

import pytest
from instance_catalog.events.schemas import CollectionReset
from instance_catalog.events.schemas import InstanceAdded
from instance_catalog.events.schemas import InstanceChanged
from pydantic import ValidationError


def test_type_literals():
    assert CollectionReset().type == "collection_reset"
    assert InstanceAdded(index=0).type == "instance_added"
    assert InstanceChanged(index=3).type == "instance_changed"


def test_index_required():
    with pytest.raises(ValidationError) as exc_info:
        InstanceAdded()
    assert "index" in str(exc_info.value)


def test_negative_index_rejected():
    with pytest.raises(ValidationError):
        InstanceChanged(index=-1)


def test_events_of_different_kinds_are_not_equal():
    assert InstanceAdded(index=1) != InstanceChanged(index=1)
