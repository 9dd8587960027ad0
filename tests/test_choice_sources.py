"""Tests for the field-choice lookup collaborators."""
import tempfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from directus_typegen.core.errors import ChoiceLookupError
from directus_typegen.db.models import DirectusField
from directus_typegen.db.session import Base, make_engine, make_session_factory
from directus_typegen.generators.ts_gen.render_model import render_model
from directus_typegen.generators.ts_gen.types import GeneratorConfig
from directus_typegen.schema.models import Collection, Field, FieldChoice, FieldDefinition, Schema
from directus_typegen.services.choices import (
    CachedChoiceSource,
    ChoiceSource,
    DatabaseChoiceSource,
    safe_lookup,
)


@pytest.fixture
def session_factory():
    with tempfile.TemporaryDirectory() as temp_dir:
        engine = make_engine(f"sqlite:///{Path(temp_dir) / 'directus.db'}")
        Base.metadata.create_all(engine)
        factory = make_session_factory(engine)
        with factory() as db:
            db.add_all([
                DirectusField(
                    collection="articles", field="status", interface="select-dropdown",
                    options={"choices": [{"text": "Draft", "value": "draft"}, {"text": "Live", "value": "live"}]},
                ),
                DirectusField(
                    collection="articles", field="labels", interface="select-multiple-checkbox",
                    options={"choices": [{"text": "A", "value": "a"}]},
                ),
                DirectusField(collection="articles", field="title", interface="input", options={"trim": True}),
                DirectusField(collection="articles", field="body", interface="input-rich-text-html"),
                DirectusField(collection="articles", field="rating", interface="select-dropdown", options={"choices": 1}),
            ])
            db.commit()
        yield factory
        engine.dispose()


def _definition(field):
    return FieldDefinition(collection="articles", field=field, choices=[FieldChoice(value="x")])


class TestDatabaseChoiceSource:
    """Lookups against directus_fields."""

    def test_lookup_with_choices(self, session_factory):
        definition = DatabaseChoiceSource(session_factory).lookup("articles", "status")
        assert definition.interface == "select-dropdown"
        assert [c.value for c in definition.choices] == ["draft", "live"]

    def test_lookup_without_choices(self, session_factory):
        definition = DatabaseChoiceSource(session_factory).lookup("articles", "title")
        assert definition is not None
        assert definition.choices == []

    def test_lookup_unknown_field(self, session_factory):
        assert DatabaseChoiceSource(session_factory).lookup("articles", "nope") is None

    def test_all_returns_only_fields_with_choices(self, session_factory):
        definitions = DatabaseChoiceSource(session_factory).all()
        assert [(d.field, d.is_multiple) for d in definitions] == [("labels", True), ("status", False)]

    def test_choices_that_are_not_a_list_are_ignored(self, session_factory):
        definition = DatabaseChoiceSource(session_factory).lookup("articles", "rating")
        assert definition.interface == "select-dropdown"
        assert definition.choices == []

    def test_driver_errors_become_lookup_errors(self):
        factory = MagicMock(side_effect=OperationalError("SELECT", {}, Exception("down")))
        with pytest.raises(ChoiceLookupError):
            DatabaseChoiceSource(factory).lookup("articles", "status")


class TestCachedChoiceSource:
    """Prefetching and per-key caching."""

    def test_prefetch_answers_from_memory(self):
        inner = MagicMock(spec=ChoiceSource)
        inner.all.return_value = [_definition("status")]
        cached = CachedChoiceSource(inner)

        assert cached.prefetch() is True
        assert cached.lookup("articles", "status").field == "status"
        assert cached.lookup("articles", "title") is None
        inner.lookup.assert_not_called()

    def test_without_prefetch_each_key_is_looked_up_once(self):
        inner = MagicMock(spec=ChoiceSource)
        inner.lookup.return_value = None
        cached = CachedChoiceSource(inner)

        cached.lookup("articles", "title")
        cached.lookup("articles", "title")
        cached.lookup("articles", "body")

        assert inner.lookup.call_count == 2

    def test_failed_prefetch_falls_back_to_lookups(self):
        inner = MagicMock(spec=ChoiceSource)
        inner.all.side_effect = ChoiceLookupError("timeout")
        inner.lookup.return_value = _definition("status")
        cached = CachedChoiceSource(inner)

        assert cached.prefetch() is False
        assert cached.lookup("articles", "status").field == "status"
        inner.lookup.assert_called_once_with("articles", "status")


def test_safe_lookup_treats_failures_as_no_choices():
    source = MagicMock(spec=ChoiceSource)
    source.lookup.side_effect = ChoiceLookupError("boom")
    assert safe_lookup(source, "articles", "status") is None


def test_safe_lookup_treats_unexpected_errors_as_no_choices():
    source = MagicMock(spec=ChoiceSource)
    source.lookup.side_effect = AttributeError("'list' object has no attribute 'get'")
    assert safe_lookup(source, "articles", "status") is None


def test_unexpected_prefetch_error_falls_back_to_lookups():
    inner = MagicMock(spec=ChoiceSource)
    inner.all.side_effect = KeyError("collection")
    inner.lookup.return_value = None
    cached = CachedChoiceSource(inner)

    assert cached.prefetch() is False
    assert cached.lookup("articles", "status") is None
    inner.lookup.assert_called_once_with("articles", "status")


def test_database_source_with_broken_options_renders_every_field(session_factory):
    collection = Collection(collection="articles", fields={
        name: Field(collection="articles", field=name, type="string", nullable=False)
        for name in ("status", "rating", "title")
    })
    schema = Schema(collections={"articles": collection})

    rendered = render_model(collection, schema, DatabaseChoiceSource(session_factory), GeneratorConfig())

    assert "  status: 'draft' | 'live';" in rendered.source
    assert "  rating: string;" in rendered.source
    assert "  title: string;" in rendered.source
    assert rendered.failures == []
