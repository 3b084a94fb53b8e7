"""Tests for UrlResolver against an in-memory catalog store."""

from datetime import datetime, timedelta, timezone

import pytest

from furniture_ar.seo.resolver import (
    NotFoundReason,
    NotResolved,
    Resolved,
    UrlResolver,
    pick_newest,
)
from furniture_ar.seo.slugs import generate_model_slug
from furniture_ar.seo.store import CatalogModel, CatalogVariant, DataStoreUnavailable

T0 = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_model(model_id, title, customer="acme", **overrides):
    fields = dict(
        id=model_id,
        title=title,
        customer_id=customer,
        customer_name=customer.title(),
        url_slug=generate_model_slug(title, model_id),
        customer_slug=customer,
        created_at=T0,
    )
    fields.update(overrides)
    return CatalogModel(**fields)


def make_variant(variant_id, model_id, name, **overrides):
    fields = dict(
        id=variant_id,
        parent_model_id=model_id,
        variant_name=name,
        hex_color="#5c4033",
        color_slug=name.lower().replace(" ", "-") if name else None,
        created_at=T0,
    )
    fields.update(overrides)
    return CatalogVariant(**fields)


@pytest.fixture
def store(memory_store):
    memory_store.add_model(make_model("abc12345", "Oak Table"))
    memory_store.add_model(make_model("Ct81wo8G", "Modern Sofa", customer="globex"))
    return memory_store


@pytest.fixture
def resolver(store):
    return UrlResolver(store)


class TestIdResolution:
    """Resolution through the embedded model id."""

    def test_resolves_by_id(self, resolver):
        result = resolver.resolve("acme", "oak-table-abc12345")
        assert isinstance(result, Resolved)
        assert result.success is True
        assert result.model.id == "abc12345"
        assert result.variant is None

    def test_title_drift_is_tolerated(self, resolver):
        result = resolver.resolve("acme", "walnut-dining-table-abc12345")
        assert isinstance(result, Resolved)
        assert result.model.id == "abc12345"

    def test_bare_id(self, resolver):
        result = resolver.resolve("acme", "abc12345")
        assert isinstance(result, Resolved)
        assert result.model.id == "abc12345"

    def test_customer_is_case_insensitive(self, resolver):
        result = resolver.resolve("ACME", "oak-table-abc12345")
        assert isinstance(result, Resolved)

    def test_id_anchored_after_title_edit(self, store, resolver):
        """A link handed out before a rename keeps resolving to the same model."""
        shared = generate_model_slug("Modern Sofa", "Ct81wo8G")
        store.add_model(
            make_model("Ct81wo8G", "Contemporary Couch", customer="globex", url_slug=shared)
        )

        result = resolver.resolve("globex", "modern-sofa-Ct81wo8G")
        assert isinstance(result, Resolved)
        assert result.model.title == "Contemporary Couch"

    def test_unbackfilled_model_uses_derived_customer_slug(self, store, resolver):
        store.add_model(
            make_model("old00001", "Old Lamp", customer="nordic", url_slug=None, customer_slug=None)
        )

        result = resolver.resolve("nordic", "old-lamp-old00001")
        assert isinstance(result, Resolved)
        assert result.model.id == "old00001"

    def test_deterministic(self, resolver):
        first = resolver.resolve("acme", "oak-table-abc12345")
        second = resolver.resolve("acme", "oak-table-abc12345")
        assert first == second


class TestNotFound:
    """Not-found conditions come back as values, never exceptions."""

    def test_unknown_id(self, resolver):
        result = resolver.resolve("acme", "oak-table-zzz99999")
        assert isinstance(result, NotResolved)
        assert result.success is False
        assert result.reason is NotFoundReason.MODEL_NOT_FOUND

    def test_wrong_customer(self, resolver):
        result = resolver.resolve("acme", "modern-sofa-Ct81wo8G")
        assert isinstance(result, NotResolved)
        assert result.reason is NotFoundReason.WRONG_CUSTOMER
        assert result.model is None

    def test_empty_segments(self, resolver):
        assert resolver.resolve("", "oak-table-abc12345").reason is NotFoundReason.MODEL_NOT_FOUND
        assert resolver.resolve("acme", "  ").reason is NotFoundReason.MODEL_NOT_FOUND

    def test_store_failure_propagates(self, store, resolver):
        store.unavailable = True
        with pytest.raises(DataStoreUnavailable):
            resolver.resolve("acme", "oak-table-abc12345")


class TestNanoidIds:
    """Older ids drawn from the nanoid alphabet may contain '_' and '-'."""

    @pytest.mark.parametrize("model_id", ["ab_12345", "ab-12345"])
    def test_resolves_by_id(self, store, resolver, model_id):
        store.add_model(make_model(model_id, "Oak Table"))

        result = resolver.resolve("acme", f"oak-table-{model_id}")
        assert isinstance(result, Resolved)
        assert result.model.id == model_id

    @pytest.mark.parametrize("model_id", ["ab_12345", "ab-12345"])
    def test_bare_id_and_stale_title(self, store, resolver, model_id):
        store.add_model(make_model(model_id, "Oak Table", url_slug=None, customer_slug=None))

        assert resolver.resolve("acme", model_id).model.id == model_id
        assert resolver.resolve("acme", f"walnut-table-{model_id}").model.id == model_id

    def test_variant_after_hyphenated_id(self, store, resolver):
        store.add_model(make_model("ab-12345", "Oak Table"))
        store.add_variant(make_variant("var00009", "ab-12345", "Walnut"))

        result = resolver.resolve("acme", "oak-table-ab-12345", "walnut")
        assert isinstance(result, Resolved)
        assert result.variant.id == "var00009"


class TestLegacySlugs:
    """Links without a recognizable id fall back to exact url_slug matching."""

    def test_literal_slug(self, store, resolver):
        store.add_model(make_model("leg00001", "Vintage Lamp", url_slug="vintage-lamp"))

        result = resolver.resolve("acme", "vintage-lamp")
        assert isinstance(result, Resolved)
        assert result.model.id == "leg00001"

    def test_literal_slug_scoped_to_customer(self, store, resolver):
        store.add_model(make_model("leg00001", "Vintage Lamp", url_slug="vintage-lamp"))

        result = resolver.resolve("globex", "vintage-lamp")
        assert result.reason is NotFoundReason.MODEL_NOT_FOUND

    def test_id_shaped_title_word_falls_back(self, store, resolver):
        """'deluxe2x' looks like an id but is part of a legacy slug."""
        store.add_model(make_model("leg00002", "Sofa Bed", url_slug="sofa-bed-deluxe2x"))

        result = resolver.resolve("acme", "sofa-bed-deluxe2x")
        assert isinstance(result, Resolved)
        assert result.model.id == "leg00002"

    def test_foreign_id_shaped_tail_falls_back(self, store, resolver):
        """The tail matches a globex id, but the whole slug is an acme legacy slug."""
        store.add_model(make_model("leg00003", "Sofa", url_slug="sofa-Ct81wo8G"))

        result = resolver.resolve("acme", "sofa-Ct81wo8G")
        assert isinstance(result, Resolved)
        assert result.model.id == "leg00003"

    def test_collision_picks_newest(self, store, resolver):
        store.add_model(make_model("old00001", "Chair", url_slug="chair", created_at=T0))
        store.add_model(
            make_model("new00001", "Chair", url_slug="chair", created_at=T0 + timedelta(days=1))
        )

        result = resolver.resolve("acme", "chair")
        assert result.model.id == "new00001"

    def test_collision_tie_breaks_on_id(self, store, resolver):
        store.add_model(make_model("aaaa0001", "Chair", url_slug="chair"))
        store.add_model(make_model("zzzz0001", "Chair", url_slug="chair"))

        result = resolver.resolve("acme", "chair")
        assert result.model.id == "zzzz0001"

    def test_pick_newest_handles_naive_and_missing_timestamps(self):
        naive = make_model("naive001", "A", created_at=datetime(2024, 5, 1))
        missing = make_model("missing1", "B", created_at=None)
        aware = make_model("aware001", "C", created_at=T0)
        assert pick_newest([missing, aware, naive]).id == "naive001"


class TestVariants:
    """Variant segment matching."""

    @pytest.fixture(autouse=True)
    def variants(self, store):
        store.add_variant(make_variant("var00001", "abc12345", "Walnut"))
        store.add_variant(make_variant("var00002", "abc12345", "Black Ash"))

    def test_match_by_color_slug(self, resolver):
        result = resolver.resolve("acme", "oak-table-abc12345", "black-ash")
        assert isinstance(result, Resolved)
        assert result.variant.id == "var00002"

    def test_match_is_case_insensitive(self, resolver):
        result = resolver.resolve("acme", "oak-table-abc12345", "WALNUT")
        assert result.variant.id == "var00001"

    def test_match_by_variant_id(self, resolver):
        result = resolver.resolve("acme", "oak-table-abc12345", "var00002")
        assert result.variant.id == "var00002"

    def test_unknown_variant_carries_model(self, resolver):
        result = resolver.resolve("acme", "oak-table-abc12345", "teak")
        assert isinstance(result, NotResolved)
        assert result.reason is NotFoundReason.VARIANT_NOT_FOUND
        assert result.model.id == "abc12345"

    def test_variant_of_another_model_is_not_found(self, store, resolver):
        store.add_model(make_model("def67890", "Side Table"))
        result = resolver.resolve("acme", "side-table-def67890", "walnut")
        assert result.reason is NotFoundReason.VARIANT_NOT_FOUND

    def test_duplicate_slug_prefers_primary(self, store, resolver):
        store.add_variant(
            make_variant(
                "var00003",
                "abc12345",
                "Walnut",
                is_primary=True,
                created_at=T0 + timedelta(hours=1),
            )
        )
        result = resolver.resolve("acme", "oak-table-abc12345", "walnut")
        assert result.variant.id == "var00003"

    def test_duplicate_slug_prefers_oldest(self, store, resolver):
        store.add_variant(
            make_variant("var00000", "abc12345", "Walnut", created_at=T0 - timedelta(hours=1))
        )
        result = resolver.resolve("acme", "oak-table-abc12345", "walnut")
        assert result.variant.id == "var00000"

    def test_unbackfilled_variant_uses_derived_slug(self, store, resolver):
        store.add_variant(make_variant("var00009", "abc12345", "Smoked Oak", color_slug=None))
        result = resolver.resolve("acme", "oak-table-abc12345", "smoked-oak")
        assert result.variant.id == "var00009"
