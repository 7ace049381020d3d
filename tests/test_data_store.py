#!/usr/bin/env python3
"""
Unit tests for the DataStore and its provider matching.
"""

import unittest

from autowire.runtime import Container, DataStore


class RecordingProvider:
    """Provider that records its invocations."""

    def __init__(self, value):
        self.value = value
        self.calls = []

    def __call__(self, key, default, container):
        self.calls.append((key, default, container))
        return self.value


class TestDataStoreData(unittest.TestCase):
    """Test direct data storage."""

    def setUp(self):
        self.container = Container()
        self.store = self.container.data()

    def test_set_and_get(self):
        self.store.set("a.b.c", 5)
        self.assertEqual(self.store.get("a.b.c"), 5)

    def test_nested_values_are_reconstituted(self):
        self.store.set("a.b.c", 5)
        self.store.set("a.b", {"c": 5})

        self.assertEqual(self.store.get("a.b"), {"c": 5})
        self.assertEqual(self.store.get("a"), {"b": {"c": 5}})
        self.assertEqual(self.store.get("a.b.c"), 5)

    def test_missing_key_returns_default(self):
        self.assertIsNone(self.store.get("missing"))
        self.assertEqual(self.store.get("missing", "fallback"), "fallback")

    def test_arrays_are_leaves(self):
        self.store.set("servers", ["a", "b"])
        self.assertEqual(self.store.get("servers"), ["a", "b"])

    def test_set_returns_store(self):
        self.assertIs(self.store.set("x", 1), self.store)

    def test_has(self):
        self.store.set("db.host", "localhost")

        self.assertTrue(self.store.has("db.host"))
        self.assertTrue(self.store.has("db"))
        self.assertFalse(self.store.has("db.port"))

    def test_initial_items(self):
        store = DataStore(self.container, {"db": {"host": "localhost", "port": 5432}, "debug": True})

        self.assertEqual(store.get("db.port"), 5432)
        self.assertEqual(store.get("db"), {"host": "localhost", "port": 5432})
        self.assertTrue(store.get("debug"))


class TestDataStoreProviders(unittest.TestCase):
    """Test provider registration, matching and caching."""

    def setUp(self):
        self.container = Container()
        self.store = self.container.data()

    def test_provider_receives_key_default_and_container(self):
        provider = RecordingProvider("value")
        self.store.provide("service.url", provider)

        self.assertEqual(self.store.get("service.url", "default"), "value")
        self.assertEqual(provider.calls, [("service.url", "default", self.container)])

    def test_most_specific_provider_wins(self):
        general = RecordingProvider("general")
        specific = RecordingProvider("specific")
        self.store.provide("config.db", general)
        self.store.provide("config.db.host", specific)

        self.assertEqual(self.store.get("config.db.host"), "specific")
        self.assertEqual(general.calls, [])

    def test_exact_match_beats_longer_provider_keys(self):
        self.store.provide("config.db.host", RecordingProvider("host"), shared=False)
        self.store.provide("config.db", RecordingProvider("db"), shared=False)

        self.assertEqual(self.store.get("config.db"), "db")

    def test_closest_extension_of_query_wins(self):
        self.store.provide("config.db.host", RecordingProvider("host"), shared=False)
        self.store.provide("config.db", RecordingProvider("db"), shared=False)

        self.assertEqual(self.store.get("config"), "db")

    def test_first_registered_wins_ties(self):
        self.store.provide("app.x", RecordingProvider("x"), shared=False)
        self.store.provide("app.y", RecordingProvider("y"), shared=False)

        self.assertEqual(self.store.get("app."), "x")

    def test_provider_key_must_extend_query(self):
        self.store.provide("config.db", RecordingProvider("db"))

        self.assertIsNone(self.store.get("config.db.port"))
        self.assertFalse(self.store.has("config.db.port"))

    def test_none_result_falls_back_to_default(self):
        self.store.provide("maybe", RecordingProvider(None), shared=False)
        self.assertEqual(self.store.get("maybe", "default"), "default")

    def test_shared_provider_result_is_cached(self):
        provider = RecordingProvider("computed")
        self.store.provide("cached.key", provider)

        self.assertEqual(self.store.get("cached.key"), "computed")
        self.assertEqual(self.store.get("cached.key"), "computed")
        self.assertEqual(len(provider.calls), 1)

    def test_shared_result_is_stored_under_query_key(self):
        provider = RecordingProvider({"host": "localhost"})
        self.store.provide("config.db", provider)

        self.store.get("config")

        self.assertEqual(self.store.get("config.host"), "localhost")
        self.assertEqual(self.store.get("config"), {"host": "localhost"})
        self.assertEqual(len(provider.calls), 1)

    def test_has_uses_direct_data_after_shared_computation(self):
        provider = RecordingProvider(42)
        self.store.provide("answer", provider)
        self.store.get("answer")

        self.assertTrue(self.store.has("answer"))
        self.assertEqual(self.store.get("answer"), 42)
        self.assertEqual(len(provider.calls), 1)

    def test_non_shared_provider_runs_every_time(self):
        provider = RecordingProvider("fresh")
        self.store.provide("fresh.key", provider, shared=False)

        self.store.get("fresh.key")
        self.store.get("fresh.key")

        self.assertEqual(len(provider.calls), 2)
        self.assertTrue(self.store.has("fresh.key"))

    def test_data_wins_over_providers(self):
        provider = RecordingProvider("provided")
        self.store.set("key", "stored")
        self.store.provide("key", provider)

        self.assertEqual(self.store.get("key"), "stored")
        self.assertEqual(provider.calls, [])

    def test_new_provider_is_considered_after_lookup(self):
        self.store.provide("svc.url.full", RecordingProvider("full"), shared=False)
        self.assertEqual(self.store.get("svc.url"), "full")

        self.store.provide("svc.url", RecordingProvider("exact"), shared=False)
        self.assertEqual(self.store.get("svc.url"), "exact")

    def test_provide_returns_store(self):
        self.assertIs(self.store.provide("x", RecordingProvider(1)), self.store)

    def test_initial_providers_are_not_shared(self):
        provider = RecordingProvider("initial")
        store = DataStore(self.container, providers={"p": provider})

        store.get("p")
        store.get("p")

        self.assertEqual(len(provider.calls), 2)

    def test_provider_can_use_container(self):
        class Settings:
            def __init__(self):
                self.region = "eu"

        self.store.provide("region", lambda key, default, c: c.make(Settings).region)
        self.assertEqual(self.store.get("region"), "eu")


if __name__ == "__main__":
    unittest.main()
