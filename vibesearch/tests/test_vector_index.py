"""
Vector Index Tests

Exhaustive cosine search with exclusion, upsert semantics and the
reader/writer lock.

Test Scenarios:
---------------
- Scenario A: {X: [1,0], Y: [0,1], Z: [0.7,0.7]}, query [1,0] -> X, Z, Y
- Scenario B: same index, exclude {X} -> Z, Y
- Scenario C: empty index -> []
- Idempotent upsert, remove, zero / mismatched vectors, tie-break by id
- Concurrent readers and writers

Run:
----
    pytest vibesearch/tests/test_vector_index.py -v
"""

import math
import random
import threading

import pytest

from vibesearch import VectorIndex
from vibesearch.index import ReadWriteLock, cosine_similarity


@pytest.fixture
def xyz_index():
    return VectorIndex({"X": [1.0, 0.0], "Y": [0.0, 1.0], "Z": [0.7, 0.7]})


class TestSearch:
    def test_scenario_a_order(self, xyz_index):
        results = xyz_index.search([1.0, 0.0], 3)
        assert [r.media_id for r in results] == ["X", "Z", "Y"]
        assert results[0].similarity == pytest.approx(1.0)
        assert results[1].similarity == pytest.approx(1 / math.sqrt(2), abs=1e-6)
        assert results[2].similarity == pytest.approx(0.0)

    def test_scenario_b_exclusion(self, xyz_index):
        results = xyz_index.search([1.0, 0.0], 3, exclude={"X"})
        assert [r.media_id for r in results] == ["Z", "Y"]

    def test_scenario_c_empty_index(self):
        assert VectorIndex().search([1.0, 0.0], 10) == []

    def test_top_k_truncates(self, xyz_index):
        assert [r.media_id for r in xyz_index.search([1.0, 0.0], 1)] == ["X"]

    def test_non_positive_top_k_rejected(self, xyz_index):
        with pytest.raises(ValueError):
            xyz_index.search([1.0, 0.0], 0)

    def test_exclude_accepts_any_iterable(self, xyz_index):
        results = xyz_index.search([1.0, 0.0], 3, exclude=["X", "Z"])
        assert [r.media_id for r in results] == ["Y"]

    def test_ties_break_by_id(self):
        index = VectorIndex({"b": [1.0, 0.0], "a": [2.0, 0.0], "c": [3.0, 0.0]})
        assert [r.media_id for r in index.search([1.0, 0.0], 3)] == ["a", "b", "c"]

    def test_zero_and_mismatched_vectors_score_zero(self):
        index = VectorIndex({"zero": [0.0, 0.0], "short": [1.0], "ok": [1.0, 0.0]})
        by_id = {r.media_id: r.similarity for r in index.search([1.0, 0.0], 3)}
        assert by_id == {"ok": pytest.approx(1.0), "zero": 0.0, "short": 0.0}

    def test_zero_query_scores_everything_zero(self, xyz_index):
        assert all(r.similarity == 0.0 for r in xyz_index.search([0.0, 0.0], 3))

    def test_similarity_always_in_range(self):
        rng = random.Random(7)
        index = VectorIndex({f"m{i}": [rng.uniform(-1, 1) for _ in range(8)] for i in range(50)})
        for r in index.search([rng.uniform(-1, 1) for _ in range(8)], 50):
            assert -1.0 <= r.similarity <= 1.0


class TestMutation:
    def test_idempotent_upsert(self, xyz_index):
        """upsert(id, v1) then upsert(id, v2): one entry, vector v2, size unchanged."""
        xyz_index.upsert("W", [1.0, 0.0])
        size = xyz_index.size()
        xyz_index.upsert("W", [0.0, 1.0])
        assert xyz_index.size() == size
        top = xyz_index.search([0.0, 1.0], 4)
        assert [r.media_id for r in top[:2]] == ["W", "Y"]
        assert sum(1 for r in top if r.media_id == "W") == 1

    def test_remove(self, xyz_index):
        xyz_index.remove("X")
        assert "X" not in xyz_index
        assert len(xyz_index) == 2
        xyz_index.remove("missing")
        assert len(xyz_index) == 2

    def test_load_replaces_contents(self, xyz_index):
        xyz_index.load({"only": [1.0, 1.0]})
        assert xyz_index.size() == 1
        assert "X" not in xyz_index

    def test_caller_mutation_does_not_leak(self):
        vec = [1.0, 0.0]
        index = VectorIndex()
        index.upsert("a", vec)
        vec[0] = 0.0
        assert index.search([1.0, 0.0], 1)[0].similarity == pytest.approx(1.0)


class TestConcurrency:
    def test_readers_and_writers(self):
        """Searches running alongside upserts never error and never see excluded ids."""
        index = VectorIndex({f"m{i}": [1.0, float(i)] for i in range(100)})
        excluded = {f"m{i}" for i in range(0, 100, 3)}
        errors = []

        def reader():
            try:
                for _ in range(50):
                    for r in index.search([1.0, 5.0], 20, excluded):
                        assert r.media_id not in excluded
            except Exception as e:
                errors.append(e)

        def writer():
            try:
                for i in range(100, 200):
                    index.upsert(f"m{i}", [1.0, float(i)])
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=reader) for _ in range(4)] + [threading.Thread(target=writer)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=30)
        assert not errors
        assert index.size() == 200

    def test_write_waits_for_readers(self):
        lock = ReadWriteLock()
        order = []
        reading = threading.Event()
        release = threading.Event()

        def reader():
            with lock.read():
                reading.set()
                release.wait(5)
                order.append("read-done")

        def writer():
            with lock.write():
                order.append("write")

        r = threading.Thread(target=reader)
        r.start()
        reading.wait(5)
        w = threading.Thread(target=writer)
        w.start()
        release.set()
        r.join(5)
        w.join(5)
        assert order == ["read-done", "write"]


class TestCosine:
    """Similarity properties checked through VectorIndex.search, the path retrieval uses."""

    def test_index_self_similarity_is_one(self):
        rng = random.Random(3)
        for _ in range(20):
            a = [rng.uniform(-5, 5) for _ in range(16)]
            assert VectorIndex({"a": a}).search(a, 1)[0].similarity == pytest.approx(1.0, abs=1e-6)

    def test_index_symmetric(self):
        a, b = [1.0, 2.0, 3.0], [-2.0, 0.5, 4.0]
        ab = VectorIndex({"b": b}).search(a, 1)[0].similarity
        ba = VectorIndex({"a": a}).search(b, 1)[0].similarity
        assert ab == pytest.approx(ba)
        assert ab == pytest.approx(cosine_similarity(a, b), abs=1e-6)

    def test_index_zero_vector_is_zero(self):
        index = VectorIndex({"zero": [0.0, 0.0, 0.0], "ok": [1.0, 2.0, 3.0]})
        by_id = {r.media_id: r.similarity for r in index.search([1.0, 2.0, 3.0], 2)}
        assert by_id["zero"] == 0.0
        assert all(r.similarity == 0.0 for r in index.search([0.0, 0.0, 0.0], 2))

    def test_self_similarity_is_one(self):
        rng = random.Random(3)
        for _ in range(20):
            a = [rng.uniform(-5, 5) for _ in range(16)]
            assert cosine_similarity(a, a) == pytest.approx(1.0)

    def test_symmetric(self):
        a, b = [1.0, 2.0, 3.0], [-2.0, 0.5, 4.0]
        assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))

    def test_zero_vector_is_zero(self):
        assert cosine_similarity([0.0, 0.0], [1.0, 2.0]) == 0.0
        assert cosine_similarity([], [1.0]) == 0.0

    def test_length_mismatch_is_zero(self):
        assert cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0]) == 0.0
