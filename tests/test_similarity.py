"""
Tests for vector math.
"""

import math

import pytest

from mimir.similarity import PreparedVector, cosine_similarity, euclidean_distance, normalize


@pytest.mark.parametrize("v", [[1.0, 2.0, 3.0], [-0.5, 0.25], [1e-8, 3e-8, 0.0]])
def test_cosine_self_similarity_is_one(v):
    assert cosine_similarity(v, v) == pytest.approx(1.0)


def test_cosine_is_symmetric():
    a = [0.3, -1.2, 4.0]
    b = [2.0, 0.5, -0.7]
    assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))


def test_cosine_orthogonal_and_opposite():
    assert cosine_similarity([1, 0], [0, 1]) == pytest.approx(0.0)
    assert cosine_similarity([1, 0], [-1, 0]) == pytest.approx(-1.0)


@pytest.mark.parametrize(
    "a, b",
    [
        ([1.0, 0.0], [1.0, 0.0, 0.0]),
        ([], []),
        ([0.0, 0.0, 0.0], [1.0, 2.0, 3.0]),
        ([1.0, 2.0], [0.0, 0.0]),
        ([float("nan"), 1.0], [1.0, 1.0]),
    ],
)
def test_cosine_malformed_vectors_score_zero(a, b):
    assert cosine_similarity(a, b) == 0.0


def test_cosine_known_value():
    assert cosine_similarity([0.99, 0.1, 0.0], [1.0, 0.0, 0.0]) == pytest.approx(0.99494, abs=1e-4)


def test_euclidean_distance():
    assert euclidean_distance([0, 0], [3, 4]) == pytest.approx(5.0)
    assert euclidean_distance([1, 2], [1, 2]) == 0.0


def test_euclidean_distance_malformed_is_infinite():
    assert euclidean_distance([1.0], [1.0, 2.0]) == math.inf
    assert euclidean_distance([], []) == math.inf


def test_normalize():
    result = normalize([3.0, 4.0])
    assert result == pytest.approx([0.6, 0.8])
    assert math.hypot(*result) == pytest.approx(1.0)


def test_normalize_zero_vector_unchanged():
    assert normalize([0.0, 0.0]) == [0.0, 0.0]


def test_prepared_vector_matches_cosine_similarity():
    a = [0.3, -1.2, 4.0]
    b = [2.0, 0.5, -0.7]
    prepared = PreparedVector(a)

    assert prepared.norm == pytest.approx(math.sqrt(0.09 + 1.44 + 16.0))
    assert prepared.cosine(PreparedVector(b)) == pytest.approx(cosine_similarity(a, b))


@pytest.mark.parametrize("a, b", [([1.0, 0.0], [1.0, 0.0, 0.0]), ([], []), ([0.0, 0.0], [1.0, 0.0])])
def test_prepared_vector_malformed_scores_zero(a, b):
    assert PreparedVector(a).cosine(PreparedVector(b)) == 0.0
