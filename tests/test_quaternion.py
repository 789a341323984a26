import numpy as np
import pytest

from vionav.quaternion import quaternion_jacobian, quaternion_plus, quaternion_product

IDENTITY = np.array([0.0, 0.0, 0.0, 1.0])


def _unit(q):
    q = np.asarray(q, dtype=float)
    return q / np.linalg.norm(q)


def test_product_with_identity():
    q = _unit([0.1, -0.4, 0.3, 0.8])
    assert np.allclose(quaternion_product(IDENTITY, q), q)
    assert np.allclose(quaternion_product(q, IDENTITY), q)


def test_product_with_conjugate_is_identity():
    q = _unit([0.2, 0.5, -0.1, 0.7])
    conj = np.array([-q[0], -q[1], -q[2], q[3]])
    assert np.allclose(quaternion_product(q, conj), IDENTITY)


def test_product_is_associative():
    a = _unit([0.1, 0.2, 0.3, 0.9])
    b = _unit([-0.5, 0.1, 0.4, 0.6])
    c = _unit([0.3, -0.3, 0.2, 0.5])
    left = quaternion_product(quaternion_product(a, b), c)
    right = quaternion_product(a, quaternion_product(b, c))
    assert np.allclose(left, right)


def test_plus_zero_delta_returns_input():
    q = _unit([0.3, 0.1, -0.2, 0.9])
    assert np.allclose(quaternion_plus(q, [0.0, 0.0, 0.0]), q)


def test_plus_on_identity_gives_axis_angle_form():
    delta = np.array([0.2, -0.1, 0.3])
    norm = np.linalg.norm(delta)
    result = quaternion_plus(IDENTITY, delta)
    assert np.allclose(result[:3], np.sin(norm) / norm * delta)
    assert result[3] == pytest.approx(np.cos(norm))


def test_plus_preserves_unit_norm():
    q = _unit([0.4, -0.2, 0.1, 0.7])
    result = quaternion_plus(q, [0.5, 1.2, -0.7])
    assert np.linalg.norm(result) == pytest.approx(1.0)


def test_jacobian_at_identity():
    expected = np.vstack([np.eye(3), np.zeros((1, 3))])
    assert np.allclose(quaternion_jacobian(IDENTITY), expected)


def test_jacobian_matches_finite_difference():
    q = _unit([0.3, -0.6, 0.2, 0.7])
    jac = quaternion_jacobian(q)
    eps = 1e-7
    for i in range(3):
        delta = np.zeros(3)
        delta[i] = eps
        numeric = (quaternion_plus(q, delta) - q) / eps
        assert np.allclose(numeric, jac[:, i], atol=1e-5)


def test_wrong_sizes_raise():
    with pytest.raises(ValueError):
        quaternion_plus([0.0, 0.0, 1.0], [0.0, 0.0, 0.0])
    with pytest.raises(ValueError):
        quaternion_plus(IDENTITY, [0.0, 0.0])
    with pytest.raises(ValueError):
        quaternion_jacobian([1.0, 2.0])