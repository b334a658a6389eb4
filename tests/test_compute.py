import numpy as np
import pytest

from ocworker import compute
from ocworker.compute import ComputeManager

A = [[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]]
B = [[7.0, 8.0], [9.0, 10.0], [11.0, 12.0]]


@pytest.fixture
def manager():
    return ComputeManager()


def test_add_u32_small(manager):
    assert manager.add_u32(3, 3) == 6


def test_add_u32_wraps(manager):
    assert manager.add_u32(0xFFFFFFFF, 1) == 0


def test_add_u32_is_commutative(manager):
    assert manager.add_u32(123456, 0xFFFF0000) == manager.add_u32(0xFFFF0000, 123456)


def test_add_u32_rejects_negative(manager):
    with pytest.raises(ValueError):
        manager.add_u32(-1, 2)


def test_add_u32_rejects_too_large(manager):
    with pytest.raises(ValueError):
        manager.add_u32(1 << 32, 0)


def test_add_vectors(manager):
    assert manager.add([3.0, 2.0], [4.0, 3.0]) == [7.0, 5.0]


def test_add_with_zero_is_identity(manager):
    values = [1.5, -2.25, 0.0]
    assert manager.add(values, [0.0, 0.0, 0.0]) == values


def test_add_length_mismatch(manager):
    with pytest.raises(ValueError, match="Input length mismatch"):
        manager.add([1.0], [1.0, 2.0])


def test_matrix_multiply_shape(manager):
    result = manager.matrix_multiply(A, B)
    assert len(result) == 2
    assert all(len(row) == 2 for row in result)


def test_matrix_multiply_values(manager):
    assert manager.matrix_multiply(A, B) == [[58.0, 64.0], [139.0, 154.0]]


def test_matrix_multiply_identity(manager):
    identity = [[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]]
    assert manager.matrix_multiply(A, identity) == A


def test_matrix_multiply_matches_numpy(manager):
    rng = np.random.default_rng(7)
    a = rng.random((20, 17), dtype=np.float32)
    b = rng.random((17, 33), dtype=np.float32)
    result = np.asarray(manager.matrix_multiply(a.tolist(), b.tolist()))
    assert np.allclose(result, a @ b, rtol=1e-5)


def test_matrix_multiply_dimension_mismatch(manager):
    with pytest.raises(ValueError, match="width must equal"):
        manager.matrix_multiply(A, A)


def test_matrix_multiply_ragged_rows(manager):
    with pytest.raises(ValueError):
        manager.matrix_multiply([[1.0, 2.0], [3.0]], B)


def test_vec_matrix_multiply_matches_row_of_matrix_product(manager):
    for row, expected in zip(A, manager.matrix_multiply(A, B)):
        assert manager.vec_matrix_multiply(row, B) == expected


def test_vec_matrix_multiply_source_example_shape(manager):
    b = [[3.0, 4.0, 5.0], [3.0, 4.0, 5.0]]
    result = manager.vec_matrix_multiply([1.0, 2.0], b)
    assert result == manager.add(manager.add(b[0], b[1]), b[1])


def test_vec_matrix_multiply_mismatch(manager):
    with pytest.raises(ValueError, match="Vector A's width"):
        manager.vec_matrix_multiply([1.0, 2.0], B)


def test_get_compute_before_init(monkeypatch):
    monkeypatch.setattr(compute, "_MANAGER", None)
    with pytest.raises(RuntimeError, match="not initialized"):
        compute.get_compute()


def test_init_compute_is_idempotent(monkeypatch):
    monkeypatch.setattr(compute, "_MANAGER", None)
    first = compute.init_compute()
    assert compute.init_compute() is first
    assert compute.get_compute() is first


def test_module_functions_use_shared_manager(monkeypatch):
    monkeypatch.setattr(compute, "_MANAGER", None)
    compute.init_compute()
    expected = ComputeManager().matrix_multiply(A, B)
    assert compute.matrix_multiply(A, B) == expected
    assert compute.vec_matrix_multiply(A[0], B) == expected[0]


def test_module_functions_require_init(monkeypatch):
    monkeypatch.setattr(compute, "_MANAGER", None)
    with pytest.raises(RuntimeError):
        compute.matrix_multiply(A, B)