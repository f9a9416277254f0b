import importlib.util
import math

import pytest

import spirograph_math as sm
from math_backends import numba_backend, python_backend
from spirograph_geometry import INSIDE, OUTSIDE, trochoid_point
from spirograph_math import list_backends

NUMBA_INSTALLED = importlib.util.find_spec("numba") is not None


def test_numba_backend_availability():
    backends = list_backends(available_only=True)
    names = {backend.name for backend in backends}
    assert "python" in names

    if NUMBA_INSTALLED:
        assert "numba" in names
    else:
        assert "numba" not in names


def test_list_backends_includes_unavailable():
    names = [backend.name for backend in list_backends()]
    assert names == ["numba", "python"]


def test_set_backend_rejects_unknown_name():
    with pytest.raises(sm.InvalidParameter):
        sm.set_backend("fortran")
    assert sm.get_backend_name() == "python"


@pytest.mark.skipif(NUMBA_INSTALLED, reason="numba is installed")
def test_set_backend_rejects_unavailable_numba():
    with pytest.raises(sm.InvalidParameter):
        sm.set_backend("numba")


def test_python_backend_matches_closed_form():
    trace = python_backend.generate_pen_trace(5.0, 3.0, 2.0, INSIDE, 50, 0.1)
    assert len(trace) == 50
    for i, point in enumerate(trace):
        x, y = trochoid_point(i * 0.1, 5.0, 3.0, 2.0, INSIDE)
        assert math.isclose(point.x, x, abs_tol=1e-12)
        assert math.isclose(point.y, y, abs_tol=1e-12)


def test_numba_backend_generator_always_usable():
    # sans numba, le générateur retombe sur le backend python
    fast = numba_backend.generate_pen_trace(7.0, 2.0, 3.0, OUTSIDE, 200)
    slow = python_backend.generate_pen_trace(7.0, 2.0, 3.0, OUTSIDE, 200)
    assert len(fast) == len(slow)
    for a, b in zip(fast, slow):
        assert math.isclose(a.x, b.x, abs_tol=1e-9)
        assert math.isclose(a.y, b.y, abs_tol=1e-9)


@pytest.mark.skipif(not NUMBA_INSTALLED, reason="numba not installed")
def test_generate_with_numba_backend_matches_python():
    request = sm.CurveRequest(200.0, 120.0, [100.0, -40.0], INSIDE)
    fast = sm.generate(request, backend="numba")
    slow = sm.generate(request, backend="python")
    assert [len(t) for t in fast] == [len(t) for t in slow]
    for fast_trace, slow_trace in zip(fast, slow):
        for a, b in zip(fast_trace, slow_trace):
            assert math.isclose(a.x, b.x, abs_tol=1e-9)
            assert math.isclose(a.y, b.y, abs_tol=1e-9)
