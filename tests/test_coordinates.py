import numpy as np
import pytest

from seisgeom import GeometryConfigurationError, normalize_coords


def check_types(locs):
    for loc in locs:
        assert isinstance(loc, tuple)
        for i in loc:
            assert isinstance(i, np.ndarray)
            assert i.dtype == np.float32
            assert i.ndim == 1
            assert not i.flags.writeable


@pytest.mark.parametrize('nsrc', [1, 2, 5])
def test_grouped(nsrc):
    x = [np.linspace(0, 100, 11) + i for i in range(nsrc)]
    y = [np.zeros(11) for _ in range(nsrc)]
    z = [np.full(11, 10.) for _ in range(nsrc)]

    locs = normalize_coords(x, y, z)
    check_types(locs)
    xloc, yloc, zloc = locs
    assert len(xloc) == len(yloc) == len(zloc) == nsrc
    for i in range(nsrc):
        assert np.array_equal(xloc[i], x[i])


def test_grouped_2d_array():
    x = np.arange(6.).reshape(2, 3)
    xloc, yloc, zloc = normalize_coords(x, [[0.], [0.]], np.ones((2, 3)))
    assert len(xloc) == 2
    assert np.array_equal(xloc[1], [3, 4, 5])
    assert np.array_equal(yloc[0], [0])


@pytest.mark.parametrize('nsrc', [None, 1, 2])
def test_flat(nsrc):
    n = nsrc or 3
    x = np.linspace(100, 1100, n)
    xloc, yloc, zloc = normalize_coords(x, range(n), [20.]*n, nsrc=nsrc)
    check_types((xloc, yloc, zloc))
    assert len(xloc) == n
    assert all(len(i) == 1 for i in xloc + yloc + zloc)
    assert [i[0] for i in xloc] == list(x.astype(np.float32))


def test_scalar():
    xloc, yloc, zloc = normalize_coords(100., 0, np.float64(20.))
    assert len(xloc) == 1
    assert xloc[0].tolist() == [100.]
    assert zloc[0].tolist() == [20.]


def test_copy_on_construct():
    x = [np.array([1., 2., 3.])]
    xloc, _, _ = normalize_coords(x, [[0.]], [[0., 0., 0.]])
    x[0][0] = 10.
    assert xloc[0][0] == 1.
    with pytest.raises(ValueError):
        xloc[0][0] = 5.


@pytest.mark.parametrize('x, y, z, nsrc', [
    ([1., 2.], [0.], [0., 0.], None),
    ([1., 2.], [0., 0.], [0., 0.], 3),
    ([[1.], [2.]], [[0.], [0.]], [[0.]], None),
    ([1.], [0.], None, None),
    ([], [], [], None),
    ('abc', [0.], [0.], None),
])
def test_inconsistent(x, y, z, nsrc):
    with pytest.raises(GeometryConfigurationError):
        normalize_coords(x, y, z, nsrc=nsrc)
