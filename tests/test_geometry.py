import pickle

import numpy as np
import pytest

from seisgeom import (Geometry, GeometryIC, GeometryOOC, GeometryConfigurationError,
                      InvalidArgument, build_geometry, compare_geometry, get_header,
                      segy_read, segy_scan, split, subsample, switchconfig)
from conftest import NREC, NS, source_x, group_x, group_elevation

SCAN_KEYS = ["GroupX", "GroupY", "RecGroupElevation", "SourceSurfaceElevation", "dt"]


def coordinates(nsrc):
    xsrc = [[i] for i in np.linspace(100, 1100, 2)[:nsrc]]
    ysrc = [[0.] for _ in range(nsrc)]
    zsrc = [[20.] for _ in range(nsrc)]
    return xsrc, ysrc, zsrc


def check_types(geometry):
    assert isinstance(geometry.xloc, tuple)
    assert all(i.dtype == np.float32 for i in geometry.xloc + geometry.yloc +
               geometry.zloc)
    assert all(type(i) is int for i in geometry.nt)
    assert all(isinstance(i, np.float32) for i in geometry.dt + geometry.t +
               geometry.t0)
    assert all(i.time_values.dtype == np.float32 for i in geometry.taxis)


@pytest.mark.parametrize('nsrc', [1, 2])
class TestFromCoordinates:

    def test_errors(self, nsrc):
        xsrc, ysrc, zsrc = coordinates(nsrc)
        with pytest.raises(GeometryConfigurationError):
            build_geometry(xsrc, ysrc, zsrc, dt=.75, t=70.)
        with pytest.raises(GeometryConfigurationError):
            build_geometry(xsrc, ysrc, zsrc)

    def test_grouped(self, nsrc):
        xsrc, ysrc, zsrc = coordinates(nsrc)
        geometry = build_geometry(xsrc, ysrc, zsrc, dt=2., t=1000.)
        geometry_t = build_geometry(xsrc, ysrc, zsrc, dt=2, t=1000)

        assert isinstance(geometry, GeometryIC)
        assert geometry_t == geometry
        assert geometry.nsrc == len(geometry) == nsrc
        assert geometry.nt == (501,)*nsrc
        assert geometry.nrec == (1,)*nsrc
        check_types(geometry)

        for i in range(nsrc):
            assert geometry.nt[i] == round(geometry.t[i]/geometry.dt[i]) + 1
            assert geometry.taxis[i].num == geometry.nt[i]
            assert geometry.taxis[i].time_values[-1] == geometry.t0[i] + geometry.t[i]

    def test_flat(self, nsrc):
        xsrc = np.linspace(100, 1100, 2)[:nsrc]
        ysrc = np.zeros(nsrc)
        zsrc = np.full(nsrc, 20.)

        geometry = GeometryIC.from_coordinates(xsrc, ysrc, zsrc, dt=4., t=1000.,
                                               nsrc=nsrc)
        check_types(geometry)
        assert geometry.nsrc == nsrc
        assert geometry.nt == (251,)*nsrc
        assert geometry == build_geometry(*coordinates(nsrc), dt=4, t=1000)

    def test_t0(self, nsrc):
        geometry = build_geometry(*coordinates(nsrc), dt=2., nt=11, t0=5.)
        assert geometry.t == (20.,)*nsrc
        assert geometry.t0 == (5.,)*nsrc
        assert geometry.taxis[0].time_values[0] == 5.
        assert geometry.taxis[0].time_values[-1] == 25.
        assert geometry != build_geometry(*coordinates(nsrc), dt=2., nt=11)


def test_receiver_spread():
    x = [np.linspace(0, 100, 11), np.linspace(50, 150, 11)]
    geometry = GeometryIC(x, [[0.], [0.]], [np.zeros(11), np.zeros(11)],
                          dt=2., t=100.)
    assert geometry.nrec == (11, 11)
    coords = geometry.coordinates(1)
    assert coords.shape == (11, 3)
    assert np.array_equal(coords[:, 0], x[1])
    assert np.all(coords[:, 1] == 0)


def test_inconsistent_spread():
    with pytest.raises(GeometryConfigurationError):
        GeometryIC([[0., 1., 2.]], [[0., 0.]], [[0., 0., 0.]], dt=2., t=100.)
    with pytest.raises(GeometryConfigurationError):
        GeometryIC([[0., 1., 2.]], [[0.]], [[0.]], dt=2., t=100.)


def test_immutable():
    x = np.array([1., 2.])
    geometry = GeometryIC([x], [[0.]], [[0., 0.]], dt=2., t=100.)
    x[0] = 10.
    assert geometry.xloc[0][0] == 1.
    with pytest.raises(ValueError):
        geometry.xloc[0][0] = 3.


def test_abstract():
    with pytest.raises(TypeError):
        Geometry()


def test_from_block(shot_records, nsrc):
    block = segy_read(shot_records)
    src_geometry = build_geometry(block, key="source",
                                  segy_depth_key="SourceSurfaceElevation")
    rec_geometry = build_geometry(block, key="receiver",
                                  segy_depth_key="RecGroupElevation")

    assert isinstance(src_geometry, GeometryIC)
    assert isinstance(rec_geometry, GeometryIC)
    assert get_header(block, "SourceSurfaceElevation")[0] == src_geometry.zloc[0][0]
    assert get_header(block, "RecGroupElevation")[0] == rec_geometry.zloc[0][0]
    assert get_header(block, "SourceX")[0] == src_geometry.xloc[0][0]
    assert get_header(block, "GroupX")[0] == rec_geometry.xloc[0][0]

    assert src_geometry.nsrc == rec_geometry.nsrc == nsrc
    assert src_geometry.nrec == (1,)*nsrc
    assert rec_geometry.nrec == (NREC,)*nsrc
    assert src_geometry.nt == rec_geometry.nt == (NS,)*nsrc
    assert src_geometry.dt == (4.,)*nsrc
    assert src_geometry.t == (1000.,)*nsrc

    for i in range(nsrc):
        assert src_geometry.xloc[i].tolist() == [source_x(i)]
        assert src_geometry.zloc[i].tolist() == [20.]
        np.testing.assert_allclose(rec_geometry.xloc[i], group_x(np.arange(NREC)))
        np.testing.assert_allclose(rec_geometry.zloc[i],
                                   group_elevation(np.arange(NREC)), rtol=1e-6)


def test_from_block_depth_key(shot_records):
    block = segy_read(shot_records)
    geometry = GeometryIC.from_block(block, key="source", segy_depth_key="SourceDepth")
    assert geometry.zloc[0].tolist() == [15.]

    # Defaults to the elevation headers
    assert GeometryIC.from_block(block).zloc[0].tolist() == [20.]


@pytest.mark.parametrize('key, depth_key, expected', [
    ('source', 'SourceDatumElevation', [10.]),
    ('receiver', 'GroupWaterDepth', [3.]*NREC),
])
def test_from_block_any_depth_key(shot_records, nsrc, key, depth_key, expected):
    geometry = GeometryIC.from_block(segy_read(shot_records), key=key,
                                     segy_depth_key=depth_key)
    assert geometry.nsrc == nsrc
    assert all(np.allclose(z, expected) for z in geometry.zloc)


def test_from_block_bad_key(shot_records):
    block = segy_read(shot_records)
    with pytest.raises(GeometryConfigurationError):
        GeometryIC.from_block(block, key="cdp")


def test_from_scan(shot_records, nsrc):
    block = segy_read(shot_records)
    container = segy_scan(shot_records, keys=SCAN_KEYS)

    src_geometry = build_geometry(container, key="source",
                                  segy_depth_key="SourceSurfaceElevation")
    rec_geometry = build_geometry(container, key="receiver",
                                  segy_depth_key="RecGroupElevation")

    assert isinstance(src_geometry, GeometryOOC)
    assert isinstance(rec_geometry, GeometryOOC)
    assert src_geometry.key == "source"
    assert rec_geometry.key == "receiver"
    assert src_geometry.segy_depth_key == "SourceSurfaceElevation"
    assert rec_geometry.segy_depth_key == "RecGroupElevation"
    assert block.data.size == sum(i*j for i, j in zip(rec_geometry.nrec,
                                                      rec_geometry.nt))
    assert src_geometry.nrec == (1,)*nsrc

    # Same as above, but with one scan per shot
    container_cell = [split(container, j) for j in range(nsrc)]
    src_geometry_cell = build_geometry(container_cell, key="source",
                                       segy_depth_key="SourceSurfaceElevation")
    rec_geometry_cell = build_geometry(container_cell, key="receiver",
                                       segy_depth_key="RecGroupElevation")

    assert isinstance(src_geometry_cell, GeometryOOC)
    assert rec_geometry_cell.key == "receiver"
    assert src_geometry_cell.segy_depth_key == "SourceSurfaceElevation"
    assert block.data.size == sum(i*j for i, j in zip(rec_geometry_cell.nrec,
                                                      rec_geometry_cell.nt))
    assert compare_geometry(src_geometry, src_geometry_cell)
    assert compare_geometry(rec_geometry, rec_geometry_cell)


def test_materialize(shot_records, nsrc):
    block = segy_read(shot_records)
    container = segy_scan(shot_records, keys=SCAN_KEYS)
    src_geometry = GeometryOOC.from_scan(container, key="source",
                                         segy_depth_key="SourceSurfaceElevation")
    rec_geometry = GeometryOOC.from_scan(container, key="receiver",
                                         segy_depth_key="RecGroupElevation")

    src_geometry_ic = build_geometry(src_geometry)
    rec_geometry_ic = build_geometry(rec_geometry)

    assert isinstance(src_geometry_ic, GeometryIC)
    assert isinstance(rec_geometry_ic, GeometryIC)
    assert get_header(block, "SourceSurfaceElevation")[0] == src_geometry_ic.zloc[0][0]
    assert get_header(block, "RecGroupElevation")[0] == rec_geometry_ic.zloc[0][0]
    assert get_header(block, "SourceX")[0] == src_geometry_ic.xloc[0][0]
    assert get_header(block, "GroupX")[0] == rec_geometry_ic.xloc[0][0]

    # Same as reading the whole file in memory
    assert src_geometry_ic == GeometryIC.from_block(block, key="source")
    assert rec_geometry_ic == GeometryIC.from_block(block, key="receiver")

    # Same summary as the out-of-core geometry
    assert compare_geometry(src_geometry, src_geometry_ic)
    assert compare_geometry(rec_geometry_ic, rec_geometry)

    shot = rec_geometry.materialize(nsrc - 1)
    assert shot.nsrc == 1
    assert shot == subsample(rec_geometry_ic, nsrc - 1)


def test_materialize_depth_key_not_scanned(shot_records):
    container = segy_scan(shot_records, keys=["GroupX"])
    geometry = GeometryOOC.from_scan(container, key="source", segy_depth_key="SourceDepth")
    assert GeometryIC.from_ooc(geometry).zloc[0].tolist() == [15.]


def test_ooc_validation(shot_records):
    container = segy_scan(shot_records)
    with pytest.raises(GeometryConfigurationError):
        GeometryOOC.from_scan(container, key="cdp")
    with pytest.raises(GeometryConfigurationError):
        GeometryOOC([container.split(0)], nt=NS, dt=4., nrec=[1, 2])
    with pytest.raises(GeometryConfigurationError):
        GeometryOOC([], nt=NS, dt=4., nrec=1)
    with pytest.raises(GeometryConfigurationError):
        GeometryOOC([container.split(0)], nt=NS, dt=3., t=1000., nrec=1)


def test_scan_directory(shot_records_dir):
    container = segy_scan(shot_records_dir, filt='.segy', keys=SCAN_KEYS)
    geometry = GeometryOOC.from_scan(container, key="source")
    assert geometry.nsrc == 3

    geometry_ic = GeometryIC.from_ooc(geometry)
    assert [i.tolist() for i in geometry_ic.xloc] == [[source_x(i)] for i in range(3)]


def test_pickle(shot_records):
    container = segy_scan(shot_records, keys=SCAN_KEYS)
    for geometry in [GeometryOOC.from_scan(container, key="receiver"),
                     GeometryIC.from_block(segy_read(shot_records), key="receiver")]:
        pkl = pickle.dumps(geometry)
        new_geometry = pickle.loads(pkl)

        assert type(new_geometry) is type(geometry)
        assert new_geometry == geometry
        assert new_geometry is not geometry


def test_copy():
    geometry = build_geometry(*coordinates(2), dt=2., t=100.)
    new_geometry = geometry.copy()
    assert new_geometry == geometry
    assert new_geometry is not geometry
    assert build_geometry(geometry) == geometry


def test_empty_selection():
    geometry = build_geometry(*coordinates(2), dt=2., t=100.)
    with pytest.raises(InvalidArgument):
        geometry[[]]


def test_rebuild_after_switchconfig():
    with switchconfig(timing_rtol=1e-2):
        geometry = build_geometry(*coordinates(1), dt=2., t=1000.01)
    assert geometry.nt == (501,)
    assert geometry.t == (1000.,)

    assert geometry.copy() == geometry
    assert pickle.loads(pickle.dumps(geometry)) == geometry


def test_repr_uninitialized():
    geometry = GeometryIC.__new__(GeometryIC)
    assert repr(geometry) == "GeometryIC(<uninitialized>)"
    assert repr(build_geometry(*coordinates(2), dt=2., t=100.)) == \
        "GeometryIC(nsrc=2, nrec=(1, 1))"
