import numpy as np
import pytest
import segyio

from seisgeom import configuration


NREC = 11
NS = 251
DT_US = 4000


def source_x(shot):
    return 100. + 1000.*shot


def group_x(rec):
    return 10.*rec


def group_elevation(rec):
    return 5. + rec


def write_shot_records(path, nsrc, nrec=NREC, ns=NS, dt_us=DT_US, first_shot=0):
    """
    Write a SEG-Y file holding ``nsrc`` shots of ``nrec`` traces each. Coordinates
    are stored in decimeters (SourceGroupScalar=-10) and elevations in
    centimeters (ElevationScalar=-100): source elevation 20 m, source depth
    15 m, source datum 10 m, group water depth 3 m.
    """
    spec = segyio.spec()
    spec.iline = 189
    spec.xline = 193
    spec.format = 5
    spec.sorting = 2
    spec.samples = np.arange(ns, dtype=np.int32)
    spec.tracecount = nsrc * nrec

    with segyio.create(str(path), spec) as f:
        f.bin[segyio.BinField.Interval] = int(dt_us)
        for s in range(nsrc):
            shot = first_shot + s
            for r in range(nrec):
                i = s*nrec + r
                f.header[i] = {
                    segyio.TraceField.TRACE_SEQUENCE_FILE: i + 1,
                    segyio.TraceField.FieldRecord: shot + 1,
                    segyio.TraceField.TraceNumber: r + 1,
                    segyio.TraceField.SourceX: int(round(source_x(shot)*10)),
                    segyio.TraceField.SourceY: 0,
                    segyio.TraceField.GroupX: int(round(group_x(r)*10)),
                    segyio.TraceField.GroupY: 0,
                    segyio.TraceField.SourceGroupScalar: -10,
                    segyio.TraceField.ElevationScalar: -100,
                    segyio.TraceField.SourceSurfaceElevation: 2000,
                    segyio.TraceField.SourceDepth: 1500,
                    segyio.TraceField.SourceDatumElevation: 1000,
                    segyio.TraceField.GroupWaterDepth: 300,
                    segyio.TraceField.ReceiverGroupElevation:
                        int(round(group_elevation(r)*100)),
                    segyio.TraceField.TRACE_SAMPLE_COUNT: int(ns),
                    segyio.TraceField.TRACE_SAMPLE_INTERVAL: int(dt_us),
                }
                f.trace[i] = np.linspace(0, 1, ns, dtype=np.float32) + np.float32(i)

    return path


@pytest.fixture(params=[1, 2], ids=['nsrc1', 'nsrc2'])
def nsrc(request):
    return request.param


@pytest.fixture
def shot_records(tmp_path, nsrc):
    """A SEG-Y file with `nsrc` shot records."""
    return write_shot_records(tmp_path / ('unit_test_shot_records_%d.segy' % nsrc),
                              nsrc)


@pytest.fixture
def shot_records_dir(tmp_path):
    """A directory with three single-shot SEG-Y files, plus an unrelated file."""
    for i in range(3):
        write_shot_records(tmp_path / ('shot_%d.segy' % i), 1, first_shot=i)
    (tmp_path / 'notes.txt').write_text('not a SEG-Y file')
    return tmp_path


@pytest.fixture(autouse=True)
def reset_configuration():
    previous = dict(configuration)
    yield
    for k, v in previous.items():
        configuration[k] = v
