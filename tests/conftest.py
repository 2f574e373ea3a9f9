from pathlib import Path

import pytest
from OCP.BRepPrimAPI import BRepPrimAPI_MakeBox
from OCP.IFSelect import IFSelect_RetDone
from OCP.STEPControl import STEPControl_AsIs, STEPControl_Writer

# Edge lengths of the box written to the STEP fixture, in mm
BOX_SIZE = (10.0, 20.0, 30.0)


class FakeKernel:
    """
    In-memory stand-in for the OCCT kernel.

    Records every call in `calls`. An exception listed in `raises`
    under a step name is raised when that step runs.
    """

    def __init__(self, raises=None, write_result=True, create_file=True):
        self.raises = raises or {}
        self.write_result = write_result
        self.create_file = create_file
        self.calls = []
        self.params = None

    def _step(self, name):
        self.calls.append(name)
        if name in self.raises:
            raise self.raises[name]

    def load(self, path):
        self._step("load")
        return ("shape", path)

    def scale(self, shape, factor):
        self._step("scale")
        return ("scaled", shape, factor)

    def tessellate(self, shape, params):
        self._step("tessellate")
        self.params = params
        return shape

    def write(self, shape, path, binary):
        self._step("write")
        if self.create_file:
            # like StlAPI_Writer, report an unwritable path instead of raising
            try:
                with open(path, "wb") as f:
                    f.write(b"fake binary" if binary else b"solid fake\nendsolid fake\n")
            except OSError:
                return False
        return self.write_result


@pytest.fixture
def fake_kernel():
    return FakeKernel()


@pytest.fixture(scope="session")
def box_step(tmp_path_factory) -> Path:
    """A STEP file holding a single axis-aligned box at the origin."""
    path = tmp_path_factory.mktemp("models") / "box.step"
    shape = BRepPrimAPI_MakeBox(*BOX_SIZE).Shape()

    writer = STEPControl_Writer()
    writer.Transfer(shape, STEPControl_AsIs)
    assert writer.Write(path.as_posix()) == IFSelect_RetDone
    return path
