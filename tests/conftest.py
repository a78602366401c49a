import pytest

from core.settings import ConnectionSettings
from hardware.mock_transport import MockTransport
from hardware.table_controller import XYTableController


@pytest.fixture
def transport():
    return MockTransport()


@pytest.fixture
def table(transport):
    """Controller on a mock transport, connection already open"""
    controller = XYTableController(ConnectionSettings(), transport)
    assert controller.open_connection()
    return controller


@pytest.fixture
def program_dir(tmp_path):
    """Program folder MyProg with prog.txt (LF endings) and pars.txt (CRLF endings)"""
    folder = tmp_path / "MyProg"
    folder.mkdir()
    (folder / "prog.txt").write_bytes(b"MOVE P,P1\nMOVE P,P2\n")
    (folder / "pars.txt").write_bytes(b"P1= 10.0 20.0\r\nP2= 30.0 40.0\r\n")
    return folder
