from pytest import fixture

from .config import get_backend, set_backend, Backend

@fixture(scope="module", params=[Backend.MULTIPROCESSING, Backend.THREADING, Backend.DUMMY])
def kwcount_backend(request):
    """Run the test under each backend in turn
    """
    original_backend = get_backend()
    set_backend(request.param)
    def fin():
        set_backend(original_backend)
    request.addfinalizer(fin)
    return request.param

@fixture
def threading_backend():
    original_backend = get_backend()
    set_backend(Backend.THREADING)
    yield Backend.THREADING
    set_backend(original_backend)

@fixture
def write_file(tmp_path):
    """Return a helper writing :lines: (or raw bytes) to a file under tmp_path"""
    def write(name, lines):
        path = tmp_path / name
        if isinstance(lines, bytes):
            path.write_bytes(lines)
        else:
            path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
        return str(path)
    return write
