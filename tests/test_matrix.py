import pytest

from tensorconv.matrix import Matrix


def _matrix(rows, cols, values):
    m = Matrix(rows, cols)
    m.initialize(values)
    return m


def test_creation():
    mat = Matrix(2, 3)
    assert mat.dim_h == 2
    assert mat.dim_w == 3
    assert mat.data is None
    mat.allocate_memory()
    assert len(mat.data) == 6
    assert mat.size() == 2 * 3


def test_initialize_sets_values():
    mat = _matrix(2, 2, [1.0, 2.0, 3.0, 4.0])
    assert mat.data == [1.0, 2.0, 3.0, 4.0]
    assert mat[0, 1] == 2.0
    assert mat[1, 0] == 3.0


def test_gemm_basic():
    a = _matrix(2, 2, [1.0, 2.0, 3.0, 4.0])
    b = _matrix(2, 2, [5.0, 6.0, 7.0, 8.0])
    c = Matrix(2, 2)
    Matrix.gemm(a, b, c)
    assert c.data == [19.0, 22.0, 43.0, 50.0]


def test_gemm_rectangular():
    a = _matrix(2, 3, [1, 2, 3, 4, 5, 6])
    b = _matrix(3, 1, [1, 0, 2])
    c = Matrix(2, 1)
    Matrix.gemm(a, b, c)
    assert c.data == [7.0, 16.0]


def test_invalid_initialize_raises():
    mat = Matrix(2, 3)
    with pytest.raises(ValueError, match="Invalid data size"):
        mat.initialize([1.0, 2.0])


@pytest.mark.parametrize(
    "shapes, message",
    [
        (((2, 3), (2, 2), (2, 2)), "A to B"),
        (((2, 2), (2, 2), (3, 2)), "C to A"),
        (((2, 2), (2, 2), (2, 3)), "C to B"),
    ],
)
def test_gemm_dimension_mismatch(shapes, message):
    a, b, c = (Matrix(*s) for s in shapes)
    a.allocate_memory()
    b.allocate_memory()
    with pytest.raises(ValueError, match=message):
        Matrix.gemm(a, b, c)


def test_index_out_of_range():
    mat = _matrix(2, 2, [1, 2, 3, 4])
    with pytest.raises(IndexError):
        mat[2, 0] = 9.0
    with pytest.raises(IndexError):
        mat[0, -1] = 9.0
    assert mat.data == [1, 2, 3, 4]
    assert mat[1, 1] == 4


def test_index_on_unallocated_raises():
    mat = Matrix(2, 2)
    with pytest.raises(RuntimeError):
        mat[0, 0]
    assert mat.data is None
    assert mat.size() == 4


def test_setitem_updates_flat_storage():
    mat = Matrix(2, 3)
    mat.allocate_memory()
    mat[1, 2] = 7.5
    assert mat.data[5] == 7.5


def test_fill():
    mat = Matrix(2, 2)
    mat.fill(3.0)
    assert mat.data == [3.0, 3.0, 3.0, 3.0]


def test_render():
    mat = _matrix(2, 2, [1.0, 2.0, 3.0, 4.5])
    assert mat.render("m") == (
        "Matrix m dims are 2x2\n"
        "Element size is 4 bytes\n"
        "1 2 \n"
        "3 4.5 \n"
    )


def test_print_writes_render(capsys):
    mat = _matrix(1, 2, [1.0, 2.0])
    mat.print("x")
    assert capsys.readouterr().out == mat.render("x")


def test_render_unallocated_raises():
    with pytest.raises(RuntimeError, match="not allocated"):
        Matrix(1, 1).render()