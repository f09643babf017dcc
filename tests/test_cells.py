import pytest

from sheetassist.llm.cells import CellRef, column_index, column_label


@pytest.mark.parametrize(
    "col,label",
    [(0, "A"), (1, "B"), (25, "Z"), (26, "AA"), (27, "AB"), (51, "AZ"), (52, "BA"), (701, "ZZ"), (702, "AAA"), (16383, "XFD")],
)
def test_column_label_matches_spreadsheet_naming(col, label):
    assert column_label(col) == label
    assert column_index(label) == col


def test_column_encoding_is_bijective_over_a_range():
    labels = [column_label(i) for i in range(5000)]
    assert len(set(labels)) == len(labels)
    assert all(column_index(l) == i for i, l in enumerate(labels))


def test_negative_column_rejected():
    with pytest.raises(ValueError):
        column_label(-1)


def test_cell_ref_label_and_parse():
    assert CellRef(row=0, col=0).label == "A1"
    assert CellRef(row=9, col=27).label == "AB10"
    assert CellRef.parse("ab10") == CellRef(row=9, col=27)
    for bad in ("", "10", "A0", "A-1", "1A"):
        with pytest.raises(ValueError):
            CellRef.parse(bad)
