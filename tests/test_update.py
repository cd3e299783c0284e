import pytest

from markerlift.errors import JoinError
from markerlift.io_.table import Dataset, Marker
from markerlift.lift.partition import MappedRecord
from markerlift.lift.update import update_dataset


@pytest.fixture
def dataset():
    return Dataset(
        markers=(
            Marker("rs1", "1", 100, ("A", "G")),
            Marker("rs2", "23", 200, ("C", "T")),
            Marker("rs3", "2", 300, ("G", "T")),
        ),
        build="hg18",
    )


def test_update_keeps_order_and_fields(dataset):
    mapped = [MappedRecord("rs3", "2", 310), MappedRecord("rs1", "1", 110)]

    lifted = update_dataset(dataset, mapped, build="hg19")

    assert lifted.markers == (Marker("rs1", "1", 110, ("A", "G")), Marker("rs3", "2", 310, ("G", "T")))
    assert lifted.build == "hg19"
    # Source dataset is untouched.
    assert dataset.markers[0].position == 100
    assert dataset.build == "hg18"


def test_update_unknown_identifier_raises(dataset):
    with pytest.raises(JoinError) as excinfo:
        update_dataset(dataset, [MappedRecord("rs1", "1", 110), MappedRecord("rs99", "1", 5)])

    assert excinfo.value.identifier == "rs99"


def test_update_repeated_identifier_raises(dataset):
    with pytest.raises(JoinError, match="more than once"):
        update_dataset(dataset, [MappedRecord("rs1", "1", 110), MappedRecord("rs1", "1", 111)])


def test_update_is_deterministic(dataset):
    mapped = [MappedRecord("rs2", "X", 250)]

    assert update_dataset(dataset, mapped) == update_dataset(dataset, mapped)


def test_update_joins_repeated_identifiers_by_input_row():
    dataset = Dataset(markers=(Marker("rs1", "1", 100, ("A",)), Marker("rs1", "2", 100, ("C",))))

    only_first = update_dataset(dataset, [MappedRecord("rs1", "1", 110, index=0)])
    both = update_dataset(dataset, [MappedRecord("rs1", "1", 110, index=0), MappedRecord("rs1", "2", 220, index=1)])

    assert only_first.markers == (Marker("rs1", "1", 110, ("A",)),)
    assert both.markers == (Marker("rs1", "1", 110, ("A",)), Marker("rs1", "2", 220, ("C",)))


def test_update_repeated_identifier_needs_input_row():
    dataset = Dataset(markers=(Marker("rs1", "1", 100), Marker("rs1", "2", 100)))

    with pytest.raises(JoinError, match="not unique"):
        update_dataset(dataset, [MappedRecord("rs1", "1", 110)])


def test_update_rejects_row_holding_other_marker(dataset):
    with pytest.raises(JoinError, match="input row 2"):
        update_dataset(dataset, [MappedRecord("rs1", "1", 110, index=2)])
