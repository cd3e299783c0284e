import pytest

from markerlift.config import TranslateConfig
from markerlift.io_.table import Marker
from markerlift.lift.translate import Interval, Translator, normalize_chrom, to_canonical


@pytest.mark.parametrize(
    "label, expected",
    [
        ("23", "X"),
        ("24", "Y"),
        ("1", "1"),
        ("chr7", "7"),
        ("chrX", "X"),
        ("x", "X"),
        ("M", "MT"),
        ("chrM", "MT"),
        ("MT", "MT"),
    ],
)
def test_normalize_recognized(label, expected):
    assert normalize_chrom(label) == (expected, True)


def test_normalize_unrecognized_passes_through():
    assert normalize_chrom("26") == ("26", False)
    assert normalize_chrom("chrUn_gl000220") == ("chrUn_gl000220", False)


def test_custom_alias():
    assert normalize_chrom("25", {"25": "X"}) == ("X", True)


def test_to_interval_is_half_open_and_prefixed():
    translator = Translator()

    assert translator.to_interval(Marker("rs1", "1", 1000000)) == Interval("chr1", 999999, 1000000)
    assert translator.to_interval(Marker("rs2", "23", 5)) == Interval("chrX", 4, 5)
    assert translator.to_interval(Marker("rs3", "24", 5)).chrom == "chrY"
    assert translator.to_interval(Marker("rs4", "MT", 5)).chrom == "chrM"


def test_without_prefix():
    translator = Translator(TranslateConfig(chr_prefix=False))

    assert translator.to_interval(Marker("rs2", "23", 5)) == Interval("X", 4, 5)


def test_unknown_code_warns_once_and_is_kept(caplog):
    translator = Translator()
    markers = [Marker("a", "26", 10), Marker("b", "26", 20), Marker("c", "1", 30)]

    intervals = translator.translate(markers)

    assert [iv.chrom for iv in intervals] == ["26", "26", "chr1"]
    assert len(translator.warnings) == 1
    assert "'26'" in translator.warnings[0]
    assert "unrecognised chromosome code" in caplog.text


def test_interval_validation():
    with pytest.raises(ValueError):
        Interval("chr1", 5, 5)
    with pytest.raises(ValueError):
        Interval("chr1", -1, 3)
    assert len(Interval("chr1", 3, 7)) == 4


def test_to_canonical():
    assert to_canonical("chr1") == "1"
    assert to_canonical("chrM") == "MT"
    assert to_canonical("chr6_apd_hap1") == "chr6_apd_hap1"
