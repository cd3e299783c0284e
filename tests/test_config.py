import pytest

from markerlift.config import LiftConfig, from_dict, load_yaml_config, to_dict


def test_defaults_round_trip():
    cfg = LiftConfig()

    assert from_dict(to_dict(cfg)) == cfg
    assert cfg.translate.chr_prefix is True
    assert cfg.chain.overlap_policy == "ambiguous"


def test_load_yaml_merges_over_defaults(write_file):
    path = write_file(
        "cfg.yaml",
        "chain:\n  path: hg18ToHg19.over.chain.gz\n  overlap_policy: reject\n"
        "translate:\n  aliases:\n    25: X\n"
        "workers: 4\nunknown_key: 1\n",
    )

    cfg = load_yaml_config(path)

    assert cfg.chain.path == "hg18ToHg19.over.chain.gz"
    assert cfg.chain.overlap_policy == "reject"
    assert cfg.chain.format == "auto"
    assert cfg.translate.aliases == {"25": "X"}
    assert cfg.translate.chr_prefix is True
    assert cfg.workers == 4


def test_empty_yaml(write_file):
    assert load_yaml_config(write_file("empty.yaml", "")) == LiftConfig()


@pytest.mark.parametrize(
    "raw",
    [{"chain": {"overlap_policy": "guess"}}, {"chain": {"format": "bed"}}, {"workers": 0}],
)
def test_invalid_values(raw):
    with pytest.raises(ValueError):
        from_dict(raw)


def test_null_sections_fall_back_to_defaults(write_file):
    cfg = load_yaml_config(write_file("cfg.yaml", "table:\noutput:\nchain:\n  path: c.chain\nworkers:\n"))

    assert cfg.table == LiftConfig().table
    assert cfg.output == LiftConfig().output
    assert cfg.chain.path == "c.chain"
    assert cfg.workers == 1


def test_non_mapping_yaml_is_rejected(write_file):
    with pytest.raises(ValueError, match="mapping"):
        load_yaml_config(write_file("cfg.yaml", "- table\n- chain\n"))
