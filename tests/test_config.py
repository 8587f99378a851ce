import pytest

from import_tidy.config import build_config
from import_tidy.config import read_config_file
from import_tidy.errors import ConfigError
from import_tidy.rules import Tier


def test_read_config_file_missing(tmp_path):
    assert read_config_file(str(tmp_path)) == {}


def test_build_config_from_file(tmp_path):
    (tmp_path / ".import-tidy.toml").write_text(
        'internal-prefix = "git.co/internal"\n'
        'order = ["internal", "standard"]\n'
        'formatter = "none"\n'
        'exclude = ["vendor"]\n'
    )
    config = build_config(str(tmp_path))
    assert config.internal_prefix == "git.co/internal"
    assert config.order.tiers == (Tier.INTERNAL, Tier.STANDARD, Tier.EXTERNAL)
    assert config.formatter is None
    assert config.exclude == ("vendor",)


def test_build_config_arguments_override_file(tmp_path):
    (tmp_path / ".import-tidy.toml").write_text('internal-prefix = "git.co/a"\norder = "internal"\n')
    config = build_config(str(tmp_path), internal_prefix="git.co/b", order="external")
    assert config.internal_prefix == "git.co/b"
    assert config.order.tiers[0] is Tier.EXTERNAL
    assert config.formatter == "gofmt"


def test_build_config_requires_prefix(tmp_path):
    with pytest.raises(ConfigError):
        build_config(str(tmp_path))


def test_build_config_malformed_file(tmp_path):
    (tmp_path / ".import-tidy.toml").write_text("internal-prefix = \n")
    with pytest.raises(ConfigError):
        build_config(str(tmp_path), internal_prefix="git.co/internal")


def test_build_config_single_exclude_string(tmp_path):
    (tmp_path / ".import-tidy.toml").write_text('internal-prefix = "git.co/internal"\nexclude = "vendor"\n')
    assert build_config(str(tmp_path)).exclude == ("vendor",)


@pytest.mark.parametrize("line", ["formatter = 3", "exclude = 3", "exclude = [1, 2]", "order = 7"])
def test_build_config_wrong_types(tmp_path, line):
    (tmp_path / ".import-tidy.toml").write_text(f'internal-prefix = "git.co/internal"\n{line}\n')
    with pytest.raises(ConfigError):
        build_config(str(tmp_path))
