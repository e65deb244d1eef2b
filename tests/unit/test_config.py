"""Tests for configuration file support."""

import logging
import tomllib

import pytest

from vcf2rdf.assembly import GRCH37_P13
from vcf2rdf.config import (
    Config,
    ConfigValidationError,
    generate_config,
    load_config,
    validate_config,
)
from vcf2rdf.models import Sequence


class TestLoadConfig:
    """Test loading TOML configuration files."""

    def test_load_full_config(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text(
            """
base = "http://example.org/"
info = ["DP", "AF"]

[namespaces]
ex = "http://example.org/ns#"

[reference.1]
name = "1"
reference = "http://identifiers.org/hco/1/GRCh37"

[reference."NC_000002.11"]
name = "2"
reference = "http://identifiers.org/hco/2/GRCh37"
"""
        )

        config = load_config(path)

        assert config.base == "http://example.org/"
        assert config.info == ["DP", "AF"]
        assert config.namespaces == {"ex": "http://example.org/ns#"}
        assert config.sequence("1") == Sequence("1", "http://identifiers.org/hco/1/GRCh37")
        assert config.sequence("NC_000002.11").name == "2"
        assert config.sequence("3") is None

    def test_info_defaults_to_none(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[reference.1]\nname = \"1\"\nreference = \"http://r/1\"\n")

        assert load_config(path).info is None

    def test_namespace_merges_defaults(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('base = "http://example.org/"\n[namespaces]\nex = "http://e/"\n')

        namespace = load_config(path).namespace

        assert namespace.base == "http://example.org/"
        assert namespace.prefixes["ex"] == "http://e/"
        assert "faldo" in namespace.prefixes

    def test_missing_reference_warns(self, tmp_path, caplog):
        path = tmp_path / "config.toml"
        path.write_text('[reference.1]\nname = "1"\n')

        with caplog.at_level(logging.WARNING, logger="vcf2rdf"):
            config = load_config(path)

        assert config.has_missing_references()
        assert "Some reference of sequences are empty" in caplog.text

    def test_file_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            load_config(tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("info = [\n")

        with pytest.raises(ConfigValidationError, match="Invalid TOML"):
            load_config(path)

    def test_invalid_prefix_name(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('[namespaces]\n"my ns" = "http://example.org/"\n')

        with pytest.raises(ConfigValidationError, match="not a valid prefix name"):
            load_config(path)


class TestValidateConfig:
    """Test configuration validation."""

    @pytest.mark.parametrize(
        "data,message",
        [
            ({"base": 1}, "base must be a string"),
            ({"namespaces": ["ex"]}, "namespaces must be a table"),
            ({"namespaces": {"ex": 1}}, "namespaces.ex must be a string"),
            ({"namespaces": {"my ns": "http://e/"}}, "namespaces.my ns is not a valid prefix name"),
            ({"namespaces": {"1ex": "http://e/"}}, "namespaces.1ex is not a valid prefix name"),
            ({"namespaces": {"ex.": "http://e/"}}, "is not a valid prefix name"),
            ({"namespaces": {"ex:": "http://e/"}}, "is not a valid prefix name"),
            ({"info": "DP"}, "info must be a list"),
            ({"info": ["DP", 1]}, "info entries must be a string"),
            ({"reference": {"1": "http://r/1"}}, "reference.1 must be a table"),
            ({"reference": {"1": {"reference": 1}}}, "reference.1.reference must be a string"),
        ],
    )
    def test_invalid(self, data, message):
        with pytest.raises(ConfigValidationError, match=message):
            validate_config(data)

    def test_valid(self):
        validate_config({"base": "http://e/", "info": [], "reference": {"1": {"name": "1"}}})

    @pytest.mark.parametrize("prefix", ["", "ex", "ex.v2", "my-ns", "my_ns1"])
    def test_valid_prefix_names(self, prefix):
        validate_config({"namespaces": {prefix: "http://e/"}})

    def test_from_dict_validates(self):
        with pytest.raises(ConfigValidationError):
            Config.from_dict({"info": 3})


class TestGenerateConfig:
    """Test configuration template generation."""

    def test_template_parses(self):
        text = generate_config(["DP", "AF"], ["1", "NC_000002.11"])
        data = tomllib.loads(text)

        assert data["info"] == ["DP", "AF"]
        assert data["namespaces"] == {}
        assert data["reference"]["1"] == {"name": "1"}
        assert data["reference"]["NC_000002.11"] == {"name": "NC_000002.11"}
        assert "# Remove unnecessary keys to convert." in text
        assert '# reference = ""' in text

    def test_template_with_assembly(self):
        text = generate_config([], ["chr1", "NC_000001.10", "chrUn"], GRCH37_P13)
        data = tomllib.loads(text)

        assert data["info"] == []
        assert data["reference"]["chr1"] == {
            "name": "1",
            "reference": "http://identifiers.org/hco/1/GRCh37",
        }
        assert data["reference"]["NC_000001.10"]["name"] == "1"
        assert "reference" not in data["reference"]["chrUn"]

    def test_template_loads_as_config(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text(generate_config(["DP"], ["1"], GRCH37_P13))

        config = load_config(path)

        assert config.info == ["DP"]
        assert config.sequence("1").reference == "http://identifiers.org/hco/1/GRCh37"
        assert not config.has_missing_references()
