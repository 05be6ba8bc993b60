"""Tests for the command-line entry point."""

import json

import pytest

from src.main import main
from src.services.database import close_connections
from src.utils.config import reset_config


@pytest.fixture
def catalog_file(tmp_path, catalog_dict):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(catalog_dict), encoding="utf-8")
    return path


def _write_payload(tmp_path, payload, name="payload.json"):
    path = tmp_path / name
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


class TestTierVolume:
    def test_eight_inch_round(self, capsys):
        assert main(["tier-volume", "8"]) == 0
        out = capsys.readouterr().out
        assert "Volume: 6178 ml" in out
        assert "Assembly: 20 min" in out

    def test_zero_diameter(self, capsys):
        assert main(["tier-volume", "0"]) == 1
        assert "ERROR:" in capsys.readouterr().out


class TestCalculate:
    def test_quote_with_json_catalog(self, tmp_path, catalog_file, capsys):
        """A quote priced against a JSON catalog prints the result as JSON."""
        payload = _write_payload(tmp_path, {"tiers": [{"tier_size_id": 2, "flavor": "Vanilla"}]})

        assert main(["calculate", payload, "--catalog", str(catalog_file)]) == 0
        result = json.loads(capsys.readouterr().out)
        assert result["suggested_price"] == "65.31"
        assert result["total_cost"] == "38.42"
        assert result["total_servings"] == 24

    def test_order_applies_price_adjustment(self, tmp_path, catalog_file, capsys):
        payload = _write_payload(
            tmp_path,
            {"tiers": [{"tier_size_id": 2, "flavor": "Vanilla"}], "price_adjustment": "4.69"},
        )

        code = main(["calculate", payload, "--catalog", str(catalog_file), "--kind", "order"])
        assert code == 0
        result = json.loads(capsys.readouterr().out)
        assert result["final_price"] == "70.00"
        assert result["price_adjustment"] == "4.69"

    def test_missing_payload_file(self, tmp_path, catalog_file, capsys):
        missing = str(tmp_path / "nope.json")
        assert main(["calculate", missing, "--catalog", str(catalog_file)]) == 1
        assert "ERROR: Could not read input" in capsys.readouterr().out

    def test_invalid_json(self, tmp_path, catalog_file, capsys):
        path = tmp_path / "broken.json"
        path.write_text("{tiers:", encoding="utf-8")
        assert main(["calculate", str(path), "--catalog", str(catalog_file)]) == 1
        assert "ERROR:" in capsys.readouterr().out

    def test_empty_catalog(self, tmp_path, capsys):
        """An empty catalog stops before pricing and points at init-db."""
        catalog = tmp_path / "empty.json"
        catalog.write_text("{}", encoding="utf-8")
        payload = _write_payload(tmp_path, {"tiers": [{"tier_size_id": 2}]})

        assert main(["calculate", payload, "--catalog", str(catalog)]) == 1
        assert "init-db --seed" in capsys.readouterr().out

    def test_unknown_tier_size(self, tmp_path, catalog_file, capsys):
        payload = _write_payload(tmp_path, {"tiers": [{"tier_size_id": 99}]})
        assert main(["calculate", payload, "--catalog", str(catalog_file)]) == 1
        assert "ERROR: Tier size with ID 99 not found" in capsys.readouterr().out


class TestInitDb:
    @pytest.fixture
    def data_dir(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CAKE_COSTING_DATA_DIR", str(tmp_path))
        close_connections()
        reset_config()
        yield tmp_path
        close_connections()
        reset_config()

    def test_init_and_seed(self, data_dir, capsys):
        assert main(["init-db", "--seed"]) == 0
        out = capsys.readouterr().out
        assert "Labor roles created: 3" in out
        assert "Tier sizes created: 5" in out
        assert (data_dir / "cake_costing.db").exists()

    def test_seed_is_idempotent(self, data_dir, capsys):
        main(["init-db", "--seed"])
        capsys.readouterr()

        assert main(["init-db", "--seed"]) == 0
        out = capsys.readouterr().out
        assert "Labor roles created: 0" in out
        assert "Tier sizes created: 0" in out


def test_no_command(capsys):
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out.lower()
