import json
import sys
from pathlib import Path

import pytest
import yaml

from fxbinary.core.modes import OverflowEnum, RoundingEnum
from fxbinary.io import packing
from fxbinary.scripts import decode_vectors, gen_vectors
from fxbinary.utils import config as config_mod

SAMPLE = Path(__file__).resolve().parents[1] / "configs" / "vectors.yaml"


def _write_cfg(tmp_path: Path, cfg) -> Path:
    path = tmp_path / "vectors.yaml"
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(cfg, f, sort_keys=False)
    return path


def test_sample_config_loads():
    cfg = config_mod.load_config(SAMPLE)
    assert cfg["defaults"]["overflow_mode"] is OverflowEnum.wrap
    assert cfg["defaults"]["round_mode"] is RoundingEnum.direct_neg_inf
    assert len(cfg["vectors"]) >= 5


def test_missing_section(tmp_path: Path):
    path = _write_cfg(tmp_path, {"defaults": {}, "vectors": []})
    with pytest.raises(ValueError, match="missing config section: outputs"):
        config_mod.load_config(path)


def test_bad_vector(tmp_path: Path):
    cfg = {
        "defaults": {"overflow_mode": 1},
        "outputs": {"dir": "out"},
        "vectors": [{"name": "x", "op": "mul", "a": {"value": 1.0, "format": [2, 2]}}],
    }
    with pytest.raises(ValueError, match="needs operand b"):
        config_mod.load_config(_write_cfg(tmp_path, cfg))


def test_gen_vectors_main(tmp_path: Path, monkeypatch):
    out_dir = tmp_path / "out"
    monkeypatch.setattr(sys, "argv", ["gen_vectors", "--config", str(SAMPLE), "--out-dir", str(out_dir)])
    assert gen_vectors.main() == 0

    summary = json.loads((out_dir / "vectors.json").read_text())
    results = {v["name"]: v for v in summary["vectors"]}
    assert results["add_basic"]["result"] == "3.75"
    assert results["add_basic"]["format"] == [3, 3]
    assert results["sub_unsigned_wrap"]["result"] == "4.125"
    assert results["mul_basic"]["result"] == "-2.8125"
    assert results["div_trunc"]["result"] == "-2.625"
    assert results["resize_sat"]["result"] == "7.75"
    assert results["resize_near_even"]["result"] == "6.0"
    assert results["shift_left_wrap"]["result"] == "-10.0"
    assert results["wide_product"]["state"]["bid"] == 2

    assert (out_dir / "add_basic_in.hex").read_text().splitlines() == ["0F", "0F"]
    assert (out_dir / "add_basic_out.hex").read_text().splitlines() == ["1E"]
    assert len(packing.read_hex_bytes(out_dir / "wide_product_out.hex")) == 12


def test_decode_vectors_main(tmp_path: Path, monkeypatch, capsys):
    hex_path = tmp_path / "v.hex"
    packing.write_hex_bytes(hex_path, bytes([0x18, 0xE0]))
    monkeypatch.setattr(sys, "argv", ["decode_vectors", "--hex", str(hex_path), "--format", "4", "4"])
    assert decode_vectors.main() == 0
    out = capsys.readouterr().out
    assert "1.5" in out
    assert "-2.0" in out
