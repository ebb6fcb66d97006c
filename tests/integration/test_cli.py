import json
from pathlib import Path

import pytest

from cli.main import main


def test_cli_xor_preset(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    main(["--preset", "xor-batch", "--max-iterations", "50", "--quiet"])
    run_dir = Path("runs/xor-batch")
    assert (run_dir / "metrics.jsonl").exists()
    assert (run_dir / "manifest.json").exists()
    payload = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert payload["iterations"] == 51


def test_cli_yaml_override_and_dump(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    override = tmp_path / "override.yaml"
    override.write_text("train:\n  alpha: 0.9\n  max_iterations: 5\n")
    dump = tmp_path / "resolved.json"
    main(["--config", str(override), "--dump-config", str(dump), "--run-dir", "out"])
    resolved = json.loads(dump.read_text())
    assert resolved["train"]["alpha"] == 0.9
    assert resolved["data"]["name"] == "xor"
    out = capsys.readouterr().out
    assert "=== sigmanet run ===" in out
    assert (tmp_path / "out" / "summary.json").exists()


def test_cli_csv_dataset(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "points.csv"
    path.write_text("x,y,label\n0,0,a\n1,1,b\n0.1,0,a\n0.9,1,b\n")
    main(
        [
            "--dataset",
            "csv",
            "--csv-path",
            str(path),
            "--target-col",
            "label",
            "--max-iterations",
            "10",
            "--quiet",
        ]
    )
    payload = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert payload["iterations"] == 11


def test_cli_list_presets(capsys):
    with pytest.raises(SystemExit):
        main(["--list-presets"])
    assert "xor-online" in capsys.readouterr().out.split()
