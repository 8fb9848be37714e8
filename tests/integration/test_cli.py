import json
from pathlib import Path

import pytest

from cli.main import main


def _last_json(capsys):
    return json.loads(capsys.readouterr().out.strip().splitlines()[-1])


def test_cli_xor_preset(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    main(["--preset", "xor", "--iterations", "20", "--seed", "1"])
    payload = _last_json(capsys)
    assert payload["iterations"] == 20
    run_dir = Path("runs/xor")
    assert (run_dir / "model.json").exists()
    assert (run_dir / "manifest.json").exists()


def test_cli_train_then_predict(tmp_path, capsys):
    run_dir = tmp_path / "run"
    main(["--preset", "xor", "--iterations", "5", "--run-dir", str(run_dir), "--quiet"])
    model_path = _last_json(capsys)["model"]

    inputs = tmp_path / "inputs.json"
    inputs.write_text(json.dumps([[0, 0], [0, 1], [1, 0], [1, 1]]))
    main(["--predict-model", model_path, "--inputs", str(inputs)])
    predictions = _last_json(capsys)
    assert len(predictions) == 4
    assert all(len(p) == 1 and 0.0 < p[0] < 1.0 for p in predictions)

    inputs.write_text(json.dumps([[0, 0, 0]]))
    with pytest.raises(SystemExit, match="first layer"):
        main(["--predict-model", model_path, "--inputs", str(inputs)])


def test_cli_csv_training(tmp_path, capsys):
    train_csv = tmp_path / "train.csv"
    test_csv = tmp_path / "test.csv"
    rows = ["label,a,b", "0,255,0", "1,0,255", "0,230,20", "1,10,240"]
    train_csv.write_text("\n".join(rows) + "\n")
    test_csv.write_text("\n".join(rows[:3]) + "\n")
    main(
        [
            "--preset", "digits-csv",
            "--train-csv", str(train_csv),
            "--test-csv", str(test_csv),
            "--num-classes", "2",
            "--sizes", "2,3,2",
            "--iterations", "3",
            "--batch-size", "2",
            "--run-dir", str(tmp_path / "run"),
            "--dump-config", str(tmp_path / "resolved.json"),
        ]
    )
    out = capsys.readouterr().out.splitlines()
    assert "Iteration 3" in out
    assert any(line.startswith("Iteration 3 scored ") and line.endswith(" / 2") for line in out)
    payload = json.loads(out[-1])
    assert payload["total"] == 2
    resolved = json.loads((tmp_path / "resolved.json").read_text())
    assert resolved["model"]["sizes"] == [2, 3, 2]


def test_cli_dimension_mismatch_exits(tmp_path):
    with pytest.raises(SystemExit, match="error"):
        main(["--preset", "xor", "--sizes", "3,2,1", "--run-dir", str(tmp_path / "run")])


def test_cli_list_presets(capsys):
    with pytest.raises(SystemExit):
        main(["--list-presets"])
    names = capsys.readouterr().out.split()
    assert {"xor", "xor-onehot", "digits-csv"} <= set(names)
