import json

from mcdock.data.io import load_config
from mcdock.data.structs import RunResult
from mcdock.pipeline.run import Config, run_docking


def _cfg(**overrides):
    cfg_data = load_config("configs/default.yaml")
    cfg_data.update({"num_tasks": 2, "num_mc_iterations": 5, "max_bfgs_iterations": 30})
    cfg_data.update(overrides)
    return Config(**cfg_data)


def test_pipeline_smoke(tmp_path, receptor_pdbqt, ligand_pdbqt):
    out_dir = tmp_path / "out"
    out_dir_repeat = tmp_path / "out_repeat"

    result = run_docking(_cfg(), str(receptor_pdbqt), str(ligand_pdbqt), str(out_dir))
    result_repeat = run_docking(_cfg(), str(receptor_pdbqt), str(ligand_pdbqt), str(out_dir_repeat))

    assert isinstance(result, RunResult)
    assert (out_dir / "result.json").exists()
    assert (out_dir / "metrics.jsonl").exists()
    assert (out_dir / "metrics.timeseries.jsonl").exists()

    with open(out_dir / "result.json", "r", encoding="utf-8") as handle:
        payload = json.load(handle)
    energies = [entry["e"] for entry in payload["results"]]
    assert energies == sorted(energies)
    assert 1 <= len(energies) <= 9
    assert payload["results"][0]["rank"] == 1
    assert payload["results"][0]["e_nd"] == payload["results"][0]["e"]
    assert len(payload["results"][0]["heavy_atoms"]) == 3
    assert payload["config"]["num_tasks"] == 2

    assert result.best.e == result_repeat.best.e
    assert result.metrics["best_energy"] == result.best.e


def test_pipeline_metrics_cover_every_task(tmp_path, receptor_pdbqt, ligand_pdbqt):
    out_dir = tmp_path / "out_metrics"
    run_docking(_cfg(), str(receptor_pdbqt), str(ligand_pdbqt), str(out_dir))

    metrics = []
    with open(out_dir / "metrics.jsonl", "r", encoding="utf-8") as handle:
        for line in handle:
            metrics.append(json.loads(line))

    incumbent = [entry for entry in metrics if entry["name"] == "incumbent_energy"]
    assert len(incumbent) == 10
    assert {entry["task"] for entry in incumbent} == {0, 1}
    metric_map = {entry["name"]: entry["value"] for entry in metrics}
    assert metric_map["n_tasks"] == 2.0


def test_pipeline_debug_log(tmp_path, receptor_pdbqt, ligand_pdbqt):
    out_dir = tmp_path / "out_debug"
    cfg = _cfg(debug=True, debug_level="DEBUG")
    run_docking(cfg, str(receptor_pdbqt), str(ligand_pdbqt), str(out_dir))

    lines = (out_dir / "debug.jsonl").read_text(encoding="utf-8").strip().splitlines()
    types = {json.loads(line)["type"] for line in lines}
    assert {"mc_task_start", "mc_task_end"} <= types
    assert cfg.debug_logger is None
