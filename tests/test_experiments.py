import csv

import pytest

import experiments as exp


@pytest.mark.parametrize("name", sorted(exp.GENERATOR_REGISTRY))
def test_generators_are_seeded(name):
    label, text1 = exp.generate_dataset(name, 500, seed=7)
    _, text2 = exp.generate_dataset(name, 500, seed=7)
    assert label == name
    assert len(text1) == 500
    assert text1 == text2


def test_unknown_generator_falls_back():
    label, text = exp.generate_dataset("nope", 64, seed=1)
    assert label == "nope_fallback_uniform_printable"
    assert len(text) == 64
    assert set(text) <= set(exp.PRINTABLE)


def test_run_one_round_trips():
    _, text = exp.generate_dataset("english_like", 4096, seed=3)
    row = exp.run_one(text)
    assert row.correctness_ok == 1
    assert row.text_chars == 4096
    assert row.unique_symbols == len(set(text))
    assert row.compressed_bits < 8 * len(text)
    assert row.compression_ratio == pytest.approx(row.compressed_bits / (8 * len(text)))
    assert row.entropy_bits <= row.avg_code_length < row.entropy_bits + 1


def test_run_one_single_symbol():
    row = exp.run_one("a" * 100)
    assert row.compressed_bits == 100
    assert row.unique_symbols == 1
    assert row.correctness_ok == 1


def test_mean_stdev():
    assert exp.mean_stdev([2.0]) == (2.0, 0.0)
    m, s = exp.mean_stdev([1.0, 3.0])
    assert m == 2.0
    assert s == pytest.approx(1.4142135, rel=1e-6)


def test_csv_outputs(tmp_path):
    rows = []
    for run_id in (1, 2):
        row = exp.run_one("abracadabra")
        row.exp_name = "exp1_distribution"
        row.dataset_name = "fixed"
        row.run_id = run_id
        rows.append(row)

    exp.write_csv(tmp_path / "metrics.csv", rows)
    exp.group_summary(rows, tmp_path / "summary.csv")

    with (tmp_path / "metrics.csv").open(encoding="utf-8") as f:
        metrics = list(csv.DictReader(f))
    assert len(metrics) == 2
    assert metrics[0]["compressed_bits"] == "23"

    with (tmp_path / "summary.csv").open(encoding="utf-8") as f:
        summary = list(csv.DictReader(f))
    assert len(summary) == 1
    assert summary[0]["n_runs"] == "2"
    assert float(summary[0]["correctness_ok_rate"]) == 1.0


def test_demo_default_text(capsys):
    assert exp.main(["--demo"]) == 0
    out = capsys.readouterr().out
    assert "compressed string:" in out
    assert f"decoded: {exp.DEMO_TEXT}" in out


def test_demo_single_symbol(capsys):
    assert exp.main(["--text", "aaaa"]) == 0
    out = capsys.readouterr().out
    assert "'1111'" in out
    assert "decoded: aaaa" in out


def test_demo_reports_errors(capsys):
    assert exp.main(["--text", ""]) == 1
    assert "InvalidInput" in capsys.readouterr().out
    assert exp.main(["--text", "bbb", "--max_count", "2"]) == 1


def test_experiments_write_outputs(tmp_path, capsys):
    code = exp.main([
        "--outdir", str(tmp_path),
        "--runs", "1",
        "--exp1_size_kb", "1",
        "--exp1_generators", "english_like,single_symbol",
        "--exp2_min_kb", "1",
        "--exp2_max_kb", "2",
        "--exp2_generators", "zipf_letters",
    ])
    assert code == 0
    assert (tmp_path / "metrics.csv").exists()
    assert (tmp_path / "summary.csv").exists()
    assert (tmp_path / "exp1_compression_ratio.png").exists()
    assert (tmp_path / "exp1_code_length.png").exists()
    assert (tmp_path / "exp2_time_zipf_letters.png").exists()
    assert "Correctness rate across all runs: 1.000" in capsys.readouterr().out
