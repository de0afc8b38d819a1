from fxgraph.runtime.main import main


def test_main_prints_code(monkeypatch, capsys, config_dir):
    monkeypatch.setenv("CONFIG_DIR", str(config_dir))
    monkeypatch.setenv("GRAPH", "default")

    assert main() == 0
    out = capsys.readouterr().out
    assert out.startswith("let new_position = ")
    assert "let direction = normalize(particle.velocity);" in out


def test_main_unknown_graph(monkeypatch, capsys, config_dir):
    monkeypatch.setenv("CONFIG_DIR", str(config_dir))
    monkeypatch.setenv("GRAPH", "missing")

    assert main() == 1
    assert capsys.readouterr().out == ""


def test_main_malformed_config(monkeypatch, capsys, tmp_path):
    graph_dir = tmp_path / "graphs" / "g"
    graph_dir.mkdir(parents=True)
    (graph_dir / "graph.yaml").write_text("name: g\n1: oops\n")
    monkeypatch.setenv("CONFIG_DIR", str(tmp_path))
    monkeypatch.setenv("GRAPH", "g")

    assert main() == 1
    assert capsys.readouterr().out == ""
