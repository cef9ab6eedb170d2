"""
tests/test_cli.py - Smoke tests for the command line
"""
from analogical.cli import main


def test_no_command_prints_help(capsys):
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out.lower()


def test_update_command(capsys):
    assert main(["update", "--cell", "4", "3"]) == 0
    out = capsys.readouterr().out
    assert "Red stiletto" in out


def test_world_command(capsys):
    assert main(["world", "--policy", "pointed", "--seed", "1", "--objects", "200"]) == 0
    assert "World: pointed" in capsys.readouterr().out


def test_trial_command(capsys):
    assert main(["trial", "--seed", "2", "--updates", "20", "--objects", "100",
                 "--every", "5"]) == 0
    assert "Mean SSE" in capsys.readouterr().out


def test_compare_command(capsys):
    assert main(["compare", "--seed", "3", "--updates", "30", "--objects", "100",
                 "--evolved", "2", "0.5", "0.5", "3", "4"]) == 0
    out = capsys.readouterr().out
    assert "evolved" in out
    assert "pointed world" in out


def test_evolve_command(capsys):
    assert main(["evolve", "--seed", "4", "--population", "4", "--generations", "1",
                 "--trials", "1", "--updates", "10", "--objects", "50", "--size", "5"]) == 0
    out = capsys.readouterr().out
    assert "Gen   0" in out
    assert "Final mean parameters" in out
