import json
import logging

import pytest

import spirograph_host
from spirograph_host import build_request, main, spirograph
from spirograph_math import INSIDE, OUTSIDE, InvalidParameter


def test_spirograph_entry_point_returns_host_values():
    result = spirograph(5, 3, [2], True)
    assert len(result) == 1
    assert result[0][0] == {"x": 4.0, "y": 0.0}
    assert len(result[0]) == 1885


def test_spirograph_outside_two_pens():
    result = spirograph(4, 4, [1, 2], False)
    assert [trace[0] for trace in result] == [{"x": 7.0, "y": 0.0}, {"x": 6.0, "y": 0.0}]


def test_build_request_coerces_host_values():
    request = build_request("5", 3, ("2", 1.5), "false")
    assert request.ring_radius == 5.0
    assert request.pen_offsets == [2.0, 1.5]
    assert request.mode == OUTSIDE
    assert build_request(5, 3, [], 1).mode == INSIDE


@pytest.mark.parametrize(
    "args",
    [
        ("five", 3, [1], True),
        (True, 3, [1], True),
        (5, None, [1], True),
        (5, 3, "12", True),
        (5, 3, [object()], True),
        (5, 3, [1], "maybe"),
    ],
)
def test_build_request_rejects_bad_host_values(args):
    with pytest.raises(InvalidParameter):
        build_request(*args)


def test_spirograph_rejects_zero_wheel():
    with pytest.raises(InvalidParameter):
        spirograph(5, 0, [1], True)


def test_main_writes_json_to_stdout(capsys):
    assert main(["-R", "4", "-r", "4", "-d", "1", "-d", "2", "--outside", "--step", "0.5"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["mode"] == OUTSIDE
    assert [pen["offset"] for pen in payload["pens"]] == [1.0, 2.0]
    assert payload["pens"][0]["points"][0] == {"x": 7.0, "y": 0.0}
    assert len(payload["pens"][1]["points"]) == 13


def test_main_with_preset_and_output_file(tmp_path):
    output = tmp_path / "curve.json"
    assert main(["--preset", "starburst", "--step", "0.1", "-o", str(output)]) == 0
    payload = json.loads(output.read_text(encoding="utf-8"))
    assert payload["ring_radius"] == 160
    assert payload["mode"] == INSIDE
    assert payload["pens"][0]["color"] == "#f1c40f"


def test_main_with_share_query(capsys):
    assert main(["--query", "R=5&r=3&d=2&inside=true", "--step", "1"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["pens"][0]["points"][0] == {"x": 4.0, "y": 0.0}


def test_main_reports_invalid_parameters(capsys):
    assert main(["-R", "0"]) == 2
    assert "ring_radius" in capsys.readouterr().err


def test_main_lists_presets_in_french(capsys):
    assert main(["--list-presets", "--lang", "fr"]) == 0
    out = capsys.readouterr().out
    assert "Préréglages" in out
    assert "Fleur classique" in out


def test_main_lists_backends(capsys):
    assert main(["--list-backends"]) == 0
    out = capsys.readouterr().out
    assert "python" in out
    assert "numba" in out


def test_backend_default_comes_from_environment(monkeypatch):
    monkeypatch.setenv(spirograph_host.BACKEND_ENV_VAR, "fortran")
    assert spirograph_host.parse_args([]).backend == "fortran"
    assert main(["-R", "5", "-r", "3"]) == 2


def test_main_lists_languages(capsys):
    assert main(["--list-languages"]) == 0
    out = capsys.readouterr().out
    assert "English" in out
    assert "Français" in out


def test_main_warns_on_unknown_language(caplog, capsys):
    with caplog.at_level(logging.WARNING, logger="spirograph_host"):
        assert main(["--list-presets", "--lang", "de"]) == 0
    assert "No labels for language 'de'" in caplog.text
    assert "Classic Flower" in capsys.readouterr().out


def test_main_regional_language_uses_base_labels(caplog, capsys):
    with caplog.at_level(logging.WARNING, logger="spirograph_host"):
        assert main(["--list-presets", "--lang", "fr-CA"]) == 0
    assert "No labels" not in caplog.text
    assert "Fleur classique" in capsys.readouterr().out


def test_main_reports_overflowing_radii(capsys):
    assert main(["-R", "1e308", "-r", "1e308", "--outside"]) == 2
    assert "overflow" in capsys.readouterr().err
