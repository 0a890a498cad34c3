from pathlib import Path

import pytest

from gauqchem.errors import ConfigError
from gauqchem.gaussian.request import Calculation
from gauqchem.qchem.render import render_input, write_input
from gauqchem.schemas.models import BridgeSettings
from gauqchem.settings import load_settings

from conftest import request_text


def _calc(nder):
    return Calculation.from_ext(request_text(2, nder, 0, 1, [8, 1], [(0.0, 0.0, 0.0), (0.0, 0.0, 1.8)]))


# -------------------------------------------------------
# Settings
# -------------------------------------------------------

def test_defaults_without_file_or_env():
    s = load_settings(env={})
    assert s.qchem_exe == "qchem"
    assert s.nthreads == 1
    assert s.source == "output"
    assert s.keep_files is True
    assert s.parse_on_failure is False


def test_yaml_file_then_env_override(tmp_path):
    cfg = tmp_path / "gauqchem.yaml"
    cfg.write_text(
        "qchem_exe: /opt/qchem/bin/qchem\n"
        "nthreads: 4\n"
        "method: wb97x-d\n"
        "rem:\n"
        "  scf_convergence: 8\n"
    )
    s = load_settings(cfg, env={"QCHEM_NTHREADS": "16", "QCHEM_RUNDIR": "/scratch/job"})
    assert s.qchem_exe == "/opt/qchem/bin/qchem"
    assert s.method == "wb97x-d"
    assert s.rem == {"scf_convergence": 8}
    assert s.nthreads == 16
    assert s.rundir == Path("/scratch/job")


def test_config_path_from_env(tmp_path):
    cfg = tmp_path / "c.yaml"
    cfg.write_text("source: fchk\n")
    s = load_settings(env={"GAUQCHEM_CONFIG": str(cfg)})
    assert s.source == "fchk"


def test_empty_yaml_is_defaults(tmp_path):
    cfg = tmp_path / "c.yaml"
    cfg.write_text("")
    assert load_settings(cfg, env={}).basis == "6-31g*"


@pytest.mark.parametrize(
    "content",
    [
        "nthreads: 0\n",
        "source: xml\n",
        "- just\n- a list\n",
        "method: [unclosed\n",
    ],
)
def test_invalid_config(tmp_path, content):
    cfg = tmp_path / "c.yaml"
    cfg.write_text(content)
    with pytest.raises(ConfigError):
        load_settings(cfg, env={})


def test_missing_config_file(tmp_path):
    with pytest.raises(ConfigError):
        load_settings(tmp_path / "nope.yaml", env={})


# -------------------------------------------------------
# Q-Chem input
# -------------------------------------------------------

def test_single_point_input():
    text = render_input(_calc(0), BridgeSettings(method="hf", basis="sto-3g"))
    assert text.startswith(
        "$molecule\n0 1\n"
        "8   0.000000000000   0.000000000000   0.000000000000\n"
        "1   0.000000000000   0.000000000000   1.800000000000\n"
        "$end\n"
    )
    rem = text[text.index("$rem"):]
    assert rem.rstrip().endswith("$end")
    words = [ln.split() for ln in rem.splitlines()]
    assert ["jobtype", "sp"] in words
    assert ["method", "hf"] in words
    assert ["basis", "sto-3g"] in words
    assert ["input_bohr", "true"] in words
    assert ["sym_ignore", "true"] in words
    assert not any(w and w[0] in ("gui", "vibman_print") for w in words)


def test_force_input():
    words = [ln.split() for ln in render_input(_calc(1), BridgeSettings()).splitlines()]
    assert ["jobtype", "force"] in words


def test_freq_input_requests_hessian_print():
    words = [ln.split() for ln in render_input(_calc(2), BridgeSettings()).splitlines()]
    assert ["jobtype", "freq"] in words
    assert ["vibman_print", "4"] in words


def test_fchk_source_adds_gui_and_extra_rem(tmp_path):
    s = BridgeSettings(source="fchk", rem={"scf_convergence": 8, "mem_total": 4000})
    out = write_input(_calc(1), s, tmp_path / "sub" / "R_qchem.inp")
    words = [ln.split() for ln in out.read_text().splitlines()]
    assert ["gui", "2"] in words
    assert ["scf_convergence", "8"] in words
    assert ["mem_total", "4000"] in words
