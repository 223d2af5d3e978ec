import subprocess

import pytest

from abq import abq
from abq.fields import DisplayForm, Preference, Scope


@pytest.fixture()
def config_file(tmp_path, data_dir):
    path = tmp_path / "config"
    path.write_text(
        "[main]\n"
        f"data_dir = {data_dir}\n"
        "opener = open-it\n"
        "\n"
        "[colors]\n"
        "disable_colors = true\n",
        encoding="utf-8")
    return str(path)


@pytest.fixture()
def calls(monkeypatch):
    recorded = []

    def fake_run(command, check=False):
        recorded.append(command)
        return subprocess.CompletedProcess(command, 0)

    monkeypatch.setattr("abq.launcher.subprocess.run", fake_run)
    return recorded


def _run(capsys, config_file, *argv):
    abq.main(["-c", config_file] + list(argv))
    return capsys.readouterr().out


def test_parse_args_defaults():
    _, args = abq.parse_args(["jane"])
    assert args.terms == ["jane"]
    assert args.form is None
    assert args.scope is Scope.ALL
    assert args.preference is Preference.NONE
    assert not args.show_uid
    assert args.uid is None


def test_parse_args_last_one_wins():
    _, args = abq.parse_args(["-b", "-l", "-n", "-a", "-g", "-H", "-W", "x"])
    assert args.form is DisplayForm.LONG
    assert args.scope is Scope.GROUPS
    assert args.preference is Preference.WORK


@pytest.mark.parametrize("argv, show_uid, uid, terms", [
    (["-u", "jane"], True, None, ["jane"]),
    (["--uid", "jane"], True, None, ["jane"]),
    (["--uid=abc", "jane"], True, "abc", ["jane"]),
    (["-ub", "jane"], True, None, ["jane"]),
    (["--", "-ufoo"], False, None, ["-ufoo"]),
])
def test_parse_args_uid(argv, show_uid, uid, terms):
    _, args = abq.parse_args(argv)
    assert args.show_uid is show_uid
    assert args.uid == uid
    assert args.terms == terms


def test_parse_args_combined_uid_flag():
    _, args = abq.parse_args(["-ul", "jane"])
    assert args.show_uid
    assert args.uid is None
    assert args.form is DisplayForm.LONG
    assert args.terms == ["jane"]


def test_parse_args_terms_around_options():
    _, args = abq.parse_args(["jane", "-l", "doe"])
    assert args.form is DisplayForm.LONG
    assert args.terms == ["jane", "doe"]


def test_bad_option_shows_usage(capsys):
    with pytest.raises(SystemExit) as exc:
        abq.parse_args(["--no-such-option"])
    assert exc.value.code == 0
    assert "usage: abq" in capsys.readouterr().err


def test_missing_terms_shows_usage(capsys, config_file):
    with pytest.raises(SystemExit) as exc:
        abq.main(["-c", config_file, "-l"])
    assert exc.value.code == 0
    assert "usage: abq" in capsys.readouterr().err


def test_version(capsys):
    abq.main(["-V"])
    out = capsys.readouterr().out
    assert out.startswith(f"abq {abq.APP_VERS}\n")


def test_make_options_uses_config_default_form(tmp_path, data_dir):
    path = tmp_path / "brief.conf"
    path.write_text(
        f"[main]\ndata_dir = {data_dir}\ndefault_form = brief\n"
        "abbreviate_labels = false\n",
        encoding="utf-8")
    config = abq.Config(str(path), str(data_dir), abq.DEFAULT_CONFIG)
    _, args = abq.parse_args(["jane"])
    options = abq.make_options(args, config)
    assert options.form is DisplayForm.BRIEF
    assert not options.abbrev
    _, args = abq.parse_args(["-l", "jane"])
    assert abq.make_options(args, config).form is DisplayForm.LONG


def test_default_config_is_created(tmp_path, data_dir, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    path = tmp_path / "new" / "config"
    config = abq.Config(str(path), str(data_dir), abq.DEFAULT_CONFIG)
    assert path.read_text(encoding="utf-8") == abq.DEFAULT_CONFIG
    assert config.opener == "xdg-open"
    assert config.default_form is DisplayForm.STANDARD
    assert config.data_dir == str(tmp_path / ".local" / "share" / "abq")


def test_single_match_has_no_summary(capsys, config_file):
    out = _run(capsys, config_file, "jane")
    assert " Name: Jane Doe\n" in out
    assert "Email: j@x.com (W)\n" in out
    assert "jane@y.com (H)" in out
    assert "match" not in out


def test_results_are_sorted_and_counted(capsys, config_file):
    out = _run(capsys, config_file, "acme")
    assert out.index("Organization: Acme Corp") < out.index("Bob Smith")
    assert out.rstrip().endswith("2 matches")


def test_no_matches(capsys, config_file):
    out = _run(capsys, config_file, "nobody")
    assert out.strip() == "0 matches"


def test_brief_and_uid(capsys, config_file):
    out = _run(capsys, config_file, "-b", "--uid=2222")
    assert out.startswith("Bob Smith 555-0101 (M)")
    assert "match" not in out


def test_list_groups(capsys, config_file):
    out = _run(capsys, config_file, "--groups")
    assert out.index("coworkers (1 member)") < \
        out.index("Friends (2 members)")
    assert "matches" not in out


def test_group_search(capsys, config_file):
    out = _run(capsys, config_file, "-g", "FRI")
    assert out == "Friends (2 members)\n"


def test_launch_stops_after_first_match(capsys, config_file, calls):
    out = _run(capsys, config_file, "-E", "acme")
    assert "Organization: Acme Corp" in out
    assert "Bob Smith" not in out
    assert out.rstrip().endswith("2 matches")
    assert calls == []


def test_launch_email(capsys, config_file, calls):
    _run(capsys, config_file, "-E", "-H", "bob")
    assert calls == [["open-it", "mailto:bob@home.example"]]


def test_terms_on_both_sides_of_an_option(capsys, config_file):
    out = _run(capsys, config_file, "jane", "-l", "doe")
    assert "First Name: Jane\n" in out
    assert " Last Name: Doe\n" in out
    assert "match" not in out
