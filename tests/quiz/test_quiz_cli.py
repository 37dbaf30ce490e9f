from __future__ import annotations

import json

import pytest
from rich.console import Console

from learning_hub.core import ensure_workspace
from learning_hub.quiz import _main as quiz_main
from learning_hub.quiz.config import CONFIG_FILENAME


def make_provider(commands):
    iterator = iter(commands)
    return lambda: next(iterator)


def make_console() -> Console:
    return Console(record=True, width=100, force_terminal=True)


def parse(*argv: str):
    return quiz_main.build_arg_parser().parse_args(list(argv))


def test_start_completes_pack_and_writes_log(quiz_file) -> None:
    path = quiz_file()
    console = make_console()

    code = quiz_main._cmd_start(
        parse("start", str(path), "--pack", "quiz-sci"),
        console=console,
        input_provider=make_provider(["True", "A) yes"]),
    )

    assert code == 0
    assert "Your final score is: 2 out of 2 (100%)" in console.export_text()

    log_path = ensure_workspace().path_for("logs") / "quiz.log"
    events = [
        json.loads(line).get("event")
        for line in log_path.read_text(encoding="utf-8").splitlines()
    ]
    assert "quiz_start" in events
    assert "quiz_complete" in events


def test_start_quit_returns_one(quiz_file) -> None:
    code = quiz_main._cmd_start(
        parse("start", str(quiz_file())),
        console=make_console(),
        input_provider=make_provider(["q"]),
    )

    assert code == 1


def test_start_num_limits_questions(quiz_file) -> None:
    console = make_console()

    code = quiz_main._cmd_start(
        parse("start", str(quiz_file()), "--num", "1"),
        console=console,
        input_provider=make_provider(["2"]),
    )

    assert code == 0
    assert "Question 1 / 1" in console.export_text()


def test_start_reads_num_from_config(quiz_file, tmp_path) -> None:
    config_path = tmp_path / "cwd" / CONFIG_FILENAME
    config_path.write_text("[quiz]\nnum = 1\n", encoding="utf-8")
    console = make_console()

    code = quiz_main._cmd_start(
        parse("start", str(quiz_file())),
        console=console,
        input_provider=make_provider(["b"]),
    )

    assert code == 0
    assert "1 out of 1" in console.export_text()


def test_start_missing_file_is_an_error(tmp_path, capsys) -> None:
    code = quiz_main._cmd_start(
        parse("start", str(tmp_path / "missing.jsonl")),
        console=make_console(),
        input_provider=make_provider([]),
    )

    assert code == 2
    assert "Error: Question file not found" in capsys.readouterr().err


def test_start_unknown_pack_is_an_error(quiz_file, capsys) -> None:
    code = quiz_main._cmd_start(
        parse("start", str(quiz_file()), "--pack", "nope"),
        console=make_console(),
        input_provider=make_provider([]),
    )

    assert code == 2
    assert "Quiz pack not found: nope" in capsys.readouterr().err


def test_start_bad_config_is_an_error(quiz_file, tmp_path, capsys) -> None:
    config_path = tmp_path / "bad.toml"
    config_path.write_text("[quiz]\nnum = -3\n", encoding="utf-8")

    code = quiz_main._cmd_start(
        parse("start", str(quiz_file()), "--config", str(config_path)),
        console=make_console(),
        input_provider=make_provider([]),
    )

    assert code == 2
    assert "quiz.num" in capsys.readouterr().err


def test_start_empty_pack_returns_one(quiz_file) -> None:
    console = make_console()

    code = quiz_main._cmd_start(
        parse("start", str(quiz_file(rows=[]))),
        console=console,
        input_provider=make_provider([]),
    )

    assert code == 1
    assert "Question bank is empty" in console.export_text()


def test_packs_lists_latest_pack_per_name(quiz_file) -> None:
    console = make_console()

    code = quiz_main._cmd_packs(
        parse("packs", str(quiz_file())), console=console
    )

    output = console.export_text()
    assert code == 0
    assert "quiz-new" in output
    assert "quiz-sci" in output
    assert "quiz-old" not in output


def test_packs_without_pack_ids(quiz_file) -> None:
    console = make_console()
    path = quiz_file(rows=[{"question": "Q|||||True", "answer": "True"}])

    code = quiz_main._cmd_packs(parse("packs", str(path)), console=console)

    assert code == 1
    assert "No quiz packs found." in console.export_text()


def test_check_reports_malformed_questions(quiz_file) -> None:
    console = make_console()

    code = quiz_main._cmd_check(
        parse("check", str(quiz_file())), console=console
    )

    output = console.export_text()
    assert code == 1
    assert "Malformed questions" in output
    assert "1 of 4 question(s) are malformed." in output


def test_check_clean_pack(quiz_file) -> None:
    console = make_console()

    code = quiz_main._cmd_check(
        parse("check", str(quiz_file()), "--pack", "quiz-new"),
        console=console,
    )

    assert code == 0
    assert "All 1 question(s) decoded." in console.export_text()


def test_main_raises_system_exit_with_command_code(quiz_file, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        quiz_main.main(["check", str(quiz_file()), "--pack", "quiz-old"])

    assert excinfo.value.code == 0
    assert "All 1 question(s) decoded." in capsys.readouterr().out


def test_main_requires_subcommand(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        quiz_main.main([])

    assert excinfo.value.code == 2
    assert "usage: learninghub quiz" in capsys.readouterr().err


def test_check_directory_is_an_error(tmp_path, capsys) -> None:
    target = tmp_path / "exports"
    target.mkdir()

    with pytest.raises(SystemExit) as excinfo:
        quiz_main.main(["check", str(target)])

    assert excinfo.value.code == 2
    assert "Error: Cannot read question file" in capsys.readouterr().err


@pytest.mark.parametrize("command", ["start", "packs", "check"])
def test_non_utf8_export_is_an_error(tmp_path, capsys, command) -> None:
    path = tmp_path / "broken.jsonl"
    path.write_bytes(b"\xff\xfe\n")

    with pytest.raises(SystemExit) as excinfo:
        quiz_main.main([command, str(path)])

    assert excinfo.value.code == 2
    assert "not UTF-8" in capsys.readouterr().err
