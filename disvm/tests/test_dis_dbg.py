"""Unit tests for dis-dbg commands, REPL dispatch and CLI."""

from __future__ import annotations

import json

import pytest
from prompt_toolkit.document import Document

from disvm.dis_dbg.cli import main
from disvm.dis_dbg.commands import build_registry
from disvm.dis_dbg.completion import DebuggerCompleter
from disvm.dis_dbg.context import DebuggerContext, NoProgramError
from disvm.dis_dbg.history import HistoryStore
from disvm.dis_dbg.parser import parse_int, split_command
from disvm.dis_dbg.repl import DebuggerREPL


@pytest.fixture
def repl():
    ctx = DebuggerContext(batch=5000)
    return DebuggerREPL(ctx, build_registry(), interactive=False)


def test_split_command_and_parse_int():
    assert split_command('load "my prog.dis"') == ["load", "my prog.dis"]
    assert split_command("") == []
    assert split_command('input "unterminated')[-1].startswith("#parse-error")
    assert parse_int("42") == 42
    assert parse_int("0x10") == 16
    assert parse_int("0t102") == 11


def test_commands_require_a_program(repl, capsys):
    for line in ("step", "run", "regs", "mem", "output", "input x", "restart"):
        assert repl.dispatch(line) == 1
    out = capsys.readouterr().out
    assert out.count("error: no program loaded") == 7


def test_context_require_runner_raises():
    with pytest.raises(NoProgramError):
        DebuggerContext().require_runner()


def test_source_step_and_run(repl, capsys):
    assert repl.dispatch("source }{") == 0
    assert repl.dispatch("input hi") == 0
    assert repl.dispatch("step") == 0
    out = capsys.readouterr().out
    assert "Loaded 2 instruction(s)" in out
    assert "Queued 2 byte(s); 2 pending" in out
    assert "Stepped 1 instruction(s); next C=00001 '{' OUT" in out
    assert repl.ctx.machine.a == ord("h")

    assert repl.dispatch("run") == 0
    out = capsys.readouterr().out
    assert "halted" in out
    assert repl.dispatch("output") == 0
    assert capsys.readouterr().out.strip() == "hi"


def test_run_with_count_stops_early(repl, capsys):
    repl.dispatch("source }{")
    repl.dispatch("input a")
    assert repl.dispatch("run 10") == 0
    assert "Ran 10 instruction(s), stopped" in capsys.readouterr().out
    assert repl.ctx.machine.steps == 10


def test_step_rejects_non_positive_count(repl):
    repl.dispatch("source !")
    assert repl.dispatch("step 0") == 1


def test_syntax_error_keeps_previous_machine(repl, capsys):
    repl.dispatch("source !")
    machine = repl.ctx.machine
    assert repl.dispatch("source !x") == 1
    assert "syntax error: not a valid instruction" in capsys.readouterr().out
    assert repl.ctx.machine is machine


def test_load_and_restart(repl, program_file, capsys):
    path = program_file("}{")
    assert repl.dispatch(f"load {path}") == 0
    repl.dispatch("input z")
    repl.dispatch("run")
    assert repl.ctx.machine.halt
    assert repl.dispatch("restart") == 0
    assert not repl.ctx.machine.halt
    assert repl.ctx.source_path == path
    assert repl.dispatch(f"load {path}.missing") == 2
    assert "load failed" in capsys.readouterr().out


def test_memory_listing_marks_pointers(repl, capsys):
    repl.dispatch("source }{")
    capsys.readouterr()
    assert repl.dispatch("mem 0 3") == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "memory @00000:"
    assert "'}' IN" in lines[1] and lines[1].lstrip().startswith("CD")
    assert "'{' OUT" in lines[2]
    assert lines[3].endswith("-")
    assert repl.dispatch("mem 99999") == 1
    assert repl.dispatch("mem nowhere") == 1


def test_registers_and_status(repl, capsys):
    assert repl.dispatch("status") == 0
    assert "no program loaded" in capsys.readouterr().out
    repl.dispatch("source _!")
    repl.dispatch("step")
    capsys.readouterr()
    assert repl.dispatch("regs") == 0
    out = capsys.readouterr().out
    assert "C: 00001 0000000001" in out
    assert "halt=False steps=1" in out
    assert repl.dispatch("status") == 0
    assert "<inline>: runnable after 1 step(s)" in capsys.readouterr().out


def test_encodings_apply_to_input_and_output(repl, capsys):
    repl.dispatch("source }{")
    assert repl.dispatch("enc in base16") == 0
    assert repl.dispatch("enc out base64") == 0
    assert repl.dispatch("enc in") == 1
    repl.dispatch("input 6869")
    repl.dispatch("run")
    capsys.readouterr()
    repl.dispatch("output --clear")
    assert capsys.readouterr().out.strip() == "aGk="
    assert repl.ctx.machine.output_buffer == []


def test_input_decode_error(repl, capsys):
    repl.dispatch("source }")
    repl.dispatch("enc in base64")
    assert repl.dispatch("input a!b") == 1
    assert "input rejected" in capsys.readouterr().out


def test_json_output(capsys):
    ctx = DebuggerContext(json_output=True)
    repl = DebuggerREPL(ctx, build_registry(), interactive=False)
    repl.dispatch("status")
    payload = json.loads(capsys.readouterr().out)
    assert payload == {"status": "ok", "result": {"loaded": False}}
    repl.dispatch("step")
    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == "error"


def test_unknown_command_and_aliases(repl, capsys):
    assert repl.dispatch("frobnicate") == 1
    assert "Unknown command: frobnicate" in capsys.readouterr().out
    assert repl.dispatch("# a comment") == 0


def test_alias_command_defines_and_removes_aliases(repl, capsys):
    assert repl.dispatch("alias") == 0
    assert "No aliases defined" in capsys.readouterr().out
    assert repl.dispatch("alias go run") == 0
    assert "go = run" in capsys.readouterr().out
    repl.dispatch("source !")
    assert repl.dispatch("go") == 0
    assert repl.ctx.machine.halt
    assert repl.dispatch("alias step run") == 1
    assert repl.dispatch("alias zz nothing") == 1
    assert repl.dispatch("alias go") == 0
    assert repl.ctx.list_aliases() == {}
    assert repl.dispatch("alias go") == 1
    repl.dispatch("alias a regs")
    repl.dispatch("alias --clear")
    assert repl.ctx.aliases == {}


def test_help_lists_commands_by_group(repl, capsys):
    assert repl.dispatch("help") == 0
    lines = capsys.readouterr().out.splitlines()
    headings = [line for line in lines if line.endswith(":")]
    assert headings == ["program:", "execution:", "inspection:", "session:"]
    for name in ("load", "source", "step", "run", "regs", "mem", "output", "alias", "exit"):
        assert any(line.lstrip().startswith(name) for line in lines)
    assert lines.index("execution:") < next(i for i, line in enumerate(lines) if "step/s/next" in line)


def test_help_for_one_command_shows_usage(repl, capsys):
    assert repl.dispatch("help mem") == 0
    out = capsys.readouterr().out
    assert out.startswith("usage: mem [address] [count]")
    assert repl.dispatch("help nothing") == 1


def test_exit_reports_machine_and_status_code(repl, capsys):
    with pytest.raises(SystemExit) as excinfo:
        repl.dispatch("quit")
    assert excinfo.value.code == 0
    assert capsys.readouterr().out == ""
    repl.dispatch("source _!")
    repl.dispatch("run")
    capsys.readouterr()
    with pytest.raises(SystemExit) as excinfo:
        repl.dispatch("exit 3")
    assert excinfo.value.code == 3
    assert "Leaving after 2 step(s); machine halted, 0 output value(s)" in capsys.readouterr().out


def test_run_interrupt_keeps_partial_count(repl, monkeypatch, capsys):
    repl.dispatch("source }{")
    repl.dispatch("input a")
    machine = repl.ctx.machine
    run = machine.run

    def interrupted(budget):
        run(4)
        raise KeyboardInterrupt

    monkeypatch.setattr(machine, "run", interrupted)
    capsys.readouterr()
    assert repl.dispatch("run") == 0
    assert "Ran 4 instruction(s), interrupted" in capsys.readouterr().out
    assert repl.ctx.runner.steps == 4
    assert repl.ctx.runner.batches == 1


def test_plain_loop_reads_stdin(repl, monkeypatch, capsys):
    lines = iter(["source \\", "}{", "status"])

    def fake_input():
        try:
            return next(lines)
        except StopIteration:
            raise EOFError

    monkeypatch.setattr("builtins.input", fake_input)
    assert repl.run() == 0
    out = capsys.readouterr().out
    assert "Loaded 2 instruction(s)" in out
    assert "runnable" in out


def test_history_store(tmp_path):
    path = tmp_path / "hist" / "history"
    store = HistoryStore(str(path), limit=2)
    store.append("step")
    for line in ("step", "run", "regs"):
        store.append(line)
    assert store.snapshot() == ["run", "regs"]
    assert path.read_text(encoding="utf-8").splitlines() == ["run", "regs"]
    assert HistoryStore(str(path)).snapshot() == ["run", "regs"]


def test_completer_suggests_commands_and_encodings():
    ctx = DebuggerContext()
    completer = DebuggerCompleter(ctx, build_registry())
    names = [c.text for c in completer.get_completions(Document("st"), None)]
    assert names == ["status", "step"]
    encs = [c.text for c in completer.get_completions(Document("enc in b"), None)]
    assert encs == ["base16", "base64"]
    words = [c.text for c in completer.get_completions(Document("mem "), None)]
    assert words == ["C", "D"]


def test_cli_runs_commands(program_file, tmp_path, capsys):
    path = program_file("}{")
    rc = main([str(path), "--input", "ok", "-c", "run", "-c", "output", "--history", str(tmp_path / "h")])
    assert rc == 0
    out = capsys.readouterr().out
    assert out.splitlines()[-1] == "ok"


def test_cli_exit_command(capsys):
    assert main(["-c", "exit"]) == 0


def test_cli_reports_load_errors(program_file, capsys):
    path = program_file("(open")
    assert main([str(path), "-c", "status"]) == 1
    assert "unterminated comment" in capsys.readouterr().err
