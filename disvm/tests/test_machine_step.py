import io
import logging
import re
from pathlib import Path

import pytest

from disvm import opcodes, trits
from disvm.errors import TritRangeError
from disvm.machine import Machine


def test_halt_stops_immediately():
    machine = Machine("!")
    assert machine.step() is False
    assert machine.halt is True
    assert (machine.c, machine.d) == (0, 0)
    assert machine.steps == 1


def test_step_after_halt_has_no_side_effects():
    machine = Machine("!")
    machine.step()
    before = machine.snapshot()
    assert machine.step() is False
    assert machine.step() is False
    assert machine.snapshot() == before


def test_comment_only_prefix_behaves_like_halt():
    machine = Machine("(comment)!")
    assert machine.step() is False
    assert machine.halt is True


def test_load_replaces_d_with_word_at_d():
    machine = Machine("*")
    assert machine.step() is True
    # D <- memory[0] == 42, then advanced
    assert machine.d == 43
    assert machine.c == 1


def test_rotate_updates_accumulator_and_memory():
    machine = Machine(">")
    assert machine.step() is True
    expected = 62 // 3 + 2 * 19683
    assert machine.a == expected
    assert machine.memory[0] == expected
    assert (machine.c, machine.d) == (1, 1)


def test_jump_loads_c_from_memory_then_advances():
    machine = Machine("^")
    assert machine.step() is True
    assert machine.c == 95
    assert machine.d == 1


def test_subtract_updates_accumulator_and_memory():
    machine = Machine("|")
    machine.a = 7
    assert machine.step() is True
    expected = trits.subtract(7, 124)
    assert machine.a == expected
    assert machine.memory[0] == expected


def test_output_appends_accumulator():
    machine = Machine("{")
    machine.a = 65
    assert machine.step() is True
    assert machine.output_buffer == [65]
    assert machine.halt is False


def test_output_of_max_value_halts():
    machine = Machine("{")
    machine.a = trits.MAX_VALUE
    assert machine.step() is False
    assert machine.halt is True
    assert machine.output_buffer == []
    assert machine.c == 0


def test_input_from_empty_queue_yields_max_value():
    machine = Machine("}")
    assert machine.step() is True
    assert machine.a == 59048


def test_input_consumes_front_element():
    machine = Machine("}}")
    machine.input_buffer = [7, 8]
    machine.step()
    assert machine.a == 7
    assert list(machine.input_buffer) == [8]
    machine.step()
    assert machine.a == 8
    assert len(machine.input_buffer) == 0


def test_input_out_of_domain_raises():
    machine = Machine("}")
    machine.input_buffer = [59049]
    with pytest.raises(TritRangeError):
        machine.step()


def test_feed_validates_values():
    machine = Machine("}")
    machine.feed([1, 2])
    with pytest.raises(TritRangeError):
        machine.feed([3, -1])
    assert list(machine.input_buffer) == [1, 2]


def test_underscore_is_accepted_but_does_nothing():
    # '_' loads as an instruction yet the cycle has no case for it
    machine = Machine("_")
    assert machine.step() is True
    assert (machine.a, machine.c, machine.d) == (0, 1, 1)
    assert machine.memory[0] == opcodes.NOP
    assert machine.output_buffer == []


def test_unknown_word_is_a_no_op():
    machine = Machine("!")
    machine.memory[0] = 5
    assert machine.step() is True
    assert (machine.a, machine.c, machine.d) == (0, 1, 1)


def test_pointers_wrap_around():
    machine = Machine("")
    machine.c = 59048
    machine.d = 59048
    assert machine.step() is True
    assert (machine.c, machine.d) == (0, 0)


def test_self_modifying_program_rewrites_fetch_position():
    # '|' at address 0 with D == 0 overwrites its own word
    machine = Machine("|")
    machine.step()
    assert machine.memory[0] == trits.subtract(0, opcodes.SUBTRACT) == 239


def test_cat_program_echoes_input(cat_source):
    machine = Machine(cat_source)
    machine.input_buffer = list(b"hi")
    executed = machine.run()
    assert machine.halt is True
    assert machine.output_buffer == [104, 105]
    assert executed == 2 * 59049 + 2
    assert machine.steps == executed


def test_run_respects_max_steps(cat_source):
    machine = Machine(cat_source)
    machine.input_buffer = [1]
    assert machine.run(10) == 10
    assert machine.halt is False
    assert machine.run(0) == 0


def test_drain_output_clears_buffer():
    machine = Machine("{")
    machine.step()
    assert machine.drain_output() == [0]
    assert machine.output_buffer == []


def test_trace_file_receives_output():
    handle = io.StringIO()
    machine = Machine("_!", trace_file=handle)
    machine.run()
    contents = handle.getvalue()
    assert contents.count("[TRACE]") == 2
    assert "'!' HALT" in contents


def test_trace_logs_at_debug(caplog):
    caplog.set_level(logging.DEBUG, logger="disvm.machine")
    machine = Machine("!", trace=True)
    machine.step()
    assert any("[TRACE] C=00000" in record.getMessage() for record in caplog.records)


def test_machine_executes_every_opcode_but_nop():
    """The instruction cycle handles each opcode in the shared table except '_'."""

    source = (Path(__file__).resolve().parents[1] / "machine.py").read_text()
    handled = set(re.findall(r"\bopcode == op\.([A-Z]+)", source))
    names = {name for name in dir(opcodes) if name.isupper() and isinstance(getattr(opcodes, name), int)}
    assert handled == names - {"NOP"}
