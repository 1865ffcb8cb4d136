"""
Amplifier orchestration tests.

Chains and feedback rings of machines running the public amplifier
example programs, checked against their published maximum signals.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from intcode.amplifiers import (
    PipelineStalled, max_thruster_signal, run_amplifier_chain, run_feedback_loop,
)
from intcode.machine import IntCodeMachine, Status

CHAIN_1 = "3,15,3,16,1002,16,10,16,1,16,15,15,4,15,99,0,0"
CHAIN_2 = ("3,23,3,24,1002,24,10,24,1002,23,-1,23,"
           "101,5,23,23,1,24,23,23,4,23,99,0,0")
CHAIN_3 = ("3,31,3,32,1002,32,10,32,1001,31,-2,31,1007,31,0,33,"
           "1002,33,7,33,1,33,31,31,1,32,31,31,4,31,99,0,0,0")

LOOP_1 = ("3,26,1001,26,-4,26,3,27,1002,27,2,27,1,27,26,"
          "27,4,27,1001,28,-1,28,1005,28,6,99,0,0,5")
LOOP_2 = ("3,52,1001,52,-5,52,3,53,1,52,56,54,1007,54,5,55,1005,55,26,1001,54,"
          "-5,54,1105,1,12,1,53,54,53,1008,54,0,55,1001,55,1,55,2,53,55,53,4,"
          "53,1001,56,-1,56,1005,56,6,99,0,0,0,0,10")


class TestChain:
    @pytest.mark.parametrize("program,phases,expected", [
        (CHAIN_1, (4, 3, 2, 1, 0), 43210),
        (CHAIN_2, (0, 1, 2, 3, 4), 54321),
        (CHAIN_3, (1, 0, 4, 3, 2), 65210),
    ])
    def test_known_settings(self, program, phases, expected):
        assert run_amplifier_chain(program, phases) == expected

    @pytest.mark.parametrize("program,phases,expected", [
        (CHAIN_1, (4, 3, 2, 1, 0), 43210),
        (CHAIN_2, (0, 1, 2, 3, 4), 54321),
        (CHAIN_3, (1, 0, 4, 3, 2), 65210),
    ])
    def test_search(self, program, phases, expected):
        signal, best = max_thruster_signal(program, range(5))
        assert signal == expected
        assert run_amplifier_chain(program, best) == expected

    def test_template_machine_untouched(self):
        template = IntCodeMachine(CHAIN_1)
        run_amplifier_chain(template, (4, 3, 2, 1, 0))
        assert template.output == []
        assert template.ip == 0

    def test_template_queues_ignored(self):
        template = IntCodeMachine(CHAIN_1)
        template.add_input(5)
        template.output.append(999)
        assert run_amplifier_chain(template, (4, 3, 2, 1, 0)) == 43210
        assert template.output == [999]

    def test_no_output(self):
        with pytest.raises(PipelineStalled):
            run_amplifier_chain("3,0,3,0,99", (0,))


class TestFeedbackLoop:
    @pytest.mark.parametrize("program,phases,expected", [
        (LOOP_1, (9, 8, 7, 6, 5), 139629729),
        (LOOP_2, (9, 7, 8, 5, 6), 18216),
    ])
    def test_known_settings(self, program, phases, expected):
        assert run_feedback_loop(program, phases) == expected

    @pytest.mark.parametrize("program,phases,expected", [
        (LOOP_1, (9, 8, 7, 6, 5), 139629729),
        (LOOP_2, (9, 7, 8, 5, 6), 18216),
    ])
    def test_search(self, program, phases, expected):
        signal, best = max_thruster_signal(program, range(5, 10), feedback=True)
        assert signal == expected
        assert sorted(best) == [5, 6, 7, 8, 9]

    def test_chain_program_in_a_ring(self):
        """A program that halts after one pass behaves like a chain."""
        assert run_feedback_loop(CHAIN_1, (4, 3, 2, 1, 0)) == 43210

    def test_template_queues_ignored(self):
        template = IntCodeMachine(LOOP_1)
        template.add_input(1, 2)
        template.output.append(999)
        assert run_feedback_loop(template, (9, 8, 7, 6, 5)) == 139629729

    def test_stalled_ring(self):
        # Reads forever without output.
        with pytest.raises(PipelineStalled):
            run_feedback_loop("3,10,1105,1,0", (0, 1))

    def test_manual_round_robin(self):
        """The loop helper matches a hand-written driver."""
        template = IntCodeMachine(LOOP_1)
        amps = []
        for phase in (9, 8, 7, 6, 5):
            amp = template.clone()
            amp.wait_on_input()
            amp.add_input(phase)
            amps.append(amp)

        signal = 0
        while True:
            for amp in amps:
                amp.add_input(signal)
                status = amp.run()
                signal = amp.take_output()[-1]
            if status is Status.HALTED:
                break
        assert signal == 139629729


class TestSearchArguments:
    def test_empty_phase_values(self):
        with pytest.raises(ValueError):
            max_thruster_signal(CHAIN_1, [])

    def test_empty_ring(self):
        with pytest.raises(ValueError):
            run_feedback_loop(CHAIN_1, ())
