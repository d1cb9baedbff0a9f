import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from intcode.solvers import (
    DiagnosticFailure,
    find_noun_verb,
    patch_program,
    restore_gravity_assist,
    run_diagnostic,
)
from intcode.vm_errors import MalformedProgram

GRAVITY_EXAMPLE = [1, 9, 10, 3, 2, 3, 11, 0, 99, 30, 40, 50]


def test_patch_program_does_not_touch_original():
    patched = patch_program(GRAVITY_EXAMPLE, 1, 2)
    assert patched[:3] == [1, 1, 2]
    assert GRAVITY_EXAMPLE[:3] == [1, 9, 10]


def test_restore_gravity_assist_reads_address_zero():
    assert restore_gravity_assist(GRAVITY_EXAMPLE, 9, 10) == 3500


def test_find_noun_verb_returns_matching_pair():
    found = find_noun_verb(GRAVITY_EXAMPLE, 3500, range(12), range(12))
    assert found is not None
    assert restore_gravity_assist(GRAVITY_EXAMPLE, *found) == 3500


def test_find_noun_verb_skips_out_of_range_pairs():
    # nouns and verbs past the tape end raise inside the VM and are skipped
    assert find_noun_verb([1, 0, 0, 0, 99], -1, range(10), range(10)) is None


def test_short_program_cannot_be_patched():
    with pytest.raises(MalformedProgram):
        patch_program([99], 12, 2)
    with pytest.raises(MalformedProgram):
        find_noun_verb([1, 0])


def test_run_diagnostic_returns_final_code():
    program = [3, 0, 104, 0, 104, 0, 4, 0, 99]
    assert run_diagnostic(program, 5) == 5


def test_run_diagnostic_reports_failed_tests():
    with pytest.raises(DiagnosticFailure) as excinfo:
        run_diagnostic([104, 3, 104, 7, 99], 1)
    assert excinfo.value.outputs == [3, 7]


def test_run_diagnostic_without_output():
    with pytest.raises(DiagnosticFailure):
        run_diagnostic([3, 0, 99], 1)
