import errno

import pytest

from pg_toolset_core.lib.program import (
    ELLIPSIS,
    Program,
    execute_program,
    format_command_line,
    run_program,
    snprintf_program_command_line,
)
from conftest import write_script


class TestExecuteProgram:
    """Running programs and capturing their output."""

    def test_captures_stdout_and_stderr(self, tmp_path):
        script = write_script(tmp_path / "prog", 'echo "out line"\necho "err line" >&2\n')

        result = run_program(str(script))

        assert result.launched
        assert result.ok
        assert result.return_code == 0
        assert result.error is None
        assert result.stdout == "out line\n"
        assert result.stderr == "err line\n"

    def test_non_zero_exit_is_returned_as_data(self, tmp_path):
        script = write_script(tmp_path / "prog", 'echo "failed" >&2\nexit 3\n')

        result = run_program(str(script))

        assert result.launched
        assert not result.ok
        assert result.return_code == 3
        assert result.stderr == "failed\n"

    def test_launch_failure_carries_os_error(self, tmp_path):
        result = run_program(str(tmp_path / "missing"))

        assert not result.launched
        assert result.return_code is None
        assert result.error == errno.ENOENT
        assert result.stdout == ""
        assert result.stderr == ""

    def test_permission_denied(self, tmp_path):
        script = tmp_path / "prog"
        script.write_text("#!/bin/sh\nexit 0\n")
        script.chmod(0o644)

        result = run_program(str(script))

        assert not result.launched
        assert result.error == errno.EACCES

    def test_arguments_are_passed_verbatim(self, tmp_path):
        script = write_script(tmp_path / "prog", 'for a in "$@"; do echo "[$a]"; done\n')

        result = run_program(str(script), "--section", "pre data", "")

        assert result.stdout.splitlines() == ["[--section]", "[pre data]", "[]"]

    def test_environment_is_passed(self, tmp_path):
        script = write_script(tmp_path / "prog", 'echo "$PGCONNECT_TIMEOUT"\n')

        result = execute_program(Program(args=(str(script),), env={"PGCONNECT_TIMEOUT": "10"}))

        assert result.stdout == "10\n"

    def test_process_buffer_sees_every_chunk(self, tmp_path):
        script = write_script(tmp_path / "prog", 'echo one\necho two >&2\necho three\n')
        seen = {"stdout": [], "stderr": []}

        result = execute_program(
            Program(args=(str(script),)),
            process_buffer=lambda stream, text: seen[stream].append(text)
        )

        assert "".join(seen["stdout"]) == result.stdout == "one\nthree\n"
        assert "".join(seen["stderr"]) == result.stderr == "two\n"

    def test_large_output_on_both_streams(self, tmp_path):
        script = write_script(
            tmp_path / "prog",
            'i=0\nwhile [ $i -lt 5000 ]; do echo "out $i"; echo "err $i" >&2; i=$((i+1)); done\n'
        )

        result = run_program(str(script))

        assert len(result.stdout.splitlines()) == 5000
        assert len(result.stderr.splitlines()) == 5000
        assert result.stdout.splitlines()[-1] == "out 4999"

    def test_program_requires_a_path(self):
        with pytest.raises(ValueError):
            Program(args=())


class TestCommandLine:
    """Rendering command lines for logs."""

    def test_short_command_line_is_complete(self):
        program = Program(args=("/usr/bin/pg_dump", "-Fc", "--file", "/tmp/out.dump"))

        assert format_command_line(program, 1024) == "/usr/bin/pg_dump -Fc --file /tmp/out.dump"

    def test_arguments_with_spaces_are_quoted(self):
        program = Program(args=("/usr/bin/psql", "-d", "dbname=app user=me"))

        assert format_command_line(program) == "/usr/bin/psql -d 'dbname=app user=me'"

    def test_snprintf_reports_full_length(self):
        program = Program(args=("/bin/prog", "x" * 100))

        text, length = snprintf_program_command_line(program, 32)

        assert length == len("/bin/prog ") + 100
        assert len(text) == 31

    def test_just_below_capacity_is_complete(self):
        program = Program(args=("/bin/prog", "a" * 10))
        full = "/bin/prog " + "a" * 10

        assert format_command_line(program, len(full) + 1) == full

    def test_at_capacity_is_truncated(self):
        program = Program(args=("/bin/prog", "a" * 10))
        full = "/bin/prog " + "a" * 10

        line = format_command_line(program, len(full))

        assert len(line) == len(full) - 1
        assert full.startswith(line[:-len(ELLIPSIS)])

    def test_long_command_line_is_truncated(self):
        program = Program(args=("/usr/lib/postgresql/14/bin/pg_dump",) + ("--table=t",) * 500)
        full = " ".join(program.args)

        line = format_command_line(program, 1024)

        assert len(line) == 1023
        assert line.endswith(ELLIPSIS)
        assert full.startswith(line[:-len(ELLIPSIS)])

    def test_capacity_must_fit_the_ellipsis(self):
        with pytest.raises(ValueError):
            format_command_line(Program(args=("/bin/prog",)), 4)

    def test_clipped_and_complete_lines_fit_the_same_buffer(self):
        """A clipped line is no longer than the longest line kept whole."""
        size = 40
        longest_complete = Program(args=("/bin/prog", "a" * (size - 1 - len("/bin/prog "))))
        clipped = Program(args=("/bin/prog", "a" * size))

        assert len(format_command_line(longest_complete, size)) == size - 1
        assert len(format_command_line(clipped, size)) == size - 1
        assert format_command_line(clipped, size).endswith(ELLIPSIS)
