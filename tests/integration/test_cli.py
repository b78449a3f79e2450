"""Integration tests for the emacs-client command line."""

import os

from click.testing import CliRunner

from emacs_client.cli import main


class TestEval:
    """Test `emacs-client eval`."""

    def test_prints_results(self, threaded_server, socket_path):
        server = threaded_server(b"-emacs-pid 42\n-print 3\n")

        result = CliRunner().invoke(main, ["--socket-path", socket_path, "eval", "(+ 1 2)"])

        assert result.exit_code == 0, result.output
        assert result.output == "3\n"
        assert server.requests[0].endswith(b"-eval (+&_1&_2) \n")

    def test_requires_expression(self, socket_path):
        result = CliRunner().invoke(main, ["--socket-path", socket_path, "eval"])

        assert result.exit_code == 2

    def test_server_error_exits_nonzero(self, threaded_server, socket_path):
        threaded_server(b"-print partial\n-error compile&_failed\n")

        result = CliRunner().invoke(main, ["--socket-path", socket_path, "eval", "(x)"])

        assert result.exit_code == 1
        assert "partial\n" in result.output
        assert "compile failed" in result.output

    def test_bad_pid_exits_nonzero(self, threaded_server, socket_path):
        threaded_server(b"-emacs-pid x\n")

        result = CliRunner().invoke(main, ["--socket-path", socket_path, "eval", "t"])

        assert result.exit_code == 1
        assert "-emacs-pid" in result.output


class TestOpen:
    """Test `emacs-client open`."""

    def test_open_file(self, threaded_server, socket_path):
        server = threaded_server(b"-emacs-pid 42\n")

        result = CliRunner().invoke(main, ["--socket-path", socket_path, "open", "notes.txt"])

        assert result.exit_code == 0, result.output
        assert result.output == ""
        assert server.requests[0].endswith(b"-file notes.txt \n")

    def test_no_server(self, socket_path):
        result = CliRunner().invoke(main, ["--socket-path", socket_path, "open", "x"])

        assert result.exit_code == 1
        assert "Cannot connect" in result.output


class TestSocketPath:
    """Test socket path selection."""

    def test_default(self, monkeypatch):
        monkeypatch.delenv("EMACS_SOCKET_NAME", raising=False)

        result = CliRunner().invoke(main, ["socket-path"])

        assert result.exit_code == 0
        assert result.output.strip().endswith(os.path.join(f"emacs{os.getuid()}", "server"))

    def test_socket_name(self):
        result = CliRunner().invoke(main, ["-s", "work", "socket-path"])

        assert result.output.strip().endswith(os.path.join(f"emacs{os.getuid()}", "work"))

    def test_socket_name_from_env(self):
        result = CliRunner().invoke(main, ["socket-path"], env={"EMACS_SOCKET_NAME": "other"})

        assert result.output.strip().endswith("other")

    def test_socket_path_wins(self):
        result = CliRunner().invoke(main, ["-s", "work", "--socket-path", "/run/e.sock", "socket-path"])

        assert result.output == "/run/e.sock\n"
