"""Tests for output handler implementations."""

from colorama import Fore

from pygit_stats import BufferedOutputHandler, ConsoleOutputHandler, NullOutputHandler


class TestNullOutputHandler:
    """NullOutputHandler should accept all calls silently."""

    def test_all_levels(self, capsys):
        handler = NullOutputHandler()
        handler.info("test")
        handler.success("test", indent=1)
        handler.warning("test")
        handler.error("test", indent=2)
        handler.debug("test")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""


class TestConsoleOutputHandler:
    def test_info_prints_to_stdout(self, capsys):
        handler = ConsoleOutputHandler()
        handler.info("hello")
        captured = capsys.readouterr()
        assert "hello" in captured.out
        assert captured.err == ""

    def test_info_with_indent(self, capsys):
        handler = ConsoleOutputHandler()
        handler.info("hello", indent=2)
        captured = capsys.readouterr()
        assert captured.out.startswith("    ")  # 2 * "  "

    def test_errors_and_warnings_to_stderr(self, capsys):
        handler = ConsoleOutputHandler()
        handler.warning("careful")
        handler.error("broken")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "careful" in captured.err
        assert "broken" in captured.err

    def test_no_color_codes_without_color(self, capsys):
        handler = ConsoleOutputHandler(use_color=False)
        handler.error("broken")
        assert "\x1b[" not in capsys.readouterr().err

    def test_color_codes_with_color(self, capsys):
        handler = ConsoleOutputHandler(use_color=True)
        handler.error("broken")
        assert Fore.RED in capsys.readouterr().err

    def test_debug_verbose(self, capsys):
        handler = ConsoleOutputHandler(verbose=True)
        handler.debug("debugging")
        captured = capsys.readouterr()
        assert "debugging" in captured.err

    def test_debug_non_verbose(self, capsys):
        handler = ConsoleOutputHandler(verbose=False)
        handler.debug("debugging")
        captured = capsys.readouterr()
        assert captured.err == ""


class TestBufferedOutputHandler:
    """BufferedOutputHandler collects messages for deferred printing."""

    def test_messages_buffered_with_level(self):
        handler = BufferedOutputHandler()
        handler.info("hello")
        handler.error("err", indent=1)
        assert handler.messages == [('info', 'hello', 0), ('error', 'err', 1)]

    def test_debug_buffered(self):
        handler = BufferedOutputHandler()
        handler.debug("debug msg")
        assert handler.messages == [('debug', 'debug msg', 0)]

    def test_flush_to_routes_levels(self, capsys):
        handler = BufferedOutputHandler()
        handler.info("line1")
        handler.warning("warn1")
        handler.debug("hidden")
        handler.flush_to(ConsoleOutputHandler())
        captured = capsys.readouterr()
        assert "line1" in captured.out
        assert "warn1" in captured.err
        assert "hidden" not in captured.err
        assert handler.messages == []  # cleared after flush
