import io
import sys

from loglines.output import LineWriter


class TestLineWriter:
    def test_appends_newline(self):
        stream = io.StringIO()
        writer = LineWriter(stream)
        writer.write("one")
        writer.write("two")
        assert stream.getvalue() == "one\ntwo\n"

    def test_defaults_to_current_stdout(self, capsys):
        writer = LineWriter()
        writer.write("to stdout")
        assert capsys.readouterr().out == "to stdout\n"
        assert writer.stream is sys.stdout
