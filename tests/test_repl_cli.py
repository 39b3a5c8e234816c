import io

import pytest

from kestrel import __version__
from kestrel.cli import main
from kestrel.repl import CONTINUATION_PROMPT, PROMPT, Repl
from kestrel.types.function import Primitive
from kestrel.types.symbol import Symbol


def run_session(interp, text, interactive=False):
    out = io.StringIO()
    Repl(interp, stdin=io.StringIO(text), stdout=out, interactive=interactive).run()
    return out.getvalue()


# -------------------------------
# REPL
# -------------------------------
def test_results_are_printed_readably(bare):
    assert run_session(bare, '(+ 1 2)\n(define x "a")\nx\n') == '3\n"a"\n"a"\n'


def test_null_results_are_not_printed(bare):
    assert run_session(bare, "null\n(if #f 1 null)\n") == ""


def test_blank_and_comment_lines(bare):
    assert run_session(bare, "\n   \n; only a comment\n(+ 1 1)\n") == "2\n"


def test_several_forms_on_one_line(bare):
    assert run_session(bare, "(define y 1) (+ y 1)\n") == "1\n2\n"


def test_multi_line_input(bare):
    assert run_session(bare, "(+ 1\n   2)\n[1\n2]\n") == "3\n[1 2]\n"


def test_incomplete_line_is_not_evaluated_early(bare):
    out = io.StringIO()
    repl = Repl(bare, stdin=io.StringIO(""), stdout=out, interactive=False)
    bare.eval("(define counter (atom 0))")
    repl.feed("(swap! counter (lambda (v) (+ v 1))) (list")
    # The swap! is complete, but it shares a buffer with an open form.
    assert bare.eval("(deref counter)") == 0
    repl.feed("1)")
    assert bare.eval("(deref counter)") == 1
    assert out.getvalue() == "1\n(1)\n"


def test_errors_are_reported_and_the_loop_continues(bare):
    output = run_session(bare, "(/ 1 0)\n(+ 1 1)\n")
    assert output == "/: division by zero\nForm:\n(/ 1 0)\n2\n"


def test_parse_errors_are_reported(bare):
    output = run_session(bare, ")\n(+ 2 2)\n")
    assert output == "unexpected ')'\nForm:\n)\n4\n"


def test_other_exceptions_are_reported(bare):
    def boom(args):
        raise RuntimeError("kaput")

    bare.env.define(Symbol("boom"), Primitive("boom", boom))
    assert run_session(bare, "(boom)\n1\n") == "Error: kaput\n1\n"


def test_interactive_prompts(bare):
    output = run_session(bare, "(+ 1\n2)\n", interactive=True)
    assert output == f"{PROMPT}{CONTINUATION_PROMPT}3\n{PROMPT}\n"


def test_exit_ends_the_session(bare):
    with pytest.raises(SystemExit) as info:
        run_session(bare, "(exit 4)\n(+ 1 1)\n")
    assert info.value.code == 4


def test_feed_keeps_state_between_calls(bare):
    out = io.StringIO()
    repl = Repl(bare, stdin=io.StringIO(""), stdout=out, interactive=False)
    repl.feed("(define z")
    assert repl.pending == ["(define z"]
    repl.feed("9)")
    assert repl.pending == []
    repl.feed("z")
    assert out.getvalue() == "9\n9\n"


# -------------------------------
# Command line
# -------------------------------
def test_cli_eval(capsys):
    assert main(["--no-prelude", "-e", "(+ 1 2)"]) == 0
    assert capsys.readouterr().out == "3\n"


def test_cli_eval_uses_the_prelude(capsys):
    assert main(["-e", "(inc 41)"]) == 0
    assert capsys.readouterr().out == "42\n"


def test_cli_files_then_expression(tmp_path, capsys):
    script = tmp_path / "defs.lisp"
    script.write_text("(define base 2)\n(println \"loaded\")\n", encoding="utf-8")
    assert main([str(script), "-e", "(* base 21)"]) == 0
    assert capsys.readouterr().out == "loaded\n42\n"


def test_cli_reports_failures(capsys):
    assert main(["--no-prelude", "-e", "(/ 1 0)"]) == 1
    assert "division by zero" in capsys.readouterr().err


def test_cli_reports_incomplete_input(capsys):
    assert main(["--no-prelude", "-e", "(+ 1"]) == 1
    assert capsys.readouterr().err.startswith("Incomplete input:")


def test_cli_reports_missing_files(tmp_path, capsys):
    assert main(["--no-prelude", str(tmp_path / "missing.lisp")]) == 1
    assert capsys.readouterr().err.startswith("Error:")


def test_cli_custom_docs(tmp_path, capsys):
    docs = tmp_path / "docs.json"
    docs.write_text('{"pages": []}', encoding="utf-8")
    assert main(["--no-prelude", "--docs", str(docs), "-e", "(man +)"]) == 0
    assert capsys.readouterr().out == "No man page for +\nnull\n"


def test_cli_version(capsys):
    with pytest.raises(SystemExit) as info:
        main(["--version"])
    assert info.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_cli_without_arguments_starts_the_repl(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("(+ 20 22)\n"))
    assert main(["--no-prelude"]) == 0
    assert capsys.readouterr().out == "42\n"
