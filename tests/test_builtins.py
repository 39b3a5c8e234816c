import pytest

from kestrel.builtin.core import CORE, format_line
from kestrel.errors import (
    KestrelArithmeticError,
    KestrelArityError,
    KestrelIndexError,
    KestrelParseError,
    KestrelThrown,
    KestrelTypeError,
)
from kestrel.types.atom import Atom
from kestrel.types.constants import FALSE, Nil, TRUE
from kestrel.types.function import Primitive
from kestrel.types.keyword import Keyword
from kestrel.types.symbol import Symbol
from kestrel.types.vector import Vector


# -------------------------------
# Arithmetic and comparison
# -------------------------------
@pytest.mark.parametrize(
    "source, expected",
    [
        ("(+ 1 2)", 3),
        ("(- 10 4)", 6),
        ("(* 6 7)", 42),
        ("(+ 1.5 2.5)", 4.0),
        ("(/ 7 2)", 3),
        ("(/ -7 2)", -3),
        ("(/ 7 -2)", -3),
        ("(/ 7.0 2.0)", 3.5),
        ("(* 99999999999 99999999999)", 99999999999 * 99999999999),
        ("(+ #xff #b1)", 256),
    ],
)
def test_arithmetic(bare, source, expected):
    assert bare.eval(source) == expected


@pytest.mark.parametrize(
    "source, expected",
    [
        ("(< 1 2)", TRUE),
        ("(< 2 1)", FALSE),
        ("(<= 2 2)", TRUE),
        ("(> 3 2)", TRUE),
        ("(>= 1 2)", FALSE),
        ("(< 1.0 2.5)", TRUE),
    ],
)
def test_comparison(bare, source, expected):
    assert bare.eval(source) is expected


def test_division_by_zero(bare):
    with pytest.raises(KestrelArithmeticError):
        bare.eval("(/ 1 0)")


@pytest.mark.parametrize("source", ["(+ 1 2.0)", '(+ 1 "2")', "(< 1 2.0)", "(* null 1)"])
def test_arithmetic_type_errors(bare, source):
    with pytest.raises(KestrelTypeError):
        bare.eval(source)


@pytest.mark.parametrize("source", ["(+ 1)", "(+ 1 2 3)", "(< 1)"])
def test_arithmetic_is_binary(bare, source):
    with pytest.raises(KestrelArityError):
        bare.eval(source)


def test_time_ms(bare):
    first = bare.eval("(time-ms)")
    assert isinstance(first, int)
    assert bare.eval("(time-ms)") >= first


# -------------------------------
# Predicates
# -------------------------------
@pytest.mark.parametrize(
    "source, expected",
    [
        ("(null? null)", TRUE),
        ("(null? (list))", FALSE),
        ("(true? #t)", TRUE),
        ("(true? 1)", FALSE),
        ("(false? #f)", TRUE),
        ("(false? null)", FALSE),
        ("(symbol? 'a)", TRUE),
        ('(symbol? "a")', FALSE),
        ('(string? "a")', TRUE),
        ("(string? :a)", FALSE),
        ("(keyword? :a)", TRUE),
        ("(number? 1)", TRUE),
        ("(number? 1.5)", TRUE),
        ('(number? "1")', FALSE),
        ("(fn? +)", TRUE),
        ("(fn? (lambda (x) x))", TRUE),
        ("(fn? 1)", FALSE),
        ("(macro? +)", FALSE),
        ("(list? (list 1))", TRUE),
        ("(list? [1])", FALSE),
        ("(vector? [1])", TRUE),
        ("(vector? (list 1))", FALSE),
        ("(sequential? [1])", TRUE),
        ("(sequential? (list))", TRUE),
        ('(sequential? "abc")', FALSE),
        ("(map? {})", TRUE),
        ("(map? (list))", FALSE),
        ("(atom? (atom 1))", TRUE),
        ("(atom? 1)", FALSE),
    ],
)
def test_predicates(bare, source, expected):
    assert bare.eval(source) is expected


def test_macro_predicate(bare):
    bare.eval("(defmacro m (lambda (x) x))")
    assert bare.eval("(macro? m)") is TRUE
    assert bare.eval("(fn? m)") is FALSE


def test_symbol_and_keyword_constructors(bare):
    assert bare.eval('(symbol "abc")') == Symbol("abc")
    assert bare.eval('(keyword "abc")') == Keyword("abc")
    assert bare.eval("(keyword :abc)") == Keyword("abc")
    with pytest.raises(KestrelTypeError):
        bare.eval("(symbol 1)")


# -------------------------------
# Strings and output
# -------------------------------
def test_str_concatenates_display_forms(bare):
    assert bare.eval('(str "a" 1 :k (list "b" 2))') == 'a1:k(b 2)'
    assert bare.eval("(str)") == ""


def test_format_str_is_readable(bare):
    assert bare.eval('(format-str "a" 1 (list "b"))') == '"a" 1 ("b")'


def test_println(bare, capsys):
    assert bare.eval('(println "hello" 1 "world")') is Nil
    assert capsys.readouterr().out == "hello 1 world\n"


@pytest.mark.parametrize(
    "fmt, values, expected",
    [
        ("plain", [], "plain"),
        ("~d + ~d", [1, 2], "1 + 2"),
        ("~s!", ["hi"], "hi!"),
        ("~x ~X", [255, 16], "#xff #x10"),
        ("~b", [5], "#b101"),
        ("~f", [2.5], "2.5"),
        ("a~%b~tc", [], "a\nb\tc"),
        ("100~~", [], "100~"),
    ],
)
def test_format_line(fmt, values, expected):
    assert format_line(fmt, values) == expected


def test_format_prints_and_returns_null(bare, capsys):
    assert bare.eval('(format "~s is ~d" "x" 3)') is Nil
    assert capsys.readouterr().out == "x is 3\n"


def test_format_errors():
    with pytest.raises(KestrelTypeError):
        format_line("~q", [])
    with pytest.raises(KestrelTypeError):
        format_line("~d", ["not a number"])
    with pytest.raises(KestrelTypeError):
        format_line("oops ~", [])
    with pytest.raises(KestrelArityError):
        format_line("~d ~d", [1])


def test_split(bare):
    assert bare.eval('(split "a,b,,c" ",")') == ["a", "b", "", "c"]
    assert bare.eval('(split "a;b" ";x")') == ["a", "b"]
    with pytest.raises(KestrelTypeError):
        bare.eval('(split "a" "")')


def test_read_string(bare):
    assert bare.eval('(read-string "(+ 1 2)")') == [Symbol("+"), 1, 2]
    assert bare.eval('(read-string "1 2")') == 1
    assert bare.eval('(read-string "")') is Nil
    with pytest.raises(KestrelParseError):
        bare.eval('(read-string "(1 2")')


def test_read_file(bare, tmp_path):
    source = tmp_path / "data.txt"
    source.write_text("contents\n", encoding="utf-8")
    assert bare.eval(f'(read-file "{source}")') == "contents\n"


@pytest.mark.parametrize("name", ["", "/definitely/not/here.lisp"])
def test_read_file_failures(bare, name):
    with pytest.raises(KestrelTypeError):
        bare.eval(f'(read-file "{name}")')


# -------------------------------
# Lists, vectors and maps
# -------------------------------
def test_list_and_vector_constructors(bare):
    assert bare.eval("(list 1 2)") == [1, 2]
    assert not isinstance(bare.eval("(list 1 2)"), Vector)
    assert isinstance(bare.eval("(vector 1 2)"), Vector)
    assert isinstance(bare.eval("(vec (list 1 2))"), Vector)


def test_cons_and_concat(bare):
    assert bare.eval("(cons 1 (list 2 3))") == [1, 2, 3]
    assert bare.eval("(cons 1 null)") == [1]
    assert not isinstance(bare.eval("(cons 1 [2])"), Vector)
    assert bare.eval("(concat (list 1) [2] null (list))") == [1, 2]
    assert bare.eval("(concat)") == []
    with pytest.raises(KestrelTypeError):
        bare.eval("(cons 1 2)")


def test_nth(bare):
    assert bare.eval("(nth (list 1 2 3) 1)") == 2
    assert bare.eval("(nth [1 2 3] 2)") == 3
    with pytest.raises(KestrelIndexError):
        bare.eval("(nth (list 1) 1)")
    with pytest.raises(KestrelIndexError):
        bare.eval("(nth (list 1) -1)")


def test_first_rest(bare):
    assert bare.eval("(first (list 1 2))") == 1
    assert bare.eval("(first (list))") is Nil
    assert bare.eval("(first null)") is Nil
    assert bare.eval("(rest [1 2 3])") == [2, 3]
    assert not isinstance(bare.eval("(rest [1 2 3])"), Vector)
    assert bare.eval("(rest (list))") == []
    assert bare.eval("(rest null)") == []


def test_empty_and_length(bare):
    assert bare.eval("(empty? (list))") is TRUE
    assert bare.eval("(empty? [1])") is FALSE
    assert bare.eval("(empty? null)") is TRUE
    assert bare.eval("(length (list 1 2 3))") == 3
    assert bare.eval("(length null)") == 0


def test_conj(bare):
    assert bare.eval("(conj [1 2] 3 4)") == Vector([1, 2, 3, 4])
    assert isinstance(bare.eval("(conj [1 2] 3 4)"), Vector)
    assert bare.eval("(conj (list 1 2) 3 4)") == [4, 3, 1, 2]


def test_seq(bare):
    assert bare.eval("(seq [1 2])") == [1, 2]
    assert not isinstance(bare.eval("(seq [1 2])"), Vector)
    assert bare.eval('(seq "ab")') == ["a", "b"]
    assert bare.eval("(seq (list))") is Nil
    assert bare.eval('(seq "")') is Nil
    assert bare.eval("(seq null)") is Nil


def test_hash_map_operations(bare):
    bare.eval('(define m (hash-map "a" 1 :b 2))')
    assert bare.eval("m") == {"a": 1, Keyword("b"): 2}
    assert bare.eval('(get m "a")') == 1
    assert bare.eval('(get m "zz")') is Nil
    assert bare.eval('(get null "a")') is Nil
    assert bare.eval("(contains? m :b)") is TRUE
    assert bare.eval('(contains? m "b")') is FALSE
    assert bare.eval('(assoc m "c" 3)') == {"a": 1, Keyword("b"): 2, "c": 3}
    assert bare.eval('(dissoc m "a")') == {Keyword("b"): 2}
    # assoc and dissoc return copies
    assert bare.eval("m") == {"a": 1, Keyword("b"): 2}
    assert sorted(map(str, bare.eval("(keys m)"))) == [":b", "a"]
    assert sorted(bare.eval("(vals m)")) == [1, 2]


def test_map_keys_must_be_strings_or_keywords(bare):
    with pytest.raises(KestrelTypeError):
        bare.eval("(hash-map 1 2)")
    with pytest.raises(KestrelArityError):
        bare.eval('(hash-map "a")')
    with pytest.raises(KestrelArityError):
        bare.eval('(assoc {} "a")')


# -------------------------------
# Higher order
# -------------------------------
def test_apply(bare):
    assert bare.eval("(apply + 1 (list 2))") == 3
    assert bare.eval("(apply + [1 2])") == 3
    assert bare.eval("(apply (lambda (&rest xs) xs) 1 2 [3 4])") == [1, 2, 3, 4]


def test_map(bare):
    assert bare.eval("(map (lambda (x) (* x x)) (list 1 2 3))") == [1, 4, 9]
    assert bare.eval("(map - [])") == []
    assert bare.eval("(map first (list (list 1) (list 2)))") == [1, 2]


# -------------------------------
# Metadata and atoms
# -------------------------------
def test_with_meta_returns_a_copy(bare):
    bare.eval("(define f (lambda (x) x))")
    bare.eval("(define g (with-meta f :tagged))")
    assert bare.eval("(meta g)") == Keyword("tagged")
    assert bare.eval("(meta f)") is Nil
    assert bare.eval("(g 5)") == 5
    assert bare.eval("(meta 1)") is Nil


def test_atoms(bare):
    bare.eval("(define a (atom 1))")
    assert isinstance(bare.eval("a"), Atom)
    assert bare.eval("(deref a)") == 1
    assert bare.eval("(reset! a 5)") == 5
    assert bare.eval("(swap! a + 10)") == 15
    assert bare.eval("(swap! a (lambda (v) (* v 2)))") == 30
    assert bare.eval("(deref a)") == 30
    with pytest.raises(KestrelTypeError):
        bare.eval("(deref 1)")


# -------------------------------
# Equality, throw and exit
# -------------------------------
def test_equality_builtin(bare):
    assert bare.eval("(= (list 1 2) [1 2])") is TRUE
    assert bare.eval("(= 1 1.0)") is FALSE
    with pytest.raises(KestrelArityError):
        bare.eval("(= 1)")


def test_throw_carries_its_payload(bare):
    with pytest.raises(KestrelThrown) as info:
        bare.eval("(throw (list 1 2))")
    assert info.value.payload == [1, 2]


@pytest.mark.parametrize("source, code", [("(exit)", 0), ("(exit 3)", 3)])
def test_exit(bare, source, code):
    with pytest.raises(SystemExit) as info:
        bare.eval(source)
    assert info.value.code == code


# -------------------------------
# Builtin table
# -------------------------------
def test_core_table_is_read_only():
    with pytest.raises(TypeError):
        CORE["+"] = None
    assert all(isinstance(p, Primitive) for p in CORE.values())
    assert "eval" not in CORE


def test_each_interpreter_has_its_own_eval(bare):
    from kestrel.interpreter import Interpreter

    other = Interpreter(prelude=False)
    other.eval("(define only-here 1)")
    assert other.eval("(eval 'only-here)") == 1
    assert bare.eval("(eval '1)") == 1
    assert bare.eval("(fn? eval)") is TRUE
