import pytest

from kestrel.types.constants import TRUE
from kestrel.types.keyword import Keyword
from kestrel.types.symbol import Symbol


def test_deep_self_recursion_does_not_grow_the_stack(bare):
    bare.eval("""
    (define count-down
      (lambda (n)
        (if (= n 0)
            0
            (count-down (- n 1)))))
    """)
    assert bare.eval("(count-down 1000000)") == 0


def test_accumulator_loop(bare):
    bare.eval("""
    (define sum-to
      (lambda (n acc)
        (if (= n 0)
            acc
            (sum-to (- n 1) (+ acc n)))))
    """)
    assert bare.eval("(sum-to 100000 0)") == 5000050000


def test_tail_position_through_let_and_begin(bare):
    bare.eval("""
    (define loop
      (lambda (n)
        (let ((m (- n 1)))
          (begin
            (if (< m 0)
                :done
                (loop m))))))
    """)
    assert bare.eval("(loop 200000)") == Keyword("done")


def test_mutual_recursion(bare):
    bare.eval("""
    (define even?
      (lambda (n) (if (= n 0) #t (odd? (- n 1)))))
    (define odd?
      (lambda (n) (if (= n 0) #f (even? (- n 1)))))
    """)
    assert bare.eval("(even? 100001)") is not TRUE
    assert bare.eval("(even? 100000)") is TRUE


def test_tail_call_inside_catch_handler(bare):
    bare.eval("""
    (define retry
      (lambda (n)
        (try (if (= n 0) :ok (throw n))
             (catch e (retry (- e 1))))))
    """)
    assert bare.eval("(retry 50)") == Keyword("ok")


@pytest.mark.parametrize("depth", [10, 1000, 50000])
def test_quasiquoted_recursion(bare, depth):
    bare.eval("""
    (define walk
      (lambda (n)
        (if (= n 0) `(done ,n) (walk (- n 1)))))
    """)
    assert bare.eval(f"(walk {depth})") == [Symbol("done"), 0]
