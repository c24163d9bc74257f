## tinyforth — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from tinyforth.context import Context
from tinyforth.builtins import load_builtins_library
from tinyforth.interpreter import evaluate, evaluate_program
from tinyforth.types import Stack, NumberLiteral, WordReference, Primitive, Procedure, DefinitionStart, DefinitionEnd
from tinyforth.errors import UnknownWord, InvariantViolation, StackUnderflow


def _context(*values):
    return Context(stack=Stack(values), dictionary=load_builtins_library())


@pytest.mark.parametrize("n", [0, 5, -12])
def test_number_literal_pushes_on_top(n):
    ctx = _context(1, 2)
    words = dict(ctx.dictionary.words)
    evaluate(NumberLiteral(n), ctx)
    assert ctx.stack == [1, 2, n]
    assert ctx.dictionary.words == words


@pytest.mark.parametrize("a, b", [(2, 3), (-4, 4), (10**20, 1)])
def test_addition_of_two_literals(a, b):
    ctx = _context()
    add = ctx.dictionary.lookup("+")
    evaluate_program([NumberLiteral(a), NumberLiteral(b), add], ctx)
    assert ctx.stack == [a + b]


def test_dup_twice():
    ctx = _context(7)
    evaluate_program([WordReference("dup"), WordReference("dup")], ctx)
    assert ctx.stack == [7, 7, 7]


def test_unknown_word():
    ctx = _context()
    with pytest.raises(UnknownWord) as exc:
        evaluate(WordReference("nope"), ctx)
    assert exc.value.forth_token == "nope"


@pytest.mark.parametrize("marker", [DefinitionStart(), DefinitionEnd()])
def test_definition_markers_never_evaluate(marker):
    with pytest.raises(InvariantViolation):
        evaluate(marker, _context())


def test_empty_procedure_is_a_no_op():
    ctx = _context(1)
    ctx.dictionary.define("f", Procedure((), "f"))
    evaluate(WordReference("f"), ctx)
    assert ctx.stack == [1]


def test_procedure_resolves_words_at_call_time():
    ctx = _context()
    ctx.dictionary.define("a", Procedure((WordReference("b"),), "a"))
    ctx.dictionary.define("b", Procedure((NumberLiteral(1),), "b"))
    evaluate(WordReference("a"), ctx)
    ctx.dictionary.define("b", Procedure((NumberLiteral(2),), "b"))
    evaluate(WordReference("a"), ctx)
    assert ctx.stack == [1, 2]


def test_procedure_holding_nodes_by_value_ignores_redefinition():
    ctx = _context()
    ctx.dictionary.define("one", Procedure((NumberLiteral(1),), "one"))
    ctx.dictionary.define("frozen", Procedure((ctx.dictionary.lookup("one"),), "frozen"))
    ctx.dictionary.define("one", Procedure((NumberLiteral(100),), "one"))
    evaluate_program([WordReference("frozen"), WordReference("one")], ctx)
    assert ctx.stack == [1, 100]


def test_primitive_receives_the_context():
    seen = []
    ctx = _context(3)
    evaluate(Primitive(lambda c: seen.append(c), "probe"), ctx)
    assert seen == [ctx]


def test_errors_are_annotated_with_the_word_being_run():
    ctx = _context()
    ctx.dictionary.define("square", Procedure((WordReference("dup"), WordReference("*")), "square"))
    with pytest.raises(StackUnderflow) as exc:
        evaluate_program([WordReference("square")], ctx)
    assert exc.value.forth_token == "dup"


def test_verbose_trace_and_stats(capsys):
    ctx = _context()
    ctx.dictionary.define("double", Procedure((WordReference("dup"), WordReference("+")), "double"))
    stats = {}
    evaluate_program([NumberLiteral(2), WordReference("double")], ctx, verbosity=1, stats=stats)
    out = capsys.readouterr().out
    assert "double" in out
    assert ctx.stack == [4]
    assert stats['steps'] > 2


def test_silent_evaluation_prints_nothing(capsys):
    ctx = _context()
    evaluate_program([NumberLiteral(2), NumberLiteral(3)], ctx)
    assert capsys.readouterr().out == ""
