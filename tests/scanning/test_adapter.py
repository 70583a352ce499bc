"""Tests for lowering tree-sitter trees into SyntaxTree node variants."""

import pytest

from perf_wizard.cancellation import CancellationToken
from perf_wizard.exceptions import AnalysisCancelled
from perf_wizard.scanning.adapter import NO_SCRIPT_BLOCK, ParseFailure, parse_source
from perf_wizard.scanning.dialects import Dialect
from perf_wizard.scanning.nodes import (
    CallNode,
    ElementNode,
    FunctionNode,
    ImportNode,
    LoopNode,
    MemberNode,
    NodeKind,
    SyntaxTree,
    ValueShape,
)


class TestLoops:
    """Loop statements become LoopNodes."""

    def test_loop_types(self, parse_js):
        tree = parse_js(
            "for (let i = 0; i < 3; i++) {}\n"
            "for (const k in obj) {}\n"
            "for (const v of list) {}\n"
            "while (ok) {}\n"
            "do {} while (ok);\n"
        )
        assert [loop.loop_type for loop in tree.visit(LoopNode)] == [
            "for",
            "for-in",
            "for-of",
            "while",
            "do-while",
        ]

    def test_lines_are_one_indexed(self, parse_js):
        tree = parse_js("\n\nwhile (x) {}\n")
        (loop,) = tree.visit(LoopNode)
        assert loop.line == 3

    def test_nested_loop_ancestry(self, parse_js):
        tree = parse_js("for (;;) {\n  while (x) {}\n}\n")
        outer, inner = tree.visit(LoopNode)
        assert tree.has_ancestor(inner, LoopNode)
        assert not tree.has_ancestor(outer, LoopNode)
        assert list(tree.descendants(outer, LoopNode)) == [inner]

    def test_for_of_iterable_runs_once(self, parse_js):
        tree = parse_js("for (const b of document.querySelectorAll('.btn')) {\n  b.focus();\n}\n")
        query, focus = tree.visit(CallNode)
        assert not tree.in_loop_iteration(query)
        assert tree.in_loop_iteration(focus)

    def test_for_condition_runs_every_iteration(self, parse_js):
        tree = parse_js("for (let i = start(); i < limit(); i++) {}\n")
        start, limit = tree.visit(CallNode)
        assert not tree.in_loop_iteration(start)
        assert tree.in_loop_iteration(limit)

    def test_while_condition_runs_every_iteration(self, parse_js):
        tree = parse_js("while (next()) {}\n")
        (call,) = tree.visit(CallNode)
        assert tree.in_loop_iteration(call)


class TestCalls:
    """Call expressions become CallNodes."""

    def test_plain_call(self, parse_js):
        tree = parse_js("setTimeout(tick, 100);\n")
        (call,) = tree.visit(CallNode)
        assert call.callee_name == "setTimeout"
        assert call.callee_object is None
        assert not call.is_method
        assert call.arguments == (ValueShape.IDENTIFIER, ValueShape.NUMBER)
        assert call.identifier_arguments == ("tick",)

    def test_method_call(self, parse_js):
        tree = parse_js("document.addEventListener('click', onClick);\n")
        (call,) = tree.visit(CallNode)
        assert call.is_method
        assert call.callee_name == "addEventListener"
        assert call.callee_object == "document"
        assert call.callee_path == "document.addEventListener"
        assert call.first_string_argument == "click"

    def test_chained_receivers(self, parse_js):
        """In a.map().filter() the filter call's receiver is the map call."""
        tree = parse_js("list.map(f).filter(g);\n")
        calls = {c.callee_name: c for c in tree.visit(CallNode)}
        assert calls["filter"].receiver == calls["map"].index
        assert calls["map"].receiver is None
        assert calls["map"].callee_object == "list"

    def test_argument_shapes(self, parse_js):
        tree = parse_js("f({a: 1}, [1], () => 1, 'x', y.z, g());\n")
        outer = next(c for c in tree.visit(CallNode) if c.callee_name == "f")
        assert outer.arguments == (
            ValueShape.OBJECT,
            ValueShape.ARRAY,
            ValueShape.FUNCTION,
            ValueShape.STRING,
            ValueShape.MEMBER,
            ValueShape.CALL,
        )


class TestImports:
    """Import statements become ImportNodes."""

    def test_default_and_named(self, parse_js):
        tree = parse_js("import React, { useState as useS } from 'react';\n")
        (imp,) = tree.visit(ImportNode)
        assert imp.source == "react"
        assert imp.is_default
        assert not imp.is_namespace
        assert imp.specifiers == ("React", "useS")

    def test_namespace(self, parse_js):
        tree = parse_js("import * as _ from 'lodash';\n")
        (imp,) = tree.visit(ImportNode)
        assert imp.is_namespace
        assert imp.specifiers == ("_",)

    def test_side_effect_import(self, parse_js):
        tree = parse_js("import './styles.css';\n")
        (imp,) = tree.visit(ImportNode)
        assert imp.source == "./styles.css"
        assert imp.specifiers == ()


class TestFunctions:
    """Function forms and the names they take."""

    def test_forms_and_names(self, parse_js):
        tree = parse_js(
            "function load(a, b) {}\n"
            "const Card = (props) => null;\n"
            "const f = function () {};\n"
            "class A { render() {} }\n"
        )
        funcs = [(f.name, f.form, f.param_count) for f in tree.visit(FunctionNode)]
        assert funcs == [
            ("load", "declaration", 2),
            ("Card", "arrow", 1),
            ("f", "expression", 0),
            ("render", "method", 0),
        ]

    def test_function_keyword_is_not_a_definition(self, parse_js):
        tree = parse_js("function load(a) {}\n")
        (func,) = tree.visit(FunctionNode)
        assert (func.name, func.start, func.end) == ("load", 0, 19)
        assert [s.kind for s in tree.scopes] == ["program", "function"]

    def test_bare_parameter_arrow(self, parse_js):
        tree = parse_js("const double = x => x * 2;\n")
        (func,) = tree.visit(FunctionNode)
        assert func.param_count == 1

    def test_callback_of(self, parse_js):
        tree = parse_js("items.map((item) => item.id);\n")
        (call,) = tree.visit(CallNode)
        (func,) = tree.visit(FunctionNode)
        assert func.callback_of == call.index
        assert func.name is None

    def test_memo_wrapped_takes_binding_name(self, parse_jsx):
        tree = parse_jsx("const Row = memo((props) => <li>{props.x}</li>);\n")
        (func,) = tree.visit(FunctionNode)
        assert func.name == "Row"
        assert func.is_component_like


class TestMembersAndElements:
    """Member accesses and JSX elements."""

    def test_assigned_member(self, parse_js):
        tree = parse_js("el.innerHTML = html;\nconst t = el.textContent;\n")
        members = {m.property: m for m in tree.visit(MemberNode)}
        assert members["innerHTML"].assigned
        assert members["innerHTML"].object_text == "el"
        assert not members["textContent"].assigned

    def test_element_attributes(self, parse_jsx):
        tree = parse_jsx(
            "const v = <input key={id} style={{a: 1}} items={[1]} onClick={() => go()} disabled />;\n"
        )
        (element,) = tree.visit(ElementNode)
        assert element.tag == "input"
        shapes = {a.name: a.value for a in element.attributes}
        assert shapes == {
            "key": ValueShape.IDENTIFIER,
            "style": ValueShape.OBJECT,
            "items": ValueShape.ARRAY,
            "onClick": ValueShape.FUNCTION,
            "disabled": None,
        }
        assert element.attribute("key") is not None
        assert element.attribute("missing") is None

    def test_nested_elements_in_preorder(self, parse_jsx):
        tree = parse_jsx("const v = <ul><li>a</li><li>b</li></ul>;\n")
        assert [e.tag for e in tree.visit(ElementNode)] == ["ul", "li", "li"]


class TestScopes:
    """Lexical scopes."""

    def test_function_body_shares_function_scope(self, parse_js):
        tree = parse_js("function f() {\n  g();\n}\n")
        (call,) = tree.visit(CallNode)
        scope = tree.scope_of(call)
        assert scope.kind == "function"
        assert [s.kind for s in tree.scope_chain(call)] == ["function", "program"]

    def test_block_and_loop_scopes(self, parse_js):
        tree = parse_js("for (;;) {\n  if (x) {\n    g();\n  }\n}\n")
        (call,) = tree.visit(CallNode)
        kinds = [s.kind for s in tree.scope_chain(call)]
        assert kinds == ["block", "block", "loop", "program"]

    def test_nodes_in_scope_include_nested_functions(self, parse_js):
        tree = parse_js(
            "function setup() {\n"
            "  on();\n"
            "  return () => { off(); };\n"
            "}\n"
            "outside();\n"
        )
        on = next(c for c in tree.visit(CallNode) if c.callee_name == "on")
        names = [c.callee_name for c in tree.nodes_in_scope(tree.scope_of(on), CallNode)]
        assert names == ["on", "off"]

    def test_class_declaration_and_expression_scopes(self, parse_js):
        tree = parse_js("class A {}\nconst B = class {};\n")
        assert [s.kind for s in tree.scopes] == ["program", "class", "class"]

    def test_catch_body_shares_catch_scope(self, parse_js):
        tree = parse_js("try { a(); } catch (e) { b(); }\n")
        b = next(c for c in tree.visit(CallNode) if c.callee_name == "b")
        assert tree.scope_of(b).kind == "catch"


class TestSyntaxTree:
    """SyntaxTree bookkeeping."""

    def test_count_and_len(self, parse_js):
        tree = parse_js("for (;;) { f(); g(); }\n")
        assert tree.count(CallNode) == 2
        assert tree.count(LoopNode) == 1
        assert len(tree) == len(tree.nodes)

    def test_node_kinds(self, parse_js):
        tree = parse_js("f();\n")
        (call,) = tree.visit(CallNode)
        assert call.kind is NodeKind.CALL

    def test_mentions_react(self, parse_js):
        assert parse_js("React.createElement('div');\n").mentions_react
        assert not parse_js("const a = 1;\n").mentions_react


class TestParseFailures:
    """Structured failures instead of exceptions."""

    def test_syntax_error(self):
        result = parse_source("const = ;\n", Dialect.SCRIPT, path="broken.js")
        assert isinstance(result, ParseFailure)
        assert result.line == 1

    def test_text_dialect_not_parsed(self):
        result = parse_source("hello", Dialect.TEXT, path="notes.md")
        assert isinstance(result, ParseFailure)

    def test_markup_without_script(self):
        result = parse_source("<template><div/></template>\n", Dialect.MARKUP, path="Empty.vue")
        assert result == ParseFailure(reason=NO_SCRIPT_BLOCK)

    def test_cancelled_token_raises(self):
        token = CancellationToken()
        token.cancel()
        source = "f();\n" * 400
        with pytest.raises(AnalysisCancelled):
            parse_source(source, Dialect.SCRIPT, path="many.js", cancel=token)


class TestMarkup:
    """Script blocks embedded in Vue/Svelte files."""

    def test_vue_lines_are_file_relative(self):
        markup = (
            "<template>\n"
            "  <div>{{ n }}</div>\n"
            "</template>\n"
            "<script>\n"
            "export default {\n"
            "  mounted() { setInterval(this.tick, 10); }\n"
            "};\n"
            "</script>\n"
        )
        tree = parse_source(markup, Dialect.MARKUP, path="Clock.vue")
        assert isinstance(tree, SyntaxTree)
        (call,) = tree.visit(CallNode)
        assert call.callee_name == "setInterval"
        assert call.line == 6
        assert markup.encode()[call.start : call.end].startswith(b"setInterval")

    def test_typescript_script_block(self):
        markup = '<script lang="ts">\nlet count: number = 0;\n</script>\n'
        result = parse_source(markup, Dialect.MARKUP, path="Counter.svelte")
        assert isinstance(result, SyntaxTree)

    def test_syntax_error_line_in_markup(self):
        markup = "<template></template>\n<script>\nconst = ;\n</script>\n"
        result = parse_source(markup, Dialect.MARKUP, path="Bad.vue")
        assert isinstance(result, ParseFailure)
        assert result.line == 3
