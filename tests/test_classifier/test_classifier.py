"""Tests for static/dynamic classification of style descriptions."""

import pytest

from stylefold.classifier import DYNAMIC, RAW_KEY, Classifier, StyleClassification, Verdict
from stylefold.errors import MalformedStyleDescription
from stylefold.parser import parse_module
from stylefold.recognizer import find_style_calls
from stylefold.resolver import ReferenceResolver, build_scope_table


def _setup(source: str):
    module = parse_module(source)
    resolver = ReferenceResolver(build_scope_table(module))
    call = next(find_style_calls(module, {"createStyleSheet"}))
    return Classifier(resolver), resolver, call


def _classify(source: str) -> StyleClassification:
    classifier, resolver, call = _setup(source)
    return classifier.classify(resolver.resolve(call.arguments[0]).node)


def _selector(source: str, index: int = 0):
    return _classify(source).selectors[index]


def _evaluate(expression: str, prelude: str = ""):
    classifier, _, call = _setup(f"{prelude}\ncreateStyleSheet({expression});")
    return classifier.evaluate(call.arguments[0])


# ---------------------------------------------------------------------------
# Constant folding
# ---------------------------------------------------------------------------


class TestEvaluate:
    @pytest.mark.parametrize(
        "expression, value",
        [
            ("'red'", "red"),
            ("0", 0),
            ("-1.5", -1.5),
            ("true", True),
            ("null", None),
            ("[0, 1]", [0, 1]),
            ("[[0, 1], 'a']", [[0, 1], "a"]),
            ("{a: 1, 'b': [2]}", {"a": 1, "b": [2]}),
            ("`plain`", "plain"),
        ],
    )
    def test_static(self, expression, value):
        assert _evaluate(expression) == value

    @pytest.mark.parametrize(
        "expression",
        [
            "() => {}",
            "function () {}",
            "f()",
            "a + b",
            "`a ${b}`",
            "[0, () => 1]",
            "{a: {b: () => 1}}",
            "{...rest}",
            "undefined",
            "theme.color",
        ],
    )
    def test_dynamic(self, expression):
        assert _evaluate(expression) is DYNAMIC

    def test_follows_references(self):
        assert _evaluate("size", prelude="const base = 4;\nconst size = [base, 'px'];") == [4, "px"]

    def test_function_reference_is_dynamic(self):
        assert _evaluate("f", prelude="function f() {}") is DYNAMIC

    def test_computed_key_reference(self):
        assert _evaluate("{[k]: 1}", prelude="const k = 'a';") == {"a": 1}

    def test_unknown_computed_key(self):
        assert _evaluate("{[k]: 1}", prelude="import k from 'm';") is DYNAMIC


# ---------------------------------------------------------------------------
# Selector verdicts
# ---------------------------------------------------------------------------


class TestStaticSelectors:
    def test_all_static(self):
        selector = _selector("createStyleSheet({a: {color: 'red', width: 0}});")
        assert selector.name == "a"
        assert selector.verdict is Verdict.STATIC
        assert selector.static_props == {"color": "red", "width": 0}
        assert selector.dynamic_entries == []

    def test_declaration_order_is_kept(self):
        selector = _selector("createStyleSheet({a: {z: 1, a: 2, m: 3}});")
        assert list(selector.static_props) == ["z", "a", "m"]

    def test_string_and_numeric_selector_keys(self):
        classification = _classify("createStyleSheet({'b-c': {x: 1}, 1: {x: 2}});")
        assert [s.name for s in classification.selectors] == ["b-c", "1"]

    def test_empty_selector_is_static(self):
        selector = _selector("createStyleSheet({a: {}});")
        assert selector.verdict is Verdict.STATIC
        assert selector.has_static_content
        assert selector.static_props == {}

    def test_lists(self):
        selector = _selector("createStyleSheet({a: {x: [0, 1], y: [[0, 1]]}});")
        assert selector.static_props == {"x": [0, 1], "y": [[0, 1]]}


class TestDynamicSelectors:
    def test_function_value(self):
        selector = _selector("createStyleSheet({b: {color: () => {}}});")
        assert selector.verdict is Verdict.DYNAMIC
        assert not selector.has_static_content
        assert not selector.verbatim
        assert len(selector.dynamic_entries) == 1

    def test_list_with_one_dynamic_item(self):
        selector = _selector("createStyleSheet({a: {x: [0, f()]}});")
        assert selector.verdict is Verdict.DYNAMIC

    @pytest.mark.parametrize("value", ["true", "null", "[]", "[[[0]]]", "{}", "[[]]"])
    def test_values_without_text_form(self, value):
        selector = _selector(f"createStyleSheet({{a: {{x: {value}}}}});")
        assert selector.verdict is Verdict.DYNAMIC
        assert selector.static_props == {}

    def test_imported_value(self):
        selector = _selector("import theme from 't';\ncreateStyleSheet({a: {color: theme}});")
        assert selector.verdict is Verdict.DYNAMIC


class TestMixedSelectors:
    def test_split(self):
        selector = _selector("createStyleSheet({a: {color: 'red', width: () => {}}});")
        assert selector.verdict is Verdict.MIXED
        assert selector.static_props == {"color": "red"}
        assert [e.key.value for e in selector.dynamic_entries] == ["width"]

    def test_unknown_computed_property_stays_dynamic(self):
        source = "import k from 'm';\ncreateStyleSheet({a: {color: 'red', [k]: 1}});"
        selector = _selector(source)
        assert selector.verdict is Verdict.MIXED
        assert selector.static_props == {"color": "red"}


class TestVerbatimSelectors:
    def test_value_not_a_mapping(self):
        selector = _selector("createStyleSheet({a: 'red'});")
        assert selector.verbatim
        assert selector.verdict is Verdict.DYNAMIC

    def test_value_from_function_call(self):
        assert _selector("createStyleSheet({a: make()});").verbatim

    def test_spread_inside_selector(self):
        selector = _selector("createStyleSheet({a: {color: 'red', ...base}});")
        assert selector.verbatim
        assert selector.static_props == {}
        assert selector.verdict is Verdict.DYNAMIC

    def test_duplicate_property(self):
        selector = _selector("createStyleSheet({a: {color: 'red', color: 'blue'}});")
        assert selector.verbatim
        assert selector.verdict is Verdict.DYNAMIC

    def test_unknown_computed_selector_key(self):
        selector = _selector("import k from 'm';\ncreateStyleSheet({[k]: {color: 'red'}});")
        assert selector.name is None
        assert selector.key_computed
        assert selector.verbatim


# ---------------------------------------------------------------------------
# References
# ---------------------------------------------------------------------------


class TestReferences:
    def test_computed_selector_key(self):
        selector = _selector("const prop = 'a'\ncreateStyleSheet({[prop]: {color: 'red'}});")
        assert selector.name == "a"
        assert selector.key_computed
        assert selector.verdict is Verdict.STATIC

    def test_nested_references(self):
        source = (
            "const color = 'red';\n"
            "const a = {color: color};\n"
            "const styles = {a: a};\n"
            "createStyleSheet(styles);"
        )
        selector = _selector(source)
        assert selector.static_props == {"color": "red"}

    def test_dynamic_reference(self):
        source = "function f() {}\ncreateStyleSheet({b: {color: f}});"
        assert _selector(source).verdict is Verdict.DYNAMIC


# ---------------------------------------------------------------------------
# Style description level
# ---------------------------------------------------------------------------


class TestStyleClassification:
    def test_static_rules_skip_dynamic_selectors(self):
        source = "createStyleSheet({a: {color: 'red'}, b: {color: () => {}}, c: {}});"
        classification = _classify(source)
        assert classification.has_static_content
        assert classification.static_rules() == [("a", {"color": "red"}), ("c", {})]

    def test_fully_dynamic(self):
        classification = _classify("createStyleSheet({b: {color: () => {}}});")
        assert not classification.has_static_content
        assert classification.static_rules() == []

    def test_empty_description(self):
        classification = _classify("createStyleSheet({});")
        assert classification.selectors == []
        assert not classification.has_static_content

    @pytest.mark.parametrize(
        "source",
        [
            "createStyleSheet({...base, a: {color: 'red'}});",
            "createStyleSheet({a: {color: 'red'}, a: {width: 0}});",
            "createStyleSheet({'@raw': {color: 'red'}});",
        ],
    )
    def test_malformed(self, source):
        with pytest.raises(MalformedStyleDescription) as excinfo:
            _classify(source)
        assert excinfo.value.span is not None

    def test_reserved_key_constant(self):
        assert RAW_KEY == "@raw"

    def test_classification_is_pure(self):
        source = "createStyleSheet({a: {color: 'red', width: () => {}}});"
        classifier, resolver, call = _setup(source)
        mapping = resolver.resolve(call.arguments[0]).node
        first = classifier.classify(mapping)
        second = classifier.classify(mapping)
        assert first == second
