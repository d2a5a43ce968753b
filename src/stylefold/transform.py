"""Whole-module orchestration: parse, find calls, classify, compile, rewrite."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from stylefold.classifier import Classifier, StyleClassification
from stylefold.compiler import IdAllocator, StyleSheetCompiler
from stylefold.compiler.pipeline import CompiledSheet
from stylefold.config import TransformConfig
from stylefold.errors import MalformedStyleDescription, NamingError, SerializationOverflow
from stylefold.model.diagnostic import Diagnostic, Severity
from stylefold.model.nodes import CallExpression, KeyedMapping, Module, Span
from stylefold.parser import parse_module
from stylefold.recognizer import find_style_calls, is_noop_call
from stylefold.resolver import ReferenceResolver, Unresolved, build_scope_table
from stylefold.rewriter import CallRewriter, Edit, apply_edits

__all__ = [
    "TransformResult",
    "CallReport",
    "StyleSheetPrecompiler",
    "transform_source",
]

logger = logging.getLogger(__name__)


@dataclass
class TransformResult:
    """Outcome of transforming one module.

    Attributes:
        code: The transformed source; identical to the input when nothing
            was rewritten.
        diagnostics: One entry per recognized call that was skipped.
        rewritten: Number of calls that were rewritten.
    """

    code: str
    diagnostics: list[Diagnostic] = field(default_factory=list)
    rewritten: int = 0

    @property
    def changed(self) -> bool:
        return self.rewritten > 0


@dataclass
class CallReport:
    """What the precompiler found at one recognized call."""

    call: CallExpression
    line: int
    column: int
    classification: StyleClassification | None = None
    skipped: str | None = None


class _ModuleRun:
    """State shared by every call site of one transform run."""

    def __init__(self, module: Module, config: TransformConfig, filename: str):
        self.module = module
        self.config = config
        self.resolver = ReferenceResolver(build_scope_table(module))
        self.classifier = Classifier(self.resolver)
        self.compiler = StyleSheetCompiler(
            IdAllocator(config.naming_function),
            plugins=config.plugins,
            options=config.options,
            filename=filename,
        )
        self.rewriter = CallRewriter(module)

    def calls(self):
        return find_style_calls(self.module, self.config.recognized_names)

    def styles_argument(self, call: CallExpression) -> KeyedMapping:
        """Resolve the first argument of *call* to its style description."""
        first = call.arguments[0]
        resolution = self.resolver.resolve(first)
        if isinstance(resolution, Unresolved):
            raise MalformedStyleDescription(
                f"Style description {resolution.name!r} cannot be resolved: "
                f"{resolution.reason}",
                first.span,
            )
        if not isinstance(resolution.node, KeyedMapping):
            raise MalformedStyleDescription(
                "Style description is not an object literal", first.span
            )
        return resolution.node

    def compile(self, classification: StyleClassification, call_index: int) -> CompiledSheet:
        return self.compiler.compile(classification.static_rules(), call_index=call_index)


class StyleSheetPrecompiler:
    """Precompile the static parts of style-sheet construction calls.

    Example::

        precompiler = StyleSheetPrecompiler(TransformConfig())
        result = precompiler.transform(source, filename="button.js")
        print(result.code)
    """

    def __init__(self, config: TransformConfig | None = None):
        self.config = config or TransformConfig()
        self.config.validate()

    def transform(self, source: str, filename: str = "<input>") -> TransformResult:
        """Rewrite every recognized call in *source*.

        Raises:
            ParseError: if *source* cannot be parsed.
        """
        module = parse_module(source)
        run = _ModuleRun(module, self.config, filename)
        result = TransformResult(code=source)
        accepted: list[Edit] = []
        # Declarations already rewritten, keyed by span, with what they compiled to.
        declared: dict[Span, tuple[StyleClassification, CompiledSheet]] = {}

        for index, call in enumerate(run.calls()):
            line, column = module.position(call.span.start)
            if is_noop_call(call):
                continue
            try:
                styles = run.styles_argument(call)
                shared = declared.get(styles.span)
                if shared is not None:
                    classification, sheet = shared
                    edits = run.rewriter.rewrite(
                        call, styles, classification, sheet, rewrite_declaration=False
                    )
                else:
                    classification = run.classifier.classify(styles)
                    sheet = run.compile(classification, index)
                    edits = run.rewriter.rewrite(call, styles, classification, sheet)
            except MalformedStyleDescription as exc:
                self._skip(result, "malformed-style", Severity.WARNING, str(exc), line, column)
                continue
            except NamingError as exc:
                self._skip(result, "naming", Severity.ERROR, str(exc), line, column)
                continue
            except SerializationOverflow as exc:
                message = f"Plugin output has no text form: {exc}"
                self._skip(result, "serialization", Severity.WARNING, message, line, column)
                continue

            if not edits:
                logger.debug("%s:%d: no static content, call left unchanged", filename, line)
                continue
            if any(edit.span.overlaps(other.span) for edit in edits for other in accepted):
                self._skip(
                    result,
                    "overlapping-rewrite",
                    Severity.WARNING,
                    "Call overlaps a call that was already rewritten",
                    line,
                    column,
                )
                continue

            accepted.extend(edits)
            result.rewritten += 1
            if call.arguments[0] is not styles:
                declared[styles.span] = (classification, sheet)
            logger.info(
                "%s:%d: precompiled %d selector(s) of %s()",
                filename,
                line,
                len(sheet.classes),
                call.callee_name,
            )

        if accepted:
            result.code = apply_edits(source, accepted)
        return result

    def analyze(self, source: str, filename: str = "<input>") -> list[CallReport]:
        """Classify every recognized call without compiling or rewriting it.

        Raises:
            ParseError: if *source* cannot be parsed.
        """
        module = parse_module(source)
        run = _ModuleRun(module, self.config, filename)
        reports: list[CallReport] = []
        for call in run.calls():
            line, column = module.position(call.span.start)
            report = CallReport(call, line, column)
            reports.append(report)
            if is_noop_call(call):
                report.skipped = "no style description"
                continue
            try:
                report.classification = run.classifier.classify(run.styles_argument(call))
            except MalformedStyleDescription as exc:
                report.skipped = str(exc)
        return reports

    @staticmethod
    def _skip(
        result: TransformResult,
        rule: str,
        severity: Severity,
        message: str,
        line: int,
        column: int,
    ) -> None:
        logger.warning("Skipping call at line %d, column %d: %s", line, column, message)
        result.diagnostics.append(Diagnostic(rule, severity, message, line, column))


def transform_source(
    source: str,
    config: TransformConfig | None = None,
    filename: str = "<input>",
) -> TransformResult:
    """Convenience wrapper: ``StyleSheetPrecompiler(config).transform(source)``."""
    return StyleSheetPrecompiler(config).transform(source, filename)
