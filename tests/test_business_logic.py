"""Tests for rubric.validation.business_logic: classification and leakage detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from rubric.config import CheckConfig
from rubric.constraints.model import PRESENTATION, Rule
from rubric.validation.business_logic import (
    SIGNATURES,
    classify_component,
    find_business_logic,
    is_ui_specific,
    validate_business_logic,
)
from rubric.validation.violations import ValidationContext

if TYPE_CHECKING:
    from pathlib import Path

    from rubric.validation.business_logic import LogicSignature
    from rubric.validation.violations import Violation


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _presentation(name: str = "Widget") -> Rule:
    return Rule(
        module_name=name,
        location=f"src/components/{name}.tsx",
        component_type=PRESENTATION,
    )


def _container(name: str = "Sidebar", **kwargs: object) -> Rule:
    location = f"src/components/{name}.tsx"
    return Rule(module_name=name, location=location, **kwargs)  # type: ignore[arg-type]


def _run(
    tmp_path: Path, rule: Rule, content: str, config: CheckConfig | None = None
) -> list[Violation]:
    ctx = ValidationContext(project_root=tmp_path, config=config or CheckConfig())
    validate_business_logic(ctx, tmp_path / rule.location, content, rule)
    return ctx.violations


def _signature(name: str) -> LogicSignature:
    return next(s for s in SIGNATURES if s.name == name)


def _find(name: str, content: str) -> list[str]:
    """Return the excerpts found by the single signature *name*."""
    return [f.excerpt for f in find_business_logic(content, [_signature(name)])]


FETCHING_WIDGET = """\
export function Widget() {
  const load = () => fetch('/api/data');
  return <div onClick={load} />;
}
"""

SUBMIT_FORM = """\
export function Form() {
  const handleSubmit = async (event) => {
    await saveForm(values);
  };
  return <form onSubmit={handleSubmit} />;
}
"""

DASHBOARD = """\
export function Dashboard() {
  const loadDashboardData = async () => {
    const data = await api.load();
    setData(data);
  };
  return <Chart data={data} />;
}
"""


def _hooks(hook: str, count: int) -> str:
    lines = [f"  const [v{i}, set{i}] = {hook}(0);" for i in range(count)]
    return "export function Panel() {\n" + "\n".join(lines) + "\n  return null;\n}\n"


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------


class TestCatalogue:
    """The signature table is plain data."""

    def test_names_unique(self) -> None:
        names = [s.name for s in SIGNATURES]
        assert len(names) == len(set(names))

    def test_severities(self) -> None:
        assert {s.severity for s in SIGNATURES} == {"error", "warning"}

    def test_warning_signatures(self) -> None:
        warnings = [s.name for s in SIGNATURES if s.severity == "warning"]
        assert warnings == ["try-catch", "reduce-transform", "long-function"]


class TestIsUiSpecific:
    """Tests for is_ui_specific()."""

    @pytest.mark.parametrize(
        "snippet",
        [
            "validateEmail",
            "formatPhoneNumber",
            "toggleMenuOpen",
            "isModalVisible",
            "truncateTitle",
            "buttonClassName",
            "handleClick",
            "items.length > 3",
        ],
    )
    def test_ui_names(self, snippet: str) -> None:
        assert is_ui_specific(snippet) is True

    @pytest.mark.parametrize("snippet", ["computeTax", "loadDashboardData", "", None])
    def test_not_ui(self, snippet: str | None) -> None:
        assert is_ui_specific(snippet) is False


# ---------------------------------------------------------------------------
# Individual signatures
# ---------------------------------------------------------------------------


class TestSignatures:
    """Each signature and its exclusion, tested in isolation."""

    def test_async_excluded_in_save_handler(self) -> None:
        assert _find("async-function", "const handleSave = async () => {}") == []
        assert _find("async-function", "const sync = async () => {}") == ["async ("]

    def test_async_function_keyword(self) -> None:
        assert _find("async-function", "async function load() {}") == ["async function"]

    def test_then_never_excluded(self) -> None:
        assert _find("promise-then", "handleSubmit(); api.load().then(render);") == [".then("]

    def test_await_excluded_by_handle_and_submit(self) -> None:
        content = "function handlePaymentsubmit() {\n  await post();\n}"
        assert _find("await", content) == []

    def test_await_outside_handlers(self) -> None:
        assert _find("await", "const rows = await db.query();") == ["await "]

    def test_short_try_in_submit_excluded(self) -> None:
        assert _find("try-catch", "try { submit(); } catch (e) {}") == []

    def test_try_without_submit(self) -> None:
        assert _find("try-catch", "try { save(); } catch (e) {}") == ["try { save(); } catch"]

    def test_long_try_in_submit_reported(self) -> None:
        content = "try {\n  a();\n  b();\n  c();\n  submit();\n} catch (e) {}"
        assert len(_find("try-catch", content)) == 1

    def test_one_line_reduce_excluded(self) -> None:
        assert _find("reduce-transform", "items.reduce((acc, x) => { return acc + x; }, 0)") == []

    def test_multiline_reduce_reported(self) -> None:
        content = (
            "const totals = items.reduce((acc, item) => {\n"
            "  acc[item.kind] = (acc[item.kind] || 0) + item.amount;\n"
            "  return acc;\n"
            "}, {});\n"
        )
        assert len(_find("reduce-transform", content)) == 1

    def test_long_function_with_ui_name_excluded(self) -> None:
        content = (
            "function formatPhoneDisplay(value) {\n"
            "  const digits = value.replace(/\\D/g, '');\n"
            "  const parts = [digits.slice(0, 3), digits.slice(3, 6)];\n"
            "  return parts.join('-');\n"
            "}\n"
        )
        assert _find("long-function", content) == []

    def test_long_function_reported(self) -> None:
        content = (
            "function summarizeLedger(value) {\n"
            "  const digits = value.replace(/\\D/g, '');\n"
            "  const parts = [digits.slice(0, 3), digits.slice(3, 6)];\n"
            "  return parts.join('-');\n"
            "}\n"
        )
        excerpts = _find("long-function", content)
        assert len(excerpts) == 1
        assert excerpts[0].startswith("function summarizeLedger")
        assert len(excerpts[0]) == 50

    def test_short_function_not_reported(self) -> None:
        assert _find("long-function", "function add(a, b) { return a + b; }") == []

    @pytest.mark.parametrize(
        ("name", "snippet"),
        [
            ("currency-conversion", "convertCurrency(amount)"),
            ("financial-calculation", "const total = calculateTotal(items);"),
            ("financial-calculation", "COMPUTETAX(x)"),
            ("domain-validation", "verifyExpense(expense)"),
            ("document-processing", "parseReceipt(file)"),
            ("report-generation", "createPDF(report)"),
        ],
    )
    def test_domain_naming(self, name: str, snippet: str) -> None:
        assert len(_find(name, snippet)) == 1

    def test_warning_suppressed_by_ui_context(self) -> None:
        content = "try { setX(1); } catch (e) { setClassName('err'); }"
        assert _find("try-catch", content) == []

    def test_error_not_suppressed_by_ui_context(self) -> None:
        assert _find("fetch", "fetch('/a'); // className") == ["fetch("]

    def test_findings_carry_line_numbers(self) -> None:
        findings = find_business_logic("const a = 1;\n\nfetch('/x');\n")
        assert [(f.signature.name, f.line) for f in findings] == [("fetch", 3)]
        assert findings[0].message == (
            'API calls must not be in presentation components. Found: "fetch(..."'
        )


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


class TestClassifyComponent:
    """Tests for classify_component()."""

    def test_rule_marked_presentation(self) -> None:
        kind = classify_component(_presentation(), "")
        assert kind.presentation is True
        assert kind.root_or_container is False
        assert kind.scanned is True

    @pytest.mark.parametrize(
        "content",
        ["// Pure presentation component", 'const meta = { type: "presentation" };'],
    )
    def test_source_markers(self, content: str) -> None:
        assert classify_component(_container(), content).presentation is True

    def test_inferred_from_denied_imports(self) -> None:
        rule = _container(denied_imports=("../stores/*",))
        assert classify_component(rule, "export const X = () => null;").presentation is True

    def test_store_usage_defeats_inference(self) -> None:
        rule = _container(denied_imports=("../stores/*",))
        assert classify_component(rule, "const s = useStore();").presentation is False
        assert classify_component(rule, "const s = new BudgetService();").presentation is False

    def test_plain_container(self) -> None:
        kind = classify_component(_container(), "export const X = () => null;")
        assert kind.presentation is False
        assert kind.scanned is False

    @pytest.mark.parametrize(
        ("rule", "content"),
        [
            (Rule(module_name="App", location="src/components/Shell.tsx"), ""),
            (Rule(module_name="Root", location="src/components/App.tsx"), ""),
            (Rule(module_name="Home", location="src/components/HomePage.tsx"), ""),
            (_presentation(), 'export const meta = { type: "container" };'),
        ],
    )
    def test_root_or_container(self, rule: Rule, content: str) -> None:
        kind = classify_component(rule, content)
        assert kind.root_or_container is True
        assert kind.scanned is False


# ---------------------------------------------------------------------------
# validate_business_logic
# ---------------------------------------------------------------------------


class TestPresentationScanning:
    """Business-logic scanning of presentation components."""

    def test_fetch_reported(self, tmp_path: Path) -> None:
        violations = _run(tmp_path, _presentation(), FETCHING_WIDGET)

        assert len(violations) == 1
        violation = violations[0]
        assert violation.type == "business-logic"
        assert violation.severity == "error"
        assert "fetch(" in violation.message
        assert violation.line == 2
        assert violation.file == "src/components/Widget.tsx"

    def test_await_in_submit_handler_allowed(self, tmp_path: Path) -> None:
        assert _run(tmp_path, _presentation("Form"), SUBMIT_FORM) == []

    def test_await_in_loader_reported(self, tmp_path: Path) -> None:
        violations = _run(tmp_path, _presentation("Dashboard"), DASHBOARD)
        awaits = [v for v in violations if v.message.startswith("Await operations")]

        assert len(awaits) == 1
        assert awaits[0].severity == "error"
        assert awaits[0].line == 3

    def test_six_state_hooks_warned(self, tmp_path: Path) -> None:
        violations = _run(tmp_path, _presentation(), _hooks("useState", 6))
        state = [v for v in violations if "state hooks" in v.message]

        assert len(state) == 1
        assert "(6)" in state[0].message
        assert state[0].severity == "warning"
        assert state[0].line is None

    def test_five_state_hooks_allowed(self, tmp_path: Path) -> None:
        violations = _run(tmp_path, _presentation(), _hooks("useState", 5))
        assert [v for v in violations if "state hooks" in v.message] == []

    def test_typed_state_hooks_counted(self, tmp_path: Path) -> None:
        content = "\n".join(f"const [a{i}] = useState<number>(0);" for i in range(6))
        violations = _run(tmp_path, _presentation(), content)
        assert any("state hooks (6)" in v.message for v in violations)

    def test_three_effect_hooks_warned(self, tmp_path: Path) -> None:
        content = "useEffect(() => {}, []);\n" * 3
        violations = _run(tmp_path, _presentation(), content)
        effects = [v for v in violations if "useEffect hooks" in v.message]

        assert len(effects) == 1
        assert "(3)" in effects[0].message

    def test_hook_limits_configurable(self, tmp_path: Path) -> None:
        config = CheckConfig(max_state_hooks=10)
        violations = _run(tmp_path, _presentation(), _hooks("useState", 6), config)
        assert [v for v in violations if "state hooks" in v.message] == []

    def test_non_component_rule_ignored(self, tmp_path: Path) -> None:
        rule = Rule(module_name="useThing", location="src/hooks/useThing.ts")
        assert _run(tmp_path, rule, FETCHING_WIDGET) == []

    @pytest.mark.parametrize("suffix", [".test.tsx", ".spec.tsx"])
    def test_test_files_skipped(self, tmp_path: Path, suffix: str) -> None:
        rule = Rule(module_name="Widget", location=f"src/components/Widget{suffix}")
        assert _run(tmp_path, rule, FETCHING_WIDGET) == []


class TestContainerChecks:
    """Structural checks for containers and the root/container scanning exemption."""

    PLAIN = "export function Sidebar({ items }) {\n  return <ul>{items}</ul>;\n}\n"

    def test_missing_boundary_only(self, tmp_path: Path) -> None:
        violations = _run(tmp_path, _container(), self.PLAIN)

        assert [(v.type, v.message, v.severity) for v in violations] == [
            ("pattern", "Container components must implement error boundaries", "error"),
        ]

    def test_effect_hook_adds_one_error(self, tmp_path: Path) -> None:
        content = self.PLAIN + "useEffect(() => {}, []);\n"
        violations = _run(tmp_path, _container(), content)

        assert [v.message for v in violations] == [
            "Container components must implement error boundaries",
            "Container components should not use useEffect",
        ]

    def test_boundary_satisfied(self, tmp_path: Path) -> None:
        content = "<ErrorBoundary>\n" + self.PLAIN
        assert _run(tmp_path, _container(), content) == []

    def test_component_did_catch_satisfies(self, tmp_path: Path) -> None:
        content = "componentDidCatch(error) { log(error); }\n"
        assert _run(tmp_path, _container(), content) == []

    def test_root_is_exempt_from_scanning(self, tmp_path: Path) -> None:
        rule = Rule(
            module_name="App",
            location="src/components/App.tsx",
            denied_imports=("../stores/*",),
        )
        content = "<ErrorBoundary>\nconst d = await fetch('/api');\n"
        assert classify_component(rule, content).presentation is True
        assert _run(tmp_path, rule, content) == []

    def test_root_without_boundary_still_flagged(self, tmp_path: Path) -> None:
        rule = Rule(module_name="App", location="src/components/App.tsx")
        violations = _run(tmp_path, rule, "fetch('/api');\n")

        assert [v.type for v in violations] == ["pattern"]

    def test_source_container_marker_exempts_presentation_rule(self, tmp_path: Path) -> None:
        content = 'const meta = { type: "container" };\nfetch("/api");\n'
        assert _run(tmp_path, _presentation(), content) == []

    def test_inferred_presentation_container_gets_both(self, tmp_path: Path) -> None:
        rule = _container(denied_imports=("../stores/*",))
        violations = _run(tmp_path, rule, "fetch('/api');\n")

        assert sorted(v.type for v in violations) == ["business-logic", "pattern"]
