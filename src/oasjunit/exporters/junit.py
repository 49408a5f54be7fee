"""JUnit XML output: CI/CD compatible test reports from lint results.

Each rule category with findings becomes a ``testsuite``; each finding becomes
a ``testcase``. Findings with severity ``error`` or ``warn`` carry a
``failure`` element, ``info`` findings do not.
"""

from __future__ import annotations

import re
import time
import xml.etree.ElementTree as ET
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from oasjunit.resultset import RuleResultSet
from oasjunit.rules import RULE_CATEGORIES_ORDERED, RuleCategory, RuleResult, is_failing

XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'

DEFAULT_SUITE_PREFIX = "OAS Linting"
DEFAULT_CLASSNAME_PREFIX = "oas-linter"
MAX_NAME_LENGTH = 200

FAILURE_TEMPLATE = (
    "File: {file}\n"
    "Line: {line}\n"
    "JSON Path: {path}\n"
    "Rule: {rule_id}\n"
    "Severity: {severity}\n"
    "\n"
    "{message}"
)

# Anything outside the XML 1.0 Char production, lone surrogates included.
_INVALID_XML_CHARS = re.compile(
    r"[^\x09\x0A\x0D\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]"
)


@dataclass
class Property:
    name: str
    value: str

    def to_element(self) -> ET.Element:
        return ET.Element("property", {"name": self.name, "value": self.value})


@dataclass
class Failure:
    message: str
    type: str
    contents: str = ""

    def to_element(self) -> ET.Element:
        el = ET.Element("failure", {"message": self.message, "type": self.type})
        el.text = self.contents
        return el


@dataclass
class TestCase:
    __test__ = False

    name: str
    classname: str
    failure: Failure | None = None
    properties: list[Property] = field(default_factory=list)

    @property
    def property_map(self) -> dict[str, str]:
        return {p.name: p.value for p in self.properties}

    def to_element(self) -> ET.Element:
        el = ET.Element("testcase", {"name": self.name, "classname": self.classname})
        if self.failure is not None:
            el.append(self.failure.to_element())
        if self.properties:
            props = ET.SubElement(el, "properties")
            for p in self.properties:
                props.append(p.to_element())
        return el


@dataclass
class TestSuite:
    __test__ = False

    name: str
    tests: int
    failures: int
    time: float
    testcases: list[TestCase] = field(default_factory=list)

    def to_element(self) -> ET.Element:
        el = ET.Element("testsuite", {
            "name": self.name,
            "tests": str(self.tests),
            "failures": str(self.failures),
            "time": format_seconds(self.time),
        })
        for tc in self.testcases:
            el.append(tc.to_element())
        return el


@dataclass
class TestSuites:
    __test__ = False

    tests: int
    failures: int
    time: float
    testsuites: list[TestSuite] = field(default_factory=list)

    def to_element(self) -> ET.Element:
        el = ET.Element("testsuites", {
            "tests": str(self.tests),
            "failures": str(self.failures),
            "time": format_seconds(self.time),
        })
        for ts in self.testsuites:
            el.append(ts.to_element())
        return el


@dataclass(frozen=True)
class FailureContext:
    file: str
    line: int
    path: str
    rule_id: str
    severity: str
    message: str


def format_seconds(seconds: float) -> str:
    return f"{seconds:.4f}"


def render_failure_body(ctx: FailureContext) -> str:
    """Render the human-readable failure text for one finding."""
    return FAILURE_TEMPLATE.format(
        file=ctx.file,
        line=ctx.line,
        path=ctx.path,
        rule_id=ctx.rule_id,
        severity=ctx.severity,
        message=ctx.message,
    )


def _elapsed_seconds(reference_time: datetime | float) -> float:
    if isinstance(reference_time, datetime):
        delta = datetime.now(reference_time.tzinfo) - reference_time
        seconds = delta.total_seconds()
    else:
        seconds = time.time() - float(reference_time)
    return max(seconds, 0.0)


def _case_name(rule_id: str, path: str, max_length: int) -> str:
    name = f"Rule: {rule_id} - JSON Path: {path}"
    if len(name) > max_length:
        name = name[:max_length] + "..."
    return name


def _build_case(
    result: RuleResult,
    args: Sequence[str],
    classname_prefix: str,
    max_name_length: int,
) -> TestCase:
    if result.rule is None:
        raise ValueError(f"Result for rule '{result.rule_id}' has no owning rule")

    line = result.line if result.line is not None else 1
    if result.origin:
        file = result.origin
    elif args:
        file = args[0]
    else:
        file = ""

    rule_id = result.rule.id
    severity = result.severity
    body = render_failure_body(FailureContext(
        file=file,
        line=line,
        path=result.path,
        rule_id=rule_id,
        severity=severity,
        message=result.message,
    ))

    failure = None
    if is_failing(severity):
        failure = Failure(message=result.message, type=severity.upper(), contents=body)

    return TestCase(
        name=_case_name(rule_id, result.path, max_name_length),
        classname=f"{classname_prefix}.{rule_id}",
        failure=failure,
        properties=[
            Property("rule", rule_id),
            Property("severity", severity),
            Property("line", str(line)),
            Property("file", file),
            Property("json_path", result.path),
        ],
    )


def _check_encodable(root: ET.Element) -> None:
    for el in root.iter():
        values = [el.text or ""] + list(el.attrib.values())
        for value in values:
            if _INVALID_XML_CHARS.search(value):
                raise ValueError(f"Character not allowed in XML inside <{el.tag}>")


def serialize_junit_report(report: TestSuites) -> bytes:
    """Serialize a report as indented UTF-8 XML.

    Raises ValueError when any text cannot be represented in XML 1.0.
    """
    root = report.to_element()
    _check_encodable(root)
    ET.indent(root, space="  ")
    body = ET.tostring(root, encoding="unicode")
    return (XML_HEADER + body + "\n").encode("utf-8")


def build_junit_report(
    result_set: RuleResultSet,
    reference_time: datetime | float,
    args: Sequence[str] = (),
    categories: Sequence[RuleCategory] | None = None,
    *,
    suite_prefix: str = DEFAULT_SUITE_PREFIX,
    classname_prefix: str = DEFAULT_CLASSNAME_PREFIX,
    max_name_length: int = MAX_NAME_LENGTH,
) -> bytes:
    """Convert a lint result set to JUnit XML bytes.

    Suites follow the order of ``categories`` (RULE_CATEGORIES_ORDERED when
    omitted); categories without findings produce no suite. ``args[0]`` names
    the file for findings without an origin. Elapsed time since
    ``reference_time`` is stamped on the root and every suite.

    Returns empty bytes when the report cannot be encoded.
    """
    elapsed = _elapsed_seconds(reference_time)
    if categories is None:
        categories = RULE_CATEGORIES_ORDERED

    suites: list[TestSuite] = []
    total_tests, total_failures = 0, 0

    for category in categories:
        cases: list[TestCase] = []
        failures = 0
        for result in result_set.get_results_by_category(category.id):
            try:
                case = _build_case(result, args, classname_prefix, max_name_length)
            except ValueError:
                continue
            cases.append(case)
            if case.failure is not None:
                failures += 1

        if not cases:
            continue
        suites.append(TestSuite(
            name=f"{suite_prefix} - {category.name}",
            tests=len(cases),
            failures=failures,
            time=elapsed,
            testcases=cases,
        ))
        total_tests += len(cases)
        total_failures += failures

    report = TestSuites(
        tests=total_tests,
        failures=total_failures,
        time=elapsed,
        testsuites=suites,
    )
    try:
        return serialize_junit_report(report)
    except ValueError:
        return b""


def _int_attr(el: ET.Element, name: str) -> int:
    return int(el.get(name, "0"))


def _float_attr(el: ET.Element, name: str) -> float:
    return float(el.get(name, "0"))


def parse_junit_report(data: bytes | str) -> TestSuites:
    """Parse JUnit XML produced by build_junit_report back into the model.

    Raises ValueError on malformed XML or an unexpected root element.
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise ValueError(f"Invalid JUnit XML: {exc}") from exc
    if root.tag != "testsuites":
        raise ValueError(f"Expected <testsuites> root, got <{root.tag}>")

    suites: list[TestSuite] = []
    for ts_el in root.findall("testsuite"):
        cases: list[TestCase] = []
        for tc_el in ts_el.findall("testcase"):
            failure = None
            f_el = tc_el.find("failure")
            if f_el is not None:
                failure = Failure(
                    message=f_el.get("message", ""),
                    type=f_el.get("type", ""),
                    contents=f_el.text or "",
                )
            props = [
                Property(p.get("name", ""), p.get("value", ""))
                for p in tc_el.findall("properties/property")
            ]
            cases.append(TestCase(
                name=tc_el.get("name", ""),
                classname=tc_el.get("classname", ""),
                failure=failure,
                properties=props,
            ))
        suites.append(TestSuite(
            name=ts_el.get("name", ""),
            tests=_int_attr(ts_el, "tests"),
            failures=_int_attr(ts_el, "failures"),
            time=_float_attr(ts_el, "time"),
            testcases=cases,
        ))

    return TestSuites(
        tests=_int_attr(root, "tests"),
        failures=_int_attr(root, "failures"),
        time=_float_attr(root, "time"),
        testsuites=suites,
    )
