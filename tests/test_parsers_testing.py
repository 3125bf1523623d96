# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests covering go test, jest, pytest and dotnet test parsers."""

from __future__ import annotations

import json

import pytest

from clipare.parsers import parse_dotnet_test, parse_go_test, parse_jest_json, parse_pytest
from clipare.records import TestStatus


def test_go_test_rerun_reports_final_pass(go_test_rerun_events: str) -> None:
    record = parse_go_test(go_test_rerun_events)

    assert len(record.tests) == 1
    test = record.tests[0]
    assert (test.name, test.package, test.status, test.elapsed) == ("TestX", "example.com/pkg", TestStatus.PASSED, 0.02)
    assert [(pkg.package, pkg.status) for pkg in record.packages] == [("example.com/pkg", TestStatus.PASSED)]
    assert (record.passed, record.failed, record.total) == (1, 0, 1)


def test_go_test_skips_noise_lines(make_raw) -> None:
    stdout = "\n".join(
        [
            "go: downloading example.com/dep v1.0.0",
            '{"Action":"skip","Package":"p","Test":"TestSkip","Elapsed":0}',
            '{"Action":"fail","Package":"p","Test":"TestBad","Elapsed":0.3}',
            '{"Action":"fail","Package":"p","Elapsed":0.4}',
        ],
    )

    record = parse_go_test(make_raw(stdout=stdout, exit_code=1))

    assert record.success is False
    assert (record.skipped, record.failed) == (1, 1)
    assert record.packages[0].status is TestStatus.FAILED


def test_jest_json_embedded_in_noise(make_raw) -> None:
    document = {
        "numTotalTests": 3,
        "numPassedTests": 1,
        "numFailedTests": 1,
        "numPendingTests": 1,
        "testResults": [
            {
                "name": "/repo/src/sum.test.js",
                "assertionResults": [
                    {"fullName": "sum adds", "status": "passed", "duration": 5},
                    {
                        "fullName": "sum fails",
                        "status": "failed",
                        "duration": 12,
                        "failureMessages": ["\x1b[31mExpected: 3\x1b[0m\nReceived: 4\n    at sum.test.js:9"],
                        "location": {"line": 9, "column": 3},
                    },
                    {"fullName": "sum later", "status": "pending"},
                ],
            },
        ],
    }
    stdout = f"> jest --json\n\x1b[2mPASS\x1b[0m something\n{json.dumps(document)}\nDone.\n"

    record = parse_jest_json(make_raw(stdout=stdout, exit_code=1, duration_ms=1500))

    assert record.json_found is True
    assert (record.total, record.passed, record.failed, record.skipped) == (3, 1, 1, 1)
    failure = record.failures[0]
    assert failure.name == "sum fails"
    assert failure.message == "Expected: 3"
    assert failure.line == 9
    assert failure.elapsed == pytest.approx(0.012)
    assert failure.file == "/repo/src/sum.test.js"
    assert record.duration_ms == 1500


def test_jest_without_json_is_not_an_error(make_raw) -> None:
    record = parse_jest_json(make_raw(stdout="Error: no tests found", exit_code=1))

    assert record.json_found is False
    assert record.tests == ()
    assert record.total == 0


PYTEST_OUTPUT = """
============================= test session starts ==============================
collected 4 items

tests/test_math.py::test_add PASSED                                      [ 25%]
tests/test_math.py::test_sub FAILED                                      [ 50%]
tests/test_math.py::test_skip SKIPPED (no reason)                        [ 75%]
tests/test_io.py::test_read PASSED                                       [100%]

=================================== FAILURES ===================================
___________________________________ test_sub ___________________________________
    def test_sub():
>       assert 1 - 1 == 1
E       assert 0 == 1
=========================== short test summary info ============================
FAILED tests/test_math.py::test_sub - assert 0 == 1
ERROR tests/test_db.py::test_conn - ConnectionError: refused
============== 1 failed, 2 passed, 1 skipped, 1 error in 0.42s ===============
"""


def test_pytest_summary_and_messages(make_raw) -> None:
    record = parse_pytest(make_raw(stdout=PYTEST_OUTPUT, exit_code=1))

    assert (record.passed, record.failed, record.skipped, record.errors) == (2, 1, 1, 1)
    assert record.total == 5
    assert record.duration_ms == pytest.approx(420.0)
    failures = {test.name: test for test in record.failures}
    assert failures["test_sub"].message == "assert 0 == 1"
    assert failures["test_sub"].file == "tests/test_math.py"
    assert failures["test_conn"].message == "ConnectionError: refused"


def test_pytest_summary_fields_are_read_by_name() -> None:
    record = parse_pytest("==== 3 passed, 2 failed in 1.00s ====\n")

    assert (record.passed, record.failed, record.skipped, record.errors) == (3, 2, 0, 0)


def test_pytest_xfail_rows_agree_with_summary() -> None:
    stdout = (
        "a.py::t1 PASSED\n"
        "a.py::t2 PASSED\n"
        "a.py::t3 XFAIL\n"
        "a.py::t4 XPASS\n"
        "==== 2 passed, 1 xfailed, 1 xpassed in 0.10s ====\n"
    )

    record = parse_pytest(stdout)

    assert (record.passed, record.failed, record.skipped) == (3, 0, 1)
    assert record.total == len(record.tests) == 4


def test_pytest_without_summary_derives_counts() -> None:
    record = parse_pytest("a.py::t1 PASSED\na.py::t2 FAILED\n")

    assert (record.total, record.passed, record.failed) == (2, 1, 1)
    assert record.summary is None


DOTNET_OUTPUT = """
Starting test execution, please wait...
  Passed Calc.Tests.Adds [12 ms]
  Failed Calc.Tests.Divides [3 ms]
  Error Message:
   Assert.Equal() Failure
   Expected: 2
  Stack Trace:
     at Calc.Tests.Divides() in /repo/CalcTests.cs:line 20
  Skipped Calc.Tests.Later [1 s]

Failed!  - Failed:     1, Passed:     1, Skipped:     1, Total:     3, Duration: 1 s
"""


def test_dotnet_test_results_and_summary(make_raw) -> None:
    record = parse_dotnet_test(make_raw(stdout=DOTNET_OUTPUT, exit_code=1))

    assert [(test.name, test.status) for test in record.tests] == [
        ("Calc.Tests.Adds", TestStatus.PASSED),
        ("Calc.Tests.Divides", TestStatus.FAILED),
        ("Calc.Tests.Later", TestStatus.SKIPPED),
    ]
    assert record.tests[0].elapsed == pytest.approx(0.012)
    assert record.tests[2].elapsed == 1.0
    assert record.tests[1].message == "Assert.Equal() Failure\nExpected: 2"
    assert (record.total, record.passed, record.failed, record.skipped) == (3, 1, 1, 1)


def test_dotnet_ignores_host_failure_lines() -> None:
    record = parse_dotnet_test(
        "Failed to load assembly foo.dll\n  Failed to resolve host\n  Passed Foo.Bar [1 ms]\n",
    )

    assert [(test.name, test.status) for test in record.tests] == [("Foo.Bar", TestStatus.PASSED)]
    assert record.failed == 0


def test_dotnet_summary_overrides_only_stated_fields() -> None:
    stdout = "  Passed A [1 ms]\n  Passed B [1 ms]\n  Failed C [1 ms]\nTotal tests: 10\n"

    record = parse_dotnet_test(stdout)

    assert record.total == 10
    assert (record.passed, record.failed) == (2, 1)
