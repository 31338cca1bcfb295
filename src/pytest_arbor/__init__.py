"""Declarative suite/test trees for pytest.

The `pytest_arbor` package lets test authors describe nested suites and
tests with `describe`/`it` calls, compose modifiers such as `skip`,
`focus` or `repeat` onto them, and hands the resulting runs to pytest.

Key features:
- chainable, immutable builders for suites and tests;
- focus-based selection that never leaks into unfocused siblings;
- repeat counts compounding across nested suites;
- a pytest plugin and a small CLI for inspecting run plans.
"""
