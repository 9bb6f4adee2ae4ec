"""Tests for logging utilities."""

import logging
from io import StringIO

from newtonkrylov.logging import configure_logging, get_logger, set_log_level


def test_get_logger_returns_namespaced_logger():
    logger = get_logger("test_module")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "newtonkrylov.test_module"


def test_get_logger_keeps_package_names():
    logger = get_logger("newtonkrylov.step.newton_krylov")
    assert logger.name == "newtonkrylov.step.newton_krylov"
    assert get_logger().name == "newtonkrylov"


def test_get_logger_caching():
    assert get_logger("test_module") is get_logger("test_module")
    assert get_logger("module1") is not get_logger("module2")


def test_logger_does_not_propagate():
    assert get_logger("test_module").propagate is False


def test_set_log_level_string():
    logger = get_logger("test_module")
    try:
        set_log_level("DEBUG")
        assert logger.level == logging.DEBUG
        set_log_level("ERROR")
        assert logger.level == logging.ERROR
    finally:
        set_log_level(logging.WARNING)


def test_configure_logging_redirects_output():
    stream = StringIO()
    try:
        logger = get_logger("test_module")
        configure_logging(level=logging.DEBUG, stream=stream)
        logger.debug("Krylov message")
        assert "Krylov message" in stream.getvalue()
        assert "[DEBUG] newtonkrylov.test_module" in stream.getvalue()
    finally:
        configure_logging(level=logging.WARNING)


def test_step_debug_logging_reports_fallback():
    import numpy as np

    from newtonkrylov import AlgorithmState, BoundConstraint, NewtonKrylovStep, NumpyVector
    from newtonkrylov import Problem, ProblemObjective

    # Ensure the step module logger exists before reconfiguring
    get_logger("newtonkrylov.step.newton_krylov")
    stream = StringIO()
    try:
        configure_logging(level=logging.DEBUG, stream=stream)
        problem = Problem(
            fun=lambda x: float(-0.5 * x @ x),
            grad=lambda x: -x,
            hess=lambda x: -np.eye(x.size),
        )
        obj = ProblemObjective(problem)
        x = NumpyVector(np.array([1.0, 0.5]))
        s, g, state = x.clone(), x.dual(), AlgorithmState()
        step = NewtonKrylovStep()
        step.initialize(x, s, g, obj, BoundConstraint(), state)
        step.compute(s, x, obj, BoundConstraint(), state)
        assert "using gradient" in stream.getvalue()
    finally:
        configure_logging(level=logging.WARNING)


def test_loggers_created_after_configuration_use_it():
    stream = StringIO()
    try:
        configure_logging(level="INFO", format_string="%(message)s", stream=stream)
        logger = get_logger("created_late")
        logger.info("secant pair stored")
        assert stream.getvalue() == "secant pair stored\n"
    finally:
        configure_logging(level=logging.WARNING)
