"""
exprcc Test Configuration
=========================

Shared fixtures for the test suite.

Tests that assemble and run generated programs request the
`toolchain_config` fixture; they are skipped when no C compiler is on
PATH or the host cannot execute x86-64 code.
"""

import pytest

from exprcc.compiler import ExpressionCompiler
from exprcc.toolchain import ToolchainConfig, toolchain_available


@pytest.fixture(scope="session")
def toolchain_config() -> ToolchainConfig:
    """
    Fixture: toolchain settings from the environment.

    Skips the requesting test when generated programs cannot be built
    and run on this machine.
    """
    config = ToolchainConfig.from_env()
    if not toolchain_available(config):
        pytest.skip(f"no x86-64 toolchain available (EXPRCC_CC={config.cc!r})")
    return config


@pytest.fixture
def compiler() -> ExpressionCompiler:
    """Fixture: a compiler with default options."""
    return ExpressionCompiler()
