"""Pytest 配置文件"""

import pytest

from extensions.ext_logging import trace_id_var


@pytest.fixture(autouse=True)
def reset_trace_id():
    """每个测试使用干净的 trace id"""
    token = trace_id_var.set(None)
    yield
    trace_id_var.reset(token)
