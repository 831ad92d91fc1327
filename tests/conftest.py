import pytest

from faithnum.arithmetic import evalctx


@pytest.fixture(autouse=True)
def default_ctx():
    """Every test starts from the default context and precision."""
    prev = evalctx.set_ctx(evalctx.NumberCtx())
    evalctx.set_default_precision(evalctx.DEFAULT_PRECISION)
    yield evalctx.get_ctx()
    evalctx.set_ctx(evalctx.NumberCtx())
    evalctx.set_default_precision(evalctx.DEFAULT_PRECISION)
    evalctx.set_ctx(prev)


@pytest.fixture
def nan_equality():
    with evalctx.using(js_nan_equality=True) as ctx:
        yield ctx


@pytest.fixture
def low_precision():
    with evalctx.using(high_precision=False) as ctx:
        yield ctx
