import pytest

from dmnd_client.proxy_state import (
    ComponentError,
    DownstreamType,
    JdState,
    PoolState,
    ProxyState,
    ShareAccounterState,
    TpState,
    TranslatorState,
    UpstreamType,
)


def test_fresh_state_is_up():
    state = ProxyState()
    assert state.get_errors() == []
    assert state.is_proxy_down() == (False, None)


def test_pool_down_is_reported():
    state = ProxyState()
    state.update_pool_state(PoolState.DOWN)
    assert state.get_errors() == [ComponentError("Pool", PoolState.DOWN)]
    assert state.is_proxy_down() == (True, "[Pool(Down)]")


def test_errors_follow_fixed_order():
    state = ProxyState()
    state.update_upstream_state(UpstreamType.TRANSLATOR_UPSTREAM)
    state.update_inconsistency(1)
    state.update_translator_state(TranslatorState.DOWN)
    state.update_share_accounter_state(ShareAccounterState.DOWN)
    state.update_jd_state(JdState.DOWN)
    state.update_tp_state(TpState.DOWN)
    state.update_pool_state(PoolState.DOWN)
    state.update_downstream_state(DownstreamType.TRANSLATOR_DOWNSTREAM)
    components = [error.component for error in state.get_errors()]
    assert components == [
        "Pool",
        "Tp",
        "Jd",
        "ShareAccounter",
        "Translator",
        "InternalInconsistency",
        "Downstream",
        "Upstream",
    ]


def test_inconsistency_description():
    state = ProxyState()
    state.update_inconsistency(1)
    down, description = state.is_proxy_down()
    assert down is True
    assert description == "[InternalInconsistency(1)]"


def test_downstream_update_replaces_previous():
    state = ProxyState()
    state.update_downstream_state(DownstreamType.JD_CLIENT_MINING_DOWNSTREAM)
    state.update_downstream_state(DownstreamType.TRANSLATOR_DOWNSTREAM)
    assert state.downstream == (DownstreamType.TRANSLATOR_DOWNSTREAM,)
    assert str(state.get_errors()[0]) == "Downstream(Down([TranslatorDownstream]))"


def test_upstream_detail_holds_type():
    state = ProxyState()
    state.update_upstream_state(UpstreamType.JDC_MINING_UPSTREAM)
    assert state.get_errors() == [
        ComponentError("Upstream", (UpstreamType.JDC_MINING_UPSTREAM,))
    ]


def test_update_proxy_state_up_resets_everything():
    state = ProxyState()
    state.update_pool_state(PoolState.DOWN)
    state.update_tp_state(TpState.DOWN)
    state.update_inconsistency(3)
    state.update_downstream_state(DownstreamType.TRANSLATOR_DOWNSTREAM)
    state.update_upstream_state(UpstreamType.TRANSLATOR_UPSTREAM)
    state.update_proxy_state_up()
    assert state.get_errors() == []
    assert state.inconsistency is None


def test_clearing_inconsistency_with_none():
    state = ProxyState()
    state.update_inconsistency(2)
    state.update_inconsistency(None)
    assert state.is_proxy_down() == (False, None)


@pytest.mark.parametrize(
    "update, value, component",
    [
        ("update_tp_state", TpState.DOWN, "Tp"),
        ("update_jd_state", JdState.DOWN, "Jd"),
        ("update_translator_state", TranslatorState.DOWN, "Translator"),
        ("update_share_accounter_state", ShareAccounterState.DOWN, "ShareAccounter"),
    ],
)
def test_single_component_down(update, value, component):
    state = ProxyState()
    getattr(state, update)(value)
    assert state.get_errors() == [ComponentError(component, value)]
    getattr(state, update)(type(value).UP)
    assert state.get_errors() == []