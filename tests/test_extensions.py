import pytest

from vault_standard.errors import UnsupportedExtension
from vault_standard.extensions import (
    Capability,
    CapabilityMsg,
    enabled_names,
    extension_execute_msg,
    extension_query_msg,
    get_capability,
    register,
)
from vault_standard.extensions.base import _REGISTRY
from vault_standard.extensions.keeper import KeeperQueryMsg
from vault_standard.extensions.lockup import AtHeight, LockupExecuteMsg, Never
from vault_standard.wire import TaggedUnion, Variant


class Pause(Variant):
    pass


@pytest.fixture
def pause_capability():
    capability = Capability(
        name="pause",
        execute=TaggedUnion("PauseExecuteMsg", (Pause,)),
        query=TaggedUnion("PauseQueryMsg", ()),
    )
    register(capability)
    yield capability
    del _REGISTRY["pause"]


class TestRegistry:
    def test_bundled_capabilities_registered_in_order(self):
        assert enabled_names(["keeper", "lockup"]) == ("lockup", "keeper")

    def test_duplicate_registration_rejected(self):
        with pytest.raises(ValueError):
            register(get_capability("lockup"))

    def test_unknown_capability(self):
        with pytest.raises(UnsupportedExtension):
            get_capability("cw4626")

    def test_enabled_names_deduplicates(self):
        assert enabled_names(["lockup", "lockup"]) == ("lockup",)

    def test_registered_capability_joins_default_unions(self, pause_capability):
        union = extension_execute_msg(["pause", "lockup"])

        assert union.tags == ("lockup", "pause")
        assert union.decode({"pause": {"pause": {}}}) == CapabilityMsg(capability="pause", msg=Pause())

    def test_extensions_do_not_see_each_other(self):
        union = extension_execute_msg(["lockup"])

        with pytest.raises(UnsupportedExtension):
            union.decode({"keeper": {"harvest": {}}})


class TestExtensionUnions:
    def test_query_union_members(self):
        union = extension_query_msg(["keeper"])
        payload = union.decode({"keeper": {"is_keeper": {"address": "osmo1k"}}})

        assert payload.msg == KeeperQueryMsg.IsKeeper(address="osmo1k")
        assert payload.returns is bool

    def test_execute_member_has_no_response_type(self):
        union = extension_execute_msg(["lockup"])
        payload = union.decode({"lockup": {"unlock": {"amount": "3"}}})

        assert payload.msg == LockupExecuteMsg.Unlock(amount=3)
        assert payload.to_wire() == {"lockup": {"unlock": {"amount": "3"}}}


class TestExpiration:
    def test_at_height_shape(self):
        assert AtHeight(height=100).to_wire() == {"at_height": 100}

    def test_never_shape(self):
        assert Never().to_wire() == {"never": {}}
