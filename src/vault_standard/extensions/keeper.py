"""
Keeper extension: a set of addresses allowed to run privileged maintenance
such as harvesting rewards.
"""
from __future__ import annotations

from typing import Any, ClassVar, List

from vault_standard.extensions.base import Capability
from vault_standard.wire import TaggedUnion, Variant


class KeeperExecuteMsg:
    class AddKeeper(Variant):
        address: str

    class RemoveKeeper(Variant):
        address: str

    class Harvest(Variant):
        """Collect and compound pending rewards. Callable by keepers only."""


class KeeperQueryMsg:
    class Keepers(Variant):
        returns: ClassVar[Any] = List[str]

    class IsKeeper(Variant):
        returns: ClassVar[Any] = bool

        address: str


CAPABILITY = Capability(
    name="keeper",
    execute=TaggedUnion(
        "KeeperExecuteMsg",
        (KeeperExecuteMsg.AddKeeper, KeeperExecuteMsg.RemoveKeeper, KeeperExecuteMsg.Harvest),
    ),
    query=TaggedUnion("KeeperQueryMsg", (KeeperQueryMsg.Keepers, KeeperQueryMsg.IsKeeper)),
)
