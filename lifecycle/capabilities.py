"""
Narrow capabilities the two lifecycle managers need from each other.

The client manager cascades closures into the contract manager, and the
contract manager checks client activity through the client manager. Each
side depends only on the one method it calls, declared here, so neither
module imports the other.
"""

from typing import Callable, Optional, Protocol

from shared.models import Client


class ActiveClientLookup(Protocol):
    """What the contract manager needs from the client side."""

    def find_active(self, client_id: int) -> Optional[Client]:
        ...


class ContractCascade(Protocol):
    """What the client manager needs from the contract side."""

    def close_all_active_for_client(self, client_id: int) -> None:
        ...


# Resolved at call time, so the client manager can be built first
ContractCascadeProvider = Callable[[], ContractCascade]
