"""
Domain layer of the client & contract service.

This package holds the business rules:
- ClientLifecycleManager: client creation, updates, deactivation, response mapping
- ContractLifecycleManager: contract creation, active queries, cost sums, closure
- build_managers: wires both managers over one store and one clock
"""

from lifecycle.clients import ClientLifecycleManager
from lifecycle.contracts import ContractLifecycleManager
from lifecycle.wiring import Managers, build_managers

__all__ = [
    "ClientLifecycleManager",
    "ContractLifecycleManager",
    "Managers",
    "build_managers",
]
