"""
modules/connections package — tourist → guide connection lifecycle.

    lifecycle  pure rules: create / transition / withdraw / classify
    service    ConnectionService, orchestrates rules against a ConnectionStore
"""
from modules.connections.lifecycle import (
    classify_for_viewer,
    validate_create,
    validate_transition,
    validate_withdrawal,
)
from modules.connections.service import ConnectionService

__all__ = [
    "ConnectionService",
    "classify_for_viewer",
    "validate_create",
    "validate_transition",
    "validate_withdrawal",
]
