"""
Core module for shared domain infrastructure.

This module contains:
- Domain exceptions and value objects
- Transaction helpers
- Metrics
- Management commands for provisioning tools
"""
