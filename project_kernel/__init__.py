"""
Project Kernel

Shared foundation for the project health engine:
- Immutable domain value objects (targets, aggregates, health result)
- Injectable clock
- Structured JSON logging
- Typed exceptions
- ORM models and read-only selectors over project records
"""

__version__ = "0.1.0"
