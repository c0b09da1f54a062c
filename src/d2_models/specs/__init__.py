"""
Typed schema models for remote model metadata.
"""

from d2_models.specs.schema import SchemaPropertySpec, SchemaSpec

__all__ = ["SchemaPropertySpec", "SchemaSpec"]
