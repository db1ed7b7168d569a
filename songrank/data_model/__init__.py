"""Shared data model primitives."""

from songrank.data_model.base import CamelModel, StrictBaseModel


__all__ = ["CamelModel", "StrictBaseModel"]
