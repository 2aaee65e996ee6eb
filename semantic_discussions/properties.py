"""Declaration of the properties this app adds to the semantic index."""

from __future__ import annotations

from .annotators import AnnotatorStore
from .semantic.registry import PropertyRegistry


class PropertyInitializer:
    """Declares one predefined property per registered annotator."""

    def __init__(self, property_registry: PropertyRegistry, annotator_store: AnnotatorStore) -> None:
        self.property_registry = property_registry
        self.annotator_store = annotator_store

    def initialize_properties(self) -> None:
        """Declare every property; registry rejections propagate unchanged."""

        for annotator in self.annotator_store.get_annotators():
            self.property_registry.register_property(
                annotator.key,
                annotator.type_id,
                annotator.label,
                visible=annotator.visible,
                annotable=False,
            )
