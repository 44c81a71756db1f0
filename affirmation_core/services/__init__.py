"""Selection, import/export formats, use cases and the widget bridge."""
