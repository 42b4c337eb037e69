"""pagetree — layout-tree engine for a drag-and-drop page editor."""

__version__ = "0.1.0"
