"""PyQt6 presentation layer; imported only by the ``gui`` command."""
