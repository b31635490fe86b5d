"""openpyxl adapter layer: validation and rendering of engine values."""
