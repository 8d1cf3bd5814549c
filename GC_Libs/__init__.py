"""
GC_Libs - Gear Cutout Library Modules

This package contains core functionality for the Gear Cutout project,
organized into specialized sub-packages:

- CutoutLib: Background removal, mask refinement and output compositing
- CatalogLib: Catalog naming, filenames, persistence and batch processing
"""

__version__ = "0.1.0"
