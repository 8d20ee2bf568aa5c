"""Skeletonizer - Straight skeletons and roof faces for simple polygons.

Skeletonizer shrinks a polygon's boundary inward at uniform speed and records
the creases traced by its vertices. The resulting skeleton can be turned into
sloped roof faces ready for 3D extrusion.

Example:
    $ skeletonizer footprints.geojson

This will create footprints-skeleton.json with the skeleton subtrees and roof
faces of every polygon in the document.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
