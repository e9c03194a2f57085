"""
Point Report - Equipment & Point Classification Reporting

Pulls the equipment/point graph of a building from the ontology service (or a
cached snapshot), classifies every point against the root type taxonomy and
writes classified and pending CSV reports for review.
"""

__version__ = "0.1.0"
__author__ = "Point Report Team"
