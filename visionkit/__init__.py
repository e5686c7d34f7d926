"""Split-and-merge segmentation, edge and distance maps, histograms, and
toolkit-independent models of an image viewer with regions of interest."""

__version__ = "0.1.0"