"""
SnapShare storage module.

Durable, collision-free persistence of composited images.
"""

from .local import ArtifactSink, LocalArtifactStore

__all__ = ['ArtifactSink', 'LocalArtifactStore']
