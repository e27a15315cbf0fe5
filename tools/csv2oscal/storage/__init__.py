"""
Artifact storage for generated component definitions
"""

from .artifact_store import ArtifactStore, FileSystemArtifactStore

__all__ = [
    'ArtifactStore',
    'FileSystemArtifactStore'
]
