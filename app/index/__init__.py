from .candidates import CandidateSet
from .kdtree import KDNode, KDTree

__all__ = ["CandidateSet", "KDNode", "KDTree"]
