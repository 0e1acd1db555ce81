"""Release strategies."""

from cutrelease.strategies.base import ReleaseStrategy, relaxed_branch_protection
from cutrelease.strategies.direct import DirectReleaseStrategy
from cutrelease.strategies.indirect import IndirectReleaseStrategy

__all__ = [
    "ReleaseStrategy",
    "DirectReleaseStrategy",
    "IndirectReleaseStrategy",
    "relaxed_branch_protection",
]
