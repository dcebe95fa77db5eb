"""
Segmentation option models.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Any

from core.constants import DEFAULT_PROFILE_RANGE, DEFAULT_PROFILE_JOIN


@dataclass
class ProfileOptions:
    """
    Options record accepted by the segmentation engine.

    range: minimum absolute depth excursion of a valid cast.
    join: merge consecutive valid casts with the same direction.
    """
    range: float = DEFAULT_PROFILE_RANGE
    join: bool = DEFAULT_PROFILE_JOIN

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)
