from __future__ import annotations
from pathlib import Path
from typing import Any, Optional, Union
import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

class TrackerParams(BaseModel):
    """
    Tunables of the pupil pipeline. Immutable: a tracker swaps the whole
    instance, so one call always sees one consistent configuration.
    Keys may be given in snake_case or camelCase (cannyThreshold).
    """
    model_config = ConfigDict(frozen=True, extra="forbid", alias_generator=to_camel, populate_by_name=True)

    blur_kernel_size: int = Field(5, ge=0)
    canny_threshold: int = Field(159, ge=0)
    canny_ratio: float = Field(2, gt=0)
    canny_aperture: int = 5
    pupil_intensity_offset: int = 11
    glint_intensity_offset: int = 5
    min_contour_size: int = 80          # may be <= 0, relaxation stays bounded
    glint_max_fraction: Optional[float] = Field(0.05, gt=0, le=1)
    debug_capture: bool = False

    @field_validator("canny_aperture")
    @classmethod
    def _aperture(cls, v: int) -> int:
        if v not in (3, 5, 7):
            raise ValueError("canny_aperture must be 3, 5 or 7")
        return v

    def with_changes(self, **changes: Any) -> "TrackerParams":
        data = self.model_dump()
        for k, v in changes.items():
            data[_FIELD_BY_ALIAS.get(k, k)] = v
        return TrackerParams.model_validate(data)

_FIELD_BY_ALIAS = {to_camel(name): name for name in TrackerParams.model_fields}

def load_params(path: Union[str, Path, None]) -> TrackerParams:
    if path is None:
        return TrackerParams()
    with open(path, "r") as f: cfg = yaml.safe_load(f)
    return TrackerParams.model_validate(cfg or {})

def dump_params(params: TrackerParams) -> str:
    return yaml.safe_dump(params.model_dump(), sort_keys=False)
