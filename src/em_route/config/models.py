import os
from math import isfinite
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from em_route.domain.entities.geography import Coordinate
from em_route.domain.entities.hospital import Hospital
from em_route.io.samples import sample_hospitals


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False


# ----------------- NETWORK ---------------------


class NetworkFromSample(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["sample"] = "sample"
    grid_size: int = Field(default=5, ge=1)
    spacing_deg: float = Field(default=0.01, gt=0)
    base_lat: float = Field(default=40.7128, ge=-90, le=90)
    base_lon: float = Field(default=-74.006, ge=-180, le=180)
    highway: str = "residential"

    @model_validator(mode="after")
    def _grid_fits_globe(self):
        top = self.base_lat + (self.grid_size - 1) * self.spacing_deg
        right = self.base_lon + (self.grid_size - 1) * self.spacing_deg
        if top > 90 or right > 180:
            raise ValueError("sample grid extends past the valid coordinate range")
        return self


class NetworkFromPath(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["path"] = "path"
    file: str
    fmt: Literal["json", "pickle"] = "json"

    @field_validator("file")
    @classmethod
    def _expand(cls, v: str) -> str:
        return os.path.expandvars(os.path.expanduser(v))


NetworkSourceUnion = Annotated[NetworkFromSample | NetworkFromPath, Field(discriminator="kind")]


class NetworkModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    ttl_s: float = Field(default=3600.0, gt=0)  # 1 hour
    source: NetworkSourceUnion = Field(default_factory=NetworkFromSample)


# ----------------- ROUTING ---------------------


class RouterModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    # prepend/append the caller's exact coordinates around the snapped path
    include_endpoints: bool = False


class TravelTimeMultiplierModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["multiplier"] = "multiplier"
    speed_kmh: float = Field(default=60.0, gt=0)


class TravelTimeLevelSpeedsModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["level_speeds"] = "level_speeds"
    green_kmh: float = 60.0
    orange_kmh: float = 30.0
    red_kmh: float = 15.0

    @field_validator("green_kmh", "orange_kmh", "red_kmh")
    @classmethod
    def _positive(cls, v: float, info: ValidationInfo) -> float:
        if not v > 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v


TravelTimeUnion = Annotated[
    TravelTimeMultiplierModel | TravelTimeLevelSpeedsModel, Field(discriminator="kind")
]


# ----------------- CONGESTION GENERATORS ---------------------


class GeneratorSyntheticModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["synthetic"] = "synthetic"
    seed: int = 123
    shares: tuple[float, float, float] = (0.6, 0.3, 0.1)  # green, orange, red

    @field_validator("shares")
    @classmethod
    def _check_shares(cls, v):
        if any(not isfinite(x) or x < 0 for x in v):
            raise ValueError("shares must be finite and non-negative")
        if sum(v) <= 0:
            raise ValueError("shares must sum to a positive value")
        return v


class GeneratorStaticModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["static"] = "static"
    densities: dict[str, float] = Field(default_factory=dict)  # segment_id -> density

    @field_validator("densities")
    @classmethod
    def _in_range(cls, v: dict[str, float]):
        bad = [k for k, d in v.items() if not (isfinite(d) and 0.0 <= d <= 1.0)]
        if bad:
            raise ValueError(f"densities must be in [0, 1]; bad segments: {bad}")
        return v


GeneratorUnion = Annotated[
    GeneratorSyntheticModel | GeneratorStaticModel, Field(discriminator="kind")
]


class SchedulerModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    interval_ms: float = Field(default=30_000, gt=0)
    autostart: bool = False
    generator: GeneratorUnion = Field(default_factory=GeneratorSyntheticModel)


# ----------------- HOSPITALS ---------------------


class HospitalModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    id: str
    name: str
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)
    address: str = ""
    capacity: int = Field(default=0, ge=0)
    emergency_capable: bool = True
    phone_number: str = ""

    def to_entity(self) -> Hospital:
        return Hospital(
            id=self.id,
            name=self.name,
            location=Coordinate(self.lat, self.lon),
            address=self.address,
            capacity=self.capacity,
            emergency_capable=self.emergency_capable,
            phone_number=self.phone_number,
        )


def _sample_hospital_models() -> list[HospitalModel]:
    return [
        HospitalModel(
            id=h.id,
            name=h.name,
            lat=h.location.lat,
            lon=h.location.lon,
            address=h.address,
            capacity=h.capacity,
            emergency_capable=h.emergency_capable,
            phone_number=h.phone_number,
        )
        for h in sample_hospitals()
    ]


class HospitalsModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    emergency_only: bool = False
    registry: list[HospitalModel] = Field(default_factory=_sample_hospital_models)


# ------------------------------------------------------------------


class EngineModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "em-route"
    run_id: str = "local"
    log: LogModel = LogModel()
    network: NetworkModel = NetworkModel()
    router: RouterModel = RouterModel()
    travel_time: TravelTimeUnion = Field(default_factory=TravelTimeMultiplierModel)
    scheduler: SchedulerModel = SchedulerModel()
    hospitals: HospitalsModel = Field(default_factory=HospitalsModel)
