"""Shared data models."""

from dataclasses import asdict, dataclass


def normalize_angle(angle):
    return float(angle) % 360.0


@dataclass
class Tooth:
    id: int
    start_angle: float
    end_angle: float
    enabled: bool = True

    def __post_init__(self):
        self.start_angle = normalize_angle(self.start_angle)
        self.end_angle = normalize_angle(self.end_angle)

    @property
    def wraps(self):
        return self.end_angle < self.start_angle

    def covers(self, angle):
        if self.wraps:
            return angle >= self.start_angle or angle <= self.end_angle
        return self.start_angle <= angle <= self.end_angle


@dataclass
class Wheel:
    id: str
    name: str
    total_teeth: int
    missing_teeth: list[int]
    teeth: list[Tooth]
    inner_radius: float = 50.0
    outer_radius: float = 80.0

    @property
    def is_crank(self):
        return self.id == "ckp"

    @property
    def enabled_teeth(self):
        return [t for t in self.teeth if t.enabled]

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_dict(cls, data):
        fields = dict(data)
        fields["teeth"] = [Tooth(**t) for t in data["teeth"]]
        fields["missing_teeth"] = [int(m) for m in data["missing_teeth"]]
        return cls(**fields)


@dataclass(frozen=True)
class Edge:
    angle_tenths: int
    level: int


@dataclass(frozen=True)
class SignalPoint:
    angle: float
    value: float


@dataclass
class DeviceSignalConfig:
    name: str
    ckp: str
    cmp1: str | None = None
    cmp2: str | None = None

    def blobs(self):
        return {"CKP": self.ckp, "CMP1": self.cmp1, "CMP2": self.cmp2}

    def to_dict(self):
        return {"name": self.name, **self.blobs()}

    @classmethod
    def from_dict(cls, data):
        return cls(
            name=data["name"],
            ckp=data["CKP"],
            cmp1=data.get("CMP1"),
            cmp2=data.get("CMP2"),
        )


@dataclass
class ExportedWheelConfig:
    version: int
    ckp: str
    cmp1: str
    cmp2: str
    checksum: str

    def to_dict(self):
        return {
            "version": self.version,
            "CKP": self.ckp,
            "CMP1": self.cmp1,
            "CMP2": self.cmp2,
            "checksum": self.checksum,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            version=data["version"],
            ckp=data["CKP"],
            cmp1=data["CMP1"],
            cmp2=data["CMP2"],
            checksum=data["checksum"],
        )


@dataclass
class WheelSet:
    ckp: Wheel
    cmp1: Wheel
    cmp2: Wheel
    ckp_mode: str = "preset"

    def wheels(self):
        return [self.ckp, self.cmp1, self.cmp2]
