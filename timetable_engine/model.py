# timetable_engine/model.py
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from .timeslots import DAY_INDEX, to_minutes

TEACHING_QUALITIES = ("excellent", "good", "average", "poor")
PRIORITY_TIERS = ("High", "Medium", "Low")


def _get(data: Dict[str, Any], camel: str, snake: str, default: Any = None) -> Any:
    # Los archivos de datos usan camelCase; aceptamos también snake_case.
    if camel in data:
        return data[camel]
    return data.get(snake, default)


def _rating(value: Any, what: str) -> int:
    r = int(value)
    if r < 1 or r > 5:
        raise ValueError(f"{what}: la calificación debe estar entre 1 y 5 (recibido {value})")
    return r


@dataclass(frozen=True)
class TimeSlot:
    day: str
    start: str   # "HH:MM"
    end: str     # "HH:MM"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TimeSlot":
        slot = cls(day=str(data["day"]), start=str(data["start"]), end=str(data["end"]))
        if slot.day not in DAY_INDEX:
            raise ValueError(f"Día desconocido {slot.day!r}")
        if to_minutes(slot.start) >= to_minutes(slot.end):
            raise ValueError(f"El slot {slot.day} {slot.start}-{slot.end} debe terminar después de empezar")
        return slot


@dataclass(frozen=True)
class Professor:
    name: str
    takes_attendance: bool = False
    teaching_quality: str = "average"   # excellent / good / average / poor

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Professor":
        quality = str(_get(data, "teachingQuality", "teaching_quality", "average"))
        if quality not in TEACHING_QUALITIES:
            raise ValueError(f"Calidad docente desconocida {quality!r} para {data.get('name')}")
        return cls(
            name=str(data["name"]),
            takes_attendance=bool(_get(data, "takesAttendance", "takes_attendance", False)),
            teaching_quality=quality,
        )


@dataclass(frozen=True)
class Section:
    section_code: str
    professor: Professor
    schedule: Tuple[TimeSlot, ...] = ()
    notes: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Section":
        return cls(
            section_code=str(_get(data, "sectionCode", "section_code")),
            professor=Professor.from_dict(data["professor"]),
            schedule=tuple(TimeSlot.from_dict(s) for s in data.get("schedule", [])),
            notes=data.get("notes"),
        )


@dataclass(frozen=True)
class Course:
    course_name: str
    course_code: str
    units: int
    sections: Tuple[Section, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Course":
        return cls(
            course_name=str(_get(data, "courseName", "course_name")),
            course_code=str(_get(data, "courseCode", "course_code")),
            units=int(data.get("units", 0) or 0),
            sections=tuple(Section.from_dict(s) for s in data.get("sections", [])),
        )


@dataclass(frozen=True)
class CourseGroup:
    # Cursos alternativos entre sí: se elige como máximo uno por grupo.
    id: str
    name: str
    priority: str = "Medium"            # High / Medium / Low
    course_codes: Tuple[str, ...] = ()
    is_active: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CourseGroup":
        priority = str(data.get("priority", "Medium"))
        if priority not in PRIORITY_TIERS:
            raise ValueError(f"Prioridad desconocida {priority!r} en el grupo {data.get('id')}")
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", data["id"])),
            priority=priority,
            course_codes=tuple(str(c) for c in _get(data, "courseCodes", "course_codes", [])),
            is_active=bool(_get(data, "isActive", "is_active", True)),
        )


@dataclass(frozen=True)
class ScheduleSection:
    course_name: str
    course_code: str
    section_code: str
    professor: Professor
    schedule: Tuple[TimeSlot, ...]

    @property
    def key(self) -> str:
        return f"{self.course_code}_{self.section_code}"


@dataclass(frozen=True)
class Schedule:
    sections: Tuple[ScheduleSection, ...]
    score: float
    units: int = 0

    @property
    def key(self) -> FrozenSet[str]:
        return frozenset(s.key for s in self.sections)


@dataclass(frozen=True)
class SelectedSection:
    # Un gen ocupado: curso + sección elegidos para un grupo
    course_code: str
    section_code: str


Genome = List[Optional[SelectedSection]]


@dataclass
class Individual:
    genome: Genome
    fitness: float = 0.0
    units: int = 0


@dataclass(frozen=True)
class CoursePreference:
    course_code: str
    course_name: str = ""
    priority: int = 1                   # 1 = más importante
    professor_ratings: Dict[str, int] = field(default_factory=dict)
    time_slot_ratings: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CoursePreference":
        code = str(_get(data, "courseCode", "course_code"))
        prof = _get(data, "professorRatings", "professor_ratings", {}) or {}
        slots = _get(data, "timeSlotRatings", "time_slot_ratings", {}) or {}
        return cls(
            course_code=code,
            course_name=str(_get(data, "courseName", "course_name", "")),
            priority=int(data.get("priority", 1)),
            professor_ratings={k: _rating(v, code) for k, v in prof.items()},
            time_slot_ratings={k: _rating(v, code) for k, v in slots.items()},
        )


@dataclass(frozen=True)
class PreferenceWeights:
    # 0..100, 50 es neutro
    professor: int = 50
    time_slot: int = 50
    free_day: int = 50
    compactness: int = 50

    def __post_init__(self):
        for name in ("professor", "time_slot", "free_day", "compactness"):
            value = getattr(self, name)
            if value < 0 or value > 100:
                raise ValueError(f"El peso {name} debe estar entre 0 y 100 (recibido {value})")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PreferenceWeights":
        return cls(
            professor=int(data.get("professor", 50)),
            time_slot=int(_get(data, "timeSlot", "time_slot", 50)),
            free_day=int(_get(data, "freeDay", "free_day", 50)),
            compactness=int(data.get("compactness", 50)),
        )


@dataclass(frozen=True)
class UserPreferences:
    preferred_professors: FrozenSet[str] = frozenset()
    time_slot_scores: Dict[str, int] = field(default_factory=dict)   # "{day}-{start}-{end}" -> 1..5
    weights: PreferenceWeights = field(default_factory=PreferenceWeights)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserPreferences":
        scores = _get(data, "timeSlotScores", "time_slot_scores", {}) or {}
        return cls(
            preferred_professors=frozenset(_get(data, "preferredProfessors", "preferred_professors", []) or []),
            time_slot_scores={k: _rating(v, "timeSlotScores") for k, v in scores.items()},
            weights=PreferenceWeights.from_dict(data.get("weights", {}) or {}),
        )
