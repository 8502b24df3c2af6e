# timetable_engine/data_loader.py
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pandas as pd
import yaml

from .conflicts import ConflictReport
from .grouping import GroupingConfig
from .model import Course, CourseGroup, CoursePreference, Schedule, UserPreferences


@dataclass(frozen=True)
class PreferenceBundle:
    preferences: Tuple[CoursePreference, ...] = ()
    user_preferences: Optional[UserPreferences] = None
    course_groups: Tuple[CourseGroup, ...] = ()
    grouping: Optional[GroupingConfig] = None
    options: Dict[str, Any] = field(default_factory=dict)


def _read_mapping(path: str) -> Dict[str, Any]:
    # YAML es superconjunto de JSON: sirve para data.json y para .yaml
    text = Path(path).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} debe contener un objeto mapeo")
    return data


def load_catalog(path: str) -> List[Course]:
    data = _read_mapping(path)
    courses = [Course.from_dict(c) for c in data.get("courses", [])]
    codes = [c.course_code for c in courses]
    dupes = sorted({c for c in codes if codes.count(c) > 1})
    if dupes:
        raise ValueError(f"Códigos de curso repetidos en {path}: {', '.join(dupes)}")
    return courses


def load_preferences(path: Optional[str]) -> PreferenceBundle:
    if not path:
        return PreferenceBundle()
    data = _read_mapping(path)
    user = data.get("userPreferences", data.get("user_preferences"))
    groups = data.get("courseGroups", data.get("course_groups", []))
    grouping = data.get("grouping")
    return PreferenceBundle(
        preferences=tuple(CoursePreference.from_dict(p) for p in data.get("preferences", [])),
        user_preferences=UserPreferences.from_dict(user) if user else None,
        course_groups=tuple(CourseGroup.from_dict(g) for g in groups),
        grouping=GroupingConfig.from_dict(grouping) if grouping else None,
        options=dict(data.get("options", {}) or {}),
    )


def schedule_to_dataframe(schedule: Schedule, rank: int = 1) -> pd.DataFrame:
    data = []
    for sec in schedule.sections:
        for slot in sec.schedule:
            data.append(
                {
                    "Rank": rank,
                    "Score": schedule.score,
                    "Curso": sec.course_code,
                    "Nombre": sec.course_name,
                    "Seccion": sec.section_code,
                    "Docente": sec.professor.name,
                    "Dia": slot.day,
                    "Hora_Inicio": slot.start,
                    "Hora_Fin": slot.end,
                }
            )
    return pd.DataFrame(data)


def schedules_to_dataframe(schedules: Sequence[Schedule]) -> pd.DataFrame:
    frames = [schedule_to_dataframe(s, rank=i + 1) for i, s in enumerate(schedules)]
    if not frames:
        return pd.DataFrame()
    return pd.concat(frames, ignore_index=True)


def export_outputs(
    schedules: Sequence[Schedule],
    out_dir: Path,
    conflicts: Optional[ConflictReport] = None,
    history: Optional[pd.DataFrame] = None,
) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)
    schedules_to_dataframe(schedules).to_csv(out_dir / "schedules.csv", index=False)
    if conflicts is not None:
        conflicts.to_frame().to_csv(out_dir / "conflicts.csv", index=False)
    if history is not None:
        history.to_csv(out_dir / "history.csv", index=False)
