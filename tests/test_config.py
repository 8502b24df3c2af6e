import json
import tempfile
import unittest
from pathlib import Path

from timetable_engine.config import GAConfig, load_config
from timetable_engine.data_loader import export_outputs, load_catalog, load_preferences, schedules_to_dataframe
from timetable_engine.model import CoursePreference, PreferenceWeights, TimeSlot, UserPreferences
from timetable_engine.solver import get_ranked_schedules
from timetable_engine.timeslots import InvalidTimeFormat

CATALOG = {
    "courses": [
        {
            "courseName": "Math",
            "courseCode": "MATH",
            "units": 3,
            "sections": [
                {
                    "sectionCode": "M1",
                    "professor": {"name": "Dr. A", "takesAttendance": False, "teachingQuality": "good"},
                    "schedule": [{"day": "Saturday", "start": "08:00", "end": "10:00"}],
                },
                {
                    "sectionCode": "M2",
                    "professor": {"name": "Dr. B", "takesAttendance": True, "teachingQuality": "poor"},
                    "schedule": [{"day": "Saturday", "start": "10:00", "end": "12:00"}],
                    "notes": "lab included",
                },
            ],
        },
        {
            "courseName": "Physics",
            "courseCode": "PHYS",
            "units": 3,
            "sections": [
                {
                    "sectionCode": "P1",
                    "professor": {"name": "Dr. C", "takesAttendance": True, "teachingQuality": "excellent"},
                    "schedule": [{"day": "Saturday", "start": "08:00", "end": "10:00"}],
                }
            ],
        },
    ]
}


class ConfigTests(unittest.TestCase):
    def test_defaults(self):
        cfg = GAConfig()
        self.assertEqual(cfg.population_size, 140)
        self.assertEqual(cfg.generations, 120)
        self.assertEqual(cfg.crossover_rate, 0.85)
        self.assertEqual(cfg.mutation_rate, 0.07)
        self.assertEqual(cfg.elite_size, 4)
        self.assertEqual(cfg.conflict_penalty, 100_000)
        self.assertEqual(cfg.unit_penalty, 5_000)

    def test_from_dict_accepts_aliases_and_ignores_unknown(self):
        cfg = GAConfig.from_dict({"populationSize": 30, "elitism": 2, "mutationRate": 0.2, "colour": "red"})
        self.assertEqual(cfg.population_size, 30)
        self.assertEqual(cfg.elite_size, 2)
        self.assertEqual(cfg.mutation_rate, 0.2)

    def test_invalid_rate_rejected(self):
        with self.assertRaises(ValueError):
            GAConfig(crossover_rate=1.5)

    def test_with_overrides_keeps_original(self):
        base = GAConfig(seed=1)
        new = base.with_overrides({"generations": 5, "seed": None})
        self.assertEqual(new.generations, 5)
        self.assertEqual(new.seed, 1)
        self.assertEqual(base.generations, 120)
        self.assertIs(base.with_overrides(None), base)

    def test_load_config(self):
        with tempfile.TemporaryDirectory() as tmp:
            self.assertEqual(load_config(str(Path(tmp) / "missing.yaml")), GAConfig())
            path = Path(tmp) / "config.yaml"
            path.write_text("population_size: 60\ngenerations: 10\nseed: 3\n", encoding="utf-8")
            cfg = load_config(str(path))
            self.assertEqual((cfg.population_size, cfg.generations, cfg.seed), (60, 10, 3))
            path.write_text("- a\n- b\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                load_config(str(path))


class BoundaryValidationTests(unittest.TestCase):
    def test_timeslot_validation(self):
        with self.assertRaises(ValueError):
            TimeSlot.from_dict({"day": "Monday", "start": "10:00", "end": "10:00"})
        with self.assertRaises(ValueError):
            TimeSlot.from_dict({"day": "Funday", "start": "08:00", "end": "10:00"})
        with self.assertRaises(InvalidTimeFormat):
            TimeSlot.from_dict({"day": "Monday", "start": "8 o'clock", "end": "10:00"})

    def test_preference_records(self):
        pref = CoursePreference.from_dict({
            "courseCode": "MATH", "courseName": "Math", "priority": 2,
            "professorRatings": {"Dr. A": 4}, "timeSlotRatings": {"Saturday-08:00-10:00": 1},
        })
        self.assertEqual(pref.priority, 2)
        self.assertEqual(pref.professor_ratings, {"Dr. A": 4})
        with self.assertRaises(ValueError):
            CoursePreference.from_dict({"courseCode": "X", "professorRatings": {"Dr. A": 9}})

        user = UserPreferences.from_dict({
            "preferredProfessors": ["Dr. A"],
            "timeSlotScores": {"Saturday-08:00-10:00": 5},
            "weights": {"professor": 80, "timeSlot": 20, "freeDay": 50, "compactness": 10},
        })
        self.assertIn("Dr. A", user.preferred_professors)
        self.assertEqual(user.weights, PreferenceWeights(80, 20, 50, 10))
        with self.assertRaises(ValueError):
            PreferenceWeights(professor=101)


class DataLoaderTests(unittest.TestCase):
    def test_load_catalog_and_solve(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "data.json"
            path.write_text(json.dumps(CATALOG), encoding="utf-8")
            courses = load_catalog(str(path))
        self.assertEqual([c.course_code for c in courses], ["MATH", "PHYS"])
        self.assertFalse(courses[0].sections[0].professor.takes_attendance)
        self.assertEqual(courses[0].sections[1].notes, "lab included")
        result = get_ranked_schedules(courses, ["Math", "Physics"])
        self.assertEqual(result.schedules[0].key, frozenset({"MATH_M2", "PHYS_P1"}))

    def test_duplicate_course_codes_rejected(self):
        data = {"courses": CATALOG["courses"] + [CATALOG["courses"][0]]}
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "data.json"
            path.write_text(json.dumps(data), encoding="utf-8")
            with self.assertRaises(ValueError):
                load_catalog(str(path))

    def test_load_preferences(self):
        prefs_doc = (
            "preferences:\n"
            "  - {courseCode: MATH, priority: 1}\n"
            "userPreferences:\n"
            "  preferredProfessors: [Dr. B]\n"
            "courseGroups:\n"
            "  - {id: g1, name: Math, priority: High, courseCodes: [MATH]}\n"
            "  - {id: g2, name: Old, priority: Low, courseCodes: [PHYS], isActive: false}\n"
            "grouping:\n"
            "  groups:\n"
            "    - {id: m, name: Math, courseNames: [Math, Calculus]}\n"
            "options: {minUnits: 3}\n"
        )
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "prefs.yaml"
            path.write_text(prefs_doc, encoding="utf-8")
            bundle = load_preferences(str(path))
        self.assertEqual(bundle.preferences[0].course_code, "MATH")
        self.assertEqual(bundle.user_preferences.preferred_professors, frozenset({"Dr. B"}))
        self.assertEqual([g.is_active for g in bundle.course_groups], [True, False])
        self.assertEqual(bundle.grouping.groups[0].course_names, ("Math", "Calculus"))
        self.assertEqual(bundle.options, {"minUnits": 3})
        self.assertIsNone(load_preferences(None).user_preferences)

    def test_export_outputs(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "data.json"
            path.write_text(json.dumps(CATALOG), encoding="utf-8")
            courses = load_catalog(str(path))
            result = get_ranked_schedules(courses, ["Math", "Physics"])
            frame = schedules_to_dataframe(result.schedules)
            self.assertEqual(list(frame["Seccion"]), ["M2", "P1"])
            export_outputs(result.schedules, Path(tmp) / "out")
            self.assertTrue((Path(tmp) / "out" / "schedules.csv").exists())


if __name__ == "__main__":
    unittest.main()
