import argparse
import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Sequence

from timetable_engine.config import load_config
from timetable_engine.data_loader import PreferenceBundle, export_outputs, load_catalog, load_preferences
from timetable_engine.ga import GAInput
from timetable_engine.model import Course, CourseGroup, Schedule
from timetable_engine.scoring import calculate_score_breakdown
from timetable_engine.solver import SchedulingOptions, get_genetic_schedules, get_ranked_schedules


def groups_for_courses(courses: Sequence[Course], names: Sequence[str]) -> List[CourseGroup]:
    # Sin grupos definidos: cada curso pedido es un grupo de un solo curso
    wanted = set(names)
    return [
        CourseGroup(id=c.course_code, name=c.course_name, course_codes=(c.course_code,))
        for c in courses if c.course_name in wanted
    ]


def print_schedule(rank: int, schedule: Schedule, prefs: PreferenceBundle):
    print(f"\n#{rank}  score={schedule.score:.1f}  unidades={schedule.units}")
    for sec in schedule.sections:
        slots = ", ".join(f"{s.day[:3]} {s.start}-{s.end}" for s in sec.schedule)
        print(f"  {sec.course_code:<10} {sec.course_name:<30} {sec.section_code:<6} {sec.professor.name:<24} {slots}")
    bd = calculate_score_breakdown(schedule.sections, prefs.preferences, user_preferences=prefs.user_preferences)
    print(
        f"  [prioridad={bd.priority:.0f} profesores={bd.professors:.0f} slots={bd.time_slots:.0f} "
        f"días libres={bd.free_days:.0f} compacidad={bd.compactness:.0f} asistencia={bd.attendance:.0f} "
        f"horario={bd.time_of_day:.0f}]"
    )


def main():
    parser = argparse.ArgumentParser(description="Generador de horarios sin choques con ranking por preferencias")
    parser.add_argument("--catalog", default="data.json", help="Catálogo de cursos (JSON/YAML)")
    parser.add_argument("--prefs", default=None, help="Preferencias, grupos y opciones (JSON/YAML)")
    parser.add_argument("--config", default="config.yaml", help="Ruta al archivo de configuración")
    parser.add_argument("--courses", nargs="*", default=[], help="Nombres de los cursos pedidos")
    parser.add_argument("--mode", choices=["exhaustive", "genetic"], default="exhaustive")
    parser.add_argument("--min-units", type=float, default=None)
    parser.add_argument("--max-units", type=float, default=None)
    parser.add_argument("--allow-skipping", action="store_true")
    parser.add_argument("--top", type=int, default=10, help="Cuántos horarios imprimir")
    parser.add_argument("--out", default="outputs", help="Directorio para los CSV de salida")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cfg = load_config(args.config)
    if args.seed is not None:
        cfg = cfg.with_overrides({"seed": args.seed})

    print("Cargando datos...")
    courses = load_catalog(args.catalog)
    prefs = load_preferences(args.prefs)

    opt_data = {"scenario_limit": cfg.scenario_limit}
    opt_data.update(prefs.options)
    options = SchedulingOptions.from_dict(opt_data)
    # Los flags de la línea de comandos mandan sobre el archivo de preferencias
    if args.min_units is not None:
        options = replace(options, min_units=args.min_units)
    if args.max_units is not None:
        options = replace(options, max_units=args.max_units)
    if args.allow_skipping:
        options = replace(options, allow_skipping=True)

    out_dir = Path(args.out)
    if args.mode == "genetic":
        groups = list(prefs.course_groups) or groups_for_courses(courses, args.courses)
        data = GAInput(
            course_groups=groups,
            courses=courses,
            preferences=prefs.preferences,
            user_preferences=prefs.user_preferences,
            min_units=options.min_units,
            max_units=options.max_units,
        )
        print(f"Generaciones: {cfg.generations} | Población: {cfg.population_size}")
        result = get_genetic_schedules(data, cfg=cfg)
        export_outputs(result.schedules, out_dir, history=result.genetic.history_frame())
    else:
        if not args.courses:
            parser.error("--courses es obligatorio en modo exhaustive")
        result = get_ranked_schedules(
            courses,
            args.courses,
            preferences=prefs.preferences,
            grouping_config=prefs.grouping,
            options=options,
            user_preferences=prefs.user_preferences,
        )
        export_outputs(result.schedules, out_dir, conflicts=result.conflicts)

    print(f"\n--- {len(result.schedules)} HORARIOS ({result.stats['elapsed_sec']:.2f}s) ---")
    for i, schedule in enumerate(result.schedules[: args.top]):
        print_schedule(i + 1, schedule, prefs)

    if result.conflicts is not None:
        report = result.conflicts
        print("\nNo hay horario válido.")
        for c in report.conflicts:
            print(f"  CHOQUE: {c.message}")
        for s in report.suggestions:
            print(f"  SUGERENCIA: {s.message}")
        if report.courses_with_multiple_sections:
            print(f"  Cursos con varias secciones: {', '.join(report.courses_with_multiple_sections)}")
        if report.missing_courses:
            print(f"  Cursos no encontrados: {', '.join(report.missing_courses)}")
    print(f"Se guardaron resultados en {out_dir}/")


if __name__ == "__main__":
    main()
