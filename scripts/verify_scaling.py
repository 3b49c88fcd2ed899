"""
Verify scaling correctness over files of ingredient lines.

Each file is treated as one recipe (one ingredient per line, '#' comments and
blank lines skipped). Every recipe is parsed, scaled by each multiplier and
audited. Exits 1 when any issue is found, 2 on bad input.

Usage:
    python scripts/verify_scaling.py recipes/pancakes.txt recipes/chili.txt
    python scripts/verify_scaling.py --multipliers 0.25,2.5 --servings 6 pancakes.txt
"""

import argparse
import os
import sys

# Add repo root to sys.path
sys.path.append(os.path.join(os.path.dirname(__file__), "../"))

from recipe_scaler.parsing import IngredientParser
from recipe_scaler.schemas import RecipeShell, ScalingOptions, ServingInfo
from recipe_scaler.services.scaling import ScalingEngine
from recipe_scaler.services.verification import audit_scaled_recipe
from recipe_scaler.settings import settings

DEFAULT_MULTIPLIERS = "0.5,1,2,3,1.7"


def parse_multipliers(raw: str) -> list[float]:
    values = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        value = float(part)
        if value > 0:
            values.append(value)
    return values


def load_lines(path: str) -> list[str]:
    with open(path, encoding="utf-8") as fh:
        return [line.strip() for line in fh if line.strip() and not line.strip().startswith("#")]


def verify_file(path: str, multipliers: list[float], servings: float,
                parser: IngredientParser, engine: ScalingEngine) -> list[str]:
    shell = RecipeShell(
        title=os.path.basename(path),
        servings=ServingInfo(amount=servings, original_text=f"{servings:g} servings"),
        ingredients=load_lines(path),
    )
    recipe = parser.parse_recipe(shell, max_workers=settings.parse_max_workers)

    issues: list[str] = []
    for multiplier in multipliers:
        scaled = engine.scale_recipe(recipe, ScalingOptions(multiplier=multiplier))
        issues.extend(audit_scaled_recipe(recipe, scaled, multiplier))
    return list(dict.fromkeys(issues))


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Audit recipe scaling over ingredient line files")
    ap.add_argument("files", nargs="+", help="Ingredient line files, one recipe per file")
    ap.add_argument("--multipliers", default=DEFAULT_MULTIPLIERS, help="Comma separated multipliers")
    ap.add_argument("--servings", type=float, default=4, help="Servings of each input recipe")
    args = ap.parse_args(argv)

    try:
        multipliers = parse_multipliers(args.multipliers)
    except ValueError:
        print(f"Invalid --multipliers: {args.multipliers}")
        return 2
    if not multipliers:
        print("No usable multipliers")
        return 2

    parser = IngredientParser()
    engine = ScalingEngine()

    print(f"Files: {len(args.files)}")
    print(f"Multipliers: {', '.join(f'{m:g}' for m in multipliers)}")
    print()

    failures: dict[str, list[str]] = {}
    for path in args.files:
        try:
            issues = verify_file(path, multipliers, args.servings, parser, engine)
        except OSError as e:
            print(f"Error reading {path}: {e}")
            return 2
        if issues:
            failures[path] = issues
            print(f"FAIL: {path}")
        else:
            print(f"PASS: {path}")

    print()
    print(f"Passed: {len(args.files) - len(failures)}/{len(args.files)}")
    print(f"Failed: {len(failures)}/{len(args.files)}")

    if failures:
        print()
        print("Failures:")
        for path, issues in failures.items():
            print(f"- {path}")
            for issue in issues:
                print(f"  - {issue}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
