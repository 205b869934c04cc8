"""Tests for meal plan generation."""

import pytest

from fitsmart.services.meal_plan import diet_of, generate_meal_plan, suggest_foods
from fitsmart.services.nutrition import compute_profile, round_half_up


def _profile(answers, **update):
    return compute_profile(answers.model_copy(update=update))


@pytest.mark.parametrize("meals, names", [
    (3, ["Breakfast", "Lunch", "Dinner"]),
    (4, ["Breakfast", "Lunch", "Afternoon Snack", "Dinner"]),
    (5, ["Breakfast", "Lunch", "Afternoon Snack", "Dinner", "Late-night Snack"]),
    (6, ["Breakfast", "Lunch", "Afternoon Snack", "Dinner", "Late-night Snack"]),
])
def test_slots_by_meals_per_day(answers, meals, names) -> None:
    plan = generate_meal_plan(_profile(answers, meals_per_day=meals))

    assert [entry.name for entry in plan] == names


def test_main_meal_split(answers) -> None:
    # target 2635 kcal over 4 meals = 658.75 kcal per main meal
    plan = generate_meal_plan(_profile(answers, meals_per_day=4))
    breakfast, lunch, snack, dinner = plan

    assert breakfast.calories == 659
    assert breakfast.protein == 49   # 658.75 * 0.3 / 4
    assert breakfast.carbs == 66     # 658.75 * 0.4 / 4
    assert breakfast.fats == 22      # 658.75 * 0.3 / 9
    assert lunch.calories == dinner.calories == breakfast.calories
    assert snack.calories == 395     # 60% of a main meal
    assert snack.time == "15:00 - 16:00"


def test_late_night_snack_carb_share(answers) -> None:
    profile = _profile(answers, meals_per_day=5)
    late = generate_meal_plan(profile)[-1]
    meal_calories = profile.target_calories / 5

    assert late.calories == round_half_up(meal_calories * 0.5)
    assert late.carbs == round_half_up(meal_calories * 0.4 / 4 * 0.3)
    assert late.fats == round_half_up(meal_calories * 0.3 / 9 * 0.5)


def test_vegan_beats_vegetarian() -> None:
    assert diet_of({"vegan", "vegetarian"}) == "vegan"
    assert diet_of({"vegetarian"}) == "vegetarian"
    assert diet_of(set()) == "omnivore"


def test_vegan_plan_has_no_animal_products(answers) -> None:
    plan = generate_meal_plan(_profile(answers, dietary_restrictions=["vegan", "vegetarian"], meals_per_day=5))
    foods = " ".join(food for entry in plan for food in entry.foods).lower()

    for word in ("egg", "cheese", "chicken", "fish", "yogurt"):
        assert word not in foods


def test_lactose_and_gluten_swaps() -> None:
    breakfast = suggest_foods("breakfast", ["lactose", "gluten"])

    assert breakfast[0] == "2 tapiocas"
    assert "30g lactose-free cheese" in breakfast
    assert suggest_foods("breakfast", [])[0] == "2 slices of whole-grain bread"


def test_vegetarian_snack_uses_default_foods() -> None:
    assert suggest_foods("afternoon_snack", ["vegetarian", "lactose"])[0] == "Lactose-free yogurt"
