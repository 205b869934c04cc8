"""Daily meal plan template generated from the user profile."""

from types import MappingProxyType
from typing import List, NamedTuple, Tuple, Union

from fitsmart.models.meal import MealPlanEntry
from fitsmart.models.profile import UserProfile
from fitsmart.services.nutrition import round_half_up


class Swap(NamedTuple):
    """Food suggestion that changes when a restriction flag is set."""

    flag: str  # "lactose" or "gluten"
    restricted: str
    otherwise: str


FoodItem = Union[str, Swap]


class Slot(NamedTuple):
    key: str
    name: str
    time: str
    # Share of a main meal for calories, protein, carbs, fats
    shares: Tuple[float, float, float, float]
    min_meals: int


SLOTS: Tuple[Slot, ...] = (
    Slot("breakfast", "Breakfast", "07:00 - 08:00", (1.0, 1.0, 1.0, 1.0), 3),
    Slot("lunch", "Lunch", "12:00 - 13:00", (1.0, 1.0, 1.0, 1.0), 3),
    Slot("afternoon_snack", "Afternoon Snack", "15:00 - 16:00", (0.6, 0.6, 0.6, 0.6), 4),
    Slot("dinner", "Dinner", "19:00 - 20:00", (1.0, 1.0, 1.0, 1.0), 3),
    Slot("late_snack", "Late-night Snack", "21:30 - 22:00", (0.5, 0.5, 0.3, 0.5), 5),
)

# Macro split of meal calories (protein, carbs, fats) and kcal per gram
MACRO_SPLIT = (0.30, 0.40, 0.30)
KCAL_PER_GRAM = (4, 4, 9)

_STARCH = Swap("gluten", "2 tapiocas", "2 slices of whole-grain bread")
_RICE = Swap("gluten", "150g brown rice", "150g white rice")
_YOGURT = Swap("lactose", "Lactose-free yogurt", "Plain yogurt")

# slot -> diet -> foods. Snacks only distinguish vegan from everyone else.
MEAL_FOODS = MappingProxyType({
    "breakfast": MappingProxyType({
        "vegan": (
            _STARCH,
            "Peanut butter (2 tbsp)",
            "1 banana",
            "Oat milk (200ml)",
        ),
        "vegetarian": (
            _STARCH,
            Swap("lactose", "2 scrambled eggs", "2 scrambled eggs with cheese"),
            "1 fruit (banana or apple)",
            Swap("lactose", "Coffee with lactose-free milk", "Coffee with milk"),
        ),
        "omnivore": (
            _STARCH,
            "2 scrambled eggs",
            Swap("lactose", "30g lactose-free cheese", "30g white cheese"),
            "1 fruit",
            "Coffee",
        ),
    }),
    "lunch": MappingProxyType({
        "vegan": (
            _RICE,
            "100g beans",
            "Grilled tofu (100g)",
            "Green salad, as much as you like",
            "Sauteed vegetables",
        ),
        "vegetarian": (
            _RICE,
            "100g beans",
            "2 boiled eggs or an omelette",
            "Green salad, as much as you like",
            "Mixed vegetables",
        ),
        "omnivore": (
            _RICE,
            "100g beans",
            "150g grilled chicken",
            "Green salad, as much as you like",
            "Sauteed vegetables",
        ),
    }),
    "afternoon_snack": MappingProxyType({
        "vegan": (
            "1 serving of fruit",
            "30g nuts",
            "Plant milk (200ml)",
        ),
        "omnivore": (
            _YOGURT,
            "1 fruit",
            "30g nuts (cashews, almonds)",
        ),
    }),
    "dinner": MappingProxyType({
        "vegan": (
            "150g sweet potato",
            "Chickpeas (100g)",
            "Green salad, as much as you like",
            "Roasted vegetables",
            "Olive oil (1 tbsp)",
        ),
        "vegetarian": (
            "150g sweet potato or cassava",
            "2-egg omelette with vegetables",
            "Green salad, as much as you like",
            Swap("lactose", "Lactose-free cheese", "Cottage cheese"),
        ),
        "omnivore": (
            "150g sweet potato",
            "150g fish or lean meat",
            "Green salad, as much as you like",
            "Grilled vegetables",
            "Olive oil",
        ),
    }),
    "late_snack": MappingProxyType({
        "vegan": (
            "Plant milk (200ml)",
            "1 serving of berries",
        ),
        "omnivore": (
            _YOGURT,
            "1 fruit or nuts",
        ),
    }),
})


def diet_of(restrictions) -> str:
    """Diet column of the food table; vegan wins over vegetarian."""
    if "vegan" in restrictions:
        return "vegan"
    if "vegetarian" in restrictions:
        return "vegetarian"
    return "omnivore"


def suggest_foods(slot: str, restrictions) -> List[str]:
    """Resolve the food suggestions of a slot for a restriction set."""
    flags = set(restrictions)
    table = MEAL_FOODS[slot]
    foods = table.get(diet_of(flags), table["omnivore"])

    resolved = []
    for food in foods:
        if isinstance(food, Swap):
            food = food.restricted if food.flag in flags else food.otherwise
        resolved.append(food)
    return resolved


def generate_meal_plan(profile: UserProfile) -> List[MealPlanEntry]:
    """
    Split target calories over the day's meals.

    Breakfast, lunch and dinner each get target / meals_per_day. An afternoon
    snack is added from 4 meals a day and a late-night snack from 5. Macros are
    30% protein, 40% carbs and 30% fats of the meal calories, each rounded to
    the gram on its own, so they need not add up to the calories exactly.
    """
    meals = profile.meals_per_day
    meal_calories = profile.target_calories / meals
    macros = [
        meal_calories * share / kcal for share, kcal in zip(MACRO_SPLIT, KCAL_PER_GRAM)
    ]

    plan = []
    for slot in SLOTS:
        if meals < slot.min_meals:
            continue
        cal_share, protein_share, carbs_share, fats_share = slot.shares
        plan.append(MealPlanEntry(
            name=slot.name,
            time=slot.time,
            calories=round_half_up(meal_calories * cal_share),
            protein=round_half_up(macros[0] * protein_share),
            carbs=round_half_up(macros[1] * carbs_share),
            fats=round_half_up(macros[2] * fats_share),
            foods=suggest_foods(slot.key, profile.dietary_restrictions),
        ))

    return plan
