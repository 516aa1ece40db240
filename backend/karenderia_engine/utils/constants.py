"""
Centralized constants and lexicon data.

This module contains all hardcoded lexicons, thresholds, and mappings
used throughout the engine. Centralizing these values makes them
easy to modify and version alongside the code.

Categories:
- Allergen lexicon (canonical names, English + Filipino keywords)
- Nutrition per 100g for known ingredients
- Ingredient category keywords
- Health scoring thresholds
- Safe alternative suggestions
- Daily reference values
- Meal filter presets
"""

from typing import Dict, List, Tuple

# ==============================================================================
# ALLERGEN LEXICON
# ==============================================================================

# One entry per allergen. Keywords combine common English terms with
# Filipino/bilingual names (bagoong, toyo, itlog, mani, ...).
ALLERGEN_LEXICON: Dict[str, Dict] = {
    "Peanuts": {
        "severity": "severe",
        "description": "High risk allergen, can cause anaphylaxis",
        "keywords": [
            "peanut", "peanuts", "peanut butter", "peanut oil", "groundnut",
            "arachis oil", "mandelonas", "beer nuts", "mixed nuts", "nut meat",
            # Filipino
            "mani", "kare-kare", "biko na may mani"
        ],
        "alternatives": ["sunflower seeds", "pumpkin seeds"],
        "aliases": ["peanut", "nuts"]
    },
    "Tree Nuts": {
        "severity": "severe",
        "description": "Tree nut allergen (almonds, cashews, walnuts and similar)",
        "keywords": [
            "almond", "almonds", "brazil nut", "cashew", "cashews", "chestnut",
            "hazelnut", "macadamia", "pecan", "pine nut", "pistachio", "walnut",
            "coconut", "nut oil", "marzipan", "nougat", "praline", "gianduja",
            "amaretto"
        ],
        "alternatives": ["sunflower seeds", "pumpkin seeds", "hemp hearts", "chia seeds"],
        "aliases": ["tree nut", "nuts"]
    },
    "Dairy": {
        "severity": "moderate",
        "description": "Contains lactose and milk proteins",
        "keywords": [
            "milk", "cheese", "butter", "cream", "yogurt", "ice cream", "lactose",
            "casein", "whey", "ghee", "buttermilk", "sour cream", "cottage cheese",
            "mozzarella", "cheddar", "parmesan", "condensed milk", "evaporated milk",
            # Filipino
            "gatas", "kesong puti", "leche flan"
        ],
        "alternatives": [
            "coconut milk", "almond milk", "oat milk", "vegan cheese",
            "nutritional yeast", "coconut oil", "vegan butter", "olive oil",
            "coconut cream", "cashew cream"
        ],
        "aliases": ["milk", "lactose", "gatas"]
    },
    "Eggs": {
        "severity": "moderate",
        "description": "Contains egg proteins",
        "keywords": [
            "egg", "eggs", "egg white", "egg yolk", "albumin", "mayonnaise", "aioli",
            "meringue", "custard", "eggnog", "lecithin", "lysozyme", "ovalbumin",
            # Filipino
            "itlog", "kwek-kwek", "balut", "penoy"
        ],
        "alternatives": [
            "flax eggs", "aquafaba", "tofu scramble", "chia eggs", "banana",
            "applesauce"
        ],
        "aliases": ["egg", "itlog"]
    },
    "Fish": {
        "severity": "moderate",
        "description": "Contains fish proteins",
        "keywords": [
            "fish", "salmon", "tuna", "cod", "bass", "flounder", "halibut", "sardine",
            "anchovy", "mackerel", "trout", "fish sauce", "fish oil",
            "worcestershire sauce", "caesar dressing", "imitation crab", "surimi",
            # Filipino
            "bagoong", "patis", "dilis", "tuyo", "daing", "tinapa", "alamang",
            "isda", "bangus", "tilapia", "galunggong"
        ],
        "alternatives": ["tofu", "tempeh", "seitan", "marinated tofu", "hearts of palm"],
        "aliases": ["isda"]
    },
    "Shellfish": {
        "severity": "severe",
        "description": "Crustacean and mollusk shellfish allergen",
        "keywords": [
            "shrimp", "crab", "lobster", "crawfish", "prawns", "scallops", "clams",
            "mussels", "oysters", "crayfish", "langostino", "barnacle", "krill",
            # Filipino
            "hipon", "alimango", "talaba", "pusit", "sugpo", "suahe", "halaan"
        ],
        "alternatives": [
            "mushrooms", "tofu", "king oyster mushrooms", "hearts of palm"
        ],
        "aliases": ["seafood", "crustacean"]
    },
    "Soy": {
        "severity": "mild",
        "description": "Contains soy proteins",
        "keywords": [
            "soy", "soya", "soybean", "tofu", "tempeh", "miso", "soy sauce", "tamari",
            "edamame", "soy milk", "soy flour", "soy protein", "lecithin",
            "hydrolyzed soy protein",
            # Filipino
            "tokwa", "taho", "toyo", "miso soup"
        ],
        "alternatives": ["coconut aminos", "seitan", "mushrooms", "lentils"],
        "aliases": ["soya", "soybean"]
    },
    "Wheat": {
        "severity": "severe",
        "description": "Contains wheat gluten proteins",
        "keywords": [
            "wheat", "flour", "bread", "pasta", "noodles", "gluten", "bulgur",
            "couscous", "semolina", "spelt", "kamut", "farro", "wheat germ",
            "wheat bran", "seitan",
            # Filipino
            "harina", "tinapay", "pandesal", "lumpia wrapper"
        ],
        "alternatives": [
            "rice flour", "coconut flour", "tapioca flour", "corn starch",
            "gluten-free bread", "rice cakes", "rice noodles", "shirataki noodles",
            "rice pasta"
        ],
        "aliases": ["gluten", "flour"]
    },
    "Sesame": {
        "severity": "moderate",
        "description": "Sesame seeds and sesame-derived products",
        "keywords": [
            "sesame", "sesame seeds", "sesame oil", "tahini", "hummus", "halva",
            "benne seeds", "sim sim", "goma"
        ],
        "alternatives": ["sunflower seed butter", "pumpkin seeds"],
        "aliases": []
    },
    "Mustard": {
        "severity": "mild",
        "description": "Mustard seed and related condiments",
        "keywords": [
            "mustard", "mustard seed", "mustard powder", "dijon", "horseradish",
            "wasabi", "mustard greens"
        ],
        "alternatives": ["turmeric", "black pepper"],
        "aliases": []
    }
}


# Allergens whose presence removes the "gluten-free" tag
GLUTEN_ALLERGENS: Tuple[str, ...] = ("Wheat", "Gluten")

# Allergens whose presence removes the "vegan-friendly" tag
ANIMAL_DERIVED_ALLERGENS: Tuple[str, ...] = ("Dairy", "Eggs")


# Ordinal severity tiers (lowest first)
SEVERITY_LEVELS: List[str] = ["mild", "moderate", "severe"]


# ==============================================================================
# SAFE ALTERNATIVE SUGGESTIONS (per triggered allergen group)
# ==============================================================================

# Evaluated in order; a rule fires when any of its allergens was triggered
SAFE_ALTERNATIVE_RULES: List[Tuple[Tuple[str, ...], str]] = [
    (("Dairy",), "Try plant-based alternatives like coconut milk or oat milk"),
    (("Eggs",), "Look for egg-free versions or ask for modifications"),
    (("Fish", "Shellfish"), "Consider meat-based or vegetarian options"),
    (("Peanuts", "Tree Nuts"), "Ask for nut-free preparation and separate cooking surfaces"),
    (("Soy",), "Request dishes without soy sauce or tofu"),
    (("Wheat",), "Look for rice-based dishes or gluten-free options"),
]


# ==============================================================================
# NUTRITION DATABASE (per 100g)
# ==============================================================================

NUTRITION_FIELDS: Tuple[str, ...] = (
    "calories", "protein", "carbohydrates", "fat", "fiber", "sugar",
    "sodium", "calcium", "iron", "vitamin_c", "vitamin_a"
)


def _record(calories, protein, carbohydrates, fat, fiber, sugar,
            sodium, calcium, iron, vitamin_c, vitamin_a) -> Dict[str, float]:
    return dict(zip(NUTRITION_FIELDS, (
        calories, protein, carbohydrates, fat, fiber, sugar,
        sodium, calcium, iron, vitamin_c, vitamin_a
    )))


# Partial matches take the first key in this order, so more specific
# keys (e.g. "peanut butter") sit before their shorter prefixes.
NUTRITION_DATABASE: Dict[str, Dict[str, float]] = {
    # Proteins
    "chicken": _record(165, 31, 0, 3.6, 0, 0, 74, 11, 0.9, 0, 41),
    "pork": _record(242, 27, 0, 14, 0, 0, 62, 19, 0.9, 0, 2),
    "beef": _record(250, 26, 0, 15, 0, 0, 72, 18, 2.6, 0, 7),
    "oxtail": _record(262, 30.9, 0, 14.8, 0, 0, 80, 12, 2.4, 0, 0),
    "bangus": _record(148, 20.5, 0, 6.7, 0, 0, 72, 51, 0.3, 0, 100),
    "fish sauce": _record(35, 5.1, 3.6, 0, 0, 3.6, 7851, 43, 0.8, 0.5, 0),
    "patis": _record(35, 5.1, 3.6, 0, 0, 3.6, 7851, 43, 0.8, 0.5, 0),
    "bagoong": _record(91, 16, 1.5, 2, 0, 0.5, 7200, 500, 3.5, 0, 60),
    "fish": _record(206, 22, 0, 12, 0, 0, 59, 16, 0.4, 0, 54),
    "shrimp": _record(99, 18, 0.9, 1.7, 0, 0, 111, 52, 0.5, 0, 54),
    "eggs": _record(155, 13, 1.1, 11, 0, 1.1, 124, 56, 1.8, 0, 540),
    "tofu": _record(76, 8, 1.9, 4.8, 0.3, 0.6, 7, 350, 5.4, 0.1, 85),
    "peanut butter": _record(588, 25, 20, 50, 6, 9.2, 459, 43, 1.9, 0, 0),
    "peanut": _record(567, 25.8, 16.1, 49.2, 8.5, 4.7, 18, 92, 4.6, 0, 0),

    # Carbohydrates
    "rice": _record(130, 2.7, 28, 0.3, 0.4, 0.1, 1, 10, 0.2, 0, 0),
    "noodles": _record(138, 4.5, 25, 2.2, 1.8, 0.6, 3, 7, 0.9, 0, 0),
    "bread": _record(265, 9, 49, 3.2, 2.7, 5, 491, 41, 3.6, 0, 0),
    "potato": _record(77, 2, 17, 0.1, 2.2, 0.8, 6, 12, 0.8, 19.7, 2),

    # Vegetables
    "tomato": _record(18, 0.9, 3.9, 0.2, 1.2, 2.6, 5, 10, 0.3, 13.7, 833),
    "onion": _record(40, 1.1, 9.3, 0.1, 1.7, 4.2, 4, 23, 0.2, 7.4, 2),
    "garlic": _record(149, 6.4, 33, 0.5, 2.1, 1, 17, 181, 1.7, 31.2, 9),
    "ginger": _record(80, 1.8, 18, 0.8, 2, 1.7, 13, 16, 0.6, 5, 0),
    "cabbage": _record(25, 1.3, 5.8, 0.1, 2.5, 3.2, 18, 40, 0.5, 36.6, 98),
    "carrots": _record(41, 0.9, 9.6, 0.2, 2.8, 4.7, 69, 33, 0.3, 5.9, 16706),
    "kangkong": _record(19, 2.6, 3.1, 0.2, 2.1, 0, 113, 77, 1.7, 55, 6300),
    "eggplant": _record(25, 1, 5.9, 0.2, 3, 3.5, 2, 9, 0.2, 2.2, 23),
    "string beans": _record(31, 1.8, 7, 0.2, 2.7, 3.3, 6, 37, 1, 12.2, 690),
    "pechay": _record(13, 1.5, 2.2, 0.2, 1, 1.2, 65, 105, 0.8, 45, 4468),
    "malunggay": _record(64, 9.4, 8.3, 1.4, 2, 0, 9, 185, 4, 51.7, 7564),
    "tamarind": _record(239, 2.8, 62.5, 0.6, 5.1, 57.4, 28, 74, 2.8, 3.5, 30),

    # Fats
    "coconut milk": _record(230, 2.3, 5.5, 24, 2.2, 3.3, 15, 16, 1.6, 2.8, 0),

    # Condiments and seasonings
    "soy sauce": _record(8, 1.3, 0.8, 0, 0.1, 0.4, 5493, 20, 0.4, 0, 4),
    "vinegar": _record(18, 0, 0.04, 0, 0, 0.04, 2, 6, 0.2, 0, 0),
    "oil": _record(884, 0, 0, 100, 0, 0, 0, 0, 0, 0, 0),
    "salt": _record(0, 0, 0, 0, 0, 0, 38758, 24, 0.3, 0, 0),
}


# "Trace food" estimate for unknown ingredients (not zero, to avoid
# reporting unknown ingredients as calorie-free)
DEFAULT_NUTRITION: Dict[str, float] = _record(20, 1, 4, 0.1, 1, 2, 5, 10, 0.2, 2, 10)


# ==============================================================================
# INGREDIENT CATEGORIZATION
# ==============================================================================

# Checked in this order; the first matching group wins
INGREDIENT_CATEGORY_KEYWORDS: Dict[str, List[str]] = {
    "protein": [
        "chicken", "pork", "beef", "fish", "shrimp", "eggs", "tofu", "peanut",
        "oxtail", "crab", "squid", "bangus", "tilapia", "liempo", "longganisa",
        "tapa", "manok", "baboy", "baka", "hipon", "pusit", "itlog", "tokwa"
    ],
    "carbohydrate": [
        "rice", "noodles", "bread", "potato", "pasta", "kanin", "pandesal",
        "bihon", "sotanghon", "canton", "camote", "flour"
    ],
    "vegetable": [
        "tomato", "onion", "garlic", "cabbage", "carrot", "kangkong", "eggplant",
        "string beans", "sitaw", "talong", "pechay", "malunggay", "ampalaya",
        "bell pepper", "ginger", "squash", "kalabasa", "okra", "labanos",
        "spinach", "tamarind", "sampalok"
    ],
    "fat": [
        "oil", "butter", "cream", "lard", "margarine", "coconut milk", "gata"
    ],
    "seasoning": [
        "soy sauce", "vinegar", "salt", "pepper", "fish sauce", "patis", "toyo",
        "suka", "bagoong", "bay leaves", "laurel", "msg"
    ]
}

INGREDIENT_CATEGORIES: List[str] = [
    "protein", "carbohydrate", "vegetable", "fat", "seasoning", "other"
]

# Any of these in an ingredient removes the "vegetarian" tag
MEAT_KEYWORDS: List[str] = [
    "meat", "chicken", "pork", "beef", "oxtail", "liempo", "longganisa",
    "tapa", "manok", "baboy", "baka", "bacon", "ham", "fish", "shrimp",
    "crab", "bangus", "tilapia", "hipon", "pusit"
]


# ==============================================================================
# HEALTH SCORING THRESHOLDS
# ==============================================================================

HEALTH_SCORE_BASE: int = 50

# Bonus points when the aggregate nutrient exceeds the threshold
HEALTH_SCORE_BONUSES: Dict[str, Tuple[float, int]] = {
    "protein": (15.0, 10),     # g
    "fiber": (5.0, 10),        # g
    "vitamin_c": (10.0, 5),    # mg
    "calcium": (100.0, 5),     # mg
    "iron": (2.0, 5),          # mg
}

# Penalty points when the aggregate nutrient exceeds the threshold
HEALTH_SCORE_PENALTIES: Dict[str, Tuple[float, int]] = {
    "sodium": (2000.0, 15),    # mg
    "sugar": (20.0, 10),       # g
    "fat": (30.0, 5),          # g
}

# More than this many distinct allergens costs MULTI_ALLERGEN_PENALTY points
MULTI_ALLERGEN_THRESHOLD: int = 2
MULTI_ALLERGEN_PENALTY: int = 10

# Points per distinct ingredient category present in the dish
CATEGORY_DIVERSITY_BONUS: int = 2

# Recommendation triggers
RECOMMENDATION_THRESHOLDS: Dict[str, float] = {
    "protein_min": 15.0,       # g
    "fiber_min": 3.0,          # g
    "sodium_max": 2000.0,      # mg
    "vitamin_c_min": 5.0,      # mg
}

# Dish warning triggers
DISH_WARNING_THRESHOLDS: Dict[str, float] = {
    "sodium": 2300.0,          # mg
    "calories": 800.0,         # kcal
}


# ==============================================================================
# DAILY REFERENCE VALUES
# ==============================================================================

DAILY_VALUES: Dict[str, float] = {
    "calories": 2000.0,
    "protein": 50.0,
    "carbs": 300.0,
    "fat": 65.0,
    "fiber": 25.0,
    "sodium": 2300.0,
    "sugar": 50.0
}


# Nutrition label layout: (label, field, unit, decimals)
NUTRITION_LABEL_FORMAT: List[Tuple[str, str, str, int]] = [
    ("Calories", "calories", "", 0),
    ("Protein", "protein", "g", 1),
    ("Carbohydrates", "carbohydrates", "g", 1),
    ("Fat", "fat", "g", 1),
    ("Fiber", "fiber", "g", 1),
    ("Sugar", "sugar", "g", 1),
    ("Sodium", "sodium", "mg", 1),
    ("Calcium", "calcium", "mg", 1),
    ("Iron", "iron", "mg", 1),
    ("Vitamin C", "vitamin_c", "mg", 1),
    ("Vitamin A", "vitamin_a", "IU", 1),
]


# ==============================================================================
# MEAL FILTER PRESETS
# ==============================================================================

# Dish attribute used for each sort key
SORT_FIELDS: Dict[str, str] = {
    "price": "price",
    "calories": "calories",
    "rating": "average_rating",
    "distance": "karenderia_distance",
    "popularity": "total_reviews",
    "name": "name"
}

FILTER_PRESETS: Dict[str, Dict] = {
    "budget-friendly": {
        "max_budget": 150,
        "sort_by": "price",
        "sort_order": "asc"
    },
    "low-calorie": {
        "max_calories": 300,
        "sort_by": "calories",
        "sort_order": "asc"
    },
    "high-protein": {
        "min_calories": 400,
        "sort_by": "rating",
        "sort_order": "desc"
    },
    "allergen-safe": {
        "allergen_safe": True,
        "sort_by": "rating",
        "sort_order": "desc"
    },
    "vegetarian": {
        "is_vegetarian": True,
        "sort_by": "popularity",
        "sort_order": "desc"
    },
    "nearby": {
        "max_distance": 5,
        "sort_by": "distance",
        "sort_order": "asc"
    }
}

DEFAULT_FILTERS: Dict = {
    "sort_by": "popularity",
    "sort_order": "desc"
}
