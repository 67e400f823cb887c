"""Curated pick lists offered during onboarding and profile editing."""

MEDICAL_CONDITIONS: tuple[str, ...] = (
    "Celiac Disease",
    "IBS (Irritable Bowel Syndrome)",
    "Lactose Intolerance",
    "Diabetes Type 1",
    "Diabetes Type 2",
    "GERD (Acid Reflux)",
    "Crohn's Disease",
    "Ulcerative Colitis",
    "Gastritis",
    "Histamine Intolerance",
    "Fructose Malabsorption",
    "Eosinophilic Esophagitis",
    "Gout",
    "Hypertension",
    "Kidney Disease",
    "Pancreatitis",
    "Diverticulitis",
    "Hashimoto's Thyroiditis",
    "PKU (Phenylketonuria)",
    "Alpha-gal Syndrome",
)

COMMON_ALLERGENS: tuple[str, ...] = (
    "Peanuts",
    "Tree Nuts",
    "Milk/Dairy",
    "Eggs",
    "Shellfish",
    "Fish",
    "Soy",
    "Wheat",
    "Sesame",
    "Gluten",
    "Mustard",
    "Celery",
    "Sulfites",
    "Lupin",
    "Molluscs",
    "Corn",
    "Nightshades",
    "Garlic",
    "Onion",
    "FODMAPs",
    "Red Meat",
    "Pork",
    "Alcohol",
    "Caffeine",
    "Chocolate",
    "Strawberries",
    "Kiwi",
    "Citrus",
    "Latex (Food Cross-React)",
    "Artificial Sweeteners (Aspartame)",
    "MSG",
    "Food Dyes (Red 40)",
    "Yeast",
)


def search_catalog(
    catalog: tuple[str, ...], query: str, exclude: list[str] | None = None
) -> list[str]:
    """Return catalog entries containing the query, minus already chosen ones."""
    needle = query.strip().lower()
    chosen = set(exclude or [])
    return [
        item for item in catalog if needle in item.lower() and item not in chosen
    ]
