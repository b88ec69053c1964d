"""
Static menu definition.

Loaded once into the MenuCatalog at import time. Prices are in SAR and are
the only prices checkout ever charges.
"""

from decimal import Decimal

# Display order for categories (appetizers first)
CATEGORY_ORDER = ["appetizers", "main", "grills", "drinks"]

CATEGORY_LABELS = {
    "appetizers": "Appetizers",
    "main": "Main Dishes",
    "grills": "Grills",
    "drinks": "Beverages",
}

MENU_ITEMS = [
    # Appetizers
    {
        "category": "appetizers",
        "image": "/image/4.JPG",
        "title": "Garden Salad",
        "description": "Fresh seasonal vegetables with zesty lemon dressing",
        "price": Decimal("15"),
        "slug": "salad",
    },
    {
        "category": "appetizers",
        "image": "/image/5.JPG",
        "title": "Hummus",
        "description": "Creamy chickpea dip with tahini, olive oil, and warm spices",
        "price": Decimal("12"),
        "slug": "hummus",
    },
    {
        "category": "appetizers",
        "image": "/image/7.JPG",
        "title": "Tabbouleh",
        "description": "Fresh parsley salad with bulgur, tomatoes, and mint",
        "price": Decimal("15"),
        "slug": "tabouleh",
    },
    {
        "category": "appetizers",
        "image": "/image/8.JPG",
        "title": "Baba Ghanoush",
        "description": "Smoky roasted eggplant blended with tahini and lemon",
        "price": Decimal("12"),
        "slug": "babaghanoush",
    },
    {
        "category": "appetizers",
        "image": "/image/9.JPG",
        "title": "Kibbeh",
        "description": "Crispy bulgur shells stuffed with seasoned meat and herbs",
        "price": Decimal("25"),
        "slug": "kibbeh",
    },
    # Main dishes
    {
        "category": "main",
        "image": "/image/1.JPG",
        "title": "Fish Rice",
        "description": "Flavorful fish and rice with aromatic spices",
        "price": Decimal("30"),
        "slug": "kabsa",
    },
    {
        "category": "main",
        "image": "/image/10.JPG",
        "title": "Lamb Biryani",
        "description": "Fragrant basmati rice layered with spiced lamb",
        "price": Decimal("35"),
        "slug": "biryani",
    },
    # Grills
    {
        "category": "grills",
        "image": "/image/14.JPG",
        "title": "Seafood Mixed Grill",
        "description": "Premium grilled shrimp and calamari with soy dipping sauce",
        "price": Decimal("45"),
        "slug": "grills",
    },
    {
        "category": "grills",
        "image": "/image/3.JPG",
        "title": "Lamb Kebab",
        "description": "Succulent lamb skewers with Middle Eastern spices",
        "price": Decimal("50"),
        "slug": "kebab",
    },
    # Beverages
    {
        "category": "drinks",
        "image": "/image/11.JPG",
        "title": "Pomegranate Juice",
        "description": "Freshly squeezed, rich in antioxidants",
        "price": Decimal("10"),
        "slug": "pomegranate",
    },
    {
        "category": "drinks",
        "image": "/image/12.JPG",
        "title": "Fresh Orange Juice",
        "description": "100% natural, squeezed to order",
        "price": Decimal("10"),
        "slug": "orange",
    },
]
