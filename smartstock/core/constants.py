from pathlib import Path


APP_DIR = Path(__file__).resolve().parents[1]
PROJECT_ROOT = APP_DIR.parent

CURRENCIES = ("$", "Fc")
FURNITURE_CONDITIONS = ("New", "Good", "Worn", "Damaged")

LOG_TYPE_ENTRY = "entry"
LOG_TYPE_EXIT = "exit"
LOG_TYPE_TRANSFER = "transfer"
LOG_TYPE_ADJUSTMENT = "adjustment"
LOG_TYPE_REFILL = "refill"
LOG_TYPE_FURNITURE_CHECK = "furniture_check"

# Known tags only; persisted history may carry others.
KNOWN_LOG_TYPES = (
    LOG_TYPE_ENTRY,
    LOG_TYPE_EXIT,
    LOG_TYPE_TRANSFER,
    LOG_TYPE_ADJUSTMENT,
    LOG_TYPE_REFILL,
    "manual_update",
    "inventory_check",
    LOG_TYPE_FURNITURE_CHECK,
)

STOCK_STATUSES = ("all", "alert", "sufficient")
SORT_KEYS = ("name", "stock", "price", "category")
SORT_ORDERS = ("asc", "desc")
MATCH_ALL_VALUES = {"", "all", "toutes", "tous"}

# ==============================
# Storage keys
# ==============================
KEY_PRODUCTS = "stockProducts"
KEY_HISTORY = "stockHistory"
KEY_FURNITURE = "stockFurniture"
KEY_SITES = "stockSites"
KEY_CATEGORIES = "stockCategories"
KEY_ARCHIVE = "stockArchive"

STORAGE_KEYS = (
    KEY_PRODUCTS,
    KEY_HISTORY,
    KEY_FURNITURE,
    KEY_SITES,
    KEY_CATEGORIES,
    KEY_ARCHIVE,
)

# ==============================
# Seed data
# ==============================
DEFAULT_CATEGORIES = (
    "Alimentaire",
    "Boisson",
    "Matériel",
    "Mobilier",
    "Décoration",
    "Autre",
)

SEED_SITES = (
    {"id": "S1", "name": "Siège Social"},
    {"id": "S2", "name": "Annexe Nord"},
)

SEED_PRODUCTS = (
    {
        "id": "1",
        "name": "Bonbons",
        "category": "Alimentaire",
        "currentStock": 15,
        "minStock": 20,
        "monthlyNeed": 20,
        "unit": "sacs",
        "unitPrice": 2.5,
        "currency": "$",
        "supplier": "Fournisseur A",
        "siteId": "S1",
    },
    {
        "id": "2",
        "name": "Biscuits",
        "category": "Alimentaire",
        "currentStock": 8,
        "minStock": 15,
        "monthlyNeed": 20,
        "unit": "paquets",
        "unitPrice": 3.0,
        "currency": "$",
        "supplier": "Fournisseur A",
        "siteId": "S1",
    },
    {
        "id": "3",
        "name": "Jus de fruit",
        "category": "Boisson",
        "currentStock": 12,
        "minStock": 10,
        "monthlyNeed": 15,
        "unit": "litres",
        "unitPrice": 4.5,
        "currency": "$",
        "supplier": "Fournisseur B",
        "siteId": "S1",
    },
    {
        "id": "4",
        "name": "Assiettes jetables",
        "category": "Matériel",
        "currentStock": 50,
        "minStock": 30,
        "monthlyNeed": 40,
        "unit": "unités",
        "unitPrice": 0.5,
        "currency": "$",
        "supplier": "Fournisseur C",
        "siteId": "S1",
    },
    {
        "id": "5",
        "name": "Nappes",
        "category": "Décoration",
        "currentStock": 10,
        "minStock": 5,
        "monthlyNeed": 8,
        "unit": "unités",
        "unitPrice": 12.0,
        "currency": "$",
        "supplier": "Fournisseur D",
        "siteId": "S1",
    },
)
