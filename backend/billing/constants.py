PLAN_FREE = "free"
PLAN_PREMIUM = "premium"

PLANS = (PLAN_FREE, PLAN_PREMIUM)

# Represents "no limit" in PLAN_LIMITS. Never compare it numerically.
UNLIMITED = None

# Countable resources and the PLAN_LIMITS key each one is checked against.
RESOURCE_LIMIT_KEYS = {
    'clients': 'max_clients',
    'pets': 'max_pets',
    'users': 'max_users',
    'photos': 'max_photos',
}

BASIC_FEATURES = [
    'basic_dashboard',
    'client_management',
    'pet_management',
    'appointments',
    'service_management',
    'financial_management',
    'basic_reports',
]

PREMIUM_FEATURES = [
    'photo_gallery',
    'whatsapp_integration',
    'advanced_reports',
    'custom_branding',
    'api_access',
    'client_portal',
    'bulk_operations',
    'custom_fields',
]

PLAN_FEATURES = {
    PLAN_FREE: frozenset(BASIC_FEATURES),
    PLAN_PREMIUM: frozenset(BASIC_FEATURES + PREMIUM_FEATURES),
}

# max_photos is per gallery: one pet or one service.
PLAN_LIMITS = {
    PLAN_FREE: {
        'max_clients': 20,
        'max_pets': 30,
        'max_users': 1,
        'max_photos': 0,
    },
    PLAN_PREMIUM: {
        'max_clients': UNLIMITED,
        'max_pets': UNLIMITED,
        'max_users': UNLIMITED,
        'max_photos': UNLIMITED,
    },
}

PLAN_DESCRIPTIONS = {
    PLAN_FREE: "Basic plan for small shops: up to 20 clients, 30 pets and a single user.",
    PLAN_PREMIUM: "Unlimited clients, pets, users and photos, WhatsApp reminders and advanced reports.",
}
